"""
Study 01: Colony Foraging Observation

Run: python -m forage_swarm.studies.01_colony_foraging.observe

Watch a colony of learning foragers work a grid.
No hypotheses yet. Just observation.
"""

import argparse
import logging

import numpy as np

from forage_swarm.config import load_config
from forage_swarm.services.controller import SimulationController


def run_study(
    ticks: int = 1000,
    config_path: str = None,
    seed: int = None,
    report_every: int = 100,
):
    """
    Observe a colony.

    Watch:
    - Survival over time
    - Food gathered per forager
    - How often foragers bump the edge
    - Resource depletion and regrowth
    """
    print("=" * 50)
    print("Study 01: Colony Foraging Observation")
    print("=" * 50)
    print("\nPrinciple: Let them learn; watch what they learn")
    print("-" * 50)

    config = load_config(config_path)
    if seed is not None:
        config.seed = seed

    controller = SimulationController(config)
    world = controller.world

    print(f"\nWorld created: {world}")
    print(f"Config: grid={config.grid_size}, agents={config.agent_count}, "
          f"epsilon={config.agent.epsilon}, discount={config.agent.discount}")
    print(f"\nRunning {ticks} ticks...")

    edge_bumps = 0
    moves = 0
    losses = []
    extinct_at = None

    controller.start()
    for tick in range(ticks):
        report = controller.advance()
        if report is None:
            break

        for outcome in report.outcomes:
            if outcome.moved:
                moves += 1
            else:
                edge_bumps += 1
            if outcome.loss is not None:
                losses.append(outcome.loss)

        if extinct_at is None and not world.living_agents():
            extinct_at = report.tick

        # Periodic status
        if tick % report_every == 0:
            stats = world.get_statistics()
            print(f"  Tick {stats['tick']}: living={stats['living']}/{stats['agents']}, "
                  f"mean_energy={stats['mean_energy']:.2f}, "
                  f"mean_food={stats['mean_food']:.2f}")
    controller.stop()

    # Analysis
    print("\n" + "=" * 50)
    print("Observations")
    print("=" * 50)

    stats = world.get_statistics()
    print(f"\nSurvivors: {stats['living']} / {stats['agents']}")
    if extinct_at is not None:
        print(f"Colony went extinct at tick {extinct_at}")

    food = [a.state.food for a in world.agents]
    print(f"Food gathered: total={sum(food)}, best={max(food, default=0)}")

    attempts = moves + edge_bumps
    if attempts:
        print(f"Edge bumps: {edge_bumps} / {attempts} "
              f"({100 * edge_bumps / attempts:.1f}%)")

    if losses:
        half = len(losses) // 2 or 1
        print(f"Mean TD loss: first half={np.mean(losses[:half]):.4f}, "
              f"second half={np.mean(losses[half:]) if losses[half:] else 0.0:.4f}")

    print(f"Resources left: {stats['resources']}")

    print("\n" + "=" * 50)
    print("Study complete. What did you observe?")
    print("=" * 50)

    return stats


def main():
    parser = argparse.ArgumentParser(description="Colony Foraging Observation Study")
    parser.add_argument("--ticks", type=int, default=1000, help="Simulation ticks")
    parser.add_argument("--config", type=str, default=None, help="YAML config path")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    run_study(
        ticks=args.ticks,
        config_path=args.config,
        seed=args.seed,
    )


if __name__ == "__main__":
    main()

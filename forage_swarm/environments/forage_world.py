"""
environments/forage_world.py

A discrete world for learning foragers.

One grid, one population, one clock.
Every tick, each living forager takes its turn, in order, alone.
Every so often, the land grows back.

Inspired by:
- Sugarscape
- Gridworld reinforcement learning sandboxes
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Set, Tuple
import logging

import numpy as np
import torch

from forage_swarm.config import SimulationConfig
from forage_swarm.core.agent import ForagerAgent, StepOutcome
from forage_swarm.environments.resource_grid import ResourceGrid, CellKind

logger = logging.getLogger(__name__)


@dataclass
class AgentSnapshot:
    """Read-only view of a forager for rendering and status text."""
    agent_id: str
    x: int
    y: int
    energy: float
    food: int
    alive: bool
    age: int


@dataclass
class WorldSnapshot:
    """Everything the presentation layer needs after a tick."""
    tick: int
    cells: np.ndarray                     # [y, x] CellKind codes
    agents: List[AgentSnapshot]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tick": self.tick,
            "cells": self.cells.tolist(),
            "agents": [asdict(a) for a in self.agents],
        }


@dataclass
class TickReport:
    """What happened during one tick."""
    tick: int
    outcomes: List[StepOutcome] = field(default_factory=list)
    deaths: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    regenerated: Dict[str, int] = field(default_factory=dict)


class ForageWorld:
    """
    Grid world with a population of learning foragers.

    Features:
    - Sequential per-agent stepping (each agent sees the grid as
      left by the previous one)
    - Periodic resource regeneration
    - Snapshots and statistics for external observers

    Dead foragers stay in the population as inert records; they are
    skipped by the tick and still reported in snapshots.
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()
        self.rng: np.random.Generator = np.random.default_rng(self.config.seed)
        self.grid: ResourceGrid = ResourceGrid(self.config.grid_size, self.rng)
        self.agents: List[ForagerAgent] = []
        self.tick = 0
        self._extinct = False
        self.reset()

    # ==================== Setup ====================

    def reset(self, config: Optional[SimulationConfig] = None) -> None:
        """
        Discard the grid and every forager, then build a fresh world.

        No learned parameters survive a reset. With a seed, network
        initialisation is seeded inside a forked torch RNG, so the
        process-wide torch state is left as it was.
        """
        if config is not None:
            self.config = config

        self.rng = np.random.default_rng(self.config.seed)

        self.grid = ResourceGrid(self.config.grid_size, self.rng)
        self.grid.scatter(CellKind.TREE, self.config.initial_trees)
        self.grid.scatter(CellKind.ROCK, self.config.initial_rocks)
        self.grid.scatter(CellKind.FOOD, self.config.initial_food)

        self.agents = []
        occupied: Set[Tuple[int, int]] = set()
        low, high = self.config.agent.initial_energy
        with torch.random.fork_rng(devices=[], enabled=self.config.seed is not None):
            if self.config.seed is not None:
                torch.manual_seed(self.config.seed)
            for i in range(self.config.agent_count):
                position = self._spawn_position(occupied)
                occupied.add(position)
                agent = ForagerAgent(
                    agent_id=f"agent_{i}",
                    position=position,
                    energy=float(self.rng.uniform(low, high)),
                    config=self.config.agent,
                    rewards=self.config.rewards,
                    approximator_config=self.config.approximator,
                    rng=self.rng,
                )
                self.agents.append(agent)

        self.tick = 0
        self._extinct = False

        logger.info(
            f"World reset: {self.config.grid_size}x{self.config.grid_size} grid, "
            f"{len(self.agents)} agents, {self.grid!r}"
        )

    def _spawn_position(self, occupied: Set[Tuple[int, int]]) -> Tuple[int, int]:
        """Uniformly random empty cell not already taken by a forager."""
        candidates = [
            (int(x), int(y))
            for x, y in self.grid.empty_cells()
            if (int(x), int(y)) not in occupied
        ]
        if not candidates:
            # Crowded world: any cell will do
            x, y = self.rng.integers(0, self.grid.size, size=2)
            logger.debug(f"No vacant cell left, spawning at ({x}, {y})")
            return (int(x), int(y))
        return candidates[int(self.rng.integers(0, len(candidates)))]

    def add_agent(
        self,
        position: Tuple[int, int],
        energy: Optional[float] = None,
        agent_id: Optional[str] = None,
    ) -> ForagerAgent:
        """Add a forager at a given cell. Energy must be positive."""
        x, y = position
        if not self.grid.in_bounds(x, y):
            raise ValueError(f"Position {position} outside the grid")

        if energy is None:
            energy = float(self.rng.uniform(*self.config.agent.initial_energy))

        agent = ForagerAgent(
            agent_id=agent_id or f"agent_{len(self.agents)}",
            position=(x, y),
            energy=energy,
            config=self.config.agent,
            rewards=self.config.rewards,
            approximator_config=self.config.approximator,
            rng=self.rng,
        )
        self.agents.append(agent)
        self._extinct = False
        return agent

    # ==================== Simulation ====================

    def step(self) -> TickReport:
        """
        Advance the world by one tick.

        1. Each living forager steps once, in population order
        2. Resources regrow every regen_interval ticks (never on tick 0)
        3. The clock advances

        A forager whose step fails is skipped for this tick; the others
        still act.
        """
        report = TickReport(tick=self.tick)

        for agent in self.agents:
            if not agent.alive:
                continue

            try:
                outcome = agent.step(self.grid)
            except Exception as e:
                logger.warning(f"Step failed for {agent.id} at tick {self.tick}: {e}")
                report.skipped.append(agent.id)
                continue

            if outcome.skipped:
                logger.warning(f"Skipped {agent.id} at tick {self.tick}: {outcome.error}")
                report.skipped.append(agent.id)
                continue

            report.outcomes.append(outcome)
            if outcome.died:
                report.deaths.append(agent.id)

        if self.tick > 0 and self.tick % self.config.regen_interval == 0:
            report.regenerated = self.regenerate()

        if not self._extinct and self.agents and not self.living_agents():
            self._extinct = True
            logger.info(f"Population extinct at tick {self.tick}")

        self.tick += 1
        return report

    def regenerate(self) -> Dict[str, int]:
        """Replenish the fixed quota of trees and food."""
        placed = {
            "tree": self.grid.scatter(CellKind.TREE, self.config.regen_trees),
            "food": self.grid.scatter(CellKind.FOOD, self.config.regen_food),
        }
        logger.debug(f"Tick {self.tick}: regenerated {placed}")
        return placed

    def spawn_resources(self, kind: CellKind, count: int) -> int:
        """Scatter extra resources on demand. Returns how many were placed."""
        placed = self.grid.scatter(kind, count)
        logger.info(f"Spawned {placed}/{count} {CellKind(kind).name} cells")
        return placed

    # ==================== Observation ====================

    def living_agents(self) -> List[ForagerAgent]:
        return [a for a in self.agents if a.alive]

    def snapshot(self) -> WorldSnapshot:
        """Current grid and per-forager state."""
        return WorldSnapshot(
            tick=self.tick,
            cells=self.grid.cells,
            agents=[
                AgentSnapshot(
                    agent_id=a.id,
                    x=a.state.x,
                    y=a.state.y,
                    energy=a.state.energy,
                    food=a.state.food,
                    alive=a.state.alive,
                    age=a.state.age,
                )
                for a in self.agents
            ],
        )

    def get_statistics(self) -> Dict[str, Any]:
        """Population and resource summary."""
        living = self.living_agents()
        stats: Dict[str, Any] = {
            "tick": self.tick,
            "agents": len(self.agents),
            "living": len(living),
            "dead": len(self.agents) - len(living),
            "mean_energy": 0.0,
            "mean_food": 0.0,
            "mean_age": 0.0,
            "resources": self.grid.counts(),
        }
        if living:
            stats["mean_energy"] = float(np.mean([a.state.energy for a in living]))
            stats["mean_food"] = float(np.mean([a.state.food for a in living]))
            stats["mean_age"] = float(np.mean([a.state.age for a in living]))
        return stats

    def get_energies(self) -> np.ndarray:
        """Energy of every forager, dead ones included."""
        return np.array([a.state.energy for a in self.agents])

    def __repr__(self) -> str:
        return (
            f"ForageWorld(size={self.grid.size}, "
            f"agents={len(self.living_agents())}/{len(self.agents)}, "
            f"tick={self.tick})"
        )

"""
core/agent.py

A forager: a position, an energy budget, a tally of what it has eaten,
and a small network of its own that it trains as it goes.

Each tick it looks, chooses, moves, eats (or doesn't), and learns.
When the energy runs out, it stops. For good.

Inspired by:
- Sugarscape agents (local vision, metabolism)
- Tabular Q-learning foragers
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple
import logging

import numpy as np

from forage_swarm.environments.resource_grid import CellKind
from .approximator import ValueApproximator, ApproximatorConfig
from .observation import ObservationEncoder
from .policy import select_action, destination
from .rewards import RewardConfig, resolve_reward
from .trainer import TDTrainer

if TYPE_CHECKING:
    from forage_swarm.environments.resource_grid import ResourceGrid

logger = logging.getLogger(__name__)


@dataclass
class AgentState:
    """
    What a forager IS at this moment.
    """
    x: int
    y: int
    energy: float
    food: int = 0                 # Lifetime resources gathered; never decreases
    alive: bool = True
    age: int = 0                  # Ticks stepped

    def __post_init__(self):
        self.x = int(self.x)
        self.y = int(self.y)
        self.energy = float(self.energy)


@dataclass
class AgentConfig:
    """
    The unchanging nature of a forager.
    Set at birth, honored throughout life.
    """
    max_energy: float = 20.0
    initial_energy: Tuple[float, float] = (10.0, 15.0)   # Uniform spawn range
    epsilon: float = 0.18                                # Exploration rate
    discount: float = 0.85                               # TD gamma
    food_normalizer: float = 5.0                         # Food feature scale

    def __post_init__(self):
        low, high = self.initial_energy
        if low > high:
            raise ValueError(f"initial_energy range is inverted: {self.initial_energy}")
        if low <= 0 or high > self.max_energy:
            raise ValueError(
                f"initial_energy {self.initial_energy} must lie in (0, {self.max_energy}]"
            )
        if not 0.0 <= self.epsilon <= 1.0:
            raise ValueError(f"epsilon must be in [0, 1], got {self.epsilon}")


@dataclass
class StepOutcome:
    """What happened during one forager step."""
    agent_id: str
    action: Optional[int] = None
    reward: Optional[float] = None         # None when no move happened
    energy_delta: float = 0.0
    moved: bool = False
    consumed: Optional[CellKind] = None
    loss: Optional[float] = None           # None when no update was made
    died: bool = False
    skipped: bool = False
    error: Optional[str] = None


class ForagerAgent:
    """
    A single learning forager on the grid.

    Principles embodied:
    - Locality: perceives only its cross of five cells
    - Ownership: its approximator belongs to it alone
    - Finitude: Dead is absorbing
    """

    def __init__(
        self,
        agent_id: str,
        position: Tuple[int, int],
        energy: float,
        config: Optional[AgentConfig] = None,
        rewards: Optional[RewardConfig] = None,
        approximator_config: Optional[ApproximatorConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        if energy <= 0:
            raise ValueError(f"A forager must spawn with positive energy, got {energy}")

        self.id = agent_id
        self.config = config or AgentConfig()
        self.rewards = rewards or RewardConfig()
        self.rng = rng if rng is not None else np.random.default_rng()

        self.state = AgentState(
            x=position[0],
            y=position[1],
            energy=min(energy, self.config.max_energy),
        )

        self.approximator: Optional[ValueApproximator] = ValueApproximator(approximator_config)
        self.encoder = ObservationEncoder(
            max_energy=self.config.max_energy,
            food_normalizer=self.config.food_normalizer,
            rng=self.rng,
        )
        self.trainer = TDTrainer(self.config.discount)

    @property
    def alive(self) -> bool:
        return self.state.alive

    @property
    def position(self) -> Tuple[int, int]:
        return (self.state.x, self.state.y)

    # ==================== Core Loop ====================

    def observe(self, grid: ResourceGrid) -> np.ndarray:
        return self.encoder.encode(self.state, grid)

    def step(self, grid: ResourceGrid) -> StepOutcome:
        """
        Observe, decide, act, collect reward, learn.

        Refused steps (dead agent, missing approximator, unusable
        observation) come back with skipped=True and nothing mutated.
        A failed update after a move keeps the move, sets `error`,
        leaves `loss` as None, and still checks for death.
        """
        outcome = StepOutcome(agent_id=self.id)

        if not self.state.alive:
            outcome.skipped = True
            outcome.error = "agent is dead"
            return outcome

        if self.approximator is None:
            outcome.skipped = True
            outcome.error = "no approximator"
            return outcome

        try:
            observation = self.observe(grid)
            values = self.approximator.predict(observation)
        except ValueError as e:
            outcome.skipped = True
            outcome.error = f"invalid observation: {e}"
            return outcome

        action = select_action(values, self.config.epsilon, self.rng)
        outcome.action = action
        self.state.age += 1

        nx, ny = destination(self.state.x, self.state.y, action)

        if not grid.in_bounds(nx, ny):
            # Bumping the edge costs energy but teaches nothing
            outcome.energy_delta = self._apply_energy(self.rewards.out_of_bounds)
            outcome.died = self._check_death()
            return outcome

        target_kind = grid.at(nx, ny)
        consumed = grid.consume(nx, ny)
        reward, food_gain = resolve_reward(consumed, target_kind, self.rewards)

        self.state.x, self.state.y = nx, ny
        self.state.food += food_gain
        outcome.energy_delta = self._apply_energy(reward)
        outcome.moved = True
        outcome.consumed = consumed
        outcome.reward = reward

        try:
            next_observation = self.observe(grid)
            outcome.loss = self.trainer.update(
                self.approximator,
                observation,
                values,
                action,
                reward,
                next_observation,
            )
        except ValueError as e:
            # The move already happened; only the learning is lost
            logger.warning(f"Agent {self.id} skipped its update: {e}")
            outcome.error = f"update failed: {e}"
        finally:
            outcome.died = self._check_death()
        return outcome

    # ==================== Internal Mechanisms ====================

    def _apply_energy(self, delta: float) -> float:
        """Add `delta`, clamped to [0, max_energy]. Returns the applied change."""
        before = self.state.energy
        self.state.energy = float(np.clip(before + delta, 0.0, self.config.max_energy))
        return self.state.energy - before

    def _check_death(self) -> bool:
        if self.state.energy <= 0:
            self.state.alive = False
            logger.debug(f"Agent {self.id} died at age {self.state.age} with food={self.state.food}")
            return True
        return False

    def __repr__(self) -> str:
        return (
            f"ForagerAgent(id={self.id}, "
            f"pos=[{self.state.x}, {self.state.y}], "
            f"energy={self.state.energy:.2f}, "
            f"food={self.state.food}, "
            f"alive={self.state.alive})"
        )

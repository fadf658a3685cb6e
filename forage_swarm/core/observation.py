"""
core/observation.py

What a forager perceives: five cells in a cross, how full it is,
how much it has gathered, and a little noise.

Locality is honesty. No forager sees past its neighbors.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Optional, Tuple
import numpy as np

from forage_swarm.environments.resource_grid import WALL_SENTINEL

if TYPE_CHECKING:
    from forage_swarm.environments.resource_grid import ResourceGrid
    from .agent import AgentState


# Center, north, south, west, east
CROSS_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (0, 0),
    (0, -1),
    (0, 1),
    (-1, 0),
    (1, 0),
)

# Cross readings, energy, food, noise, bias
OBSERVATION_SIZE = len(CROSS_OFFSETS) + 4

BIAS_FEATURE = 1.0


class ObservationEncoder:
    """
    Turns an agent's surroundings and internal state into a feature vector.

    Layout (OBSERVATION_SIZE = 9):
        [0:5]  cell codes at the cross offsets, WALL_SENTINEL off-grid
        [5]    energy / max_energy
        [6]    food / food_normalizer
        [7]    uniform [0, 1) noise, drawn fresh on every call
        [8]    constant bias input
    """

    def __init__(
        self,
        max_energy: float,
        food_normalizer: float = 5.0,
        rng: Optional[np.random.Generator] = None,
    ):
        if max_energy <= 0:
            raise ValueError(f"max_energy must be positive, got {max_energy}")
        if food_normalizer <= 0:
            raise ValueError(f"food_normalizer must be positive, got {food_normalizer}")
        self.max_energy = max_energy
        self.food_normalizer = food_normalizer
        self.rng = rng if rng is not None else np.random.default_rng()

    def encode(self, state: AgentState, grid: ResourceGrid) -> np.ndarray:
        features = np.empty(OBSERVATION_SIZE, dtype=np.float32)

        for i, (dx, dy) in enumerate(CROSS_OFFSETS):
            nx, ny = state.x + dx, state.y + dy
            if grid.in_bounds(nx, ny):
                features[i] = float(grid.at(nx, ny))
            else:
                features[i] = WALL_SENTINEL

        features[5] = state.energy / self.max_energy
        features[6] = state.food / self.food_normalizer
        features[7] = self.rng.random(dtype=np.float32)
        features[8] = BIAS_FEATURE

        return features

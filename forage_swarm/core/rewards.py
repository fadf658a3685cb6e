"""
core/rewards.py

What the world pays for each step.

Food is worth more than a tree. Rocks hurt a little.
Walking costs a little. Walking into the edge costs more.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from forage_swarm.environments.resource_grid import CellKind


@dataclass
class RewardConfig:
    """Reward schedule, in energy units."""
    tree: float = 2.0              # Eating a tree
    rock: float = -0.3             # Stepping onto a rock
    food: float = 4.0              # Eating food
    empty: float = -0.04           # Base cost of any successful move
    out_of_bounds: float = -0.4    # Trying to leave the grid (no move)
    food_gain_tree: int = 1        # Food counter gain per tree
    food_gain_food: int = 2        # Food counter gain per food cell


def resolve_reward(
    consumed: Optional[CellKind],
    destination: CellKind,
    config: RewardConfig,
) -> Tuple[float, int]:
    """
    Reward and food-counter gain for a successful move.

    `consumed` is what ResourceGrid.consume returned for the destination;
    `destination` is the kind the cell held before consumption. A resource
    reward replaces the base step cost rather than adding to it.

    Returns (reward, food_gain).
    """
    if consumed == CellKind.TREE:
        return config.tree, config.food_gain_tree
    if consumed == CellKind.FOOD:
        return config.food, config.food_gain_food
    if destination == CellKind.ROCK:
        return config.rock, 0
    return config.empty, 0

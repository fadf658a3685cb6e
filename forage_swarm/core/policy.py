"""
core/policy.py

Epsilon-greedy action selection.

Mostly trust what you have learned.
Sometimes, try something else.
"""

from __future__ import annotations
from enum import IntEnum
from typing import Dict, Optional, Sequence, Tuple
import numpy as np


class Action(IntEnum):
    """The five things a forager can do each tick."""
    STAY = 0
    NORTH = 1
    SOUTH = 2
    WEST = 3
    EAST = 4


NUM_ACTIONS = len(Action)

# (dx, dy) per action; north is toward y = 0
MOVE_VECTORS: Dict[Action, Tuple[int, int]] = {
    Action.STAY: (0, 0),
    Action.NORTH: (0, -1),
    Action.SOUTH: (0, 1),
    Action.WEST: (-1, 0),
    Action.EAST: (1, 0),
}


def greedy_action(values: Sequence[float]) -> int:
    """Index of the largest value; the lowest index wins ties."""
    values = np.asarray(values)
    if values.shape != (NUM_ACTIONS,):
        raise ValueError(f"Expected {NUM_ACTIONS} action values, got shape {values.shape}")
    # np.argmax returns the first occurrence of the maximum
    return int(np.argmax(values))


def select_action(
    values: Sequence[float],
    epsilon: float,
    rng: Optional[np.random.Generator] = None,
) -> int:
    """
    Pick an action from action-value estimates.

    With probability `epsilon` a uniformly random action is returned,
    otherwise the greedy one.
    """
    rng = rng if rng is not None else np.random.default_rng()
    if rng.random() < epsilon:
        return int(rng.integers(0, NUM_ACTIONS))
    return greedy_action(values)


def destination(x: int, y: int, action: int) -> Tuple[int, int]:
    """Coordinates an action would lead to from (x, y)."""
    dx, dy = MOVE_VECTORS[Action(action)]
    return x + dx, y + dy

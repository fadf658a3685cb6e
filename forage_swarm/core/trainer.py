"""
core/trainer.py

One-step temporal-difference learning.

Look at what happened, look one step ahead,
and move the estimate a little toward what it should have been.
"""

from __future__ import annotations
from typing import TYPE_CHECKING
import numpy as np

if TYPE_CHECKING:
    from .approximator import ValueApproximator


def td_target(
    values: np.ndarray,
    action: int,
    reward: float,
    next_values: np.ndarray,
    discount: float,
) -> np.ndarray:
    """
    Target vector for a single transition.

    A copy of `values` with the taken action replaced by
    reward + discount * max(next_values). Other actions keep their
    current estimates, so they contribute no error.
    """
    target = np.array(values, dtype=np.float64, copy=True)
    target[action] = reward + discount * float(np.max(next_values))
    return target


class TDTrainer:
    """Applies one TD update to an agent's approximator."""

    def __init__(self, discount: float = 0.85):
        if not 0.0 <= discount <= 1.0:
            raise ValueError(f"discount must be in [0, 1], got {discount}")
        self.discount = discount

    def update(
        self,
        approximator: ValueApproximator,
        observation: np.ndarray,
        values: np.ndarray,
        action: int,
        reward: float,
        next_observation: np.ndarray,
    ) -> float:
        """
        Train `approximator` on one transition.

        The target is built from the post-move observation but the
        update is applied to the pre-move `observation`.

        Returns the training loss.
        """
        next_values = approximator.predict(next_observation)
        target = td_target(values, action, reward, next_values, self.discount)
        return approximator.update(observation, target)

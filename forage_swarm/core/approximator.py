"""
core/approximator.py

A small network that guesses how good each action is.

One per forager. Never shared. Trained one sample at a time,
every tick, for as long as the forager lives.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence, Tuple
import logging

import numpy as np
import torch
import torch.nn as nn

from .observation import OBSERVATION_SIZE
from .policy import NUM_ACTIONS

logger = logging.getLogger(__name__)


@dataclass
class ApproximatorConfig:
    """Shape and learning rate of the action-value network."""
    hidden_sizes: Tuple[int, ...] = (16, 16)
    learning_rate: float = 0.01


class QNetwork(nn.Module):
    """Feed-forward observation -> action-value network."""

    def __init__(
        self,
        input_dim: int = OBSERVATION_SIZE,
        hidden_sizes: Sequence[int] = (16, 16),
        output_dim: int = NUM_ACTIONS,
    ):
        super().__init__()

        layers = []
        in_features = input_dim
        for width in hidden_sizes:
            layers.append(nn.Linear(in_features, width))
            layers.append(nn.ReLU())
            in_features = width
        layers.append(nn.Linear(in_features, output_dim))

        self.net = nn.Sequential(*layers)

    def forward(self, x):
        # x: [batch, input_dim]
        return self.net(x)


class ValueApproximator:
    """
    Maps an observation to one value estimate per action.

    predict: pure function of the current parameters
    update:  one gradient step on the squared error for a single sample

    Tensors created here live only for the duration of a call.
    """

    def __init__(self, config: ApproximatorConfig | None = None):
        self.config = config or ApproximatorConfig()
        self.model = QNetwork(
            input_dim=OBSERVATION_SIZE,
            hidden_sizes=self.config.hidden_sizes,
            output_dim=NUM_ACTIONS,
        )
        self.optimizer = torch.optim.Adam(
            self.model.parameters(),
            lr=self.config.learning_rate,
        )
        self.criterion = nn.MSELoss()
        self.updates = 0

    def _to_tensor(self, vector: np.ndarray, size: int) -> torch.Tensor:
        array = np.asarray(vector, dtype=np.float32)
        if array.shape != (size,):
            raise ValueError(f"Expected vector of shape ({size},), got {array.shape}")
        if not np.all(np.isfinite(array)):
            raise ValueError("Vector contains non-finite values")
        return torch.from_numpy(array.copy()).unsqueeze(0)

    def predict(self, observation: np.ndarray) -> np.ndarray:
        """Action values for one observation, shape (NUM_ACTIONS,)."""
        x = self._to_tensor(observation, OBSERVATION_SIZE)

        self.model.eval()
        with torch.no_grad():
            values = self.model(x)

        return values.squeeze(0).numpy().astype(np.float64)

    def update(self, observation: np.ndarray, target: np.ndarray) -> float:
        """
        Nudge the prediction for `observation` toward `target`.

        Exactly one optimizer step. Returns the loss before the step.
        """
        x = self._to_tensor(observation, OBSERVATION_SIZE)
        y = self._to_tensor(target, NUM_ACTIONS)

        self.model.train()
        self.optimizer.zero_grad()
        loss = self.criterion(self.model(x), y)
        loss.backward()
        self.optimizer.step()

        self.updates += 1
        return loss.item()

    def parameter_count(self) -> int:
        return sum(p.numel() for p in self.model.parameters())

    def __repr__(self) -> str:
        return (
            f"ValueApproximator(hidden={self.config.hidden_sizes}, "
            f"lr={self.config.learning_rate}, updates={self.updates})"
        )

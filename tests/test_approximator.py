"""
Tests for core/approximator.py and core/trainer.py

Per-agent action-value networks and one-step TD updates.
"""

import numpy as np
import pytest
import torch
from unittest.mock import Mock

from forage_swarm.core.approximator import ValueApproximator, ApproximatorConfig, QNetwork
from forage_swarm.core.observation import OBSERVATION_SIZE
from forage_swarm.core.policy import NUM_ACTIONS
from forage_swarm.core.trainer import TDTrainer, td_target


def make_observation(seed=0):
    rng = np.random.default_rng(seed)
    return rng.random(OBSERVATION_SIZE).astype(np.float32)


def flat_parameters(approximator):
    return torch.cat([p.detach().flatten() for p in approximator.model.parameters()])


class TestApproximatorConfig:
    """Tests for ApproximatorConfig dataclass."""

    def test_default_config(self):
        """Default config has expected values."""
        config = ApproximatorConfig()
        assert config.hidden_sizes == (16, 16)
        assert config.learning_rate == 0.01

    def test_custom_config(self):
        """Hidden sizes shape the network."""
        config = ApproximatorConfig(hidden_sizes=(8,), learning_rate=0.1)
        approximator = ValueApproximator(config)
        linear_layers = [m for m in approximator.model.modules() if isinstance(m, torch.nn.Linear)]
        assert len(linear_layers) == 2
        assert linear_layers[0].out_features == 8


class TestQNetwork:
    """Tests for the raw network."""

    def test_forward_shape(self):
        """The network maps a batch of observations to five values each."""
        net = QNetwork()
        out = net(torch.zeros(3, OBSERVATION_SIZE))
        assert out.shape == (3, NUM_ACTIONS)


class TestValueApproximator:
    """Tests for predict/update."""

    def test_predict_shape(self):
        """predict() returns five finite values."""
        values = ValueApproximator().predict(make_observation())
        assert values.shape == (NUM_ACTIONS,)
        assert np.all(np.isfinite(values))

    def test_predict_is_pure(self):
        """predict() neither changes parameters nor varies between calls."""
        approximator = ValueApproximator()
        obs = make_observation()
        before = flat_parameters(approximator)

        first = approximator.predict(obs)
        second = approximator.predict(obs)

        np.testing.assert_array_equal(first, second)
        assert torch.equal(before, flat_parameters(approximator))

    def test_update_is_one_step(self):
        """update() takes one optimizer step and returns the loss."""
        approximator = ValueApproximator()
        obs = make_observation()
        before = flat_parameters(approximator)

        loss = approximator.update(obs, np.ones(NUM_ACTIONS))

        assert isinstance(loss, float)
        assert approximator.updates == 1
        assert not torch.equal(before, flat_parameters(approximator))

    def test_repeated_updates_approach_target(self):
        """Repeated updates drive predictions toward the target."""
        approximator = ValueApproximator()
        obs = make_observation()
        target = np.array([1.0, -1.0, 0.5, 2.0, 0.0])

        first_loss = approximator.update(obs, target)
        for _ in range(200):
            last_loss = approximator.update(obs, target)

        assert last_loss < first_loss
        np.testing.assert_allclose(approximator.predict(obs), target, atol=0.1)

    def test_instances_are_independent(self):
        """Updating one approximator leaves another untouched."""
        a = ValueApproximator()
        b = ValueApproximator()
        assert a.model is not b.model
        assert not torch.equal(flat_parameters(a), flat_parameters(b))

        before_b = flat_parameters(b)
        a.update(make_observation(), np.ones(NUM_ACTIONS))
        assert torch.equal(before_b, flat_parameters(b))

    def test_malformed_observation_rejected(self):
        """Observations of the wrong length are rejected."""
        approximator = ValueApproximator()
        with pytest.raises(ValueError):
            approximator.predict(np.zeros(OBSERVATION_SIZE - 1))

    def test_non_finite_observation_rejected(self):
        """NaN observations are rejected."""
        approximator = ValueApproximator()
        obs = make_observation()
        obs[2] = np.nan
        with pytest.raises(ValueError):
            approximator.predict(obs)

    def test_malformed_target_rejected(self):
        """Targets of the wrong length are rejected without an update."""
        approximator = ValueApproximator()
        with pytest.raises(ValueError):
            approximator.update(make_observation(), np.zeros(3))
        assert approximator.updates == 0

    def test_parameter_count(self):
        """Parameter count matches the 9-16-16-5 layout."""
        approximator = ValueApproximator()
        expected = (9 * 16 + 16) + (16 * 16 + 16) + (16 * 5 + 5)
        assert approximator.parameter_count() == expected


class TestTDTarget:
    """Tests for the TD target vector."""

    def test_only_taken_action_changes(self):
        """Only the taken action gets the bootstrapped target."""
        values = np.array([0.1, 0.2, 0.3, 0.4, 0.5])
        next_values = np.array([1.0, 3.0, 2.0, 0.0, -1.0])

        target = td_target(values, 2, 4.0, next_values, 0.85)

        assert target[2] == pytest.approx(4.0 + 0.85 * 3.0)
        for i in (0, 1, 3, 4):
            assert target[i] == values[i]

    def test_values_not_mutated(self):
        """The caller's value vector is left alone."""
        values = np.zeros(5)
        td_target(values, 0, 1.0, np.ones(5), 0.5)
        np.testing.assert_array_equal(values, np.zeros(5))


class TestTDTrainer:
    """Tests for TDTrainer."""

    def test_default_discount(self):
        """Default discount is 0.85."""
        assert TDTrainer().discount == 0.85

    def test_invalid_discount(self):
        """Discounts outside [0, 1] are rejected."""
        with pytest.raises(ValueError):
            TDTrainer(discount=1.5)

    def test_trains_pre_move_observation(self):
        """The trainer bootstraps on the next view and trains the previous one."""
        approximator = Mock()
        approximator.predict.return_value = np.array([0.0, 2.0, 0.0, 0.0, 0.0])
        approximator.update.return_value = 0.25

        obs = make_observation(1)
        next_obs = make_observation(2)
        values = np.array([1.0, 1.0, 1.0, 1.0, 1.0])

        loss = TDTrainer(0.5).update(approximator, obs, values, 4, -0.04, next_obs)

        assert loss == 0.25
        approximator.predict.assert_called_once()
        np.testing.assert_array_equal(approximator.predict.call_args[0][0], next_obs)

        trained_obs, target = approximator.update.call_args[0]
        np.testing.assert_array_equal(trained_obs, obs)
        np.testing.assert_allclose(target, [1.0, 1.0, 1.0, 1.0, -0.04 + 0.5 * 2.0])

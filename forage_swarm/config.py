"""
config.py

Every tunable in one place.

A simulation config composes the forager, reward, and network configs
with the world-level settings. Configs load from YAML so a run can be
described in a file and repeated.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional
import logging

import yaml

from forage_swarm.core.agent import AgentConfig
from forage_swarm.core.approximator import ApproximatorConfig
from forage_swarm.core.rewards import RewardConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "configs" / "default.yaml"


@dataclass
class SimulationConfig:
    """Configuration for a foraging world."""
    # World
    grid_size: int = 20
    agent_count: int = 8
    initial_trees: int = 40
    initial_rocks: int = 25
    initial_food: int = 15
    tile_size: int = 24              # Pixels per cell; presentation only

    # Regeneration
    regen_interval: int = 50         # Ticks between replenishments
    regen_trees: int = 3
    regen_food: int = 2

    # Random seed (None = fresh entropy each reset)
    seed: Optional[int] = None

    # Nested configs
    agent: AgentConfig = field(default_factory=AgentConfig)
    rewards: RewardConfig = field(default_factory=RewardConfig)
    approximator: ApproximatorConfig = field(default_factory=ApproximatorConfig)

    def __post_init__(self):
        if self.grid_size <= 0:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        if self.agent_count < 0:
            raise ValueError(f"agent_count must be non-negative, got {self.agent_count}")
        if self.regen_interval <= 0:
            raise ValueError(f"regen_interval must be positive, got {self.regen_interval}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _build(cls, data: Dict[str, Any], section: str):
    """Instantiate a config dataclass, rejecting unknown keys."""
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {section} config keys: {sorted(unknown)}")
    return cls(**data)


def config_from_dict(data: Optional[Dict[str, Any]]) -> SimulationConfig:
    """Build a SimulationConfig from a plain (e.g. YAML-loaded) mapping."""
    data = dict(data or {})

    agent_data = dict(data.pop("agent", None) or {})
    if "initial_energy" in agent_data:
        agent_data["initial_energy"] = tuple(agent_data["initial_energy"])

    approx_data = dict(data.pop("approximator", None) or {})
    if "hidden_sizes" in approx_data:
        approx_data["hidden_sizes"] = tuple(approx_data["hidden_sizes"])

    rewards_data = dict(data.pop("rewards", None) or {})

    return _build(
        SimulationConfig,
        {
            **data,
            "agent": _build(AgentConfig, agent_data, "agent"),
            "rewards": _build(RewardConfig, rewards_data, "rewards"),
            "approximator": _build(ApproximatorConfig, approx_data, "approximator"),
        },
        "simulation",
    )


def load_config(config_path: Optional[str] = None) -> SimulationConfig:
    """Load a SimulationConfig from YAML (defaults to the packaged config)."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    logger.info(f"Loaded simulation config from {config_path}")
    return config_from_dict(data)

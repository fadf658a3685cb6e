"""
Core components of a forager.

- agent: The ForagerAgent - observe, decide, act, learn
- observation: The cross-shaped view of the world
- approximator: Per-agent action-value network
- policy: Epsilon-greedy action selection
- rewards: What each step pays
- trainer: One-step TD updates
"""

from .agent import ForagerAgent, AgentState, AgentConfig, StepOutcome

__all__ = ["ForagerAgent", "AgentState", "AgentConfig", "StepOutcome"]

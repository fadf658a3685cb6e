"""
Forage-Swarm: Online-Learning Foragers on a Discrete Grid

A population of agents, each with its own small action-value network,
learning from moment to moment where the food is.
"""

__version__ = "0.1.0"

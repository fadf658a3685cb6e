"""
forage_swarm/services/

Control surface for external drivers (UIs, frame clocks, scripts).

The controller wraps a ForageWorld and exposes start/pause/resume/reset
and single-tick advancement. It owns no timers.
"""

from .controller import SimulationController

__all__ = ["SimulationController"]

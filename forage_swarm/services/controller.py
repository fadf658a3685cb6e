"""
Simulation controller.

The control surface a presentation layer drives: start, pause, resume,
stop, reset, and advance one tick at a time. The controller owns no
timers; whatever frame clock drives it simply calls `advance`.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

from forage_swarm.config import SimulationConfig
from forage_swarm.environments.forage_world import ForageWorld, TickReport, WorldSnapshot
from forage_swarm.environments.resource_grid import CellKind

logger = logging.getLogger(__name__)


class SimulationController:
    """
    Drives a ForageWorld on behalf of an external UI.

    Ticks, resets and manual spawns are serialized by a lock so a
    reset issued from another thread never lands in the middle of a tick.
    """

    def __init__(self, config: SimulationConfig | None = None):
        self.config = config or SimulationConfig()
        self.world = ForageWorld(self.config)

        # Status
        self.running = False
        self.paused = False
        self.start_time: float | None = None
        self.last_report: TickReport | None = None

        self._lock = threading.Lock()

        logger.info(f"Controller initialized with {self.world!r}")

    # ==================== Control ====================

    def start(self) -> None:
        """Begin accepting ticks."""
        self.running = True
        self.paused = False
        self.start_time = time.time()
        logger.info("Simulation started")

    def pause(self) -> None:
        if not self.running:
            return
        self.paused = True
        logger.info(f"Simulation paused at tick {self.world.tick}")

    def resume(self) -> None:
        if not self.running:
            return
        self.paused = False
        logger.info(f"Simulation resumed at tick {self.world.tick}")

    def stop(self) -> None:
        """Stop accepting ticks. The world is kept as-is."""
        self.running = False
        self.paused = False
        logger.info("Stopping simulation...")

    def reset(self, config: SimulationConfig | None = None) -> None:
        """
        Throw away the grid and every forager and build a new world.

        Running/paused status is preserved.
        """
        with self._lock:
            if config is not None:
                self.config = config
            self.world.reset(self.config)
            self.last_report = None

    @property
    def active(self) -> bool:
        return self.running and not self.paused

    # ==================== Ticking ====================

    def advance(self) -> TickReport | None:
        """
        Advance one tick if running and not paused.

        Returns the tick report, or None when no tick was taken.
        """
        if not self.active:
            return None

        with self._lock:
            self.last_report = self.world.step()

        return self.last_report

    def run(self, ticks: int) -> dict[str, Any]:
        """
        Run `ticks` ticks back to back.

        Starts the controller if needed. Returns final statistics.
        """
        if not self.running:
            self.start()

        logger.info(f"Running {ticks} ticks")

        try:
            for _ in range(ticks):
                if not self.running:
                    break
                if self.paused:
                    break
                self.advance()

        except KeyboardInterrupt:
            logger.info("Simulation interrupted by user")
            self.running = False

        stats = self.world.get_statistics()
        logger.info(
            f"Run finished at tick {stats['tick']}: "
            f"{stats['living']}/{stats['agents']} agents alive"
        )
        return stats

    def spawn(self, kind: CellKind, count: int) -> int:
        """Scatter extra resources into the current world."""
        with self._lock:
            return self.world.spawn_resources(kind, count)

    # ==================== Status ====================

    def snapshot(self) -> WorldSnapshot:
        with self._lock:
            return self.world.snapshot()

    def get_status(self) -> dict[str, Any]:
        """Get current controller status."""
        elapsed = 0.0
        if self.start_time:
            elapsed = time.time() - self.start_time

        return {
            "running": self.running,
            "paused": self.paused,
            "elapsed_time": elapsed,
            **self.world.get_statistics(),
        }

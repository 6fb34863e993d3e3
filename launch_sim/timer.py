"""
Launch Telemetry Simulation - Tick Scheduling

Two interchangeable tick sources for RocketSimulation:

- RepeatingTimer: wall-clock ticks on one daemon worker thread
- ManualTimer: ticks only when fire() is called (headless runs, tests)

Both take ``(interval, callback)`` and expose start(), cancel() and active.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class RepeatingTimer:
    """Calls ``callback`` every ``interval`` seconds on a single worker thread.

    The wait happens before each call, so the first tick fires one interval
    after start().
    """

    def __init__(self, interval: float, callback: TickCallback,
                 name: str = "SimulationClock") -> None:
        self.interval = interval
        self.callback = callback
        self.name = name
        self._thr: Optional[threading.Thread] = None
        self._stop = threading.Event()

    @property
    def active(self) -> bool:
        return self._thr is not None and self._thr.is_alive() and not self._stop.is_set()

    def start(self) -> None:
        if self.active:
            return
        self._stop = threading.Event()
        self._thr = threading.Thread(target=self._worker, args=(self._stop,),
                                     name=self.name, daemon=True)
        self._thr.start()

    def _worker(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            self.callback()

    def cancel(self, timeout: float = 1.0) -> None:
        """Stop ticking. Joins the worker unless called from the worker itself."""
        self._stop.set()
        thr = self._thr
        self._thr = None
        if thr is not None and thr is not threading.current_thread():
            thr.join(timeout=timeout)
            if thr.is_alive():
                logger.warning(f"Timer thread {self.name} did not stop within {timeout}s")


class ManualTimer:
    """Deterministic tick source: each fire() runs the callback while active."""

    def __init__(self, interval: float, callback: TickCallback) -> None:
        self.interval = interval
        self.callback = callback
        self.active = False
        self.ticks = 0

    def start(self) -> None:
        self.active = True

    def cancel(self) -> None:
        self.active = False

    def fire(self, count: int = 1) -> int:
        """Run up to ``count`` ticks, stopping early if cancelled. Returns ticks run."""
        fired = 0
        for _ in range(count):
            if not self.active:
                break
            self.callback()
            self.ticks += 1
            fired += 1
        return fired

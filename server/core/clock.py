"""
Tick clocks that drive game cartridges.

A cartridge never sleeps or spins its own loop. It hands a callback to a
TickClock and the clock invokes it once per interval. TimerClock is the
production clock (re-armed threading.Timer, serialised through the session
lock); ManualClock is the deterministic clock used by tests.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TickClock(ABC):
    """Periodic scheduler contract shared by all clocks."""

    def __init__(self):
        self.interval_ms: int = 0
        self._callback: Optional[Callable[[], None]] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @abstractmethod
    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        """Begin calling `callback` every `interval_ms` milliseconds."""

    @abstractmethod
    def stop(self) -> None:
        """Cancel the periodic callback. No tick fires after this returns."""

    def restart(self, interval_ms: int) -> None:
        """Cancel the pending tick and re-arm at a new interval."""
        callback = self._callback
        self.stop()
        if callback is not None:
            self.start(interval_ms, callback)


class TimerClock(TickClock):
    """
    Re-arming threading.Timer clock.

    Each fire acquires the shared session lock, so ticks never interleave
    with input handling or with a session transition. A generation counter
    is bumped on every stop/restart; a timer thread that was already waiting
    on the lock when the clock was stopped sees a stale generation and bails
    out without touching the engine.
    """

    def __init__(self, lock: threading.RLock):
        super().__init__()
        self._lock = lock
        self._timer: Optional[threading.Timer] = None
        self._generation = 0

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        if interval_ms <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_ms}")
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self.interval_ms = interval_ms
            self._callback = callback
            self._running = True
            self._schedule_tick(self._generation)

    def stop(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._running = False

    def _cancel_timer(self) -> None:
        if self._timer:
            self._timer.cancel()
            self._timer = None

    def _schedule_tick(self, generation: int) -> None:
        self._timer = threading.Timer(self.interval_ms / 1000.0, self._fire, args=(generation,))
        self._timer.daemon = True
        self._timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if not self._running or generation != self._generation:
                return
            try:
                self._callback()
            except Exception as e:
                logger.exception(f"Tick callback failed: {e}")
            # The callback may have stopped or re-armed the clock itself
            if self._running and generation == self._generation:
                self._schedule_tick(generation)


class ManualClock(TickClock):
    """
    Deterministic clock driven by the caller.

    `advance(ms)` fires the callback once for every full interval that
    elapses; a re-arm inside a callback resets the accumulated time, the same
    way a fresh timer would.
    """

    def __init__(self):
        super().__init__()
        self._elapsed_ms = 0
        self.starts = 0
        self.fired = 0

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        if interval_ms <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_ms}")
        self.interval_ms = interval_ms
        self._callback = callback
        self._running = True
        self._elapsed_ms = 0
        self.starts += 1

    def stop(self) -> None:
        self._running = False
        self._elapsed_ms = 0

    def fire(self) -> None:
        """Fire a single tick immediately if the clock is running."""
        if self._running:
            self.fired += 1
            self._callback()

    def advance(self, ms: int) -> int:
        """Advance simulated time; returns the number of ticks fired."""
        ticks = 0
        self._elapsed_ms += ms
        while self._running and self._elapsed_ms >= self.interval_ms:
            self._elapsed_ms -= self.interval_ms
            ticks += 1
            self.fire()
        return ticks

"""Debouncer — collapse a burst of triggers into one delayed fire.

Uses threading.Timer (daemon=True). Each arm() cancels the previous timer,
so only the last trigger in a burst fires. When a scheduler is installed the
fire is marshaled to the UI thread.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from reactbox import _scheduler

logger = logging.getLogger("reactbox.debounce")


class Debouncer:
    """A single restartable one-shot timer."""

    __slots__ = ("_lock", "_timer", "_generation")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def arm(self, delay_ms: int, fire: Callable[[], None]) -> None:
        """Start (or restart) the timer; fire() runs delay_ms after the last arm."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            t = threading.Timer(delay_ms / 1000, self._expire, args=[self._generation, fire])
            t.daemon = True
            self._timer = t
            t.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1

    def _expire(self, generation: int, fire: Callable[[], None]) -> None:
        with self._lock:
            # A timer that lost the race with arm()/cancel() must stay silent.
            if generation != self._generation:
                return
            self._timer = None
        _scheduler.marshal(lambda: self._fire(generation, fire))

    def _fire(self, generation: int, fire: Callable[[], None]) -> None:
        if generation != self._generation:
            return
        try:
            fire()
        except Exception:
            logger.exception("Debounced callback %r failed", fire)

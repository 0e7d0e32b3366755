"""Push-based event stream with operator chaining.

Minimal broadcast stream: emit values, subscribe to them, and compose
with debounce/map/filter operators. Each operator returns a new stream
(immutable chain). dispose() tears down the entire chain.

A stream that has seen a value (or was seeded with one) replays the latest
value to every new subscriber, so subscribers always start from a snapshot.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

from reactbox._isolation import FailureCollector
from reactbox.debounce import Debouncer

T = TypeVar("T")
U = TypeVar("U")

Disposer = Callable[[], None]

logger = logging.getLogger("reactbox.stream")

_UNSET = object()


def _noop() -> None:
    pass


class EventStream(Generic[T]):
    """Push-based broadcast stream with latest-value replay."""

    def __init__(self, initial: T = _UNSET) -> None:  # type: ignore[assignment]
        self._subscribers: list[Callable[[T], None]] = []
        self._children: list[EventStream] = []  # downstream streams for dispose
        self._disposed = False
        self._parent_disposer: Disposer | None = None
        self._latest = initial
        self._debouncers: list[Debouncer] = []

    @property
    def disposed(self) -> bool:
        return self._disposed

    def emit(self, value: T) -> None:
        """Push a value to all subscribers."""
        if self._disposed:
            return
        self._latest = value
        failures = FailureCollector(logger)
        for cb in list(self._subscribers):
            with failures.guard("Stream subscriber", cb):
                cb(value)
        failures.raise_first()

    def subscribe(self, callback: Callable[[T], None]) -> Disposer:
        """Register a callback and replay the latest value. Returns a function that removes it."""
        if self._disposed:
            return _noop
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass  # already removed

        if self._latest is not _UNSET:
            try:
                callback(self._latest)
            except Exception:
                _unsubscribe()
                raise
        return _unsubscribe

    def debounce(self, delay_ms: int) -> EventStream[T]:
        """Coalesce rapid events: emit the last one after a quiet period."""
        child: EventStream[T] = EventStream()
        child._parent_disposer = self._track_child(child)
        debouncer = Debouncer()
        child._debouncers.append(debouncer)

        def _on_event(value: T) -> None:
            debouncer.arm(delay_ms, lambda: child.emit(value))

        self.subscribe(_on_event)
        return child

    def map(self, fn: Callable[[T], U]) -> EventStream[U]:
        """Transform events through fn."""
        child: EventStream[U] = EventStream()
        child._parent_disposer = self._track_child(child)
        self.subscribe(lambda v: child.emit(fn(v)))
        return child

    def filter(self, fn: Callable[[T], bool]) -> EventStream[T]:
        """Only pass events where fn returns True."""
        child: EventStream[T] = EventStream()
        child._parent_disposer = self._track_child(child)
        self.subscribe(lambda v: child.emit(v) if fn(v) else None)
        return child

    def dispose(self) -> None:
        """Tear down this stream and all downstream children."""
        if self._disposed:
            return
        self._disposed = True
        self._subscribers.clear()
        self._latest = _UNSET
        for debouncer in self._debouncers:
            debouncer.cancel()
        self._debouncers.clear()
        for child in list(self._children):
            child.dispose()
        self._children.clear()
        if self._parent_disposer is not None:
            self._parent_disposer()
            self._parent_disposer = None

    def _track_child(self, child: EventStream) -> Disposer:
        """Register child for dispose propagation. Returns a disposer that removes it."""
        self._children.append(child)

        def _remove() -> None:
            try:
                self._children.remove(child)
            except ValueError:
                pass

        return _remove

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else f"{len(self._subscribers)} subscribers"
        return f"EventStream({state})"

"""Observable values: state containers that notify on change.

An Observable holds one value and three kinds of dependents:

- bound components: UI objects that get a refresh request on change
- listeners: plain callbacks invoked with the new value
- a stream: an EventStream that broadcasts every change

Every effective mutation runs the same notify protocol, synchronously:
prune dead components, refresh live ones, call listeners, emit on the
stream. A failure in one callback is logged and does not stop the rest;
the first failure is re-raised after the run completes.

Thread safety: containers are single-threaded. Install a scheduler with
set_scheduler() and mutations from other threads are marshaled onto the
UI thread.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, Optional, Protocol, TypeVar

from reactbox import _scheduler
from reactbox._isolation import FailureCollector
from reactbox.debounce import Debouncer
from reactbox.stream import Disposer, EventStream

T = TypeVar("T")

logger = logging.getLogger("reactbox.observable")


class DisposedError(RuntimeError):
    """Raised when a disposed container is mutated or subscribed to."""


class Component(Protocol):
    """What a container needs from a bound UI component.

    Textual widgets satisfy this as-is.
    """

    @property
    def is_attached(self) -> bool: ...

    def refresh(self) -> object: ...


class Observable(Generic[T]):
    """A single observable value with bound components, listeners and a stream.

    Usage:
        counter = Observable(0)
        counter.listen(lambda v: print("counter:", v))
        counter.set(1)                 # prints "counter: 1"
        counter.update(lambda v: v + 1)
        counter.set(2)                 # strict: equal value, nothing fires

    With strict=False every set() notifies, even when the value is equal.
    """

    __slots__ = (
        "_value",
        "_strict",
        "_bound",
        "_seen_attached",
        "_listeners",
        "_stream",
        "_debouncers",
        "_teardown",
        "_disposed",
    )

    def __init__(self, value: T, strict: bool = True) -> None:
        self._value = value
        self._strict = strict
        self._bound: list[Component] = []
        self._seen_attached: set[int] = set()  # ids of bound components seen attached
        self._listeners: list[Callable[[T], None]] = []
        self._stream: EventStream[T] = EventStream(value)
        self._debouncers: list[Debouncer] = []
        self._teardown: list[Callable[[], None]] = []
        self._disposed = False

    # --- Read side ---

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, value: T) -> None:
        self.set(value)

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def stream(self) -> EventStream[T]:
        """Broadcast stream of changes. New subscribers get the current value first."""
        return self._stream

    # --- Mutation ---

    def set(self, value: T) -> None:
        """Write a new value. In strict mode an equal value is ignored."""
        self._check_alive("set")
        _scheduler.dispatch(lambda: self._set_direct(value))

    def _set_direct(self, value: T) -> None:
        old = self._value
        if self._strict and (old is value or old == value):
            return
        self._value = value
        self._notify()

    def update(self, fn: Callable[[T], T]) -> None:
        """Replace the value with fn(value). Goes through set(), so strict applies.

        Usage:
            counter.update(lambda v: v + 1)
        """
        self._check_alive("update")
        _scheduler.dispatch(lambda: self._set_direct(fn(self._value)))

    def mutate(self, fn: Callable[[T], object]) -> None:
        """Edit the value in place, then always notify.

        Equality cannot see in-place edits, so this is the one sanctioned way
        to change a mutable value without replacing it.
        """
        self._check_alive("mutate")

        def _run() -> None:
            fn(self._value)
            self._notify()

        _scheduler.dispatch(_run)

    def notify(self) -> None:
        """Run the notify protocol on the current value without changing it."""
        self._check_alive("notify")
        _scheduler.dispatch(self._notify)

    def _notify(self) -> None:
        if self._disposed:
            return
        failures = FailureCollector(logger)

        before = len(self._bound)
        self._bound = [c for c in self._bound if not self._is_torn_down(c)]
        self._seen_attached &= {id(c) for c in self._bound}
        if len(self._bound) != before:
            logger.debug("Pruned %d detached component(s)", before - len(self._bound))

        for component in list(self._bound):
            if not component.is_attached:
                continue
            self._seen_attached.add(id(component))
            with failures.guard("Refresh of", component):
                component.refresh()

        value = self._value
        for callback in list(self._listeners):
            with failures.guard("Listener", callback):
                callback(value)

        try:
            self._stream.emit(value)
        finally:
            failures.raise_first()

    def _is_torn_down(self, component: Component) -> bool:
        # Detached after having been attached. A component bound before it
        # was mounted stays bound until it first shows up attached.
        return id(component) in self._seen_attached and not component.is_attached

    # --- Listeners ---

    def listen(self, callback: Callable[[T], None]) -> None:
        """Call callback(value) on every change. Registering twice is a no-op.

        Callbacks compare like functions do: by identity, and bound methods
        by (instance, function), so obj.method can be unlistened later.
        """
        self._check_alive("listen")
        if callback not in self._listeners:
            self._listeners.append(callback)

    def unlisten(self, callback: Callable[[T], None]) -> None:
        try:
            self._listeners.remove(callback)
        except ValueError:
            pass  # not registered

    def debounce(self, delay_ms: int, callback: Callable[[T], None]) -> Disposer:
        """Call callback once per burst of changes, delay_ms after the last one.

        The callback receives the value current at fire time. Each call
        installs an independent debounced listener; the returned function
        removes it and cancels its pending timer.

        The delay runs on a timer thread. Install a scheduler with
        set_scheduler() (e.g. app.call_from_thread) so the callback runs on
        the UI thread; without one it runs on the timer thread.
        """
        self._check_alive("debounce")
        debouncer = Debouncer()

        def _on_change(_value: T) -> None:
            debouncer.arm(delay_ms, lambda: callback(self._value))

        self._listeners.append(_on_change)
        self._debouncers.append(debouncer)

        def _remove() -> None:
            self.unlisten(_on_change)
            debouncer.cancel()
            try:
                self._debouncers.remove(debouncer)
            except ValueError:
                pass

        return _remove

    # --- Components ---

    def bind(self, component: Component) -> None:
        """Refresh component on every change, starting with one refresh now.

        Binding the same component twice is a no-op. A component that is
        not attached yet stays bound and starts refreshing once it is.
        """
        self._check_alive("bind")
        if any(c is component for c in self._bound):
            return
        self._bound.append(component)
        if component.is_attached:
            self._seen_attached.add(id(component))
            component.refresh()

    def unbind(self, component: Component) -> None:
        for i, c in enumerate(self._bound):
            if c is component:
                del self._bound[i]
                self._seen_attached.discard(id(component))
                return

    # --- Lifecycle ---

    def on_dispose(self, fn: Callable[[], None]) -> None:
        """Register a teardown hook run once by dispose()."""
        self._check_alive("on_dispose")
        self._teardown.append(fn)

    def dispose(self) -> None:
        """Drop every listener, binding and stream subscriber. Safe to call twice."""
        if self._disposed:
            return
        self._disposed = True
        for debouncer in self._debouncers:
            debouncer.cancel()
        self._debouncers.clear()
        teardown, self._teardown = self._teardown, []
        for fn in teardown:
            fn()
        self._listeners.clear()
        self._bound.clear()
        self._seen_attached.clear()
        self._stream.dispose()
        logger.debug("Disposed %r", self)

    def _check_alive(self, op: str) -> None:
        if self._disposed:
            raise DisposedError(f"cannot {op}() a disposed {type(self).__name__}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __str__(self) -> str:
        return str(self._value)


class NullableObservable(Observable[Optional[T]]):
    """An Observable whose value may be None (the default).

    Usage:
        user = NullableObservable()
        user.value            # None
        user.set(User("Max"))
    """

    __slots__ = ()

    def __init__(self, value: T | None = None, strict: bool = True) -> None:
        super().__init__(value, strict)

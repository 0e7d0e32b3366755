"""Textual integration for reactbox. Opt-in, requires textual.

Textual widgets already satisfy the Component protocol (is_attached +
refresh()), so any widget can be bound directly. This module adds the
builder-style and stream-style widgets plus react()/react_n() for creating
a container already bound to a widget.

Cross-thread mutations: call reactbox.set_scheduler(app.call_from_thread)
from the app thread, e.g. in App.on_mount.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from textual.app import RenderResult
from textual.widget import Widget

from reactbox.observable import NullableObservable, Observable
from reactbox.stream import Disposer

T = TypeVar("T")

Builder = Callable[[T], RenderResult]


class ReactiveBuilder(Widget):
    """Renders builder(source.value), re-rendering whenever source changes.

    Binds on mount and unbinds on unmount. Assigning .source while mounted
    moves the binding to the new container.
    """

    DEFAULT_CSS = """
    ReactiveBuilder {
        height: auto;
    }
    """

    def __init__(
        self,
        source: Observable[T],
        builder: Builder[T],
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self._source = source
        self._builder = builder

    @property
    def source(self) -> Observable[T]:
        return self._source

    @source.setter
    def source(self, source: Observable[T]) -> None:
        if source is self._source:
            return
        old, self._source = self._source, source
        if self.is_attached:
            old.unbind(self)
            source.bind(self)

    def on_mount(self) -> None:
        self._source.bind(self)

    def on_unmount(self) -> None:
        self._source.unbind(self)

    def refresh(self, *regions, repaint: bool = True, layout: bool = True, recompose: bool = False):
        # New content may change the widget's size.
        return super().refresh(*regions, repaint=repaint, layout=layout, recompose=recompose)

    def render(self) -> RenderResult:
        return self._builder(self._source.value)


class StreamBuilder(Widget):
    """Renders builder(latest) from source.stream, independent of bind().

    The stream replays the current value on subscribe, so the first render
    already shows it.
    """

    DEFAULT_CSS = """
    StreamBuilder {
        height: auto;
    }
    """

    def __init__(
        self,
        source: Observable[T],
        builder: Builder[T],
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self._source = source
        self._builder = builder
        self._latest: T = source.value
        self._unsubscribe: Disposer | None = None

    @property
    def latest(self) -> T:
        return self._latest

    def on_mount(self) -> None:
        self._unsubscribe = self._source.stream.subscribe(self._on_value)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_value(self, value: T) -> None:
        self._latest = value
        if self.is_attached:
            self.refresh(layout=True)

    def render(self) -> RenderResult:
        return self._builder(self._latest)


def react(widget: Widget, value: T, strict: bool = True) -> Observable[T]:
    """Create an Observable bound to widget in one step.

    Safe to call before the widget is mounted: the binding is kept until the
    widget first shows up attached, and refreshes start from there.

    Usage:
        class Counter(Static):
            def __init__(self, **kwargs):
                super().__init__(**kwargs)
                self.count = react(self, 0)

            def render(self):
                return f"Count: {self.count.value}"
    """
    obs = Observable(value, strict)
    obs.bind(widget)
    return obs


def react_n(widget: Widget, value: T | None = None, strict: bool = True) -> NullableObservable[T]:
    """Nullable variant of react()."""
    obs: NullableObservable[T] = NullableObservable(value, strict)
    obs.bind(widget)
    return obs

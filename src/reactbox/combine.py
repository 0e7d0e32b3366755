"""Combinators — derived Observables kept live from several sources.

A derived container's value is fn(current values of all sources), computed
once on construction and again whenever any source notifies. The derived
container is an ordinary Observable: it can be bound, listened to and
combined further. Disposing it detaches it from its sources.

Propagation is eager and synchronous: a change to a source cascades through
every derived container before the source's set() returns.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

from reactbox.observable import Observable

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
D = TypeVar("D")
E = TypeVar("E")
R = TypeVar("R")


def combine(
    sources: Sequence[Observable[Any]],
    fn: Callable[[list[Any]], R],
    *,
    strict: bool = True,
) -> Observable[R]:
    """Derive an Observable from any number of sources.

    fn receives the list of current source values, in source order.
    Exceptions from fn propagate: on construction to the caller, and on a
    source change to whoever mutated the source.

    Usage:
        first = Observable("Ada")
        last = Observable("Lovelace")
        full = combine([first, last], lambda vs: " ".join(vs))
        full.value  # "Ada Lovelace"
    """
    sources = list(sources)
    if not sources:
        raise ValueError("combine() needs at least one source")
    for source in sources:
        source._check_alive("combine")

    derived: Observable[R] = Observable(fn([s.value for s in sources]), strict)

    def _update(_value: Any) -> None:
        if not derived.disposed:
            derived.set(fn([s.value for s in sources]))

    for source in sources:
        source.listen(_update)
        derived.on_dispose(lambda source=source: source.unlisten(_update))
    return derived


def computed(
    sources: Sequence[Observable[Any]],
    fn: Callable[[tuple[Any, ...]], R] | None = None,
    *,
    strict: bool = True,
) -> Observable[Any]:
    """Like combine(), but by default republishes the tuple of source values.

    Handy for one Observable that fires whenever any of several sources
    changes.

    Usage:
        pair = computed([a, b])
        pair.value  # (a.value, b.value)
    """
    if fn is None:
        return combine(sources, tuple, strict=strict)
    return combine(sources, lambda values: fn(tuple(values)), strict=strict)


def combine2(
    a: Observable[A],
    b: Observable[B],
    fn: Callable[[A, B], R],
    *,
    strict: bool = True,
) -> Observable[R]:
    """Combine two Observables.

    Usage:
        total = combine2(a, b, lambda x, y: x + y)
    """
    return combine([a, b], lambda v: fn(v[0], v[1]), strict=strict)


def combine3(
    a: Observable[A],
    b: Observable[B],
    c: Observable[C],
    fn: Callable[[A, B, C], R],
    *,
    strict: bool = True,
) -> Observable[R]:
    """Combine three Observables; fn gets their values in the same order."""
    return combine([a, b, c], lambda v: fn(v[0], v[1], v[2]), strict=strict)


def combine4(
    a: Observable[A],
    b: Observable[B],
    c: Observable[C],
    d: Observable[D],
    fn: Callable[[A, B, C, D], R],
    *,
    strict: bool = True,
) -> Observable[R]:
    return combine([a, b, c, d], lambda v: fn(v[0], v[1], v[2], v[3]), strict=strict)


def combine5(
    a: Observable[A],
    b: Observable[B],
    c: Observable[C],
    d: Observable[D],
    e: Observable[E],
    fn: Callable[[A, B, C, D, E], R],
    *,
    strict: bool = True,
) -> Observable[R]:
    return combine([a, b, c, d, e], lambda v: fn(v[0], v[1], v[2], v[3], v[4]), strict=strict)

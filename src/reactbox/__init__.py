"""reactbox: observable value containers for UI state."""

from importlib.metadata import version as _version

__version__ = _version("reactbox")

from reactbox._scheduler import set_scheduler
from reactbox.observable import Component, DisposedError, NullableObservable, Observable
from reactbox.combine import combine, combine2, combine3, combine4, combine5, computed
from reactbox.debounce import Debouncer
from reactbox.stream import EventStream
# textual NOT auto-imported, opt-in only

__all__ = [
    "Observable",
    "NullableObservable",
    "Component",
    "DisposedError",
    "combine",
    "combine2",
    "combine3",
    "combine4",
    "combine5",
    "computed",
    "Debouncer",
    "EventStream",
    "set_scheduler",
]

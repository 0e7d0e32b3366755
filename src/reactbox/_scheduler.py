"""Thread marshaling for container mutations and debounce fires.

Containers are single-threaded: every notify protocol run happens on the
UI thread. Call set_scheduler() once from that thread:

    reactbox.set_scheduler(app.call_from_thread)

After that, mutations issued from any other thread are handed to the
scheduler instead of running in place. Without a scheduler everything runs
on the calling thread.
"""

from __future__ import annotations

import threading
from typing import Callable

_scheduler: Callable[[Callable[[], None]], object] | None = None
_scheduler_thread: threading.Thread | None = None


def set_scheduler(scheduler: Callable[[Callable[[], None]], object] | None) -> None:
    """Install (or clear, with None) the process-wide UI-thread scheduler."""
    global _scheduler, _scheduler_thread
    _scheduler = scheduler
    _scheduler_thread = threading.current_thread() if scheduler is not None else None


def on_scheduler_thread() -> bool:
    if _scheduler is None:
        return True
    return threading.current_thread() == _scheduler_thread


def dispatch(fn: Callable[[], None]) -> None:
    """Run fn now if on the UI thread, otherwise marshal it there."""
    if on_scheduler_thread():
        fn()
    else:
        _scheduler(fn)


def marshal(fn: Callable[[], None]) -> None:
    """Hand fn to the scheduler unconditionally, used by timer threads."""
    if _scheduler is None:
        fn()
    else:
        _scheduler(fn)

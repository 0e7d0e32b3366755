"""Failure boundaries for notification fan-out.

One failing listener must not starve the rest. Each call runs inside
guard(); the first exception is kept and re-raised by raise_first() once the
whole fan-out has finished.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager


class FailureCollector:
    __slots__ = ("_logger", "_first")

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger
        self._first: BaseException | None = None

    @contextmanager
    def guard(self, what: str, target: object):
        try:
            yield
        except Exception as exc:
            self._logger.exception("%s %r failed", what, target)
            if self._first is None:
                self._first = exc

    def raise_first(self) -> None:
        if self._first is not None:
            exc, self._first = self._first, None
            raise exc

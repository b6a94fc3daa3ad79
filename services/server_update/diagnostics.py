"""Progress reporting for update runs."""

from __future__ import annotations

import logging
import traceback
from typing import Callable


_LOGGER = logging.getLogger(__name__)


class DiagnosticSink:
    """Forward progress lines to a caller supplied callable.

    Every line is mirrored to the module logger. A sink that raises is logged
    and otherwise ignored so reporting never changes the outcome of a run.
    """

    def __init__(self, consumer: Callable[[str], None] | None = None) -> None:
        self._consumer = consumer

    def __call__(self, message: str) -> None:
        _LOGGER.debug(message)
        if self._consumer is None:
            return
        try:
            self._consumer(message)
        except Exception:  # pragma: no cover - sink failures are advisory
            _LOGGER.warning("Diagnostic sink raised while handling %r", message, exc_info=True)

    def exception(self, error: BaseException) -> None:
        """Write ``error`` and its traceback, one line at a time."""

        lines = traceback.format_exception(type(error), error, error.__traceback__)
        for chunk in lines:
            for line in chunk.rstrip("\n").splitlines():
                self(line)


__all__ = ["DiagnosticSink"]

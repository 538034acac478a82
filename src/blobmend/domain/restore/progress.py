"""Rate-limited progress logging for long-running maintenance loops."""

from __future__ import annotations

import time
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable
    from logging import Logger
    from types import TracebackType


class ProgressLogIntervalHelper:
    """Emit at most one progress line per ``interval_seconds``."""

    def __init__(
        self,
        logger: Logger,
        interval_seconds: float,
        *,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._logger = logger
        self._interval = interval_seconds
        self._monotonic = monotonic
        self._started = monotonic()
        self._last_logged = self._started

    def __enter__(self) -> ProgressLogIntervalHelper:
        self._started = self._monotonic()
        self._last_logged = self._started
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        return None

    @property
    def elapsed(self) -> str:
        """Elapsed time since the helper was entered, as ``H:MM:SS``."""

        return str(timedelta(seconds=int(self._monotonic() - self._started)))

    def info(self, message: str, *args: object) -> bool:
        now = self._monotonic()
        if now - self._last_logged < self._interval:
            return False
        self._last_logged = now
        self._logger.info(message, *args)
        return True

"""Clock helpers so time-dependent logic can be driven from tests."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def days_ago(days: int, *, clock: Clock = utcnow) -> date:
    """Return the UTC calendar date ``days`` before today."""

    if days < 0:
        raise ValueError("Days must be non-negative")
    now = clock()
    if now.tzinfo is None:
        raise ValueError("Clock values must include timezone information")
    return (now.astimezone(UTC) - timedelta(days=days)).date()


__all__ = ["Clock", "days_ago", "utcnow"]

from __future__ import annotations

import logging

import pytest

from blobmend.domain.restore.progress import ProgressLogIntervalHelper


class _FakeMonotonic:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_progress_logs_at_most_once_per_interval(caplog: pytest.LogCaptureFixture) -> None:
    monotonic = _FakeMonotonic()
    logger = logging.getLogger("tests.progress")
    caplog.set_level(logging.INFO, logger="tests.progress")

    with ProgressLogIntervalHelper(logger, 60, monotonic=monotonic) as progress:
        assert progress.info("tick %s", 1) is False
        monotonic.now += 59
        assert progress.info("tick %s", 2) is False
        monotonic.now += 1
        assert progress.info("tick %s", 3) is True
        monotonic.now += 30
        assert progress.info("tick %s", 4) is False
        monotonic.now += 30
        assert progress.info("tick %s", 5) is True

    assert [record.getMessage() for record in caplog.records] == ["tick 3", "tick 5"]


def test_progress_formats_elapsed_time() -> None:
    monotonic = _FakeMonotonic()

    logger = logging.getLogger("tests.progress")

    with ProgressLogIntervalHelper(logger, 60, monotonic=monotonic) as progress:
        monotonic.now += 3723.9

        assert progress.elapsed == "1:02:03"

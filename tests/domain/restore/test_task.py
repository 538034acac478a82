from __future__ import annotations

import logging

import pytest

from blobmend.domain.model import BlobId
from blobmend.domain.restore.registry import (
    DEFAULT_INTEGRITY_STRATEGY,
    IntegrityStrategyRegistry,
    RestoreStrategyRegistry,
)
from blobmend.domain.restore.task import RestoreMetadataTask, TaskConfiguration
from tests.helpers.blob_stores import (
    AlwaysInUse,
    FakeReconciliationLog,
    FakeRepositoryManager,
    InMemoryBlobStore,
    InMemoryBlobStoreManager,
    RecordingIntegrityStrategy,
    RecordingMaintenanceService,
    RecordingRestoreStrategy,
    make_asset,
    make_repository,
)


class _Fixture:
    def __init__(self) -> None:
        self.store = InMemoryBlobStore()
        self.restore_strategy = RecordingRestoreStrategy()
        self.integrity_strategy = RecordingIntegrityStrategy()
        self.maintenance = RecordingMaintenanceService()

    def task(self, **configuration: object) -> RestoreMetadataTask:
        return RestoreMetadataTask(
            TaskConfiguration(blob_store_name="default", **configuration),  # type: ignore[arg-type]
            blob_store_manager=InMemoryBlobStoreManager(self.store),
            repositories=FakeRepositoryManager([make_repository()]),
            restore_strategies=RestoreStrategyRegistry({"raw": self.restore_strategy}),
            integrity_strategies=IntegrityStrategyRegistry(
                {DEFAULT_INTEGRITY_STRATEGY: self.integrity_strategy}
            ),
            usage_checker=AlwaysInUse(),
            maintenance=self.maintenance,
            reconciliation_log=FakeReconciliationLog(),
        )


@pytest.fixture
def fixture() -> _Fixture:
    return _Fixture()


def test_restore_then_integrity_check(fixture: _Fixture) -> None:
    fixture.store.add("a")
    fixture.integrity_strategy.failing_assets.append(make_asset("/broken"))

    result = fixture.task(restore_blobs=True, integrity_check=True).execute()

    assert result.processed == 1
    assert fixture.restore_strategy.restored == [(BlobId("a"), False)]
    assert fixture.integrity_strategy.checked == ["raw-hosted"]
    assert fixture.maintenance.deleted == [("raw-hosted", "/broken")]


def test_integrity_check_not_selected(fixture: _Fixture, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)

    fixture.task(restore_blobs=True).execute()

    assert fixture.integrity_strategy.checked == []
    assert "Integrity check operation not selected" in caplog.text


def test_integrity_check_alone_still_runs(fixture: _Fixture) -> None:
    fixture.task(integrity_check=True).execute()

    assert fixture.integrity_strategy.checked == ["raw-hosted"]


def test_dry_run_failure_handler_only_logs(
    fixture: _Fixture, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="blobmend")
    task = fixture.task(dry_run=True, integrity_check=True)

    task.integrity_check_failed(make_asset("/broken"))

    assert fixture.maintenance.deleted == []
    assert (
        "dryRun: Removing asset /broken from repository raw-hosted, blob integrity check failed"
        in caplog.text
    )


def test_failure_for_unknown_repository_is_logged(fixture: _Fixture) -> None:
    task = fixture.task(integrity_check=True)

    task.integrity_check_failed(make_asset("/x", repository_name="gone"))

    assert fixture.maintenance.deleted == []


def test_cancel_is_observed(fixture: _Fixture) -> None:
    for blob_id in ("a", "b"):
        fixture.store.add(blob_id)
    task = fixture.task(restore_blobs=True)
    fixture.restore_strategy.on_restore = lambda _blob_id: task.cancel()

    result = task.execute()

    assert task.is_cancelled() is True
    assert result.cancelled is True
    assert result.processed == 1

"""The restore-metadata task: restore pass followed by an optional integrity pass."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from blobmend.domain.clock import utcnow
from blobmend.domain.restore.cancellation import CancellationToken
from blobmend.domain.restore.dry_run import dry_run_prefix
from blobmend.domain.restore.integrity import check_integrity
from blobmend.domain.restore.orchestrator import RestoreRequest, RestoreResult, restore_blobs

if TYPE_CHECKING:
    from blobmend.domain.clock import Clock
    from blobmend.domain.model import Asset
    from blobmend.domain.ports import (
        BlobStoreManager,
        BlobStoreUsageChecker,
        MaintenanceService,
        ReconciliationLog,
        RepositoryManager,
    )
    from blobmend.domain.restore.registry import IntegrityStrategyRegistry, RestoreStrategyRegistry

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TaskConfiguration:
    """Run parameters of the restore-metadata task."""

    blob_store_name: str
    dry_run: bool = False
    restore_blobs: bool = False
    undelete_blobs: bool = False
    integrity_check: bool = False
    since_days: int | None = None

    def restore_request(self) -> RestoreRequest:
        return RestoreRequest(
            blob_store_name=self.blob_store_name,
            restore=self.restore_blobs,
            undelete=self.undelete_blobs,
            dry_run=self.dry_run,
            since_days=self.since_days,
        )


class RestoreMetadataTask:
    """Cancellable unit of work run on a dedicated task thread."""

    def __init__(
        self,
        configuration: TaskConfiguration,
        *,
        blob_store_manager: BlobStoreManager,
        repositories: RepositoryManager,
        restore_strategies: RestoreStrategyRegistry,
        integrity_strategies: IntegrityStrategyRegistry,
        usage_checker: BlobStoreUsageChecker | None,
        maintenance: MaintenanceService,
        reconciliation_log: ReconciliationLog,
        cancellation: CancellationToken | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.configuration = configuration
        self.blob_store_manager = blob_store_manager
        self.repositories = repositories
        self.restore_strategies = restore_strategies
        self.integrity_strategies = integrity_strategies
        self.usage_checker = usage_checker
        self.maintenance = maintenance
        self.reconciliation_log = reconciliation_log
        self.cancellation = cancellation or CancellationToken()
        self.clock = clock

    def execute(self) -> RestoreResult:
        result = restore_blobs(
            self.configuration.restore_request(),
            blob_store_manager=self.blob_store_manager,
            repositories=self.repositories,
            restore_strategies=self.restore_strategies,
            usage_checker=self.usage_checker,
            reconciliation_log=self.reconciliation_log,
            cancellation=self.cancellation,
            clock=self.clock,
        )

        if not self.configuration.integrity_check:
            log.warning("Integrity check operation not selected")
            return result

        check_integrity(
            self.configuration.blob_store_name,
            blob_store_manager=self.blob_store_manager,
            repositories=self.repositories,
            integrity_strategies=self.integrity_strategies,
            on_failure=self.integrity_check_failed,
            cancellation=self.cancellation,
        )
        return result

    def cancel(self) -> None:
        self.cancellation.cancel()

    def is_cancelled(self) -> bool:
        return self.cancellation.is_cancelled()

    def integrity_check_failed(self, asset: Asset) -> None:
        """Remove an asset whose blob failed the integrity check (logged only on dry runs)."""

        repository = self.repositories.get(asset.repository_name)
        if repository is None:
            log.error(
                "Unable to find repository '%s' of asset %s, not removing it",
                asset.repository_name,
                asset.name,
            )
            return

        log.info(
            "%sRemoving asset %s from repository %s, blob integrity check failed",
            dry_run_prefix(self.configuration.dry_run),
            asset.name,
            repository.name,
        )
        if not self.configuration.dry_run:
            self.maintenance.delete_asset(repository, asset)

"""Restore pass: walk a blob store and rebuild or undelete what it references."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from blobmend.domain.clock import utcnow
from blobmend.domain.errors import BlobStoreNotFoundError
from blobmend.domain.model import Repository
from blobmend.domain.restore.cancellation import CancellationToken
from blobmend.domain.restore.context import build_restore_context
from blobmend.domain.restore.dry_run import dry_run_prefix
from blobmend.domain.restore.progress import ProgressLogIntervalHelper
from blobmend.domain.restore.scanner import blob_ids_to_process

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from blobmend.domain.clock import Clock
    from blobmend.domain.model import BlobId
    from blobmend.domain.ports import (
        BlobStore,
        BlobStoreManager,
        BlobStoreUsageChecker,
        ReconciliationLog,
        RepositoryManager,
    )
    from blobmend.domain.restore.context import RestoreContext
    from blobmend.domain.restore.registry import RestoreStrategyRegistry

PROGRESS_INTERVAL_SECONDS: Final[int] = 60

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RestoreRequest:
    """Parameters of one restore pass over a single blob store."""

    blob_store_name: str
    restore: bool = False
    undelete: bool = False
    dry_run: bool = False
    since_days: int | None = None

    @property
    def update_assets(self) -> bool:
        return self.restore and not self.dry_run


@dataclass(slots=True)
class RestoreResult:
    """Counters and touched repositories of a restore pass."""

    processed: int = 0
    undeleted: int = 0
    touched_repositories: list[Repository] = field(default_factory=list[Repository])
    cancelled: bool = False


def restore_blobs(
    request: RestoreRequest,
    *,
    blob_store_manager: BlobStoreManager,
    repositories: RepositoryManager,
    restore_strategies: RestoreStrategyRegistry,
    usage_checker: BlobStoreUsageChecker | None,
    reconciliation_log: ReconciliationLog,
    cancellation: CancellationToken | None = None,
    clock: Clock = utcnow,
    progress_interval: float = PROGRESS_INTERVAL_SECONDS,
    monotonic: Callable[[], float] = time.monotonic,
) -> RestoreResult:
    """Restore metadata for and/or undelete the blobs of one blob store.

    Raises ``BlobStoreNotFoundError`` when the store does not exist. Failures
    while handling a single blob are logged and do not stop the pass; errors
    raised while enumerating the store propagate.
    """

    result = RestoreResult()
    if not request.restore and not request.undelete:
        log.warning("No repair/restore operations selected")
        return result

    token = cancellation or CancellationToken()
    prefix = dry_run_prefix(request.dry_run)
    blob_store = blob_store_manager.get(request.blob_store_name)
    if blob_store is None:
        raise BlobStoreNotFoundError(request.blob_store_name)

    if request.dry_run:
        log.info("%sActions will be logged, but no changes will be made.", prefix)

    touched: dict[str, Repository] = {}
    blob_ids = blob_ids_to_process(
        blob_store,
        request.since_days,
        reconciliation_log=reconciliation_log,
        clock=clock,
    )

    with ProgressLogIntervalHelper(log, progress_interval, monotonic=monotonic) as progress:
        for blob_id in blob_ids:
            context = _build_context(
                request.blob_store_name, blob_store, blob_id, repositories, restore_strategies
            )
            if context is None:
                log.error("Unable to resolve restore context for blob %s, skipping", blob_id)
            else:
                if _apply(context, request, blob_store, usage_checker):
                    result.undeleted += 1
                if request.update_assets:
                    touched.setdefault(context.repository.name, context.repository)

            result.processed += 1
            progress.info(
                "%sElapsed time: %s, processed: %s, un-deleted: %s",
                prefix,
                progress.elapsed,
                result.processed,
                result.undeleted,
            )

            if token.is_cancelled():
                result.cancelled = True
                break

    result.touched_repositories = list(touched.values())
    if _run_after_hooks(result.touched_repositories, request.update_assets, restore_strategies, token):
        result.cancelled = True

    log.info(
        "%sRestore of blob store '%s' %s: processed: %s, un-deleted: %s",
        prefix,
        request.blob_store_name,
        "cancelled" if result.cancelled else "finished",
        result.processed,
        result.undeleted,
    )
    return result


def _build_context(
    blob_store_name: str,
    blob_store: BlobStore,
    blob_id: BlobId,
    repositories: RepositoryManager,
    strategies: RestoreStrategyRegistry,
) -> RestoreContext | None:
    try:
        return build_restore_context(
            blob_store_name,
            blob_store,
            blob_id,
            repositories=repositories,
            strategies=strategies,
        )
    except Exception:
        log.exception("Error resolving blob %s", blob_id)
        return None


def _apply(
    context: RestoreContext,
    request: RestoreRequest,
    blob_store: BlobStore,
    usage_checker: BlobStoreUsageChecker | None,
) -> bool:
    """Run the restore and undelete steps for one blob; return whether it was undeleted."""

    if request.restore and context.strategy is not None and not context.attributes.deleted:
        try:
            context.strategy.restore(context.properties, context.blob, blob_store, request.dry_run)
        except Exception:
            log.exception("Error restoring blob %s", context.blob_id)

    if not request.undelete:
        return False
    try:
        return blob_store.undelete(usage_checker, context.blob_id, context.attributes, request.dry_run)
    except Exception:
        log.exception("Error un-deleting blob %s", context.blob_id)
        return False


def _run_after_hooks(
    repositories: Iterable[Repository],
    update_assets: bool,  # noqa: FBT001
    strategies: RestoreStrategyRegistry,
    token: CancellationToken,
) -> bool:
    """Call each touched repository's ``after`` hook; return ``True`` if cancelled midway."""

    for repository in repositories:
        if token.is_cancelled():
            return True
        strategy = strategies.get(repository.format)
        if strategy is not None:
            strategy.after(update_assets, repository)
    return False

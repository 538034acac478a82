"""Integrity pass: hand each repository of a blob store to its format's checker."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from blobmend.domain.restore.cancellation import CancellationToken

if TYPE_CHECKING:
    from blobmend.domain.ports import BlobStoreManager, IntegrityCheckFailedHandler, RepositoryManager
    from blobmend.domain.restore.registry import IntegrityStrategyRegistry

log = getLogger(__name__)


def check_integrity(
    blob_store_name: str,
    *,
    blob_store_manager: BlobStoreManager,
    repositories: RepositoryManager,
    integrity_strategies: IntegrityStrategyRegistry,
    on_failure: IntegrityCheckFailedHandler,
    cancellation: CancellationToken | None = None,
) -> int:
    """Check every repository with own storage in the blob store; return how many completed.

    A missing blob store is logged and the pass is skipped. Violations found by a
    strategy are reported through ``on_failure``; a strategy that raises is logged and
    the remaining repositories are still checked.
    """

    blob_store = blob_store_manager.get(blob_store_name)
    if blob_store is None:
        log.error("Unable to find blob store '%s' in the blob store manager", blob_store_name)
        return 0

    token = cancellation or CancellationToken()
    checked = 0
    for repository in repositories.browse_for_blob_store(blob_store_name):
        if not repository.has_own_storage:
            continue
        strategy = integrity_strategies.get(repository.format)
        log.info("Checking integrity of repository '%s' (%s)", repository.name, repository.format)
        try:
            strategy.check(repository, blob_store, token.is_cancelled, on_failure)
        except Exception:
            log.exception("Integrity check of repository %s failed", repository.name)
            continue
        checked += 1
    return checked

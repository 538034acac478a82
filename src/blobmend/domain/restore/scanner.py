"""Choose which blob ids a restore run has to visit."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from blobmend.domain.clock import days_ago, utcnow

if TYPE_CHECKING:
    from collections.abc import Iterator

    from blobmend.domain.clock import Clock
    from blobmend.domain.model import BlobId
    from blobmend.domain.ports import BlobStore, ReconciliationLog

log = getLogger(__name__)


def blob_ids_to_process(
    blob_store: BlobStore,
    since_days: int | None,
    *,
    reconciliation_log: ReconciliationLog,
    clock: Clock = utcnow,
) -> Iterator[BlobId]:
    """Return the blob ids to process, lazily.

    Without ``since_days`` (or with a negative value) the whole store is enumerated.
    Otherwise only blobs recorded in the reconciliation log since ``today - since_days``
    are returned; blobs whose creation was never logged are not seen on that path.
    """

    if since_days is None or since_days < 0:
        log.info("Will process all blobs")
        return blob_store.blob_ids()

    since = days_ago(since_days, clock=clock)
    log.info("Will process blobs created within last %s days, that is since %s", since_days, since)
    return reconciliation_log.blobs_created_since(blob_store, since)

"""Per-blob resolution of everything needed to restore or undelete it."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from blobmend.domain.model import REPO_NAME_PROPERTY

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from blobmend.domain.model import Blob, BlobAttributes, BlobId, Repository
    from blobmend.domain.ports import BlobStore, RepositoryManager, RestoreBlobStrategy
    from blobmend.domain.restore.registry import RestoreStrategyRegistry

type Resolved = Mapping[str, Any]
type Step = tuple[str, Callable[[Resolved], object | None]]

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RestoreContext:
    """Facts about one blob, resolved in full before any action is taken on it.

    ``strategy`` is ``None`` when no restore strategy exists for the repository's
    format; undelete can still be evaluated in that case.
    """

    blob_store_name: str
    blob_store: BlobStore
    blob_id: BlobId
    blob: Blob
    attributes: BlobAttributes
    properties: Mapping[str, str]
    repository_name: str
    repository: Repository
    strategy: RestoreBlobStrategy | None


def build_restore_context(
    blob_store_name: str,
    blob_store: BlobStore,
    blob_id: BlobId,
    *,
    repositories: RepositoryManager,
    strategies: RestoreStrategyRegistry,
) -> RestoreContext | None:
    """Resolve a ``RestoreContext`` or ``None`` as soon as one required fact is missing."""

    steps: tuple[Step, ...] = (
        ("blob", lambda _: blob_store.get(blob_id, include_deleted=True)),
        ("attributes", lambda _: blob_store.get_blob_attributes(blob_id)),
        ("properties", lambda resolved: resolved["attributes"].properties),
        ("repository_name", lambda resolved: resolved["properties"].get(REPO_NAME_PROPERTY)),
        ("repository", lambda resolved: repositories.get(resolved["repository_name"])),
    )
    resolved = _resolve(blob_id, steps)
    if resolved is None:
        return None

    repository: Repository = resolved["repository"]
    return RestoreContext(
        blob_store_name=blob_store_name,
        blob_store=blob_store,
        blob_id=blob_id,
        blob=resolved["blob"],
        attributes=resolved["attributes"],
        properties=resolved["properties"],
        repository_name=resolved["repository_name"],
        repository=repository,
        strategy=strategies.get(repository.format),
    )


def _resolve(blob_id: BlobId, steps: tuple[Step, ...]) -> Resolved | None:
    resolved: Resolved = MappingProxyType({})
    for key, step in steps:
        value = step(resolved)
        if value is None:
            log.debug("Blob %s: no %s, skipping", blob_id, key)
            return None
        resolved = MappingProxyType({**resolved, key: value})
    return resolved

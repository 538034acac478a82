"""Ports for repository and asset metadata."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from blobmend.domain.model import Asset, Repository


@runtime_checkable
class RepositoryManager(Protocol):
    """Lookup of configured repositories."""

    def get(self, name: str) -> Repository | None: ...

    def browse_for_blob_store(self, blob_store_name: str) -> Sequence[Repository]: ...


@runtime_checkable
class AssetRepository(Protocol):
    """Persistence contract for assets."""

    def add(self, asset: Asset) -> None: ...

    def find(self, repository_name: str, name: str) -> Asset | None: ...

    def browse(self, repository_name: str) -> Sequence[Asset]: ...

    def delete(self, asset: Asset) -> None: ...

    def exists_for_blob(self, blob_store_name: str, blob_id: str) -> bool: ...


@runtime_checkable
class MaintenanceService(Protocol):
    def delete_asset(self, repository: Repository, asset: Asset) -> None: ...


__all__ = ["AssetRepository", "MaintenanceService", "RepositoryManager"]

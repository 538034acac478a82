"""Domain port definitions for adapters."""

from __future__ import annotations

from .blob_store import BlobStore, BlobStoreManager, BlobStoreUsageChecker
from .persistence import AssetRepository, MaintenanceService, RepositoryManager
from .reconciliation import ReconciliationLog
from .strategies import (
    CancelPredicate,
    IntegrityCheckFailedHandler,
    IntegrityCheckStrategy,
    RestoreBlobStrategy,
)
from .unit_of_work import MetadataRepositories, MetadataUnitOfWork

__all__ = [
    "AssetRepository",
    "BlobStore",
    "BlobStoreManager",
    "BlobStoreUsageChecker",
    "CancelPredicate",
    "IntegrityCheckFailedHandler",
    "IntegrityCheckStrategy",
    "MaintenanceService",
    "MetadataRepositories",
    "MetadataUnitOfWork",
    "ReconciliationLog",
    "RepositoryManager",
    "RestoreBlobStrategy",
]

"""Restore and integrity-check passes over a blob store."""

from __future__ import annotations

from .cancellation import CancellationToken
from .context import RestoreContext, build_restore_context
from .integrity import check_integrity
from .orchestrator import RestoreRequest, RestoreResult, restore_blobs
from .registry import DEFAULT_INTEGRITY_STRATEGY, IntegrityStrategyRegistry, RestoreStrategyRegistry
from .scanner import blob_ids_to_process
from .task import RestoreMetadataTask, TaskConfiguration

__all__ = [
    "DEFAULT_INTEGRITY_STRATEGY",
    "CancellationToken",
    "IntegrityStrategyRegistry",
    "RestoreContext",
    "RestoreMetadataTask",
    "RestoreRequest",
    "RestoreResult",
    "RestoreStrategyRegistry",
    "TaskConfiguration",
    "blob_ids_to_process",
    "build_restore_context",
    "check_integrity",
    "restore_blobs",
]

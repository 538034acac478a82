"""Restore-metadata task parameters read from the environment."""

from __future__ import annotations

from blobmend.domain.restore.task import TaskConfiguration

from .env import env_flag, env_int, require_env_vars

BLOB_STORE_VAR = "BLOBMEND_BLOB_STORE"


def get_task_configuration() -> TaskConfiguration:
    """Build the task configuration for scheduler-driven runs.

    ``BLOBMEND_SINCE_DAYS`` unset (or negative) means every blob is scanned.
    """

    values = require_env_vars((BLOB_STORE_VAR,))
    return TaskConfiguration(
        blob_store_name=values[BLOB_STORE_VAR].strip(),
        dry_run=env_flag("BLOBMEND_DRY_RUN"),
        restore_blobs=env_flag("BLOBMEND_RESTORE_BLOBS"),
        undelete_blobs=env_flag("BLOBMEND_UNDELETE_BLOBS"),
        integrity_check=env_flag("BLOBMEND_INTEGRITY_CHECK"),
        since_days=env_int("BLOBMEND_SINCE_DAYS"),
    )

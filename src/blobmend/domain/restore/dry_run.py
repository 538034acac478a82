"""Prefix for log lines describing actions that a dry run only simulates."""

from __future__ import annotations

from typing import Final

DRY_RUN_PREFIX: Final[str] = "dryRun: "


def dry_run_prefix(dry_run: bool) -> str:  # noqa: FBT001
    return DRY_RUN_PREFIX if dry_run else ""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from blobmend.app import (
    create_repository,
    run_on_task_thread,
    run_restore_metadata,
    upload_asset,
)
from blobmend.config import ConfigurationError, configure_logging, get_task_configuration
from blobmend.domain.model import RepositoryType
from blobmend.domain.restore import CancellationToken, TaskConfiguration

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Repair blob store metadata")
    subparsers = parser.add_subparsers(dest="command", required=True)

    restore = subparsers.add_parser(
        "restore",
        help="Restore metadata, undelete blobs and check integrity of a blob store",
    )
    restore.add_argument(
        "--blob-store",
        type=str,
        help="Blob store to process (default: take all options from BLOBMEND_* variables)",
    )
    restore.add_argument(
        "--restore",
        action="store_true",
        help="Recreate missing asset metadata from blob properties",
    )
    restore.add_argument(
        "--undelete",
        action="store_true",
        help="Un-delete soft-deleted blobs that are still referenced",
    )
    restore.add_argument(
        "--integrity-check",
        action="store_true",
        help="Verify assets against their blobs and remove broken ones",
    )
    restore.add_argument(
        "--dry-run",
        action="store_true",
        help="Log intended actions without changing anything",
    )
    restore.add_argument(
        "--since-days",
        type=int,
        help="Only process blobs created in the last N days (default: all blobs)",
    )

    repository = subparsers.add_parser("repository", help="Repository management commands")
    repository_sub = repository.add_subparsers(dest="repository_command", required=True)
    repository_create = repository_sub.add_parser("create", help="Create a repository")
    repository_create.add_argument("--name", type=str, required=True, help="Repository name")
    repository_create.add_argument(
        "--format",
        type=str,
        required=True,
        help="Repository format, for example raw",
    )
    repository_create.add_argument(
        "--blob-store",
        type=str,
        required=True,
        help="Blob store holding the repository content",
    )
    repository_create.add_argument(
        "--type",
        type=RepositoryType,
        choices=list(RepositoryType),
        default=RepositoryType.HOSTED,
        help="Repository type (default: %(default)s)",
    )

    upload = subparsers.add_parser("upload", help="Upload a file as an asset of a repository")
    upload.add_argument("path", type=Path, help="File to upload")
    upload.add_argument("--repository", type=str, required=True, help="Target repository")
    upload.add_argument(
        "--name",
        type=str,
        help="Asset name (defaults to the file name)",
    )
    upload.add_argument("--content-type", type=str, help="Optional content type")

    return parser.parse_args(list(argv))


def _task_configuration(args: argparse.Namespace) -> TaskConfiguration:
    if args.blob_store is None:
        return get_task_configuration()
    if not args.blob_store.strip():
        raise ValueError("Blob store name must not be blank")
    return TaskConfiguration(
        blob_store_name=args.blob_store.strip(),
        dry_run=args.dry_run,
        restore_blobs=args.restore,
        undelete_blobs=args.undelete,
        integrity_check=args.integrity_check,
        since_days=args.since_days,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configuration = (
            _task_configuration(parsed_args) if parsed_args.command == "restore" else None
        )
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)

    try:
        if configuration is not None:
            _run_restore(configuration)
        elif parsed_args.command == "repository" and parsed_args.repository_command == "create":
            create_repository(
                name=parsed_args.name,
                format_name=parsed_args.format,
                blob_store_name=parsed_args.blob_store,
                repository_type=parsed_args.type,
            )
        elif parsed_args.command == "upload":
            upload_asset(
                repository_name=parsed_args.repository,
                name=parsed_args.name or parsed_args.path.name,
                content=parsed_args.path.read_bytes(),
                content_type=parsed_args.content_type,
            )
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def _run_restore(configuration: TaskConfiguration) -> None:
    cancellation = CancellationToken()
    previous = signal(SIGINT, _cancel_on_sigint(cancellation))
    try:
        result = run_on_task_thread(
            lambda: run_restore_metadata(configuration, cancellation=cancellation)
        )
    finally:
        if previous is not None:
            signal(SIGINT, previous)
    if result.cancelled:
        log.warning("Restore of blob store %s was cancelled", configuration.blob_store_name)


def _cancel_on_sigint(
    cancellation: CancellationToken,
) -> Callable[[int, FrameType | None], None]:
    def _handler(_signal_received: int, _frame: FrameType | None) -> None:
        log.warning("Cancellation requested (Ctrl+C), stopping after the current blob")
        cancellation.cancel()

    return _handler


def run() -> None:
    """Console script entry point: load `.env` then run the CLI."""
    load_dotenv()
    main()


if __name__ == "__main__":
    run()

"""Date-partitioned reconciliation log of created blobs, one directory per blob store.

Writing goes through a dedicated ``logging`` logger per log root so that appending a record can
never fail the blob creation that triggered it: write errors end up in
``Handler.handleError``. Partitions live at ``<log_root>/<blob store>/<YYYY-MM-DD>``
and hold one ``<timestamp>,<blob id>`` line per created blob.
"""

from __future__ import annotations

import hashlib
import logging
import time
from datetime import UTC, date, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from blobmend.domain.model import BlobId

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from blobmend.domain.ports import BlobStore

BLOBSTORE: Final[str] = "blobstore"
RECONCILIATION_LOGGER_NAME: Final[str] = "blobstore-reconciliation-log"
LINE_FORMAT: Final[str] = "%(asctime)s,%(message)s"
TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%S"

log = getLogger(__name__)


class ReconciliationLogHandler(logging.Handler):
    """Append records tagged with a blob store name to that store's daily partition."""

    def __init__(self, log_root: Path) -> None:
        super().__init__(level=logging.INFO)
        self.log_root = log_root
        formatter = logging.Formatter(LINE_FORMAT, datefmt=TIMESTAMP_FORMAT)
        formatter.converter = time.gmtime
        self.setFormatter(formatter)

    def partition_path(self, blob_store_name: str, created: float) -> Path:
        day = datetime.fromtimestamp(created, UTC).date()
        return self.log_root / blob_store_name / day.isoformat()

    def emit(self, record: logging.LogRecord) -> None:
        blob_store_name = getattr(record, BLOBSTORE, None)
        if not blob_store_name:
            return
        try:
            path = self.partition_path(str(blob_store_name), record.created)
            path.parent.mkdir(parents=True, exist_ok=True)
            line = self.format(record)
            with path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        except Exception:  # noqa: BLE001
            self.handleError(record)


def reconciliation_logger_name(log_root: Path) -> str:
    """Name of the logger writing under ``log_root``; each log root gets its own."""

    digest = hashlib.sha1(str(log_root.expanduser().resolve()).encode()).hexdigest()  # noqa: S324
    return f"{RECONCILIATION_LOGGER_NAME}.{digest[:12]}"


def install_reconciliation_handler(
    log_root: Path,
    *,
    logger_name: str | None = None,
) -> logging.Logger:
    """Attach a ``ReconciliationLogHandler`` for ``log_root`` to its own logger.

    Idempotent for the same root. If ``logger_name`` is given and that logger already
    writes under another root, the old handler is replaced.
    """

    logger = logging.getLogger(logger_name or reconciliation_logger_name(log_root))
    logger.setLevel(logging.INFO)
    logger.propagate = False
    for handler in list(logger.handlers):
        if not isinstance(handler, ReconciliationLogHandler):
            continue
        if handler.log_root == log_root:
            return logger
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(ReconciliationLogHandler(log_root))
    return logger


class ReconciliationLogger:
    """Records created blob ids and reads them back by creation date."""

    def __init__(self, log_root: Path, *, logger: logging.Logger | None = None) -> None:
        self.log_root = log_root
        self._logger = logger or install_reconciliation_handler(log_root)

    def log_blob_created(self, blob_store: BlobStore, blob_id: BlobId) -> None:
        if blob_id.is_temporary:
            return
        self._logger.info(blob_id.value, extra={BLOBSTORE: blob_store.name})

    def blobs_created_since(self, blob_store: BlobStore, since: date) -> Iterator[BlobId]:
        """Yield ids logged in partitions dated ``since`` or later, oldest partition first.

        Malformed lines are skipped; an unreadable partition contributes nothing.
        """

        for partition in self._partitions_since(blob_store.name, since):
            for line in _read_lines(partition):
                fields = line.split(",")
                blob_id = _parse_blob_id(fields)
                if blob_id is None:
                    log.info("Cannot find blob id on line, skipping: %s", line)
                    continue
                yield blob_id

    def _partitions_since(self, blob_store_name: str, since: date) -> list[Path]:
        directory = self.log_root / blob_store_name
        try:
            entries = list(directory.iterdir())
        except FileNotFoundError:
            log.info("No files found to process")
            return []
        except OSError:
            log.exception("Problem when listing directory '%s'", directory)
            return []

        selected: list[tuple[date, Path]] = []
        for entry in entries:
            try:
                partition_date = date.fromisoformat(entry.name)
            except ValueError:
                continue
            if partition_date >= since and entry.is_file():
                selected.append((partition_date, entry))

        selected.sort()
        for _, entry in selected:
            log.info("Processing file '%s'", entry.name)
        return [entry for _, entry in selected]


def _parse_blob_id(fields: list[str]) -> BlobId | None:
    if len(fields) != 2:  # noqa: PLR2004
        return None
    try:
        return BlobId(fields[1])
    except ValueError:
        return None


def _read_lines(path: Path) -> Iterator[str]:
    try:
        with path.open(encoding="utf-8") as handle:
            for line in handle:
                yield line.rstrip("\r\n")
    except (OSError, UnicodeDecodeError):
        log.exception("Problem when reading file '%s'", path.name)


__all__ = [
    "RECONCILIATION_LOGGER_NAME",
    "ReconciliationLogHandler",
    "ReconciliationLogger",
    "install_reconciliation_handler",
    "reconciliation_logger_name",
]

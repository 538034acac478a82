"""Errors raised by blob store operations."""

from __future__ import annotations


class BlobStoreError(RuntimeError):
    """Raised when a blob store cannot read or write its own data."""


class BlobStoreNotFoundError(BlobStoreError, LookupError):
    """Raised when a run targets a blob store that does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Blob store '{name}' not found")
        self.name = name

"""Filesystem blob store adapter."""

from __future__ import annotations

from .schema import BlobPropertiesDocument
from .store import FileBlobStore, FileBlobStoreManager

__all__ = ["BlobPropertiesDocument", "FileBlobStore", "FileBlobStoreManager"]

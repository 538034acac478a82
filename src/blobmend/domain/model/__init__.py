"""Domain model for blob stores, repositories and assets."""

from __future__ import annotations

from .blobs import (
    BLOB_NAME_HEADER,
    BLOB_NAME_PROPERTY,
    CONTENT_TYPE_HEADER,
    CONTENT_TYPE_PROPERTY,
    CREATION_TIME_PROPERTY,
    DELETED_PROPERTY,
    DELETED_REASON_PROPERTY,
    HEADER_PREFIX,
    REPO_NAME_HEADER,
    REPO_NAME_PROPERTY,
    SHA1_PROPERTY,
    SIZE_PROPERTY,
    TEMPORARY_BLOB_ID_PREFIX,
    Blob,
    BlobAttributes,
    BlobId,
    BlobMetrics,
)
from .repository import Asset, Repository, RepositoryType

__all__ = [
    "BLOB_NAME_HEADER",
    "BLOB_NAME_PROPERTY",
    "CONTENT_TYPE_HEADER",
    "CONTENT_TYPE_PROPERTY",
    "CREATION_TIME_PROPERTY",
    "DELETED_PROPERTY",
    "DELETED_REASON_PROPERTY",
    "HEADER_PREFIX",
    "REPO_NAME_HEADER",
    "REPO_NAME_PROPERTY",
    "SHA1_PROPERTY",
    "SIZE_PROPERTY",
    "TEMPORARY_BLOB_ID_PREFIX",
    "Asset",
    "Blob",
    "BlobAttributes",
    "BlobId",
    "BlobMetrics",
    "Repository",
    "RepositoryType",
]

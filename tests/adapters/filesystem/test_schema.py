from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from blobmend.adapters.filesystem.schema import BlobPropertiesDocument


def test_parses_aliased_document() -> None:
    document = BlobPropertiesDocument.model_validate_json(
        """
        {
          "headers": {"BlobStore.blob-name": "/a.txt"},
          "sha1": "abc",
          "size": 3,
          "creationTime": "2024-05-01T10:00:00",
          "deleted": true,
          "deletedReason": "cleanup",
          "unknown": "ignored"
        }
        """
    )

    assert document.creation_time == datetime(2024, 5, 1, 10, tzinfo=UTC)
    assert document.deleted_reason == "cleanup"
    assert document.to_properties() == {
        "@BlobStore.blob-name": "/a.txt",
        "sha1": "abc",
        "size": "3",
        "creationTime": "2024-05-01T10:00:00+00:00",
        "deleted": "true",
        "deletedReason": "cleanup",
    }


def test_live_document_has_no_deletion_properties() -> None:
    document = BlobPropertiesDocument(
        sha1="abc", size=0, creation_time=datetime(2024, 5, 1, tzinfo=UTC)
    )

    properties = document.to_properties()

    assert "deleted" not in properties
    assert '"creationTime"' in document.to_json()


def test_negative_size_is_rejected() -> None:
    with pytest.raises(ValidationError):
        BlobPropertiesDocument(sha1="abc", size=-1, creation_time=datetime(2024, 5, 1, tzinfo=UTC))

"""Built-in restore and integrity-check strategies."""

from __future__ import annotations

from .integrity import DefaultIntegrityCheckStrategy
from .raw import RAW_FORMAT, RawRestoreBlobStrategy

__all__ = ["RAW_FORMAT", "DefaultIntegrityCheckStrategy", "RawRestoreBlobStrategy"]

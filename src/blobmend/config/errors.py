"""Errors raised while reading blobmend settings from the environment."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A ``BLOBMEND_*`` or ``DATABASE_URI`` value cannot be used."""


class MissingConfigurationError(ConfigurationError):
    """A required setting, such as the blob store name, is unset or blank."""

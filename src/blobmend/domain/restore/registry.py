"""Format-keyed registries of restore and integrity-check strategies."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

    from blobmend.domain.ports.strategies import IntegrityCheckStrategy, RestoreBlobStrategy

DEFAULT_INTEGRITY_STRATEGY: Final[str] = "default"


class RestoreStrategyRegistry:
    """Restore strategies by repository format; unknown formats have none."""

    def __init__(self, strategies: Mapping[str, RestoreBlobStrategy] | None = None) -> None:
        self._strategies = MappingProxyType(dict(strategies or {}))

    def get(self, format_name: str) -> RestoreBlobStrategy | None:
        return self._strategies.get(format_name)

    def __contains__(self, format_name: object) -> bool:
        return format_name in self._strategies

    @property
    def formats(self) -> tuple[str, ...]:
        return tuple(self._strategies)


class IntegrityStrategyRegistry:
    """Integrity strategies by repository format, falling back to a mandatory default."""

    def __init__(self, strategies: Mapping[str, IntegrityCheckStrategy]) -> None:
        if DEFAULT_INTEGRITY_STRATEGY not in strategies:
            raise ValueError(
                f"Integrity strategies must include a '{DEFAULT_INTEGRITY_STRATEGY}' entry"
            )
        self._strategies = MappingProxyType(dict(strategies))

    @property
    def default(self) -> IntegrityCheckStrategy:
        return self._strategies[DEFAULT_INTEGRITY_STRATEGY]

    def get(self, format_name: str) -> IntegrityCheckStrategy:
        return self._strategies.get(format_name, self.default)

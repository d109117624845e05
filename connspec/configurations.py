"""Process-wide lookup of named connection profiles."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping

from .config import AppConfig

ProfileValue = Mapping[str, object] | str


class ConfigurationRegistry:
    """Read-only mapping of profile name to configuration.

    Values are either raw configuration mappings or strings naming another
    profile (or a connection URL). The registry performs no resolution.
    """

    def __init__(self, profiles: Mapping[str, ProfileValue] | None = None) -> None:
        self._profiles: dict[str, ProfileValue] = {
            str(name): value if isinstance(value, str) else MappingProxyType(dict(value))
            for name, value in (profiles or {}).items()
        }

    @classmethod
    def from_app_config(cls, config: AppConfig) -> ConfigurationRegistry:
        """Build a registry from the loaded settings file."""

        return cls(config.profile_mappings())

    def get(self, name: str) -> ProfileValue | None:
        """Return the profile registered under ``name``, if any."""

        return self._profiles.get(name)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._profiles)

    def __contains__(self, name: object) -> bool:
        return name in self._profiles

    def __iter__(self) -> Iterator[str]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)


__all__ = ["ConfigurationRegistry", "ProfileValue"]

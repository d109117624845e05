"""App configuration loading helpers."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Mapping

import tomllib

from pydantic import BaseModel, ConfigDict, Field, ValidationError

CONFIG_FILE = Path.home() / ".config" / "connspec" / "config.toml"
ENVIRONMENT_VARIABLE = "CONNSPEC_ENV"

LOG = logging.getLogger(__name__)


class ProfileConfig(BaseModel):
    """Connection profile stored under ``[profiles.<name>]`` in config.toml."""

    model_config = ConfigDict(extra="allow")

    adapter: str | None = None
    host: str | None = None
    port: int | None = None
    username: str | None = None
    password: str | None = None
    database: str | None = None

    def as_mapping(self) -> dict[str, object]:
        """Return the profile as a plain mapping without unset fields."""

        return self.model_dump(exclude_none=True)


class AppConfig(BaseModel):
    """Shape of the application configuration file."""

    environment: str | None = None
    profiles: dict[str, ProfileConfig | str] = Field(default_factory=lambda: dict(_default_profiles()))

    def with_environment(self, name: str | None) -> AppConfig:
        """Return a copy with the current environment updated."""

        return self.model_copy(update={"environment": name})

    def profile_mappings(self) -> dict[str, Mapping[str, object] | str]:
        """Profiles as plain mappings (or alias/URL strings) for the registry."""

        return {
            name: profile if isinstance(profile, str) else profile.as_mapping()
            for name, profile in self.profiles.items()
        }


def current_environment(config: AppConfig) -> str | None:
    """Environment name from ``CONNSPEC_ENV`` or the config file."""

    return os.environ.get(ENVIRONMENT_VARIABLE) or config.environment


def load_config() -> AppConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file()
    except FileNotFoundError:
        return AppConfig()
    except (tomllib.TOMLDecodeError, OSError):
        return AppConfig()

    profiles = data.get("profiles")
    return AppConfig(
        environment=data.get("environment"),
        profiles=profiles if profiles is not None else dict(_default_profiles()),
    )


def save_config(config: AppConfig) -> None:
    """Persist configuration to disk."""

    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = []
    if config.environment:
        lines.append(f"environment = {_format_value(config.environment)}")
    aliases = {name: value for name, value in config.profiles.items() if isinstance(value, str)}
    if aliases:
        lines.append("")
        lines.append("[profiles]")
        for name in sorted(aliases):
            lines.append(f"{_format_key(name)} = {_format_value(aliases[name])}")
    for name, profile in config.profiles.items():
        if isinstance(profile, str):
            continue
        lines.append("")
        lines.append(f"[profiles.{_format_key(name)}]")
        for key, value in profile.as_mapping().items():
            lines.append(f"{_format_key(key)} = {_format_value(value)}")
    CONFIG_FILE.write_text("\n".join(lines).lstrip("\n") + "\n")


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    environment = raw.get("environment")
    if isinstance(environment, str):
        data["environment"] = environment
    profiles = raw.get("profiles")
    if isinstance(profiles, dict):
        parsed: dict[str, ProfileConfig | str] = {}
        for name, value in profiles.items():
            if isinstance(value, str):
                parsed[str(name)] = value
            elif isinstance(value, dict):
                try:
                    parsed[str(name)] = ProfileConfig(**value)
                except ValidationError:
                    LOG.warning("Skipping invalid profile in config file", extra={"profile": str(name)})
        data["profiles"] = parsed
    return data


def _format_key(key: str) -> str:
    if key and all(ch.isalnum() or ch in "-_" for ch in key):
        return key
    return json.dumps(key)


def _format_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(str(value))


def _default_profiles() -> tuple[tuple[str, ProfileConfig], ...]:
    """Default profiles used before the config file is customized."""

    return (
        ("development", ProfileConfig(adapter="sqlite", database="db/development.sqlite3")),
        ("test", ProfileConfig(adapter="sqlite", database=":memory:")),
    )

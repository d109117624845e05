"""Shared dataclasses used across resolver/handler modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

ConnectionConfiguration = dict[str, object]
AdapterFactory = Callable[[ConnectionConfiguration], Any]

PRIMARY = "primary"


@dataclass(frozen=True, slots=True)
class ConnectionSpecification:
    """Resolved configuration bound to its adapter's construction entry point."""

    config: Mapping[str, object]
    adapter_method: str
    factory: AdapterFactory

    @property
    def adapter(self) -> str:
        return str(self.config["adapter"])


@dataclass(frozen=True, slots=True)
class ConnectionHandle:
    """Live connection registered under a logical name."""

    name: str
    spec: ConnectionSpecification
    connection: Any
    established_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))

    @property
    def config(self) -> Mapping[str, object]:
        return self.spec.config


__all__ = [
    "AdapterFactory",
    "ConnectionConfiguration",
    "ConnectionHandle",
    "ConnectionSpecification",
    "PRIMARY",
]

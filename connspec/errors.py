"""Errors raised while resolving connection descriptors."""

from __future__ import annotations

from typing import Sequence


class ConnectionResolutionError(RuntimeError):
    """Base error for descriptor resolution failures."""


class AdapterNotSpecified(ConnectionResolutionError):
    """Raised when no usable adapter could be determined for a descriptor."""

    def __init__(self, message: str, *, descriptor: str | None = None) -> None:
        super().__init__(message)
        self.descriptor = descriptor


class MalformedURL(ConnectionResolutionError, ValueError):
    """Raised when a string descriptor cannot be parsed as a URL."""


class AdapterLoadError(ConnectionResolutionError):
    """Raised when an adapter implementation cannot be made available."""

    def __init__(self, message: str, *, adapter: str) -> None:
        super().__init__(message)
        self.adapter = adapter


class AdapterNotFound(ConnectionResolutionError):
    """Raised when a loaded adapter lacks its construction entry point."""

    def __init__(self, message: str, *, adapter: str, descriptor: str | None = None) -> None:
        super().__init__(message)
        self.adapter = adapter
        self.descriptor = descriptor


class CyclicConfiguration(ConnectionResolutionError):
    """Raised when profile names refer back to themselves."""

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        super().__init__(f"Cyclic database configuration: {' -> '.join(self.chain)}")


class ConnectionNotEstablished(ConnectionResolutionError):
    """Raised when no connection is registered under the requested name."""


__all__ = [
    "AdapterLoadError",
    "AdapterNotFound",
    "AdapterNotSpecified",
    "ConnectionNotEstablished",
    "ConnectionResolutionError",
    "CyclicConfiguration",
    "MalformedURL",
]

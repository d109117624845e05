"""Resolve connection descriptors into registered adapter connections."""

from __future__ import annotations

__version__ = "0.1.0"

from .adapters import AdapterRegistry, register_adapter
from .config import AppConfig, ProfileConfig, current_environment, load_config, save_config
from .configurations import ConfigurationRegistry
from .errors import (
    AdapterLoadError,
    AdapterNotFound,
    AdapterNotSpecified,
    ConnectionNotEstablished,
    ConnectionResolutionError,
    CyclicConfiguration,
    MalformedURL,
)
from .handler import ConnectionHandler
from .models import PRIMARY, ConnectionHandle, ConnectionSpecification
from .resolver import ConnectionResolver, normalize_config, normalize_key
from .urls import decode_url, looks_like_url, redact_url

__all__ = [
    "AdapterLoadError",
    "AdapterNotFound",
    "AdapterNotSpecified",
    "AdapterRegistry",
    "AppConfig",
    "ConfigurationRegistry",
    "ConnectionHandle",
    "ConnectionHandler",
    "ConnectionNotEstablished",
    "ConnectionResolutionError",
    "ConnectionResolver",
    "ConnectionSpecification",
    "CyclicConfiguration",
    "MalformedURL",
    "PRIMARY",
    "ProfileConfig",
    "__version__",
    "current_environment",
    "decode_url",
    "load_config",
    "looks_like_url",
    "normalize_config",
    "normalize_key",
    "redact_url",
    "register_adapter",
    "save_config",
]

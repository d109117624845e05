"""Adapter registry exports and built-in adapters."""

from .loader import (
    BUILTIN_ADAPTERS,
    ENTRY_POINT_GROUP,
    AdapterRegistry,
    adapter_method_name,
    install_hint,
    register_adapter,
)
from .postgresql import PostgresqlConnection, postgresql_connection
from .sqlite import SqliteConnection, sqlite_connection

__all__ = [
    "AdapterRegistry",
    "BUILTIN_ADAPTERS",
    "ENTRY_POINT_GROUP",
    "PostgresqlConnection",
    "SqliteConnection",
    "adapter_method_name",
    "install_hint",
    "postgresql_connection",
    "register_adapter",
    "sqlite_connection",
]

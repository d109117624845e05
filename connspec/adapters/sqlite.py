"""SQLite adapter backed by the standard library driver."""

from __future__ import annotations

import logging
import sqlite3
from typing import Mapping

from .loader import register_adapter

LOG = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class SqliteConnection:
    """Lazily opened SQLite connection."""

    def __init__(self, config: Mapping[str, object]) -> None:
        database = config.get("database")
        if not database:
            raise ValueError("No database file specified. Missing argument: database")
        self.config = dict(config)
        self.database = str(database)
        self.timeout = float(config.get("timeout", DEFAULT_TIMEOUT))  # type: ignore[arg-type]
        self._conn: sqlite3.Connection | None = None

    @property
    def connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> sqlite3.Connection:
        """Open the database file (idempotent)."""

        if self._conn is None:
            LOG.debug("Opening SQLite database", extra={"database": self.database})
            self._conn = sqlite3.connect(self.database, timeout=self.timeout)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None


@register_adapter("sqlite")
def sqlite_connection(config: Mapping[str, object]) -> SqliteConnection:
    return SqliteConnection(config)


__all__ = ["SqliteConnection", "sqlite_connection"]

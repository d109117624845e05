"""PostgreSQL adapter backed by asyncpg."""

from __future__ import annotations

import asyncio
import importlib
import logging
import threading
from types import ModuleType
from typing import Any, Coroutine, Mapping

from connspec.errors import AdapterLoadError

from .loader import install_hint, register_adapter

LOG = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 3.0
DRIVER = "asyncpg"


def load_driver() -> ModuleType:
    """Import the asyncpg driver, reporting a missing install as a load error."""

    try:
        return importlib.import_module(DRIVER)
    except ImportError as exc:
        raise AdapterLoadError(
            f"Please install the postgresql adapter: `{install_hint('postgresql')}` ({exc})",
            adapter="postgresql",
        ) from exc


class PostgresqlConnection:
    """asyncpg connection driven from a private event loop thread.

    Construction performs no I/O; :meth:`connect` opens the connection and
    :meth:`close` tears it down together with the loop.
    """

    def __init__(self, config: Mapping[str, object], *, connect_timeout: float | None = None) -> None:
        self._driver = load_driver()
        self.config = dict(config)
        timeout = config.get("connect_timeout", DEFAULT_CONNECT_TIMEOUT)
        self._connect_timeout = connect_timeout if connect_timeout is not None else float(timeout)  # type: ignore[arg-type]
        self._conn: Any | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._loop_thread: threading.Thread | None = None

    @property
    def connected(self) -> bool:
        return self._conn is not None

    def connect_kwargs(self) -> dict[str, object]:
        """Keyword arguments passed to ``asyncpg.connect``."""

        kwargs: dict[str, object] = {"host": self.config.get("host") or "localhost"}
        port = self.config.get("port")
        if port is not None:
            kwargs["port"] = int(port)  # type: ignore[arg-type]
        if self.config.get("username"):
            kwargs["user"] = self.config["username"]
        for key in ("password", "database"):
            if self.config.get(key):
                kwargs[key] = self.config[key]
        kwargs["timeout"] = self._connect_timeout
        return kwargs

    def connect(self) -> Any:
        """Open the connection (idempotent) and return the asyncpg connection."""

        if self._conn is None:
            LOG.debug(
                "Connecting to PostgreSQL",
                extra={"host": self.config.get("host"), "database": self.config.get("database")},
            )
            self._conn = self._run(self._driver.connect(**self.connect_kwargs()))
        return self._conn

    def close(self) -> None:
        conn, self._conn = self._conn, None
        try:
            if conn is not None:
                self._run(conn.close())
        finally:
            self._stop_loop()

    def _run(self, coro: Coroutine[Any, Any, Any]) -> Any:
        loop = self._ensure_loop()
        future = asyncio.run_coroutine_threadsafe(coro, loop)
        return future.result()

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.new_event_loop()
            self._loop_thread = threading.Thread(
                target=self._loop.run_forever,
                name="connspec-asyncpg",
                daemon=True,
            )
            self._loop_thread.start()
        return self._loop

    def _stop_loop(self) -> None:
        loop, thread = self._loop, self._loop_thread
        self._loop = None
        self._loop_thread = None
        if loop is None:
            return
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout=1)
        if not loop.is_running():
            loop.close()


@register_adapter("postgresql")
def postgresql_connection(config: Mapping[str, object]) -> PostgresqlConnection:
    return PostgresqlConnection(config)


__all__ = ["PostgresqlConnection", "load_driver", "postgresql_connection"]

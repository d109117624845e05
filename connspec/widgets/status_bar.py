"""Status bar widget that mirrors the primary connection handle."""

from __future__ import annotations

from typing import Callable

from textual.widgets import Static

from connspec.handler import ConnectionHandler
from connspec.models import PRIMARY, ConnectionHandle
from connspec.urls import redact_url


class StatusBar(Static):
    """Compact status strip rendered above Textual's footer."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        padding: 0 1;
        background: $surface-darken-3;
        color: $text;
    }
    """

    def __init__(
        self,
        handler: ConnectionHandler,
        *,
        name: str = PRIMARY,
        last_error: str | None = None,
    ) -> None:
        super().__init__("", id="status-bar")
        self._handler = handler
        self._connection_name = name
        self._last_error = last_error
        self._unsubscribe: Callable[[], None] | None = None

    async def on_mount(self) -> None:
        self._unsubscribe = self._handler.subscribe(self._handle_update)
        self.update(self.status_text())

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def show_error(self, message: str | None) -> None:
        self._last_error = message
        self.update(self.status_text())

    def status_text(self) -> str:
        """Text currently shown in the status strip."""

        handle = self._current_handle()
        if handle is None:
            parts = [f"Connection: {self._connection_name}", "Status: Not connected"]
        else:
            config = handle.config
            parts = [f"Connection: {handle.name}", f"Adapter: {handle.spec.adapter}"]
            if config.get("host"):
                target = str(config["host"])
                if config.get("port") is not None:
                    target = f"{target}:{config['port']}"
                parts.append(f"Host: {target}")
            if config.get("database"):
                parts.append(f"Database: {config['database']}")
            established = handle.established_at.astimezone().strftime("%H:%M:%S")
            parts.append(f"Established: {established}")
        if self._last_error:
            reason = redact_url(self._last_error.splitlines()[0][:80])
            parts.append(f"Error: {reason}")
        return " | ".join(parts)

    def _current_handle(self) -> ConnectionHandle | None:
        if not self._handler.connected(self._connection_name):
            return None
        return self._handler.handle(self._connection_name)

    def _handle_update(self, name: str, handle: ConnectionHandle | None) -> None:
        if name != self._connection_name:
            return
        if handle is not None:
            self._last_error = None
        self.update(self.status_text())


__all__ = ["StatusBar"]

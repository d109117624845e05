"""Read-only listing of the configured connection profiles."""

from __future__ import annotations

from typing import Callable

from textual.widgets import Static

from connspec.configurations import ConfigurationRegistry
from connspec.handler import ConnectionHandler
from connspec.models import PRIMARY, ConnectionHandle
from connspec.urls import redact_url


class ProfileList(Static):
    """Shows each profile with its adapter and target, marking the active one."""

    DEFAULT_CSS = """
    ProfileList {
        height: 1fr;
        padding: 1 2;
    }
    """

    def __init__(
        self,
        configurations: ConfigurationRegistry,
        handler: ConnectionHandler,
        *,
        active: Callable[[], str | None],
    ) -> None:
        super().__init__("", id="profile-list")
        self._configurations = configurations
        self._handler = handler
        self._active = active
        self._unsubscribe: Callable[[], None] | None = None

    async def on_mount(self) -> None:
        self._unsubscribe = self._handler.subscribe(self._handle_update)
        self.update(self.render_profiles())

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def render_profiles(self) -> str:
        if not len(self._configurations):
            return "No profiles configured."
        active = self._active() if self._handler.connected(PRIMARY) else None
        lines: list[str] = []
        for name in self._configurations:
            marker = "●" if name == active else " "
            lines.append(f"{marker} {name:<16} {self._summary(name)}")
        return "\n".join(lines)

    def _summary(self, name: str) -> str:
        profile = self._configurations.get(name)
        if isinstance(profile, str):
            return f"→ {redact_url(profile)}"
        if profile is None:
            return ""
        adapter = profile.get("adapter") or "?"
        target = profile.get("database") or profile.get("host") or ""
        return f"{adapter:<12} {target}"

    def _handle_update(self, name: str, handle: ConnectionHandle | None) -> None:
        if name == PRIMARY:
            self.update(self.render_profiles())


__all__ = ["ProfileList"]

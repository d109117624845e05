"""Textual console for inspecting and switching connection profiles."""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header

from .config import AppConfig, current_environment, load_config, save_config
from .configurations import ConfigurationRegistry
from .errors import ConnectionResolutionError
from .handler import ConnectionHandler
from .models import PRIMARY
from .providers import DisconnectProvider, ProfileConnectProvider
from .resolver import FROM_ENVIRONMENT, ConnectionResolver
from .urls import redact_url
from .widgets import ProfileList, StatusBar

LOG = logging.getLogger(__name__)


def _load_app_config() -> AppConfig:
    """Load configuration with a small wrapper for future overrides."""

    return load_config()


class ConnspecApp(App[None]):
    """Lists profiles and keeps the primary connection registered."""

    COMMANDS = App.COMMANDS | {ProfileConnectProvider, DisconnectProvider}
    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+r", "reconnect", "Reconnect"),
        ("ctrl+p", "command_palette", "Command Palette"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._config = _load_app_config()
        self._handler = ConnectionHandler()
        self._resolver = ConnectionResolver(
            ConfigurationRegistry.from_app_config(self._config),
            handler=self._handler,
            environment=self.current_environment,
        )
        self._status_bar: StatusBar | None = None
        self._last_error: str | None = None
        self._pending_notifications: list[tuple[str, str]] = []
        self._establish(FROM_ENVIRONMENT)

    def compose(self) -> ComposeResult:
        """Compose the root layout."""

        yield Header(show_clock=True)
        yield ProfileList(
            self._resolver.configurations,
            self._handler,
            active=self.current_environment,
        )
        self._status_bar = StatusBar(self._handler, last_error=self._last_error)
        yield self._status_bar
        yield Footer()

    async def on_mount(self) -> None:
        self._flush_pending_notifications()

    def action_reconnect(self) -> None:
        self._establish(FROM_ENVIRONMENT)

    @property
    def resolver(self) -> ConnectionResolver:
        """Expose the resolver for providers and tests."""

        return self._resolver

    @property
    def handler(self) -> ConnectionHandler:
        return self._handler

    @property
    def last_error(self) -> str | None:
        """Message of the most recent resolution failure."""

        return self._last_error

    def current_environment(self) -> str | None:
        return current_environment(self._config)

    def connect_profile(self, name: str) -> None:
        """Establish the primary connection from a profile and persist the choice."""

        if not self._establish(name):
            return
        self._config = self._config.with_environment(name)
        save_config(self._config)
        self._safe_notify(f"Connected to profile: {name}")

    def disconnect(self) -> None:
        """Remove the primary connection, if any."""

        if self._resolver.remove_connection(PRIMARY) is not None:
            self._safe_notify("Primary connection removed.")

    def _establish(self, descriptor: object) -> bool:
        try:
            self._resolver.establish_connection(descriptor, name=PRIMARY)
        except (ConnectionResolutionError, ValueError) as exc:
            LOG.warning("Connection resolution failed", extra={"descriptor": redact_url(str(descriptor))})
            self._record_error(str(exc))
            return False
        self._record_error(None)
        return True

    def _record_error(self, message: str | None) -> None:
        self._last_error = message
        if self._status_bar is not None:
            self._status_bar.show_error(message)
        if message:
            self._safe_notify(message, severity="error")

    async def _shutdown(self) -> None:
        for handle in self._handler.handles:
            self._handler.remove_connection(handle.name)
        await super()._shutdown()

    def _safe_notify(self, message: str, *, severity: str = "information") -> None:
        if self.is_running:
            try:
                self.notify(message, severity=severity)
            except Exception:
                LOG.exception("Failed to display notification", extra={"notification": message})
        else:
            self._pending_notifications.append((message, severity))

    def _flush_pending_notifications(self) -> None:
        if not self._pending_notifications:
            return
        pending = list(self._pending_notifications)
        self._pending_notifications.clear()
        for message, severity in pending:
            try:
                self.notify(message, severity=severity)
            except Exception:
                LOG.exception("Failed to display queued notification", extra={"notification": message})


def main() -> None:
    """Invoke the Textual application."""

    ConnspecApp().run()


if __name__ == "__main__":
    main()

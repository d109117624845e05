"""Table of named, registered connections."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from .errors import ConnectionNotEstablished
from .models import PRIMARY, ConnectionHandle, ConnectionSpecification

LOG = logging.getLogger(__name__)

HandleListener = Callable[[str, ConnectionHandle | None], None]


class ConnectionHandler:
    """Owns at most one live connection per logical name.

    Instances are created by the application bootstrap and injected where
    needed, so tests can work with isolated tables.
    """

    def __init__(self) -> None:
        self._handles: dict[str, ConnectionHandle] = {}
        self._listeners: set[HandleListener] = set()

    def establish_connection(self, name: str, spec: ConnectionSpecification) -> ConnectionHandle:
        """Invoke the adapter factory and register the result under ``name``.

        The factory runs first; an existing handle is only replaced once a new
        connection object exists, so a failing factory leaves it registered.
        """

        connection = spec.factory(dict(spec.config))
        self.remove_connection(name)
        handle = ConnectionHandle(name=name, spec=spec, connection=connection)
        self._handles[name] = handle
        LOG.info("Established connection", extra={"connection": name, "adapter": spec.adapter})
        self._notify(name, handle)
        return handle

    def remove_connection(self, name: str = PRIMARY) -> Mapping[str, object] | None:
        """Drop the handle registered under ``name``; a no-op when absent.

        Returns the configuration of the removed handle.
        """

        handle = self._handles.pop(name, None)
        if handle is None:
            return None
        close = getattr(handle.connection, "close", None)
        if callable(close):
            close()
        LOG.info("Removed connection", extra={"connection": name, "adapter": handle.spec.adapter})
        self._notify(name, None)
        return handle.config

    def retrieve_connection(self, name: str = PRIMARY) -> Any:
        """Return the live connection object registered under ``name``."""

        return self.handle(name).connection

    def handle(self, name: str = PRIMARY) -> ConnectionHandle:
        try:
            return self._handles[name]
        except KeyError:
            raise ConnectionNotEstablished(f"No connection established for '{name}'") from None

    def connected(self, name: str = PRIMARY) -> bool:
        return name in self._handles

    @property
    def handles(self) -> tuple[ConnectionHandle, ...]:
        return tuple(self._handles.values())

    def subscribe(self, listener: HandleListener) -> Callable[[], None]:
        """Subscribe to handle changes; returns an unsubscribe handle."""

        self._listeners.add(listener)

        def _unsubscribe() -> None:
            self._listeners.discard(listener)

        return _unsubscribe

    def _notify(self, name: str, handle: ConnectionHandle | None) -> None:
        for listener in tuple(self._listeners):
            listener(name, handle)


__all__ = ["ConnectionHandler", "HandleListener"]

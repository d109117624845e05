"""Command palette providers for the connection console."""

from __future__ import annotations

from typing import Iterator

from textual.command import DiscoveryHit, Hit, Hits, Provider
from textual.types import IgnoreReturnCallbackType

from .resolver import ConnectionResolver


class _ConsoleProvider(Provider):
    """Shared plumbing: palette entries that call a method on the app."""

    def entries(self) -> Iterator[tuple[str, IgnoreReturnCallbackType, str]]:
        """Yield ``(label, callback, help)`` for every available command."""

        raise NotImplementedError

    async def search(self, query: str) -> Hits:
        matcher = self.matcher(query)
        for label, callback, help_text in self.entries():
            score = matcher.match(label)
            if score > 0:
                yield Hit(score=score, match_display=matcher.highlight(label), command=callback, help=help_text)

    async def discover(self) -> Hits:
        for label, callback, help_text in self.entries():
            yield DiscoveryHit(display=label, command=callback, help=help_text)

    @property
    def _resolver(self) -> ConnectionResolver | None:
        resolver = getattr(self.app, "resolver", None)
        return resolver if isinstance(resolver, ConnectionResolver) else None

    def _call_app(self, method: str, *args: object) -> IgnoreReturnCallbackType:
        async def _run() -> None:
            target = getattr(self.app, method, None)
            if target is not None:
                target(*args)

        return _run


class ProfileConnectProvider(_ConsoleProvider):
    """One "Connect to profile" entry per configured profile."""

    def entries(self) -> Iterator[tuple[str, IgnoreReturnCallbackType, str]]:
        resolver = self._resolver
        if resolver is None:
            return
        for name in resolver.configurations:
            yield (
                f"Connect to profile: {name}",
                self._call_app("connect_profile", name),
                "Establish the primary connection from this profile.",
            )


class DisconnectProvider(_ConsoleProvider):
    """Drop the primary connection."""

    def entries(self) -> Iterator[tuple[str, IgnoreReturnCallbackType, str]]:
        if self._resolver is None or not self._resolver.handler.connected():
            return
        yield (
            "Disconnect primary connection",
            self._call_app("disconnect"),
            "Remove the registered primary connection.",
        )


__all__ = ["DisconnectProvider", "ProfileConnectProvider"]

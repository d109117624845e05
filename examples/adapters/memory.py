"""Sample third-party adapter exposing the ``memory_connection`` entry point."""

from __future__ import annotations

from typing import Mapping


class MemoryConnection:
    """Connection stand-in that records its configuration and lifecycle."""

    instances: list["MemoryConnection"] = []

    def __init__(self, config: Mapping[str, object]) -> None:
        self.config = dict(config)
        self.closed = False
        MemoryConnection.instances.append(self)

    def close(self) -> None:
        self.closed = True


def memory_connection(config: Mapping[str, object]) -> MemoryConnection:
    return MemoryConnection(config)

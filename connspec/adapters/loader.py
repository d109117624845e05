"""Adapter registry and entry point loader."""

from __future__ import annotations

import importlib.metadata as metadata
import inspect
import logging
from typing import Callable, Iterator, Mapping

from connspec.errors import AdapterLoadError, AdapterNotFound
from connspec.models import AdapterFactory

LOG = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "connspec.adapters"

BUILTIN_ADAPTERS: dict[str, AdapterFactory] = {}


def register_adapter(adapter_id: str) -> Callable[[AdapterFactory], AdapterFactory]:
    """Decorator registering a built-in construction entry point.

    Example:
        @register_adapter("sqlite")
        def sqlite_connection(config): ...
    """

    def decorator(factory: AdapterFactory) -> AdapterFactory:
        BUILTIN_ADAPTERS[adapter_id] = factory
        return factory

    return decorator


def adapter_method_name(adapter_id: str) -> str:
    """Conventional name of an adapter's construction entry point."""

    return f"{adapter_id}_connection"


def install_hint(adapter_id: str) -> str:
    return f"pip install connspec-{adapter_id}-adapter"


class AdapterRegistry:
    """Maps adapter identifiers to construction entry points.

    Registries start from a copy of the built-in adapters. Identifiers that
    are not registered are looked up among the ``connspec.adapters`` entry
    points; the loaded object must expose ``<adapter>_connection``.
    """

    def __init__(
        self,
        *,
        entry_point_group: str = ENTRY_POINT_GROUP,
        builtin_adapters: Mapping[str, AdapterFactory] | None = None,
    ) -> None:
        self._entry_point_group = entry_point_group
        self._factories: dict[str, AdapterFactory] = dict(
            BUILTIN_ADAPTERS if builtin_adapters is None else builtin_adapters
        )

    def register(self, adapter_id: str, factory: AdapterFactory) -> None:
        """Register (or replace) the factory for an adapter."""

        if not callable(factory):
            raise ValueError(f"Adapter '{adapter_id}' factory is not callable")
        self._factories[adapter_id] = factory

    def load(self, adapter_id: str) -> AdapterFactory:
        """Return the construction entry point for ``adapter_id``."""

        factory = self._factories.get(adapter_id)
        if factory is not None:
            return factory

        entry_point = self._find_entry_point(adapter_id)
        if entry_point is None:
            raise AdapterLoadError(
                f"Please install the {adapter_id} adapter: `{install_hint(adapter_id)}` "
                f"(no '{self._entry_point_group}' entry point named '{adapter_id}')",
                adapter=adapter_id,
            )
        try:
            target = entry_point.load()
        except ImportError as exc:
            LOG.warning(
                "Adapter entry point failed to import",
                extra={"adapter": adapter_id, "entry_point": entry_point.value},
            )
            raise AdapterLoadError(
                f"Please install the {adapter_id} adapter: `{install_hint(adapter_id)}` ({exc})",
                adapter=adapter_id,
            ) from exc
        except AttributeError as exc:
            LOG.warning(
                "Adapter entry point names a missing attribute",
                extra={"adapter": adapter_id, "entry_point": entry_point.value},
            )
            raise AdapterNotFound(
                f"database configuration specifies nonexistent {adapter_id} adapter ({exc})",
                adapter=adapter_id,
            ) from exc

        factory = self._construction_entry_point(adapter_id, target)
        if factory is None:
            raise AdapterNotFound(
                f"database configuration specifies nonexistent {adapter_id} adapter",
                adapter=adapter_id,
            )
        LOG.debug("Loaded adapter from entry point", extra={"adapter": adapter_id})
        self._factories[adapter_id] = factory
        return factory

    @property
    def adapter_ids(self) -> tuple[str, ...]:
        """Identifiers with a known construction entry point."""

        return tuple(sorted(self._factories))

    def __contains__(self, adapter_id: object) -> bool:
        return adapter_id in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self.adapter_ids)

    def _find_entry_point(self, adapter_id: str) -> metadata.EntryPoint | None:
        eps = metadata.entry_points()
        for entry_point in eps.select(group=self._entry_point_group):
            if entry_point.name == adapter_id:
                return entry_point
        return None

    @staticmethod
    def _construction_entry_point(adapter_id: str, target: object) -> AdapterFactory | None:
        candidate = getattr(target, adapter_method_name(adapter_id), None)
        if candidate is None and not inspect.ismodule(target) and not inspect.isclass(target):
            candidate = target
        if candidate is None or not callable(candidate):
            return None
        return candidate  # type: ignore[return-value]


__all__ = [
    "AdapterRegistry",
    "BUILTIN_ADAPTERS",
    "ENTRY_POINT_GROUP",
    "adapter_method_name",
    "install_hint",
    "register_adapter",
]

"""Resolve connection descriptors into canonical configurations."""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Callable, Mapping

from .adapters import AdapterRegistry, adapter_method_name
from .config import AppConfig, current_environment
from .configurations import ConfigurationRegistry
from .errors import AdapterNotFound, AdapterNotSpecified, CyclicConfiguration
from .handler import ConnectionHandler
from .models import PRIMARY, ConnectionConfiguration, ConnectionSpecification
from .urls import decode_url, looks_like_url, redact_url

LOG = logging.getLogger(__name__)

DATABASE_URL = "DATABASE_URL"

EnvironmentProvider = Callable[[], str | None]
UrlDecoder = Callable[[str], Mapping[str, object]]


class _FromEnvironment:
    def __repr__(self) -> str:
        return f"<${DATABASE_URL}>"


FROM_ENVIRONMENT = _FromEnvironment()


def normalize_key(key: object) -> str:
    """Canonical string form of a configuration key."""

    if isinstance(key, Enum):
        key = key.value if isinstance(key.value, str) else key.name
    elif isinstance(key, bytes):
        key = key.decode("utf-8")
    return str(key).strip().lower()


def normalize_config(config: Mapping[object, object]) -> ConnectionConfiguration:
    """Copy ``config`` with every key normalized; later keys win."""

    return {normalize_key(key): value for key, value in config.items()}


class ConnectionResolver:
    """Turns any supported descriptor into a registered connection.

    Descriptors may be ``None`` (use the current environment name), a profile
    name, a URL, a configuration mapping or an already resolved
    :class:`ConnectionSpecification`. Profile names always win over URL
    interpretation of the same string.
    """

    def __init__(
        self,
        configurations: ConfigurationRegistry,
        adapters: AdapterRegistry | None = None,
        handler: ConnectionHandler | None = None,
        *,
        environment: EnvironmentProvider | None = None,
        decoder: UrlDecoder = decode_url,
    ) -> None:
        self._configurations = configurations
        self._adapters = adapters if adapters is not None else AdapterRegistry()
        self._handler = handler if handler is not None else ConnectionHandler()
        self._environment = environment
        self._decoder = decoder

    @classmethod
    def from_app_config(
        cls,
        config: AppConfig,
        *,
        adapters: AdapterRegistry | None = None,
        handler: ConnectionHandler | None = None,
    ) -> ConnectionResolver:
        """Bootstrap a resolver from the loaded settings file."""

        return cls(
            ConfigurationRegistry.from_app_config(config),
            adapters,
            handler,
            environment=lambda: current_environment(config),
        )

    @property
    def configurations(self) -> ConfigurationRegistry:
        return self._configurations

    @property
    def adapters(self) -> AdapterRegistry:
        return self._adapters

    @property
    def handler(self) -> ConnectionHandler:
        return self._handler

    def establish_connection(
        self,
        descriptor: object = FROM_ENVIRONMENT,
        *,
        name: str = PRIMARY,
    ) -> ConnectionConfiguration:
        """Resolve ``descriptor`` and register the connection under ``name``.

        Without a descriptor the ``DATABASE_URL`` environment variable is
        used; when that is unset too, the current environment name is.
        Any existing handle under ``name`` is replaced only once the new
        connection has been built.
        """

        if descriptor is FROM_ENVIRONMENT:
            descriptor = os.environ.get(DATABASE_URL) or None
        spec = self.resolve(descriptor)
        self._handler.establish_connection(name, spec)
        return dict(spec.config)

    def remove_connection(self, name: str = PRIMARY) -> Mapping[str, object] | None:
        return self._handler.remove_connection(name)

    def retrieve_connection(self, name: str = PRIMARY) -> object:
        return self._handler.retrieve_connection(name)

    def resolve(self, descriptor: object) -> ConnectionSpecification:
        """Resolve a descriptor without registering anything."""

        return self._resolve(descriptor, chain=(), origin=None)

    def _resolve(
        self,
        descriptor: object,
        *,
        chain: tuple[str, ...],
        origin: str | None,
    ) -> ConnectionSpecification:
        if descriptor is None:
            return self._resolve_environment(chain)
        if isinstance(descriptor, ConnectionSpecification):
            return descriptor
        if isinstance(descriptor, Enum):
            return self._resolve_name(str(descriptor.value), chain=chain, allow_url=False)
        if isinstance(descriptor, str):
            return self._resolve_name(descriptor, chain=chain, allow_url=True)
        if isinstance(descriptor, Mapping):
            return self._resolve_config(descriptor, origin=origin)
        raise TypeError(f"Unsupported connection descriptor: {type(descriptor).__name__}")

    def _resolve_environment(self, chain: tuple[str, ...]) -> ConnectionSpecification:
        environment = self._environment() if self._environment is not None else None
        if not environment:
            raise AdapterNotSpecified("No database configuration given and no current environment is set")
        LOG.debug("Falling back to environment profile", extra={"environment": environment})
        return self._resolve_name(environment, chain=chain, allow_url=True)

    def _resolve_name(self, name: str, *, chain: tuple[str, ...], allow_url: bool) -> ConnectionSpecification:
        label = redact_url(name)
        if name in chain:
            raise CyclicConfiguration(chain + (name,))
        configuration = self._configurations.get(name)
        if configuration is not None:
            LOG.debug("Resolved profile", extra={"profile": label})
            return self._resolve(configuration, chain=chain + (name,), origin=label)
        if allow_url and looks_like_url(name):
            LOG.debug("Decoding connection URL", extra={"url": label})
            return self._resolve_config(self._decoder(name), origin=label)
        raise AdapterNotSpecified(f"{label} database is not configured", descriptor=label)

    def _resolve_config(self, config: Mapping[object, object], *, origin: str | None) -> ConnectionSpecification:
        normalized = normalize_config(config)
        adapter = normalized.get("adapter")
        adapter_id = str(adapter).strip() if adapter is not None else ""
        if not adapter_id:
            where = f" '{origin}'" if origin else ""
            raise AdapterNotSpecified(
                f"database configuration{where} does not specify adapter",
                descriptor=origin,
            )
        normalized["adapter"] = adapter_id
        try:
            factory = self._adapters.load(adapter_id)
        except AdapterNotFound as exc:
            if origin is None:
                raise
            raise AdapterNotFound(f"{exc} (from '{origin}')", adapter=adapter_id, descriptor=origin) from exc
        return ConnectionSpecification(
            config=normalized,
            adapter_method=adapter_method_name(adapter_id),
            factory=factory,
        )


__all__ = [
    "ConnectionResolver",
    "DATABASE_URL",
    "EnvironmentProvider",
    "FROM_ENVIRONMENT",
    "normalize_config",
    "normalize_key",
]

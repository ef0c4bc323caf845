"""Client Registry — Process-wide mapping of configuration names to live clients.

The registry resolves each configuration name through ``Settings``, opens a
client with the backend class registered for that configuration, and keeps
the live client under the name until ``close_all()``. Access to the mapping
is guarded by a reader/writer lock: lookups share the read side, while
initialization and teardown take the write side.

Built-in backends are registered by import path and loaded on first use, so
a missing client library only fails the names configured for that backend.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from searchconn.clients.base.client import ClientHealth, SearchClient
from searchconn.clients.base.locks import ReadWriteLock
from searchconn.exceptions import ClientError, ConfigError, ConnectionError, NotRegisteredError

if TYPE_CHECKING:
    from searchconn.config.settings import Settings

logger = logging.getLogger(__name__)

# A backend is either a client class or a "module:ClassName" import path.
Backend = type[SearchClient] | str

# Keys of ClientConfig.extra that would shadow an argument of SearchClient.open().
RESERVED_EXTRA_KEYS = frozenset({"endpoint", "username", "password", "timeout_ms", "verify_certs"})


def builtin_backends() -> dict[str, Backend]:
    """Import paths of the client classes shipped with searchconn, keyed by backend name."""
    return {
        "elasticsearch": "searchconn.clients.elasticsearch.client:ElasticsearchClient",
        "opensearch": "searchconn.clients.opensearch.client:OpenSearchClient",
    }


def load_backend(backend: Backend) -> type[SearchClient]:
    """Resolve a backend registration to its client class.

    Raises:
        ConnectionError: If the module (or the client library it needs)
            cannot be imported.
        ConfigError: If the import path does not name a class in the module.
    """
    if not isinstance(backend, str):
        return backend
    module_name, _, class_name = backend.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConnectionError(f"Backend module '{module_name}' could not be imported: {e}") from e
    try:
        return getattr(module, class_name)
    except AttributeError as e:
        raise ConfigError(f"Backend module '{module_name}' has no client class '{class_name}'.") from e


class ClientRegistry:
    """Registry of named search clients.

    The registry maintains both backend class registrations and live
    client instances. It supports:
      - Registering client classes by backend name
      - Opening clients for configuration names, replacing older ones
      - Retrieving live clients by configuration name
      - Health checking and closing all clients

    Args:
        settings: Source of the per-name client configurations.
        backends: Client classes or ``"module:ClassName"`` paths by backend
            name. Defaults to the built-ins.

    Example:
        >>> registry = ClientRegistry(Settings.from_yaml("searchconn.yaml"))
        >>> await registry.initialize_all("users", "logs")
        >>> client = await registry.get("users")
    """

    def __init__(self, settings: Settings, backends: Mapping[str, Backend] | None = None) -> None:
        self._settings = settings
        self._classes: dict[str, Backend] = dict(builtin_backends() if backends is None else backends)
        self._clients: dict[str, SearchClient] = {}
        self._lock = ReadWriteLock()

    def register(self, backend: str, client_class: Backend) -> None:
        """Register a client class.

        Args:
            backend: Backend name used in client configurations.
            client_class: The client class to register, or its import path.
        """
        if backend in self._classes:
            logger.warning("Overwriting existing backend registration: %s", backend)
        self._classes[backend] = client_class
        logger.info("Registered backend: %s", backend)

    async def initialize_all(self, *names: str) -> list[str]:
        """Open a client for each configuration name and install it.

        A client already registered under the same name is closed before
        the new one is installed. Names whose configuration is missing or
        whose client cannot be opened are logged and skipped; no error is
        raised, so one bad entry does not block the others.

        Args:
            *names: Configuration names to initialize.

        Returns:
            The names that now have a freshly opened client.
        """
        initialized: list[str] = []
        for name in names:
            try:
                client = await self._open(name)
            except ClientError as e:
                logger.error("Failed to initialize client '%s': %s", name, e)
                continue
            except Exception:
                logger.error("Failed to initialize client '%s'", name, exc_info=True)
                continue

            async with self._lock.write():
                old = self._clients.get(name)
                if old is not None:
                    await self._close_client(name, old)
                self._clients[name] = client

            initialized.append(name)
            logger.info("Initialized client '%s' (%s at %s)", name, client.name, client.endpoint)
        return initialized

    async def get(self, name: str) -> SearchClient:
        """Get a live client by configuration name.

        Raises:
            NotRegisteredError: If no client is registered under this name.
        """
        async with self._lock.read():
            client = self._clients.get(name)
        if client is None:
            raise NotRegisteredError(
                f"No client registered under '{name}'. Call initialize_all() first."
            )
        return client

    async def health_check_all(self) -> dict[str, ClientHealth]:
        """Run health checks on all live clients.

        Returns:
            Dictionary mapping configuration names to their health status.
        """
        async with self._lock.read():
            clients = dict(self._clients)
        return {name: await client.health_check() for name, client in clients.items()}

    async def close_all(self) -> None:
        """Close every client and empty the registry.

        Later lookups fail with ``NotRegisteredError`` until the names are
        initialized again.
        """
        async with self._lock.write():
            for name, client in self._clients.items():
                await self._close_client(name, client)
            self._clients.clear()

    async def _open(self, name: str) -> SearchClient:
        config = self._settings.client_config(name)
        backend = self._classes.get(config.backend)
        if backend is None:
            raise ConfigError(
                f"Unknown backend '{config.backend}' for client '{name}'. "
                f"Available backends: {list(self._classes.keys())}"
            )
        reserved = sorted(RESERVED_EXTRA_KEYS.intersection(config.extra))
        if reserved:
            raise ConfigError(
                f"Client '{name}' sets {reserved} in 'extra'; set them as top-level client options instead."
            )
        client_class = load_backend(backend)
        return await client_class.open(
            config.endpoint,
            username=config.username,
            password=config.password,
            timeout_ms=config.timeout_ms,
            verify_certs=config.verify_certs,
            **config.extra,
        )

    @staticmethod
    async def _close_client(name: str, client: SearchClient) -> None:
        try:
            await client.close()
            logger.info("Closed client: %s", name)
        except Exception:
            logger.warning("Error closing client: %s", name, exc_info=True)

    @property
    def registered_backends(self) -> list[str]:
        """List all registered backend names."""
        return list(self._classes.keys())

    @property
    def active_clients(self) -> list[str]:
        """List all configuration names with a live client."""
        return list(self._clients.keys())

"""Registry slot — The process-wide registry shared by the operations facade."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from searchconn.clients.base.registry import ClientRegistry
from searchconn.config.settings import Settings

# Process-wide registry (set by open_registry() or the host application)
_registry: ClientRegistry | None = None


def set_registry(registry: ClientRegistry | None) -> None:
    """Install the process-wide registry, or clear it with None."""
    global _registry
    _registry = registry


def get_registry() -> ClientRegistry:
    """Get the process-wide registry.

    Returns:
        The installed ClientRegistry.

    Raises:
        RuntimeError: If no registry is installed.
    """
    if _registry is None:
        raise RuntimeError("searchconn registry not initialized. Use open_registry() or set_registry().")
    return _registry


@asynccontextmanager
async def open_registry(settings: Settings, *names: str) -> AsyncIterator[ClientRegistry]:
    """Run a registry for the lifetime of a block.

    Opens clients for *names*, installs the registry process-wide, and on
    exit closes every client and clears the slot.

    Example::

        async with open_registry(Settings.from_yaml("searchconn.yaml"), "users"):
            await insert_doc("users", "idx1", "1", {"userid": "user01"})
    """
    registry = ClientRegistry(settings)
    await registry.initialize_all(*names)
    set_registry(registry)
    try:
        yield registry
    finally:
        await registry.close_all()
        set_registry(None)

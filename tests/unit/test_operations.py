"""Tests for the operations facade and the process-wide registry slot."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import patch

import pytest

from searchconn import deps, operations
from searchconn.clients.base.registry import ClientRegistry
from searchconn.config.settings import Settings
from searchconn.deps import get_registry, open_registry, set_registry
from searchconn.exceptions import AlreadyExistsError, DocumentNotFoundError, NotRegisteredError
from searchconn.models.example import ExampleUser


@pytest.fixture(autouse=True)
def _clear_registry_slot() -> Iterator[None]:
    yield
    set_registry(None)


class TestRegistrySlot:
    def test_get_registry_unset(self) -> None:
        with pytest.raises(RuntimeError, match="not initialized"):
            get_registry()

    def test_set_and_get(self, registry: ClientRegistry) -> None:
        set_registry(registry)
        assert get_registry() is registry

    async def test_open_registry_lifecycle(self, settings: Settings, memory_backend: type) -> None:
        with patch.object(deps, "ClientRegistry", lambda s: ClientRegistry(s, backends={"memory": memory_backend})):
            async with open_registry(settings, "test", "unreachable") as registry:
                assert get_registry() is registry
                assert registry.active_clients == ["test"]
                client = await operations.get_client("test")

        assert client.closed
        with pytest.raises(RuntimeError):
            get_registry()


class TestOperations:
    async def test_unregistered_name(self, registry: ClientRegistry) -> None:
        set_registry(registry)
        with pytest.raises(NotRegisteredError):
            await operations.get_doc("test", "idx1", "1")

    async def test_no_registry_installed(self) -> None:
        with pytest.raises(RuntimeError):
            await operations.get_client("test")

    async def test_document_lifecycle(self, registry: ClientRegistry, user_mapping: dict) -> None:
        await registry.initialize_all("test")
        set_registry(registry)

        await operations.create_index("test", "idx1", user_mapping)
        with pytest.raises(AlreadyExistsError):
            await operations.create_index("test", "idx1", user_mapping)

        assert await operations.insert_doc("test", "idx1", "1", {"userid": "user01"}) == "1"
        doc = await operations.get_doc("test", "idx1", "1")
        assert doc.source == {"userid": "user01"}
        assert b"user01" in doc.raw

        result = await operations.term_search("test", "idx1", "userid", "user01")
        assert result.total_hits == 1
        assert result.each(ExampleUser)[0].userid == "user01"

        assert await operations.delete_doc("test", "idx1", "1") is True
        with pytest.raises(DocumentNotFoundError):
            await operations.delete_doc("test", "idx1", "1")
        with pytest.raises(DocumentNotFoundError):
            await operations.get_doc("test", "idx1", "1")

    async def test_explicit_registry_wins(self, registry: ClientRegistry, settings: Settings) -> None:
        await registry.initialize_all("test")
        set_registry(ClientRegistry(settings, backends={}))

        await operations.insert_doc("test", "idx1", "1", '{"userid": "user01"}', registry=registry)
        doc = await operations.get_doc("test", "idx1", "1", registry=registry)
        assert doc.parse(ExampleUser).userid == "user01"

    async def test_term_search_pagination(self, registry: ClientRegistry) -> None:
        await registry.initialize_all("test")
        for i in range(15):
            await operations.insert_doc("test", "idx1", str(i), {"userid": "same"}, registry=registry)

        first = await operations.term_search("test", "idx1", "userid", "same", registry=registry)
        rest = await operations.term_search("test", "idx1", "userid", "same", from_=10, size=10, registry=registry)

        assert first.total_hits == 15
        assert len(first.hits) == 10
        assert len(rest.hits) == 5

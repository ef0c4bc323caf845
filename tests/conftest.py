"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from searchconn.clients.base.client import SearchClient
from searchconn.clients.base.registry import ClientRegistry
from searchconn.config.settings import Settings
from searchconn.exceptions import DocumentNotFoundError


class InMemoryClient(SearchClient):
    """SearchClient over a dict, standing in for a live backend.

    Set ``extra={"unreachable": True}`` in a client config to make the
    liveness ping fail, and ``extra={"close_fails": True}`` to make closing
    the transport raise.
    """

    @property
    def name(self) -> str:
        return "memory"

    def _build_client(self) -> Any:
        conn = MagicMock()
        conn.ping = AsyncMock(return_value=not self._extra_kwargs.get("unreachable", False))
        close_error = RuntimeError("socket gone") if self._extra_kwargs.get("close_fails") else None
        conn.close = AsyncMock(side_effect=close_error)
        conn.store = {}
        return conn

    async def _index_exists(self, client: Any, index_name: str) -> bool:
        return index_name in client.store

    async def _create_index(self, client: Any, index_name: str, body: dict[str, Any]) -> Any:
        client.store[index_name] = {}
        return {"acknowledged": True, "index": index_name}

    async def _index_doc(
        self,
        client: Any,
        index_name: str,
        doc_id: str,
        document: dict[str, Any],
        refresh: bool | str | None,
    ) -> Any:
        client.store.setdefault(index_name, {})[doc_id] = document
        return {"_index": index_name, "_id": doc_id, "result": "created"}

    async def _get_doc(self, client: Any, index_name: str, doc_id: str) -> Any:
        try:
            source = client.store[index_name][doc_id]
        except KeyError as e:
            raise DocumentNotFoundError(f"Document '{doc_id}' not found in '{index_name}'.") from e
        return {"_index": index_name, "_id": doc_id, "_version": 1, "found": True, "_source": source}

    async def _delete_doc(self, client: Any, index_name: str, doc_id: str) -> Any:
        docs = client.store.get(index_name, {})
        if doc_id not in docs:
            raise DocumentNotFoundError(f"Document '{doc_id}' not found in '{index_name}'.")
        del docs[doc_id]
        return {"_index": index_name, "_id": doc_id, "result": "deleted"}

    async def _search(self, client: Any, index_name: str, query: dict[str, Any], from_: int, size: int) -> Any:
        field, value = next(iter(query["term"].items()))
        hits = [
            {"_index": index_name, "_id": doc_id, "_score": 1.0, "_source": source}
            for doc_id, source in client.store.get(index_name, {}).items()
            if source.get(field) == value
        ]
        return {"took": 1, "hits": {"total": {"value": len(hits)}, "hits": hits[from_ : from_ + size]}}


@pytest.fixture
def settings() -> Settings:
    """Settings with in-memory clients and one broken entry of each kind."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        clients={
            "test": {"backend": "memory", "endpoint": "http://localhost:9200"},
            "logs": {"backend": "memory", "endpoint": "http://logs.local:9200", "timeout_ms": 500},
            "unreachable": {"backend": "memory", "endpoint": "http://down.local:9200", "extra": {"unreachable": True}},
            "no_endpoint": {"backend": "memory", "endpoint": ""},
            "bad_backend": {"backend": "solr", "endpoint": "http://localhost:8983"},
        },
    )


@pytest.fixture
def registry(settings: Settings) -> ClientRegistry:
    return ClientRegistry(settings, backends={"memory": InMemoryClient})


@pytest.fixture
def user_mapping() -> dict[str, Any]:
    return {"mappings": {"properties": {"userid": {"type": "keyword"}}}}


@pytest.fixture
def memory_backend() -> type[InMemoryClient]:
    return InMemoryClient


"""Operations facade — Forward requests to a client by configuration name.

Each function resolves the client registered under *config_name* and
forwards the call. The registry comes from the ``registry`` argument when
given, else from the process-wide slot (see ``searchconn.deps``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from searchconn.clients.base.client import SearchClient, SearchResult
from searchconn.clients.base.registry import ClientRegistry
from searchconn.deps import get_registry
from searchconn.models.document import Document


async def get_client(config_name: str, registry: ClientRegistry | None = None) -> SearchClient:
    """Resolve the client registered under *config_name*.

    Raises:
        NotRegisteredError: If no client is registered under that name.
    """
    return await (registry or get_registry()).get(config_name)


async def create_index(
    config_name: str,
    index_name: str,
    mapping: Mapping[str, Any] | str | None = None,
    *,
    registry: ClientRegistry | None = None,
) -> None:
    client = await get_client(config_name, registry)
    await client.create_index(index_name, mapping)


async def insert_doc(
    config_name: str,
    index_name: str,
    doc_id: str,
    payload: Any,
    *,
    refresh: bool | str | None = None,
    registry: ClientRegistry | None = None,
) -> str:
    client = await get_client(config_name, registry)
    return await client.insert_doc(index_name, doc_id, payload, refresh=refresh)


async def get_doc(
    config_name: str,
    index_name: str,
    doc_id: str,
    *,
    registry: ClientRegistry | None = None,
) -> Document:
    client = await get_client(config_name, registry)
    return await client.get_doc(index_name, doc_id)


async def delete_doc(
    config_name: str,
    index_name: str,
    doc_id: str,
    *,
    registry: ClientRegistry | None = None,
) -> bool:
    client = await get_client(config_name, registry)
    return await client.delete_doc(index_name, doc_id)


async def term_search(
    config_name: str,
    index_name: str,
    field: str,
    value: Any,
    *,
    from_: int = 0,
    size: int = 10,
    registry: ClientRegistry | None = None,
) -> SearchResult:
    """Exact-match search on one field, first page of ten by default.

    For other queries, take ``(await get_client(name)).connection`` and use
    the backend library directly.
    """
    client = await get_client(config_name, registry)
    return await client.term_search(index_name, field, value, from_=from_, size=size)

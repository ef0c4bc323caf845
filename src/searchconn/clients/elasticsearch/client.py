"""Elasticsearch client — Handle over the ``elasticsearch`` async client (v8+).

The wrapped ``AsyncElasticsearch`` keeps a pooled, persistent connection
and is safe to share between tasks.
"""

from __future__ import annotations

from typing import Any

from elasticsearch import AsyncElasticsearch, NotFoundError

from searchconn.clients.base.client import SearchClient
from searchconn.exceptions import DocumentNotFoundError


class ElasticsearchClient(SearchClient):
    """Search client for Elasticsearch (v8+).

    Index bodies and documents are passed with the v8 keyword API
    (``mappings=``, ``document=``, ``query=``).
    """

    @property
    def name(self) -> str:
        return "elasticsearch"

    def _build_client(self) -> AsyncElasticsearch:
        client_kwargs: dict[str, Any] = {
            "hosts": [self.endpoint],
            "request_timeout": self.timeout,
        }
        if self.username:
            client_kwargs["basic_auth"] = (self.username, self.password)
        # TLS options are rejected for plain http nodes.
        if self.endpoint.startswith("https"):
            client_kwargs["verify_certs"] = self._verify_certs

        client_kwargs.update(self._extra_kwargs)
        return AsyncElasticsearch(**client_kwargs)

    async def _index_exists(self, client: AsyncElasticsearch, index_name: str) -> bool:
        return bool(await client.indices.exists(index=index_name))

    async def _create_index(self, client: AsyncElasticsearch, index_name: str, body: dict[str, Any]) -> Any:
        return await client.indices.create(index=index_name, **body)

    async def _index_doc(
        self,
        client: AsyncElasticsearch,
        index_name: str,
        doc_id: str,
        document: dict[str, Any],
        refresh: bool | str | None,
    ) -> Any:
        kwargs: dict[str, Any] = {"index": index_name, "id": doc_id, "document": document}
        if refresh is not None:
            kwargs["refresh"] = refresh
        return await client.index(**kwargs)

    async def _get_doc(self, client: AsyncElasticsearch, index_name: str, doc_id: str) -> Any:
        try:
            return await client.get(index=index_name, id=doc_id)
        except NotFoundError as e:
            raise DocumentNotFoundError(f"Document '{doc_id}' not found in '{index_name}'.") from e

    async def _delete_doc(self, client: AsyncElasticsearch, index_name: str, doc_id: str) -> Any:
        try:
            return await client.delete(index=index_name, id=doc_id, refresh="wait_for")
        except NotFoundError as e:
            raise DocumentNotFoundError(f"Document '{doc_id}' not found in '{index_name}'.") from e

    async def _search(
        self,
        client: AsyncElasticsearch,
        index_name: str,
        query: dict[str, Any],
        from_: int,
        size: int,
    ) -> Any:
        return await client.search(index=index_name, query=query, from_=from_, size=size)

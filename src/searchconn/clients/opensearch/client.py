"""OpenSearch client — Handle over the ``opensearch-py`` async client (v2+).

OpenSearch is an AWS-maintained fork of Elasticsearch with a compatible
query DSL and API surface. ``opensearch-py`` takes request bodies through
``body=`` rather than the Elasticsearch v8 keyword arguments.
"""

from __future__ import annotations

from typing import Any

from opensearchpy import AsyncOpenSearch, NotFoundError

from searchconn.clients.base.client import SearchClient
from searchconn.exceptions import DocumentNotFoundError


class OpenSearchClient(SearchClient):
    """Search client for OpenSearch (v2+)."""

    @property
    def name(self) -> str:
        return "opensearch"

    def _build_client(self) -> AsyncOpenSearch:
        client_kwargs: dict[str, Any] = {
            "hosts": [self.endpoint],
            "timeout": self.timeout,
            "verify_certs": self._verify_certs,
            "ssl_show_warn": False,
        }
        if self.username:
            client_kwargs["http_auth"] = (self.username, self.password)

        client_kwargs.update(self._extra_kwargs)
        return AsyncOpenSearch(**client_kwargs)

    async def _index_exists(self, client: AsyncOpenSearch, index_name: str) -> bool:
        return bool(await client.indices.exists(index=index_name))

    async def _create_index(self, client: AsyncOpenSearch, index_name: str, body: dict[str, Any]) -> Any:
        return await client.indices.create(index=index_name, body=body or None)

    async def _index_doc(
        self,
        client: AsyncOpenSearch,
        index_name: str,
        doc_id: str,
        document: dict[str, Any],
        refresh: bool | str | None,
    ) -> Any:
        kwargs: dict[str, Any] = {"index": index_name, "id": doc_id, "body": document}
        if refresh is not None:
            kwargs["refresh"] = refresh
        return await client.index(**kwargs)

    async def _get_doc(self, client: AsyncOpenSearch, index_name: str, doc_id: str) -> Any:
        try:
            return await client.get(index=index_name, id=doc_id)
        except NotFoundError as e:
            raise DocumentNotFoundError(f"Document '{doc_id}' not found in '{index_name}'.") from e

    async def _delete_doc(self, client: AsyncOpenSearch, index_name: str, doc_id: str) -> Any:
        try:
            return await client.delete(index=index_name, id=doc_id, refresh="wait_for")
        except NotFoundError as e:
            raise DocumentNotFoundError(f"Document '{doc_id}' not found in '{index_name}'.") from e

    async def _search(
        self,
        client: AsyncOpenSearch,
        index_name: str,
        query: dict[str, Any],
        from_: int,
        size: int,
    ) -> Any:
        body = {"query": query, "from": from_, "size": size}
        return await client.search(index=index_name, body=body)

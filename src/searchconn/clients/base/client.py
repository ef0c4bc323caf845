"""Base search client — Abstract handle over one search backend connection.

A ``SearchClient`` owns one configured connection to a backend endpoint and
forwards a small set of operations to the wrapped client library:

  1. Creating an index (after an existence check)
  2. Inserting, fetching and deleting documents by id
  3. Running an exact-match ``term`` search
  4. Reporting health status

Handles are published only once they are live: use ``SearchClient.open()``,
which builds the library client and pings the endpoint before returning.
Concrete backends implement the private primitives; the public operations,
error translation and result handling live here.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Self, TypeVar

from pydantic import BaseModel, Field, ValidationError

from searchconn.exceptions import (
    AlreadyExistsError,
    BackendError,
    ClientError,
    ConfigError,
    ConnectionError,
    DeleteError,
    DocumentNotFoundError,
    InvalidPayloadError,
)
from searchconn.models.document import Document
from searchconn.models.payload import as_payload, load_json_object

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)

# Top-level sections accepted in a create-index body.
INDEX_BODY_SECTIONS = ("mappings", "settings", "aliases")


class ClientHealth(BaseModel):
    """Health status of a search client."""

    status: str = Field(description="Health status: healthy, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of the health check ping in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of the health check")
    message: str | None = Field(default=None, description="Additional health message")


class SearchResult(BaseModel):
    """Hits returned by a search request."""

    total_hits: int = Field(default=0, description="Total number of matching documents")
    hits: list[dict[str, Any]] = Field(default_factory=list, description="Raw hit dicts")
    took_ms: int = Field(default=0, description="Backend query execution time in ms")

    def sources(self) -> list[dict[str, Any]]:
        """Return the ``_source`` body of every hit."""
        return [hit.get("_source") or {} for hit in self.hits]

    def each(self, model: type[_M]) -> list[_M]:
        """Validate every hit source into *model*, skipping hits that do not fit."""
        items: list[_M] = []
        for source in self.sources():
            try:
                items.append(model.model_validate(source))
            except ValidationError:
                logger.debug("Skipping hit that does not match %s", model.__name__)
        return items

    @classmethod
    def from_response(cls, response: Mapping[str, Any]) -> SearchResult:
        hits = response.get("hits", {})
        total = hits.get("total", 0)
        if isinstance(total, Mapping):
            total = total.get("value", 0)
        return cls(
            total_hits=int(total),
            hits=[dict(hit) for hit in hits.get("hits", [])],
            took_ms=int(response.get("took", 0)),
        )


def response_body(response: Any) -> Mapping[str, Any]:
    """Unwrap a library response object to its JSON body."""
    return getattr(response, "body", response)


def index_body(mapping: Mapping[str, Any] | str | None) -> dict[str, Any]:
    """Normalize a create-index mapping specification.

    Args:
        mapping: A dict or JSON string with ``mappings``/``settings``/``aliases``
            sections, or None for an index with backend defaults.

    Raises:
        InvalidPayloadError: If the specification is not a JSON object or has
            unknown top-level sections.
    """
    if mapping is None:
        return {}
    body = load_json_object(mapping, "index mapping") if isinstance(mapping, str) else dict(mapping)
    unknown = sorted(set(body) - set(INDEX_BODY_SECTIONS))
    if unknown:
        raise InvalidPayloadError(f"Unknown index body sections: {unknown}")
    return body


class SearchClient(ABC):
    """Abstract base class for search backend clients.

    Args:
        endpoint: Backend URL, e.g. ``"http://127.0.0.1:9200"``.
        username: HTTP basic-auth username; empty disables authentication.
        password: HTTP basic-auth password.
        timeout_ms: Per-request timeout in milliseconds, ping included.
        verify_certs: Whether to verify TLS certificates.
        **kwargs: Additional keyword arguments forwarded to the library client.

    Raises:
        ConfigError: If *endpoint* is empty.
    """

    def __init__(
        self,
        endpoint: str,
        username: str = "",
        password: str = "",
        timeout_ms: int = 3000,
        verify_certs: bool = True,
        **kwargs: Any,
    ) -> None:
        if not endpoint:
            raise ConfigError("Endpoint is empty.")
        self.endpoint = endpoint
        self.username = username
        self.password = password
        self.timeout_ms = timeout_ms
        self._verify_certs = verify_certs
        self._extra_kwargs = kwargs
        self._client: Any = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., 'elasticsearch', 'opensearch')."""

    @property
    def timeout(self) -> float:
        """Request timeout in seconds."""
        return self.timeout_ms / 1000

    @property
    def closed(self) -> bool:
        return self._client is None

    @property
    def connection(self) -> Any:
        """The wrapped library client, for requests this class does not forward."""
        return self._require_client()

    @classmethod
    async def open(
        cls,
        endpoint: str,
        username: str = "",
        password: str = "",
        timeout_ms: int = 3000,
        verify_certs: bool = True,
        **kwargs: Any,
    ) -> Self:
        """Create a client and verify the backend is reachable.

        Returns:
            A live client.

        Raises:
            ConfigError: If *endpoint* is empty.
            ConnectionError: If the client cannot be built or the ping fails.
        """
        client = cls(
            endpoint,
            username=username,
            password=password,
            timeout_ms=timeout_ms,
            verify_certs=verify_certs,
            **kwargs,
        )
        await client.initialize()
        return client

    async def initialize(self) -> None:
        """Build the library client and ping the endpoint.

        The library client is kept only if the ping succeeds; otherwise its
        transport is released before ``ConnectionError`` is raised. A
        transport that fails to close is logged, not raised. Cancellation
        during the ping also releases the transport.
        """
        if self._client is not None:
            return
        try:
            client = self._build_client()
        except Exception as e:
            raise ConnectionError(f"Failed to create {self.name} client for {self.endpoint}: {e}") from e

        try:
            alive = await client.ping()
        except Exception as e:
            await self._discard(client)
            raise ConnectionError(f"Failed to ping {self.name} at {self.endpoint}: {e}") from e
        except BaseException:
            await self._discard(client)
            raise
        if not alive:
            await self._discard(client)
            raise ConnectionError(f"Ping to {self.name} at {self.endpoint} did not succeed.")

        self._client = client
        logger.info("Connected to %s at %s", self.name, self.endpoint)

    async def _discard(self, client: Any) -> None:
        try:
            await client.close()
        except Exception:
            logger.warning("Error closing unused %s client for %s", self.name, self.endpoint, exc_info=True)

    async def close(self) -> None:
        """Release the connection. Closing a closed client does nothing."""
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.close()
        logger.info("Closed %s client for %s", self.name, self.endpoint)

    def _require_client(self) -> Any:
        if self._client is None:
            raise ConnectionError(f"{self.name} client for {self.endpoint} is not connected.")
        return self._client

    # ── Operations ───────────────────────────────────────────────────────

    async def create_index(self, index_name: str, mapping: Mapping[str, Any] | str | None = None) -> None:
        """Create an index with the given mapping specification.

        The existence check and the creation are two requests, so two
        concurrent callers may both pass the check.

        Raises:
            AlreadyExistsError: If the index is already present.
            BackendError: If either request fails.
        """
        body = index_body(mapping)
        client = self._require_client()
        try:
            exists = await self._index_exists(client, index_name)
        except Exception as e:
            raise BackendError(f"Failed to check index '{index_name}': {e}") from e
        if exists:
            raise AlreadyExistsError(f"Index '{index_name}' already exists.")

        try:
            await self._create_index(client, index_name, body)
        except Exception as e:
            raise BackendError(f"Failed to create index '{index_name}': {e}") from e
        logger.info("Created index %s on %s", index_name, self.endpoint)

    async def insert_doc(
        self,
        index_name: str,
        doc_id: str,
        payload: Any,
        *,
        refresh: bool | str | None = None,
    ) -> str:
        """Index a document under an explicit id.

        No refresh is requested unless *refresh* is given, so the write may
        not be visible to an immediate search.

        Args:
            index_name: Target index.
            doc_id: Document id.
            payload: JSON ``bytes``/``str``, a mapping, a pydantic model or a ``Payload``.
            refresh: Optional refresh policy (``True``, ``False`` or ``"wait_for"``).

        Returns:
            The id the backend stored the document under.
        """
        document = as_payload(payload).to_document()
        client = self._require_client()
        try:
            response = await self._index_doc(client, index_name, doc_id, document, refresh)
        except Exception as e:
            raise BackendError(f"Failed to index document '{doc_id}' into '{index_name}': {e}") from e
        return str(response_body(response)["_id"])

    async def get_doc(self, index_name: str, doc_id: str) -> Document:
        """Retrieve a single document by id.

        Raises:
            DocumentNotFoundError: If the document or index does not exist.
            BackendError: If the request fails otherwise.
        """
        client = self._require_client()
        try:
            response = await self._get_doc(client, index_name, doc_id)
        except ClientError:
            raise
        except Exception as e:
            raise BackendError(f"Failed to fetch document '{doc_id}' from '{index_name}': {e}") from e
        return Document.from_response(response_body(response))

    async def delete_doc(self, index_name: str, doc_id: str) -> bool:
        """Delete a document, waiting for the deletion to become visible.

        Returns:
            True when the backend reports the document as deleted.

        Raises:
            DocumentNotFoundError: If there was no such document.
            DeleteError: If the backend answered with any other result.
            BackendError: If the request fails.
        """
        client = self._require_client()
        try:
            response = await self._delete_doc(client, index_name, doc_id)
        except ClientError:
            raise
        except Exception as e:
            raise BackendError(f"Failed to delete document '{doc_id}' from '{index_name}': {e}") from e

        result = response_body(response).get("result")
        if result == "deleted":
            return True
        if result == "not_found":
            raise DocumentNotFoundError(f"Document '{doc_id}' not found in '{index_name}'.")
        raise DeleteError(f"Delete of document '{doc_id}' from '{index_name}' returned result '{result}'.")

    async def term_search(
        self,
        index_name: str,
        field: str,
        value: Any,
        *,
        from_: int = 0,
        size: int = 10,
    ) -> SearchResult:
        """Run an exact-match ``term`` query on a single field.

        Other query shapes go through ``connection`` directly.
        """
        client = self._require_client()
        query = {"term": {field: value}}
        try:
            response = await self._search(client, index_name, query, from_, size)
        except Exception as e:
            raise BackendError(f"Term search on '{index_name}' failed: {e}") from e
        return SearchResult.from_response(response_body(response))

    async def health_check(self) -> ClientHealth:
        """Ping the backend and report its health."""
        if self._client is None:
            return ClientHealth(status="unhealthy", message="Client not connected")

        try:
            start = time.monotonic()
            alive = await self._client.ping()
            latency_ms = int((time.monotonic() - start) * 1000)
        except Exception as e:
            return ClientHealth(status="unhealthy", message=str(e))

        return ClientHealth(
            status="healthy" if alive else "unhealthy",
            latency_ms=latency_ms,
            last_check=datetime.now(UTC).isoformat(),
            message=f"{self.name} at {self.endpoint}",
        )

    # ── Backend primitives ───────────────────────────────────────────────

    @abstractmethod
    def _build_client(self) -> Any:
        """Construct the library client from this handle's settings."""

    @abstractmethod
    async def _index_exists(self, client: Any, index_name: str) -> bool:
        """Return whether *index_name* exists."""

    @abstractmethod
    async def _create_index(self, client: Any, index_name: str, body: dict[str, Any]) -> Any:
        """Create *index_name* from a normalized index body."""

    @abstractmethod
    async def _index_doc(
        self,
        client: Any,
        index_name: str,
        doc_id: str,
        document: dict[str, Any],
        refresh: bool | str | None,
    ) -> Any:
        """Index *document* under *doc_id*."""

    @abstractmethod
    async def _get_doc(self, client: Any, index_name: str, doc_id: str) -> Any:
        """Fetch a document. Must raise ``DocumentNotFoundError`` when it is missing."""

    @abstractmethod
    async def _delete_doc(self, client: Any, index_name: str, doc_id: str) -> Any:
        """Delete a document with ``refresh=wait_for``.

        Must raise ``DocumentNotFoundError`` when it is missing.
        """

    @abstractmethod
    async def _search(self, client: Any, index_name: str, query: dict[str, Any], from_: int, size: int) -> Any:
        """Run *query* with pagination."""

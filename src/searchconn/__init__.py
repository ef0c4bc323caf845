"""searchconn — Named, pooled connections to Elasticsearch and OpenSearch.

Quick start::

    from searchconn import Settings, open_registry, insert_doc, get_doc

    settings = Settings.from_yaml("searchconn.yaml")

    async with open_registry(settings, "users"):
        await insert_doc("users", "idx1", "1", {"userid": "user01"})
        doc = await get_doc("users", "idx1", "1")

Call ``setup_logging(settings.observability)`` once at startup to render the
library's log records. ``searchconn.models.example`` holds a sample index
mapping (``EXAMPLE_USER_MAPPING``) and matching document model
(``ExampleUser``) for use with ``create_index`` and ``Document.parse``.
"""

from searchconn.clients.base import ClientHealth, ClientRegistry, SearchClient, SearchResult
from searchconn.config.settings import ClientConfig, Settings
from searchconn.deps import get_registry, open_registry, set_registry
from searchconn.exceptions import (
    AlreadyExistsError,
    BackendError,
    ClientError,
    ConfigError,
    ConnectionError,
    DeleteError,
    DocumentNotFoundError,
    InvalidPayloadError,
    NotRegisteredError,
)
from searchconn.models.document import Document
from searchconn.models.payload import Payload, SerializedPayload, StructuredPayload, as_payload
from searchconn.observability.logging import setup_logging
from searchconn.operations import create_index, delete_doc, get_client, get_doc, insert_doc, term_search

__version__ = "0.1.0"

__all__ = [
    "AlreadyExistsError",
    "BackendError",
    "ClientConfig",
    "ClientError",
    "ClientHealth",
    "ClientRegistry",
    "ConfigError",
    "ConnectionError",
    "DeleteError",
    "Document",
    "DocumentNotFoundError",
    "InvalidPayloadError",
    "NotRegisteredError",
    "Payload",
    "SearchClient",
    "SearchResult",
    "SerializedPayload",
    "Settings",
    "StructuredPayload",
    "__version__",
    "as_payload",
    "create_index",
    "delete_doc",
    "get_client",
    "get_doc",
    "get_registry",
    "insert_doc",
    "open_registry",
    "set_registry",
    "setup_logging",
    "term_search",
]

"""Base client interface — Abstract handle and registry for search backends."""

from searchconn.clients.base.client import ClientHealth, SearchClient, SearchResult
from searchconn.clients.base.registry import ClientRegistry

__all__ = ["ClientHealth", "ClientRegistry", "SearchClient", "SearchResult"]

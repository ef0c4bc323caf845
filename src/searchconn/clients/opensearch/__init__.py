from searchconn.clients.opensearch.client import OpenSearchClient

__all__ = ["OpenSearchClient"]

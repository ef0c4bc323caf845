from searchconn.clients.elasticsearch.client import ElasticsearchClient

__all__ = ["ElasticsearchClient"]

"""Search client layer — Handles for named search backend connections.

Built-in backends:
  - elasticsearch: Elasticsearch v8+ (``elasticsearch`` async client)
  - opensearch: OpenSearch v2+ (``opensearch-py`` async client)

Subclass ``SearchClient`` and register it on a ``ClientRegistry`` to add
another backend.
"""

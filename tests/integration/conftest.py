"""Integration test fixtures — Docker-based search backends.

Expects backends to be running, e.g.:
    docker run -d -p 9200:9200 -e discovery.type=single-node -e xpack.security.enabled=false elasticsearch:8.15.0
    docker run -d -p 9201:9200 -e discovery.type=single-node -e DISABLE_SECURITY_PLUGIN=true opensearchproject/opensearch:2

Tests skip when a backend is not reachable.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Iterator

import httpx
import pytest

from searchconn.config.settings import Settings

ELASTICSEARCH_HOST = "http://localhost:9200"
OPENSEARCH_HOST = "http://localhost:9201"


def _wait_for_service(url: str, timeout: float = 60.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=10)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


def _delete_index(host: str, index: str) -> None:
    httpx.delete(f"{host}/{index}", params={"ignore_unavailable": "true"}, timeout=30)


@pytest.fixture(scope="session")
def elasticsearch_ready() -> str:
    """Ensure Elasticsearch is running."""
    if not _wait_for_service(ELASTICSEARCH_HOST):
        pytest.skip(f"Elasticsearch not available at {ELASTICSEARCH_HOST}")
    return ELASTICSEARCH_HOST


@pytest.fixture(scope="session")
def opensearch_ready() -> str:
    """Ensure OpenSearch is running."""
    if not _wait_for_service(OPENSEARCH_HOST):
        pytest.skip(f"OpenSearch not available at {OPENSEARCH_HOST}")
    return OPENSEARCH_HOST


@pytest.fixture
def index_name(request: pytest.FixtureRequest) -> Iterator[str]:
    """A fresh index name, deleted again after the test."""
    name = f"searchconn-test-{uuid.uuid4().hex[:8]}"
    yield name
    for fixture in ("elasticsearch_ready", "opensearch_ready"):
        if fixture in request.fixturenames:
            _delete_index(request.getfixturevalue(fixture), name)


@pytest.fixture
def backend_settings(request: pytest.FixtureRequest) -> Settings:
    clients = {}
    if "elasticsearch_ready" in request.fixturenames:
        clients["test"] = {"backend": "elasticsearch", "endpoint": request.getfixturevalue("elasticsearch_ready")}
    if "opensearch_ready" in request.fixturenames:
        clients["test"] = {"backend": "opensearch", "endpoint": request.getfixturevalue("opensearch_ready")}
    return Settings(_env_file=None, clients=clients)  # type: ignore[call-arg]

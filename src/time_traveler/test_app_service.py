from __future__ import annotations

import logging
import random
from typing import Iterable, List

import pytest
from fastapi.testclient import TestClient

from . import app as app_module
from .content_generator import ContentSynthesizer
from .models import ArticleSummary, SearchHit
from .synthesis_cache import SynthesisCache
from .wikipedia_importer import WikipediaLookupError


class _StubWikipedia:
    def __init__(self, hits: List[SearchHit], summary: ArticleSummary | None = None, fail: bool = False):
        self.hits = hits
        self.summary = summary
        self.fail = fail
        self.search_calls = 0
        self.topics = ["Ancient Rome", "Cold War"]

    def search(self, query: str, limit: int = 10) -> List[SearchHit]:
        self.search_calls += 1
        if self.fail:
            raise WikipediaLookupError("Failed to reach the Wikipedia API")
        return self.hits[:limit]

    def summarize(self, title: str) -> ArticleSummary | None:
        return self.summary

    def suggest(self, query: str) -> List[str]:
        if self.fail:
            raise WikipediaLookupError("Failed to reach the Wikipedia API")
        return [hit.title for hit in self.hits]

    def trending_topics(self) -> List[str]:
        return list(self.topics)

    def random_article(self) -> ArticleSummary | None:
        if self.fail:
            raise WikipediaLookupError("Failed to reach the Wikipedia API")
        return self.summary


def _install(client: TestClient, stub: _StubWikipedia) -> None:
    client.app.state.wikipedia = stub
    client.app.state.synthesizer = ContentSynthesizer(stub, SynthesisCache(capacity=4), rng=random.Random(0))


@pytest.fixture
def client() -> Iterable[TestClient]:
    with TestClient(app_module.app, raise_server_exceptions=False) as test_client:
        yield test_client


def test_health_endpoint_returns_uptime_and_version(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "uptime_seconds" in data
    assert data["version"] == app_module.app.version
    assert "X-Request-ID" in response.headers


def test_request_id_header_is_reused_from_client(client: TestClient) -> None:
    response = client.get("/health", headers={"X-Request-ID": "test-request-123"})
    assert response.headers["X-Request-ID"] == "test-request-123"


def test_startup_builds_synthesizer(client: TestClient) -> None:
    synthesizer = client.app.state.synthesizer
    assert isinstance(synthesizer, ContentSynthesizer)
    assert synthesizer.cache.capacity == app_module.settings.cache_capacity


def test_synthesize_endpoint_returns_learning_unit(client: TestClient) -> None:
    stub = _StubWikipedia(
        hits=[SearchHit(page_id="1", title="Age of Exploration")],
        summary=ArticleSummary(
            title="Age of Exploration",
            extract="European voyages of discovery ran from 1418 to 1620.",
        ),
    )
    _install(client, stub)

    response = client.post("/api/synthesize", json={"query": "Age of Exploration"})
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["success"] is True
    event = data["event"]
    assert event["id"] == "age-of-exploration"
    assert event["category"] == "exploration"
    assert event["start_year"] == 1418
    assert event["end_year"] == 1620
    assert event["timeline"][0]["type"] == "milestone"
    assert 2 <= len(event["quiz"]) <= 3

    assert response.headers["X-Synthesis-Source"] == "lookup"

    repeat = client.post("/api/synthesize", json={"query": "age of exploration "})
    assert repeat.headers["X-Synthesis-Source"] == "cache"
    assert repeat.json()["cached"] is True
    assert stub.search_calls == 1


def test_synthesize_endpoint_reports_fallback(client: TestClient) -> None:
    _install(client, _StubWikipedia(hits=[]))

    response = client.post("/api/synthesize", json={"query": "xyzxyz-no-such-topic"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "No historical information found"
    assert response.headers["X-Synthesis-Source"] == "fallback"
    assert data["event"]["period"] == "1000 AD - 1500 AD"
    assert len(data["event"]["timeline"]) == 3


def test_synthesize_endpoint_rejects_blank_query(client: TestClient) -> None:
    response = client.post("/api/synthesize", json={"query": "   "})
    assert response.status_code == 422


def test_search_endpoint_caps_limit(client: TestClient) -> None:
    hits = [SearchHit(page_id=str(i), title=f"Topic {i}") for i in range(60)]
    _install(client, _StubWikipedia(hits=hits))

    response = client.get("/api/search", params={"q": "topic", "limit": 100})
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == app_module.settings.max_search_results
    assert data["results"][0]["title"] == "Topic 0"


def test_search_endpoint_maps_lookup_failure_to_bad_gateway(client: TestClient) -> None:
    _install(client, _StubWikipedia(hits=[], fail=True))
    response = client.get("/api/search", params={"q": "rome"})
    assert response.status_code == 502


def test_suggestions_endpoint(client: TestClient) -> None:
    _install(client, _StubWikipedia(hits=[SearchHit(page_id="1", title="Roman Empire")]))
    response = client.get("/api/suggestions", params={"q": "rom"})
    assert response.status_code == 200
    assert response.json()["suggestions"] == ["Roman Empire"]


def test_unhandled_exception_returns_request_id(client: TestClient) -> None:
    if not any(
        getattr(route, "path", None) == "/_test-error"
        for route in app_module.app.router.routes
    ):
        @app_module.app.get("/_test-error")
        async def _raise_error():  # pragma: no cover - used only for tests
            raise RuntimeError("boom")

    response = client.get("/_test-error")
    assert response.status_code == 500
    data = response.json()
    assert "request_id" in data
    assert response.headers["X-Request-ID"] == data["request_id"]


def test_request_log_carries_synthesis_source(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    _install(client, _StubWikipedia(hits=[]))
    with caplog.at_level(logging.INFO, logger="time_traveler.app"):
        client.post("/api/synthesize", json={"query": "Atlantis"})

    completed = [record for record in caplog.records if record.getMessage() == "Request completed"]
    assert completed
    assert completed[-1].synthesis_source == "fallback"


def test_trending_endpoint(client: TestClient) -> None:
    _install(client, _StubWikipedia(hits=[]))
    response = client.get("/api/trending")
    assert response.status_code == 200
    assert response.json() == {"topics": ["Ancient Rome", "Cold War"]}


def test_random_endpoint_returns_summary(client: TestClient) -> None:
    summary = ArticleSummary(title="Hittites", extract="An Anatolian people of the Bronze Age.")
    _install(client, _StubWikipedia(hits=[], summary=summary))
    response = client.get("/api/random")
    assert response.status_code == 200
    assert response.json()["title"] == "Hittites"


def test_random_endpoint_without_article(client: TestClient) -> None:
    _install(client, _StubWikipedia(hits=[]))
    assert client.get("/api/random").status_code == 404


def test_random_endpoint_maps_lookup_failure_to_bad_gateway(client: TestClient) -> None:
    _install(client, _StubWikipedia(hits=[], fail=True))
    assert client.get("/api/random").status_code == 502

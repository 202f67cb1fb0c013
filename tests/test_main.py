"""Tests for URL Shortener Service HTTP endpoints."""

import asyncio

from fastapi.testclient import TestClient

from shorturls.core.registry import Registry, get_registry
from shorturls.main import app


def create(client, **payload):
    return client.post("/shorturls", json=payload)


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_check(self, client):
        """Test health check returns healthy status."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "time" in data


class TestCreateShortURL:
    """Tests for POST /shorturls endpoint."""

    def test_create_short_url_success(self, client):
        response = create(client, url="https://a.com", validity=60)
        assert response.status_code == 201
        data = response.json()
        code = data["shortLink"].rsplit("/", 1)[-1]
        assert data["shortLink"] == f"http://localhost:3000/{code}"
        assert len(code) == 8
        assert "expiry" in data

    def test_create_with_custom_code(self, client):
        response = create(client, url="https://a.com", shortcode="custom1")
        assert response.status_code == 201
        assert response.json()["shortLink"].endswith("/custom1")

    def test_missing_url(self, client):
        response = create(client, validity=10)
        assert response.status_code == 400
        assert response.json() == {"error": "Bad Request", "message": "URL is required"}

    def test_invalid_json(self, client):
        response = client.post(
            "/shorturls",
            content="not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_malformed_url(self, client):
        response = create(client, url="https://")
        assert response.status_code == 400

    def test_custom_code_too_short(self, client, registry):
        response = create(client, url="b.com", shortcode="abc")
        assert response.status_code == 400
        assert "4-20" in response.json()["message"]
        assert len(registry) == 0

    def test_custom_code_invalid_chars(self, client):
        response = create(client, url="b.com", shortcode="abc-123")
        assert response.status_code == 400
        assert "alphanumeric" in response.json()["message"]

    def test_duplicate_custom_code(self, client):
        assert create(client, url="https://a.com", shortcode="dupe1").status_code == 201
        response = create(client, url="https://b.com", shortcode="dupe1")
        assert response.status_code == 409
        assert "already exists" in response.json()["message"]


class TestRedirectEndpoint:
    """Tests for GET /{shortcode} endpoint."""

    def test_redirect_success(self, client):
        create(client, url="example.com", shortcode="redir1")
        response = client.get("/redir1", follow_redirects=False)
        assert response.status_code == 301
        assert response.headers["location"] == "https://example.com"

    def test_redirect_not_found(self, client):
        response = client.get("/nonexistent", follow_redirects=False)
        assert response.status_code == 404
        assert response.json()["message"] == "Short URL not found or expired"

    def test_redirect_expired(self, client, clock):
        create(client, url="https://a.com", validity=60, shortcode="soon1")
        clock.advance(minutes=61)
        response = client.get("/soon1", follow_redirects=False)
        assert response.status_code == 404

    def test_redirect_records_clicks(self, client):
        create(client, url="https://a.com", shortcode="clicky")
        client.get("/clicky", follow_redirects=False)
        client.get(
            "/clicky",
            headers={"Referer": "https://news.example.com"},
            follow_redirects=False,
        )

        data = client.get("/shorturls/clicky").json()
        assert data["totalClicks"] == 2
        assert [c["source"] for c in data["clicks"]] == [
            "direct",
            "https://news.example.com",
        ]
        assert all(c["location"] == "unknown" for c in data["clicks"])


class TestStatsEndpoint:
    """Tests for GET /shorturls/{shortcode} endpoint."""

    def test_stats_for_new_url(self, client):
        create(client, url="https://a.com", shortcode="fresh1")
        response = client.get("/shorturls/fresh1")
        assert response.status_code == 200
        data = response.json()
        assert data["totalClicks"] == 0
        assert data["clicks"] == []
        assert "createdAt" in data
        assert "expiresAt" in data

    def test_stats_not_found(self, client):
        response = client.get("/shorturls/nonexistent")
        assert response.status_code == 404
        assert response.json()["error"] == "Not Found"


def test_lifespan_builds_registry():
    """Test the default lifespan attaches a fresh registry."""
    with TestClient(app) as client:
        assert isinstance(app.state.registry, Registry)
        response = client.post("/shorturls", json={"url": "https://a.com"})
        assert response.status_code == 201


class TestCreateLimits:
    """Tests for create requests the registry cannot satisfy."""

    def test_validity_too_large(self, client, registry):
        response = create(client, url="https://a.com", validity=5_000_000_000)
        assert response.status_code == 400
        assert "Validity" in response.json()["message"]
        assert len(registry) == 0

    def test_generation_exhausted(self, client, clock):
        exhausted = Registry(
            clock=clock,
            code_generator=lambda: "samecode",
            max_generation_attempts=2,
        )
        app.dependency_overrides[get_registry] = lambda: exhausted

        assert create(client, url="https://a.com").status_code == 201
        response = create(client, url="https://b.com")
        assert response.status_code == 503
        assert response.json()["error"] == "Service Unavailable"
        assert len(exhausted) == 1


class LoopRecordingRegistry(Registry):
    """Registry noting whether each call ran on an event loop thread."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.calls_on_loop = []

    def _note_loop(self):
        try:
            asyncio.get_running_loop()
            self.calls_on_loop.append(True)
        except RuntimeError:
            self.calls_on_loop.append(False)

    def create(self, *args, **kwargs):
        self._note_loop()
        return super().create(*args, **kwargs)

    def resolve(self, code):
        self._note_loop()
        return super().resolve(code)

    def stats(self, code):
        self._note_loop()
        return super().stats(code)


def test_registry_calls_run_in_threadpool(client, clock):
    """Test route handlers take the registry lock off the event loop."""
    recording = LoopRecordingRegistry(clock=clock)
    app.dependency_overrides[get_registry] = lambda: recording

    create(client, url="https://a.com", shortcode="pooled1")
    client.get("/pooled1", follow_redirects=False)
    client.get("/shorturls/pooled1")

    assert recording.calls_on_loop == [False, False, False]

"""Tests for the FastAPI routes."""

from fastapi.testclient import TestClient

from crp.api import create_app
from crp.errors import RateLimited, Unreachable
from fakes import CountingStore, FakeReddit


REGISTER_BODY = {
    "redditId": "abc123",
    "title": "Massive pothole in Janakpuri near District Centre",
    "body": "caused accidents",
    "author": "delhi_resident_99",
    "permalink": "https://www.reddit.com/r/delhi/comments/abc123/",
    "createdAt": "2026-01-15T10:30:00Z",
    "citizenEmail": "citizen@example.com",
}


def _client(resolver_factory, settings, **overrides):
    resolver, parts = resolver_factory(**overrides)
    return TestClient(create_app(resolver=resolver, settings=settings)), parts


def test_health(resolver_factory, settings):
    client, _ = _client(resolver_factory, settings)
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["environment"] == settings.run_env


def test_register_returns_created_outcome(resolver_factory, settings):
    client, parts = _client(resolver_factory, settings)

    resp = client.post("/register", json=REGISTER_BODY)

    assert resp.status_code == 201
    data = resp.json()
    assert data["success"] is True
    assert data["department"] == "PWD"
    assert data["location"] == "Janakpuri, Delhi"
    assert data["authorityBody"] == "MCD West Zone"
    assert data["authorityEmailSent"] is True
    assert data["citizenEmailSent"] is True
    assert data["citizenSmsSent"] is False
    assert data["citizenNotified"] is True
    assert data["complaintId"] in parts["store"].complaints


def test_register_twice_conflicts(resolver_factory, settings):
    client, parts = _client(resolver_factory, settings)

    assert client.post("/register", json=REGISTER_BODY).status_code == 201
    resp = client.post("/register", json=REGISTER_BODY)

    assert resp.status_code == 409
    assert resp.json()["redditId"] == "abc123"
    assert parts["store"].insert_calls == 1


def test_register_rejects_non_civic_post(resolver_factory, settings):
    client, parts = _client(resolver_factory, settings)

    resp = client.post("/register", json={"title": "Check out this funny meme", "body": "lol"})

    assert resp.status_code == 422
    assert resp.json()["reason"] == "No civic keywords detected"
    assert parts["store"].insert_calls == 0


def test_register_requires_title(resolver_factory, settings):
    client, _ = _client(resolver_factory, settings)
    assert client.post("/register", json={"title": " abc "}).status_code == 400
    assert client.post("/register", json={"body": "pothole road"}).status_code == 400


def test_register_null_title_is_bad_request(resolver_factory, settings):
    client, parts = _client(resolver_factory, settings)

    resp = client.post("/register", json={"title": None, "body": "pothole road"})

    assert resp.status_code == 400
    assert parts["store"].insert_calls == 0


def test_register_null_body_falls_back_to_title(resolver_factory, settings):
    client, parts = _client(resolver_factory, settings)
    title = "Massive pothole on road in Janakpuri"

    resp = client.post("/register", json={"title": title, "body": None})

    assert resp.status_code == 201
    stored = parts["store"].complaints[resp.json()["complaintId"]]
    assert stored.description == title


def test_register_malformed_field_is_bad_request(resolver_factory, settings):
    client, _ = _client(resolver_factory, settings)

    resp = client.post("/register", json={"title": ["not", "a", "string"]})

    assert resp.status_code == 400
    assert resp.json()["fields"] == ["title"]


def test_cors_preflight_allows_frontend_origin(resolver_factory, settings):
    client, _ = _client(resolver_factory, settings)

    resp = client.options(
        "/register",
        headers={
            "Origin": settings.frontend_url,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == settings.frontend_url


def test_register_storage_failure_is_500(resolver_factory, settings):
    client, _ = _client(resolver_factory, settings, store=CountingStore(fail_insert=True))

    resp = client.post("/register", json=REGISTER_BODY)

    assert resp.status_code == 500
    assert resp.json()["error"] == "Database error"


def test_all_lists_recent_complaints(resolver_factory, settings):
    client, _ = _client(resolver_factory, settings)
    client.post("/register", json=REGISTER_BODY)

    resp = client.get("/all", params={"limit": 1000})

    assert resp.status_code == 200
    data = resp.json()
    assert data["count"] == 1
    assert data["complaints"][0]["redditId"] == "abc123"


def test_fetch_validates_keyword_and_caps_limit(resolver_factory, settings):
    reddit = FakeReddit()
    client, _ = _client(resolver_factory, settings, reddit=reddit)

    assert client.get("/fetch", params={"keyword": "a"}).status_code == 400

    resp = client.get("/fetch", params={"keyword": "pothole", "limit": 500})
    assert resp.status_code == 200
    assert resp.json()["totalFetched"] == 0
    assert reddit.calls == [("search", "pothole", "delhi", 50)]


def test_fetch_maps_upstream_errors(resolver_factory, settings):
    client, _ = _client(
        resolver_factory, settings, reddit=FakeReddit(error=RateLimited("slow down", 30))
    )
    resp = client.get("/fetch", params={"keyword": "pothole"})
    assert resp.status_code == 429
    assert resp.json()["retryAfter"] == 30

    client, _ = _client(
        resolver_factory, settings, reddit=FakeReddit(error=Unreachable("no route"))
    )
    assert client.get("/fetch", params={"keyword": "pothole"}).status_code == 503


def test_batch_process_defaults(resolver_factory, settings, post_factory):
    reddit = FakeReddit(posts=[post_factory()])
    client, _ = _client(resolver_factory, settings, reddit=reddit)

    resp = client.post("/batch-process", json={})

    assert resp.status_code == 200
    data = resp.json()
    assert data["registered"] == 1
    assert data["complaints"][0]["authorityNotified"] is True
    assert reddit.calls == [("search", "pothole", "delhi", 10)]

"""
Tests for the HTTP API using FastAPI's TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from url_shortener.api import app
from url_shortener.base62 import decode
from url_shortener.config import BASE_URL, REDIRECT_TYPE

TEST_URL = "https://www.example.com/very/long/url/path"


@pytest.fixture
def client(temp_db):
    return TestClient(app)


def shorten(client, url=TEST_URL, headers=None, **fields):
    return client.post("/api/v1/shorten", json={"url": url, **fields}, headers=headers)


def test_shorten(client):
    response = shorten(client)

    assert response.status_code == 201
    data = response.json()
    assert data["long_url"] == TEST_URL
    assert data["short_url"] == f"{BASE_URL}{data['short_key']}"
    assert data["is_private"] is False
    assert data["expires_at"] is not None
    assert decode(data["short_key"]) == 1


def test_redirect(client):
    short_key = shorten(client).json()["short_key"]

    response = client.get(f"/{short_key}", follow_redirects=False)

    assert response.status_code == REDIRECT_TYPE
    assert response.headers["location"] == TEST_URL


def test_redirect_unknown_key(client):
    response = client.get("/zzzz", follow_redirects=False)

    assert response.status_code == 404
    assert "zzzz" in response.text


def test_redirect_malformed_key(client):
    response = client.get("/not-a-key", follow_redirects=False)
    assert response.status_code == 404


@pytest.mark.parametrize("body", [
    {"url": ""},
    {"url": "   "},
    {"url": "https://example.com/" + "a" * 2048},
    {"url": TEST_URL, "expiration_in_days": 0},
    {},
])
def test_shorten_invalid_request(client, body):
    response = client.post("/api/v1/shorten", json=body)
    assert response.status_code == 422


def test_private_url_without_user(client):
    response = shorten(client, is_private=True)
    assert response.status_code == 400


def test_shorten_with_unknown_user(client):
    response = shorten(client, headers={"X-User-Id": "99"})
    assert response.status_code == 400


def test_private_url_flow(client):
    user = client.post("/api/v1/users", json={"name": "alice"}).json()
    headers = {"X-User-Id": str(user["id"])}

    response = shorten(client, headers=headers, is_private=True)
    assert response.status_code == 201
    short_key = response.json()["short_key"]

    assert client.get(f"/{short_key}", follow_redirects=False).status_code == 404
    owner_response = client.get(f"/{short_key}", headers=headers, follow_redirects=False)
    assert owner_response.status_code == REDIRECT_TYPE

    listing = client.get(f"/api/v1/users/{user['id']}/short-urls").json()
    assert listing["total_elements"] == 1
    assert listing["data"][0]["created_by"] == user

    # Private links stay out of the public listing
    assert client.get("/api/v1/short-urls").json()["total_elements"] == 0


def test_user_listing_for_unknown_user(client):
    assert client.get("/api/v1/users/5/short-urls").status_code == 404


def test_public_listing(client):
    for i in range(3):
        shorten(client, url=f"https://example.com/{i}")

    response = client.get("/api/v1/short-urls", params={"page": 1})

    assert response.status_code == 200
    data = response.json()
    assert data["total_elements"] == 3
    assert data["page_number"] == 1
    assert [item["original_url"] for item in data["data"]] == [
        "https://example.com/2", "https://example.com/1", "https://example.com/0"
    ]


def test_public_listing_rejects_page_zero(client):
    assert client.get("/api/v1/short-urls", params={"page": 0}).status_code == 422


def test_stats(client):
    short_key = shorten(client).json()["short_key"]
    client.get(f"/{short_key}", follow_redirects=False)
    client.get(f"/{short_key}", follow_redirects=False)

    response = client.get(f"/api/v1/stats/{short_key}")

    assert response.status_code == 200
    data = response.json()
    assert data["short_key"] == short_key
    assert data["original_url"] == TEST_URL
    assert data["click_count"] == 2


def test_stats_unknown_key(client):
    assert client.get("/api/v1/stats/zzzz").status_code == 404


def test_index(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "URL Shortener" in response.text


def test_initialize_app(temp_db):
    from url_shortener.app import initialize_app

    assert initialize_app() is app


def test_private_url_stats_only_for_creator(client):
    alice = client.post("/api/v1/users", json={"name": "alice"}).json()
    bob = client.post("/api/v1/users", json={"name": "bob"}).json()
    short_key = shorten(client, headers={"X-User-Id": str(alice["id"])}, is_private=True).json()["short_key"]

    assert client.get(f"/api/v1/stats/{short_key}").status_code == 404
    other = client.get(f"/api/v1/stats/{short_key}", headers={"X-User-Id": str(bob["id"])})
    assert other.status_code == 404
    assert TEST_URL not in other.text

    owner = client.get(f"/api/v1/stats/{short_key}", headers={"X-User-Id": str(alice["id"])})
    assert owner.status_code == 200
    assert owner.json()["original_url"] == TEST_URL


@pytest.mark.parametrize("path", ["/api/v1/short-urls", "/api/v1/users/{user_id}/short-urls"])
def test_listing_page_beyond_storage_range(client, path):
    user = client.post("/api/v1/users", json={"name": "alice"}).json()
    shorten(client, headers={"X-User-Id": str(user["id"])})

    response = client.get(path.format(user_id=user["id"]), params={"page": 10 ** 19})

    assert response.status_code == 200
    data = response.json()
    assert data["data"] == []
    assert data["has_next"] is False


def test_shorten_keeps_url_as_given(client):
    url = TEST_URL + " "

    response = shorten(client, url=url)

    assert response.status_code == 201
    assert response.json()["long_url"] == url

"""Unit tests for the recommendations endpoint."""

from fastapi.testclient import TestClient

URL = "/api/v1/recommendations"


def test_pets_recommendations(client: TestClient, auth_headers, embedder) -> None:
    response = client.get(URL, params={"type": "pets"}, headers=auth_headers)
    assert response.status_code == 200

    data = response.json()
    assert data["recommendations"] == ["pet-0", "pet-2", "pet-1"]
    assert data["type"] == "pets"
    assert data["took_ms"] >= 0
    assert embedder.prompts == ["Recommend me 5 pets (species: dog, cat)"]


def test_hint_query_overrides_profile(client: TestClient, auth_headers, embedder) -> None:
    response = client.get(
        URL, params={"type": "pets", "hint": ["parrot", "lizard"]}, headers=auth_headers
    )
    assert response.status_code == 200
    assert embedder.prompts == ["Recommend me 5 pets (species: parrot, lizard)"]


def test_pool_is_cached_across_requests(client: TestClient, auth_headers, loader) -> None:
    for _ in range(3):
        assert client.get(URL, params={"type": "pets"}, headers=auth_headers).status_code == 200
    assert loader.calls == ["adoptions"]


def test_invalid_type(client: TestClient, auth_headers, loader, embedder) -> None:
    response = client.get(URL, params={"type": "fish"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == 'Invalid type; must be "pets" or "articles"'
    assert loader.calls == []
    assert embedder.prompts == []


def test_missing_type(client: TestClient, auth_headers) -> None:
    response = client.get(URL, headers=auth_headers)
    assert response.status_code == 400


def test_missing_bearer_token(client: TestClient) -> None:
    response = client.get(URL, params={"type": "pets"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Missing Bearer token"


def test_non_bearer_scheme(client: TestClient) -> None:
    response = client.get(
        URL, params={"type": "pets"}, headers={"Authorization": "Basic dXNlcjpwYXNz"}
    )
    assert response.status_code == 401


def test_invalid_token(client: TestClient) -> None:
    response = client.get(
        URL, params={"type": "pets"}, headers={"Authorization": "Bearer wrong"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_upstream_failure_is_opaque(
    client: TestClient, auth_headers, loader, upstream_error
) -> None:
    loader.error = upstream_error
    response = client.get(URL, params={"type": "articles"}, headers=auth_headers)
    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"


def test_embedding_failure_is_opaque(
    client: TestClient, auth_headers, embedder, embedding_error
) -> None:
    embedder.error = embedding_error
    response = client.get(URL, params={"type": "pets"}, headers=auth_headers)
    assert response.status_code == 500
    assert "model" not in response.text


def test_preference_failure_is_opaque(
    client: TestClient, auth_headers, preference_store, upstream_error
) -> None:
    preference_store.error = upstream_error
    response = client.get(URL, params={"type": "pets"}, headers=auth_headers)
    assert response.status_code == 500


def test_post_not_allowed(client: TestClient, auth_headers) -> None:
    response = client.post(URL, params={"type": "pets"}, headers=auth_headers)
    assert response.status_code == 405

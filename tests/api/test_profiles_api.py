# tests/api/test_profiles_api.py
"""Tests for profile endpoints."""

import uuid

from fastapi import status

from currents.core.security import create_access_token


def test_ensure_profile_creates_then_returns(client) -> None:
    """The first call registers the profile, later calls just return it."""
    user_id = str(uuid.uuid4())
    headers = {"Authorization": f"Bearer {create_access_token(user_id)}"}
    payload = {"username": "newcomer", "full_name": "New Comer"}

    created = client.post("/api/profiles/me", json=payload, headers=headers)
    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["id"] == user_id
    assert created.json()["username"] == "newcomer"

    again = client.post("/api/profiles/me", json=payload, headers=headers)
    assert again.status_code == status.HTTP_200_OK
    assert again.json()["id"] == user_id


def test_ensure_profile_rejects_taken_username(client, author) -> None:
    """Usernames are unique."""
    headers = {"Authorization": f"Bearer {create_access_token(str(uuid.uuid4()))}"}
    response = client.post("/api/profiles/me", json={"username": "alice"}, headers=headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["details"] == [
        {"field": "username", "message": "Username is already taken"}
    ]


def test_ensure_profile_validates_username(client) -> None:
    """Usernames must be 3-30 safe characters."""
    headers = {"Authorization": f"Bearer {create_access_token(str(uuid.uuid4()))}"}
    response = client.post("/api/profiles/me", json={"username": "a b"}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_get_profile(client, author) -> None:
    """Profiles are public by username."""
    response = client.get("/api/profiles/alice")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["full_name"] == "Alice Author"
    assert client.get("/api/profiles/ghost").status_code == status.HTTP_404_NOT_FOUND


def test_list_my_drafts(client, author, auth_headers) -> None:
    """Drafts are listed only for their author."""
    client.post("/api/posts", json={"title": "Idea", "status": "draft"}, headers=auth_headers)
    client.post("/api/posts", json={"title": "Live", "content": "body"}, headers=auth_headers)

    response = client.get("/api/profiles/me/drafts", headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    assert [p["title"] for p in response.json()["posts"]] == ["Idea"]


def test_delete_profile_cascades_to_posts(client, author, auth_headers) -> None:
    """Removing a profile removes every post it wrote."""
    first = client.post("/api/posts", json={"title": "One", "content": "a"}, headers=auth_headers)
    client.post("/api/posts", json={"title": "Two", "content": "b"}, headers=auth_headers)

    response = client.delete("/api/profiles/me", headers=auth_headers)

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get("/api/posts/alice").status_code == status.HTTP_404_NOT_FOUND
    slug = first.json()["post"]["slug"]
    assert client.get(f"/api/posts/slug/{slug}").status_code == status.HTTP_404_NOT_FOUND

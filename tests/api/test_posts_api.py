# tests/api/test_posts_api.py
"""Tests for post-related endpoints."""

import uuid

from fastapi import status

from currents.core.security import create_access_token


def _publish(client, headers, title="Hello World", content="Body text", **extra):
    return client.post("/api/posts", json={"title": title, "content": content, **extra}, headers=headers)


def test_create_post_success(client, author, auth_headers) -> None:
    """Publishing returns the new post wrapped in an envelope."""
    response = _publish(client, auth_headers, title="My First Post!")

    assert response.status_code == status.HTTP_201_CREATED
    post = response.json()["post"]
    assert post["slug"] == "my-first-post"
    assert post["status"] == "published"
    assert post["archived_at"] is None
    assert post["is_active"] is True
    assert post["author_id"] == author.id
    assert post["author"]["username"] == "alice"


def test_create_post_requires_auth(client, author) -> None:
    """Anonymous writes are rejected with 401."""
    response = _publish(client, {})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Not authenticated"}


def test_create_post_rejects_bad_token(client, author) -> None:
    """Tokens that fail verification are rejected with 401."""
    response = _publish(client, {"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Could not validate credentials"}


def test_create_post_missing_title(client, author, auth_headers) -> None:
    """Validation failures come back as 400 with field details."""
    response = _publish(client, auth_headers, title="   ")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["error"] == "Invalid request data"
    assert body["details"] == [{"field": "title", "message": "Title is required"}]


def test_create_post_empty_content(client, author, auth_headers) -> None:
    """Published posts need content."""
    response = _publish(client, auth_headers, content="")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["details"] == [
        {"field": "content", "message": "Please enter some content"}
    ]


def test_create_draft_without_content(client, author, auth_headers) -> None:
    """Drafts may be saved without a body."""
    response = _publish(client, auth_headers, content="", status="draft")

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["post"]["status"] == "draft"
    assert response.json()["post"]["is_active"] is False


def test_get_user_post(client, author, auth_headers) -> None:
    """The current post of a user is returned by username."""
    _publish(client, auth_headers, title="First")
    created = _publish(client, auth_headers, title="Second").json()["post"]

    response = client.get("/api/posts/alice")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["post"]["id"] == created["id"]


def test_get_user_post_unknown_user(client) -> None:
    """Unknown usernames are 404."""
    response = client.get("/api/posts/nobody")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "User not found"}


def test_get_user_post_without_active_post(client, author) -> None:
    """A user with nothing published is 404."""
    response = client.get("/api/posts/alice")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "No active post found for this user"}


def test_get_user_post_blank_username(client) -> None:
    """A blank username is a bad request."""
    response = client.get("/api/posts/%20")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Username is required"


def test_get_user_history(client, author, auth_headers) -> None:
    """History lists archived posts next to the current one."""
    _publish(client, auth_headers, title="Old")
    _publish(client, auth_headers, title="New")

    response = client.get("/api/posts/alice/history")

    assert response.status_code == status.HTTP_200_OK
    posts = response.json()["posts"]
    assert sorted(p["title"] for p in posts) == ["New", "Old"]
    assert sum(p["is_active"] for p in posts) == 1


def test_get_post_by_slug(client, author, auth_headers) -> None:
    """Posts are addressable by slug."""
    _publish(client, auth_headers, title="Slug Lookup")

    response = client.get("/api/posts/slug/slug-lookup")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["post"]["title"] == "Slug Lookup"

    assert client.get("/api/posts/slug/unknown").status_code == status.HTTP_404_NOT_FOUND


def test_list_posts_paginates(client, author, other_author, auth_headers, other_auth_headers) -> None:
    """The feed returns active posts with pagination flags."""
    _publish(client, auth_headers, title="From Alice")
    _publish(client, other_auth_headers, title="From Bob")

    response = client.get("/api/posts", params={"page": 1, "limit": 1})

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert len(body["posts"]) == 1
    assert body["pagination"] == {"page": 1, "limit": 1, "has_next": True, "has_prev": False}


def test_list_posts_empty(client) -> None:
    """An empty feed is a normal response."""
    response = client.get("/api/posts")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["posts"] == []


def test_list_posts_invalid_pagination(client) -> None:
    """Bad page or limit values are rejected, not clamped."""
    for params in ({"page": "0"}, {"limit": "500"}, {"page": "abc"}):
        response = client.get("/api/posts", params=params)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Invalid pagination parameters"


def test_update_post(client, author, auth_headers) -> None:
    """Owners can edit title and content; the slug stays."""
    post = _publish(client, auth_headers, title="Before").json()["post"]

    response = client.patch(
        f"/api/posts/{post['id']}",
        json={"title": "After", "content": "Changed"},
        headers=auth_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    updated = response.json()["post"]
    assert updated["title"] == "After"
    assert updated["content"] == "Changed"
    assert updated["slug"] == "before"


def test_update_post_rejects_slug_change(client, author, auth_headers) -> None:
    """The slug is not part of the update contract."""
    post = _publish(client, auth_headers).json()["post"]
    response = client.patch(f"/api/posts/{post['id']}", json={"slug": "new"}, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_post_forbidden_for_other_author(client, author, other_author, auth_headers, other_auth_headers) -> None:
    """Editing someone else's post is 403."""
    post = _publish(client, auth_headers).json()["post"]
    response = client.patch(
        f"/api/posts/{post['id']}",
        json={"title": "Hijacked"},
        headers=other_auth_headers,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_update_archived_post_conflicts(client, author, auth_headers) -> None:
    """Archived posts cannot be edited."""
    old = _publish(client, auth_headers, title="Old").json()["post"]
    _publish(client, auth_headers, title="New")

    response = client.patch(f"/api/posts/{old['id']}", json={"title": "Again"}, headers=auth_headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert "error" in response.json()


def test_archive_post(client, author, auth_headers) -> None:
    """Archiving removes the post from the author's current slot."""
    post = _publish(client, auth_headers).json()["post"]

    response = client.post(f"/api/posts/{post['id']}/archive", headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["post"]["archived_at"] is not None
    assert client.get("/api/posts/alice").status_code == status.HTTP_404_NOT_FOUND


def test_delete_post(client, author, auth_headers) -> None:
    """Owners can delete their posts."""
    post = _publish(client, auth_headers).json()["post"]

    response = client.delete(f"/api/posts/{post['id']}", headers=auth_headers)

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.delete(f"/api/posts/{post['id']}", headers=auth_headers).status_code == 404


def test_create_post_without_profile(client) -> None:
    """A verified token with no registered profile gets 404, not a conflict."""
    headers = {"Authorization": f"Bearer {create_access_token(str(uuid.uuid4()))}"}
    response = _publish(client, headers)

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "User not found"}


def test_slug_route_word_is_not_a_username(client) -> None:
    """A user named "slug" would be shadowed by the slug lookup route."""
    headers = {"Authorization": f"Bearer {create_access_token(str(uuid.uuid4()))}"}
    response = client.post("/api/profiles/me", json={"username": "slug"}, headers=headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["details"][0]["field"] == "username"

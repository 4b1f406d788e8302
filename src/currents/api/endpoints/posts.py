"""Post-related endpoints for the Currents API."""

from fastapi import APIRouter, Query, Response, status

from currents.api.dependencies import (
    CurrentUserIdDep,
    FeedPaginatorDep,
    PostServiceDep,
    ProfileServiceDep,
)
from currents.core.errors import ValidationError
from currents.schemas.post import (
    FeedResponse,
    PageInfo,
    PostCreate,
    PostEnvelope,
    PostListEnvelope,
    PostUpdate,
)
from currents.services.post_service import to_post_response

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=FeedResponse)
def list_posts(
    paginator: FeedPaginatorDep,
    page: str | None = Query(None, description="1-based page number (default 1)"),
    limit: str | None = Query(None, description="Items per page, 1-100 (default 20)"),
) -> FeedResponse:
    """List every author's active post, newest first.

    Raw query strings are passed to the validation layer so that bad values
    come back as field-level errors instead of being clamped.
    """
    feed = paginator.list_active_posts(page, limit)
    return FeedResponse(
        posts=[to_post_response(post) for post in feed.posts],
        pagination=PageInfo(
            page=feed.page,
            limit=feed.limit,
            has_next=feed.has_next,
            has_prev=feed.has_prev,
        ),
    )


@router.post("", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
def create_post(
    post_data: PostCreate,
    user_id: CurrentUserIdDep,
    posts: PostServiceDep,
) -> PostEnvelope:
    """Create a post; publishing replaces the caller's current post."""
    post = posts.create(user_id, post_data.model_dump())
    return PostEnvelope(post=to_post_response(post))


@router.get("/slug/{slug}", response_model=PostEnvelope)
def get_post_by_slug(slug: str, posts: PostServiceDep) -> PostEnvelope:
    """Return a post by its slug."""
    return PostEnvelope(post=to_post_response(posts.get_by_slug(slug)))


@router.get("/{username}", response_model=PostEnvelope)
def get_user_post(
    username: str,
    posts: PostServiceDep,
    profiles: ProfileServiceDep,
) -> PostEnvelope:
    """Return the current post of ``username``.

    Raises:
        ValidationError: If the username is blank.
        NotFoundError: If the user does not exist or has no active post.
    """
    if not username.strip():
        raise ValidationError(
            [{"field": "username", "message": "Username is required"}],
            message="Username is required",
        )
    profile = profiles.get_by_username(username)
    return PostEnvelope(post=to_post_response(posts.get_active(profile.id)))


@router.get("/{username}/history", response_model=PostListEnvelope)
def get_user_history(
    username: str,
    posts: PostServiceDep,
    profiles: ProfileServiceDep,
) -> PostListEnvelope:
    """Return every post by ``username``, archived ones included."""
    profile = profiles.get_by_username(username)
    return PostListEnvelope(posts=[to_post_response(p) for p in posts.history(profile.id)])


@router.patch("/{post_id}", response_model=PostEnvelope)
def update_post(
    post_id: str,
    post_data: PostUpdate,
    user_id: CurrentUserIdDep,
    posts: PostServiceDep,
) -> PostEnvelope:
    """Edit one of the caller's posts in place."""
    post = posts.update(post_id, user_id, post_data.model_dump(exclude_unset=True))
    return PostEnvelope(post=to_post_response(post))


@router.post("/{post_id}/archive", response_model=PostEnvelope)
def archive_post(
    post_id: str,
    user_id: CurrentUserIdDep,
    posts: PostServiceDep,
) -> PostEnvelope:
    """Retire one of the caller's posts without replacing it."""
    return PostEnvelope(post=to_post_response(posts.archive(post_id, user_id)))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: str,
    user_id: CurrentUserIdDep,
    posts: PostServiceDep,
) -> Response:
    """Delete one of the caller's posts."""
    posts.delete(post_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

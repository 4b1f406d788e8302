"""Shared API dependencies for authentication and service wiring."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from currents.core.errors import UnauthorizedError
from currents.core.security import decode_subject
from currents.db.session import get_db
from currents.repositories.post_repo import PostRepository
from currents.repositories.profile_repo import ProfileRepository
from currents.services.feed import FeedPaginator
from currents.services.post_service import PostService
from currents.services.profile_service import ProfileService

# Missing credentials are reported through UnauthorizedError so the body shape
# matches every other error response.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Return the verified profile id from the bearer token.

    Raises:
        UnauthorizedError: If no token was sent or it does not verify.
    """
    if credentials is None:
        raise UnauthorizedError("Not authenticated", status_code=401)
    return decode_subject(credentials.credentials)


def get_post_repository(db: SessionDep) -> PostRepository:
    """Build a post repository bound to the request's session."""
    return PostRepository(db)


def get_post_service(
    repo: Annotated[PostRepository, Depends(get_post_repository)],
) -> PostService:
    """Build the post lifecycle service for this request."""
    return PostService(repo)


def get_feed_paginator(
    repo: Annotated[PostRepository, Depends(get_post_repository)],
) -> FeedPaginator:
    """Build the feed paginator for this request."""
    return FeedPaginator(repo)


def get_profile_service(db: SessionDep) -> ProfileService:
    """Build the profile service for this request."""
    return ProfileService(ProfileRepository(db))


# Type aliases for route signatures
CurrentUserIdDep = Annotated[str, Depends(get_current_user_id)]
PostServiceDep = Annotated[PostService, Depends(get_post_service)]
FeedPaginatorDep = Annotated[FeedPaginator, Depends(get_feed_paginator)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]

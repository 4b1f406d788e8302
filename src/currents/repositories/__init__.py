"""Persistence boundaries over SQLAlchemy sessions."""

from .post_repo import PostRepository
from .profile_repo import ProfileRepository

__all__ = ["PostRepository", "ProfileRepository"]

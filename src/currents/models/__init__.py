"""SQLAlchemy models for the Currents application."""

from .post import POST_STATUS_DRAFT, POST_STATUS_PUBLISHED, POST_STATUSES, Post
from .profile import Profile

__all__ = [
    "Post", "POST_STATUS_DRAFT", "POST_STATUS_PUBLISHED", "POST_STATUSES",
    "Profile",
]

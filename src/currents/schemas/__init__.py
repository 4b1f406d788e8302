"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .og import OgCard
from .post import (
    AuthorSummary,
    FeedResponse,
    PageInfo,
    PaginationParams,
    PostCreate,
    PostEnvelope,
    PostListEnvelope,
    PostResponse,
    PostUpdate,
)
from .profile import ProfileCreate, ProfileResponse

__all__ = [
    "OgCard",
    "AuthorSummary", "FeedResponse", "PageInfo", "PaginationParams",
    "PostCreate", "PostEnvelope", "PostListEnvelope", "PostResponse", "PostUpdate",
    "ProfileCreate", "ProfileResponse",
]

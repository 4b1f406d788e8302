"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from currents.models.post import (
    CONTENT_MAX_LENGTH,
    EXCERPT_MAX_LENGTH,
    SLUG_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)

PostStatus = Literal["draft", "published"]

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def clean_title(value: str) -> str:
    """Trim a title and enforce its 1-255 character bounds."""
    title = value.strip()
    if not title:
        raise ValueError("Title is required")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return title


class PostCreate(BaseModel):
    """Schema for creating (and usually publishing) a post."""

    title: str = Field(..., description="Post title, 1-255 characters after trimming")
    content: str = Field("", max_length=CONTENT_MAX_LENGTH, description="Post body")
    excerpt: str | None = Field(
        None,
        max_length=EXCERPT_MAX_LENGTH,
        description="Optional summary; derived from the content when omitted",
    )
    status: PostStatus = Field("published", description="Initial lifecycle status")
    slug: str | None = Field(
        None,
        max_length=SLUG_MAX_LENGTH,
        pattern=SLUG_PATTERN,
        description="Optional custom slug; derived from the title when omitted",
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Trim the title and enforce its length bounds."""
        return clean_title(v)

    @field_validator("content", mode="before")
    @classmethod
    def default_content(cls, v: object) -> object:
        """Treat a null body as empty."""
        return "" if v is None else v


class PostUpdate(BaseModel):
    """Partial update of a post; slug and author are immutable."""

    title: str | None = None
    content: str | None = Field(None, max_length=CONTENT_MAX_LENGTH)
    status: PostStatus | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        """Apply the creation rules to a supplied title."""
        if v is None:
            return v
        return clean_title(v)


class PaginationParams(BaseModel):
    """Page/limit query parameters for feed listings."""

    page: int = Field(1, ge=1, description="1-based page number")
    limit: int = Field(20, ge=1, le=100, description="Items per page")


class AuthorSummary(BaseModel):
    """Public author fields embedded in post responses."""

    id: str
    username: str
    full_name: str | None = None
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: str
    author_id: str
    title: str
    content: str
    excerpt: str | None
    slug: str
    status: PostStatus
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None
    archived_at: datetime | None
    is_active: bool
    author: AuthorSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class PostEnvelope(BaseModel):
    """Single post wrapped as ``{"post": ...}``."""

    post: PostResponse


class PostListEnvelope(BaseModel):
    """Post collection wrapped as ``{"posts": [...]}``."""

    posts: list[PostResponse]


class PageInfo(BaseModel):
    """Pagination metadata for the feed."""

    page: int
    limit: int
    has_next: bool
    has_prev: bool


class FeedResponse(BaseModel):
    """One page of the active-post feed."""

    posts: list[PostResponse]
    pagination: PageInfo

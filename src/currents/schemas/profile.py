"""Profile-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Path segments under /api/posts that a username would shadow.
RESERVED_USERNAMES = frozenset({"slug"})


class ProfileCreate(BaseModel):
    """Schema for registering the caller's public profile."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=30,
        pattern=r"^[a-zA-Z0-9_-]+$",
        description="Letters, numbers, underscores and hyphens",
    )
    email: str = Field("", max_length=320)
    full_name: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=500)
    avatar_url: str | None = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Reject usernames that collide with fixed route segments."""
        if v.lower() in RESERVED_USERNAMES:
            raise ValueError("Username is reserved")
        return v


class ProfileResponse(BaseModel):
    """Response schema for profile information."""

    id: str
    username: str
    full_name: str | None
    bio: str | None
    avatar_url: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

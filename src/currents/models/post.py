"""SQLAlchemy model for posts and their lifecycle columns."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from currents.db.session import Base
from currents.db.time import utcnow

if TYPE_CHECKING:
    from currents.models.profile import Profile

POST_STATUS_DRAFT = "draft"
POST_STATUS_PUBLISHED = "published"
POST_STATUSES = (POST_STATUS_DRAFT, POST_STATUS_PUBLISHED)

TITLE_MAX_LENGTH = 255
EXCERPT_MAX_LENGTH = 500
CONTENT_MAX_LENGTH = 10000
SLUG_MAX_LENGTH = 100

_ACTIVE_PREDICATE = "status = 'published' AND archived_at IS NULL"


def _new_post_id() -> str:
    return str(uuid.uuid4())


class Post(Base):
    """A single piece of writing by one author.

    An author has at most one *active* post: published and never archived.
    Publishing a new one stamps ``archived_at`` on the previous active post,
    which is never cleared again.
    """

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'published')",
            name="ck_post_status",
        ),
        # Storage-level guard for the single active post per author.
        Index(
            "uq_post_one_active_per_author",
            "author_id",
            unique=True,
            sqlite_where=text(_ACTIVE_PREDICATE),
            postgresql_where=text(_ACTIVE_PREDICATE),
        ),
        Index("ix_post_feed_order", "published_at", "created_at", "id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_post_id)
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profile.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    excerpt: Mapped[str | None] = mapped_column(String(EXCERPT_MAX_LENGTH), nullable=True)
    slug: Mapped[str] = mapped_column(String(SLUG_MAX_LENGTH + 20), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=POST_STATUS_PUBLISHED)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # Null while this is the author's current post; set once when superseded.
    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    author: Mapped[Profile] = relationship("Profile", back_populates="posts", lazy="selectin")

    def __init__(self, **kwargs: object) -> None:
        now = utcnow()
        kwargs.setdefault("created_at", now)
        kwargs.setdefault("updated_at", kwargs["created_at"])
        super().__init__(**kwargs)

    @property
    def is_active(self) -> bool:
        """Return True for the author's current published, non-archived post."""
        return self.status == POST_STATUS_PUBLISHED and self.archived_at is None

    @property
    def is_archived(self) -> bool:
        """Return True once the post has been superseded."""
        return self.archived_at is not None

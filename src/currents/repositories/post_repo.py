"""Data access helpers for working with posts."""
from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from currents.core.errors import ConflictError, NotFoundError, UnavailableError, ValidationError
from currents.core.settings import settings
from currents.db.time import utcnow
from currents.models.post import (
    CONTENT_MAX_LENGTH,
    EXCERPT_MAX_LENGTH,
    POST_STATUS_DRAFT,
    POST_STATUS_PUBLISHED,
    POST_STATUSES,
    Post,
)
from currents.schemas.post import clean_title
from currents.services.slugs import resolve_unique, slugify
from currents.services.text import derive_excerpt

logger = logging.getLogger(__name__)

__all__ = ["PostRepository", "store_errors"]

UPDATABLE_FIELDS = frozenset({"title", "content", "status"})


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Translate storage exceptions raised inside the block into domain errors."""
    try:
        yield
    except IntegrityError as exc:
        logger.warning("Constraint violation during %s: %s", operation, exc.orig)
        raise ConflictError(f"Constraint violation during {operation}") from exc
    except (OperationalError, PoolTimeoutError) as exc:
        logger.error("Store unavailable during %s: %s", operation, exc)
        raise UnavailableError(f"Store unavailable during {operation}") from exc


def _validated_title(title: str | None) -> str:
    try:
        return clean_title(title or "")
    except ValueError as exc:
        raise ValidationError.for_field("title", str(exc)) from exc


class PostRepository:
    """Persistence boundary for posts.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(
        self,
        session: Session,
        *,
        slug_max_attempts: int | None = None,
        excerpt_length: int | None = None,
    ) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session
        self.slug_max_attempts = slug_max_attempts or settings.slug_max_attempts
        self.excerpt_length = excerpt_length or settings.excerpt_length

    def _flush(self, operation: str) -> None:
        with store_errors(operation):
            self.session.flush()

    def _first(self, stmt: Any, operation: str) -> Post | None:
        with store_errors(operation):
            return self.session.execute(stmt).scalars().first()

    def _all(self, stmt: Any, operation: str) -> list[Post]:
        with store_errors(operation):
            return list(self.session.execute(stmt).scalars())

    # Reads

    def find_by_id(self, post_id: str, *, for_update: bool = False) -> Post | None:
        """Return a post by identifier, or None."""
        stmt = select(Post).where(Post.id == post_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self._first(stmt, "fetch post")

    def get_by_id(self, post_id: str, *, for_update: bool = False) -> Post:
        """Return a post by identifier.

        Raises:
            NotFoundError: If no post has this id.
        """
        post = self.find_by_id(post_id, for_update=for_update)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def find_active(self, author_id: str, *, for_update: bool = False) -> Post | None:
        """Return the author's published, non-archived post, or None.

        ``for_update`` row-locks it on dialects that support ``SELECT ... FOR UPDATE``.
        """
        stmt = select(Post).where(
            Post.author_id == author_id,
            Post.status == POST_STATUS_PUBLISHED,
            Post.archived_at.is_(None),
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self._first(stmt, "fetch active post")

    def get_active(self, author_id: str) -> Post:
        """Return the author's current post or raise ``NotFoundError``."""
        post = self.find_active(author_id)
        if post is None:
            raise NotFoundError("No active post found for this user")
        return post

    def get_by_slug(self, slug: str) -> Post:
        """Return the post published under ``slug`` or raise ``NotFoundError``."""
        post = self._first(select(Post).where(Post.slug == slug), "fetch post by slug")
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def slug_exists(self, slug: str) -> bool:
        """Return True when any post, archived or not, already uses ``slug``."""
        stmt = select(Post.id).where(Post.slug == slug).limit(1)
        with store_errors("check slug"):
            return self.session.execute(stmt).first() is not None

    def list_active_paginated(self, page: int, page_size: int, *, lookahead: int = 0) -> list[Post]:
        """Return one page of active posts across all authors, newest first.

        Ordering is ``published_at``, then ``created_at``, then ``id``, all
        descending, which is a total order. ``lookahead`` fetches extra rows past
        the page so callers can tell whether another page exists.
        """
        if page < 1:
            raise ValidationError.for_field("page", "Page must be at least 1")
        if page_size < 1:
            raise ValidationError.for_field("limit", "Limit must be at least 1")

        stmt = (
            select(Post)
            .where(Post.status == POST_STATUS_PUBLISHED, Post.archived_at.is_(None))
            .order_by(desc(Post.published_at), desc(Post.created_at), desc(Post.id))
            .offset((page - 1) * page_size)
            .limit(page_size + lookahead)
        )
        return self._all(stmt, "list feed")

    def list_by_author(self, author_id: str) -> list[Post]:
        """Return every post by the author, archived included, newest first."""
        stmt = (
            select(Post)
            .where(Post.author_id == author_id)
            .order_by(desc(Post.created_at), desc(Post.id))
        )
        return self._all(stmt, "list author posts")

    def list_drafts(self, author_id: str) -> list[Post]:
        """Return the author's drafts, most recently edited first."""
        stmt = (
            select(Post)
            .where(Post.author_id == author_id, Post.status == POST_STATUS_DRAFT)
            .order_by(desc(Post.updated_at), desc(Post.id))
        )
        return self._all(stmt, "list drafts")

    # Writes

    def create(
        self,
        *,
        author_id: str,
        title: str,
        content: str = "",
        excerpt: str | None = None,
        status: str = POST_STATUS_PUBLISHED,
        slug: str | None = None,
        published_at: datetime | None = None,
    ) -> Post:
        """Insert a new post and return the persisted ORM instance.

        Args:
            author_id: Owning profile id.
            title: Raw title; trimmed and bounds-checked here.
            content: Body text.
            excerpt: Summary; derived from ``content`` when None.
            status: ``draft`` or ``published``.
            slug: Custom slug; derived from the title and disambiguated when None.
            published_at: Publication time; defaults to now for published posts.

        Raises:
            ValidationError: On an empty or oversized field, an unknown status,
                or a custom slug that is already taken.
            ConflictError: When the store rejects the row under a concurrent write.
        """
        clean = _validated_title(title)
        if status not in POST_STATUSES:
            raise ValidationError.for_field("status", f"Status must be one of {', '.join(POST_STATUSES)}")
        content = content or ""
        if len(content) > CONTENT_MAX_LENGTH:
            raise ValidationError.for_field(
                "content", f"Content must be at most {CONTENT_MAX_LENGTH} characters"
            )
        if excerpt is None:
            excerpt = derive_excerpt(content, self.excerpt_length)
        elif len(excerpt) > EXCERPT_MAX_LENGTH:
            raise ValidationError.for_field(
                "excerpt", f"Excerpt must be at most {EXCERPT_MAX_LENGTH} characters"
            )

        if slug is None:
            slug = resolve_unique(slugify(clean), self.slug_exists, self.slug_max_attempts)
        elif self.slug_exists(slug):
            raise ValidationError.for_field("slug", "Slug is already taken")

        now = utcnow()
        if status == POST_STATUS_PUBLISHED and published_at is None:
            published_at = now
        elif status == POST_STATUS_DRAFT:
            published_at = None

        post = Post(
            author_id=author_id,
            title=clean,
            content=content,
            excerpt=excerpt,
            slug=slug,
            status=status,
            created_at=now,
            updated_at=now,
            published_at=published_at,
            archived_at=None,
        )
        self.session.add(post)
        self._flush("create post")
        return post

    def archive(self, post_id: str) -> Post:
        """Mark a post as superseded. Archiving an archived post is a no-op."""
        post = self.get_by_id(post_id)
        return self._archive(post)

    def _archive(self, post: Post) -> Post:
        if post.archived_at is not None:
            return post
        now = utcnow()
        post.archived_at = now
        post.updated_at = now
        self._flush("archive post")
        return post

    def archive_active(self, author_id: str) -> Post | None:
        """Lock and archive the author's active post, if there is one."""
        post = self.find_active(author_id, for_update=True)
        if post is None:
            return None
        return self._archive(post)

    def update(self, post_id: str, fields: Mapping[str, Any]) -> Post:
        """Apply a partial update of ``title``, ``content`` and/or ``status``.

        The slug and author never change here. Supplying new content
        re-derives the excerpt; moving to ``published`` stamps ``published_at``
        and moving back to ``draft`` clears it.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                [{"field": name, "message": "Field cannot be updated"} for name in sorted(unknown)]
            )

        changes: dict[str, Any] = {}
        if "title" in fields:
            changes["title"] = _validated_title(fields["title"])
        if "content" in fields:
            content = fields["content"] or ""
            if len(content) > CONTENT_MAX_LENGTH:
                raise ValidationError.for_field(
                    "content", f"Content must be at most {CONTENT_MAX_LENGTH} characters"
                )
            changes["content"] = content
            changes["excerpt"] = derive_excerpt(content, self.excerpt_length)
        status = fields.get("status")
        if "status" in fields and status not in POST_STATUSES:
            raise ValidationError.for_field(
                "status", f"Status must be one of {', '.join(POST_STATUSES)}"
            )

        post = self.get_by_id(post_id)
        now = utcnow()
        for name, value in changes.items():
            setattr(post, name, value)
        if "status" in fields:
            if status == POST_STATUS_PUBLISHED and post.published_at is None:
                post.published_at = now
            elif status == POST_STATUS_DRAFT:
                post.published_at = None
            post.status = status
        post.updated_at = now
        self._flush("update post")
        return post

    def delete(self, post_id: str) -> None:
        """Remove a post permanently."""
        post = self.get_by_id(post_id)
        self.session.delete(post)
        self._flush("delete post")

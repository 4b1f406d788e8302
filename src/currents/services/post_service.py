"""Service-level orchestration of the post lifecycle.

Publishing replaces the author's current post: the previous active post is
archived and the new one inserted inside a single transaction, so readers
never observe zero or two active posts for an author mid-publish.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from sqlalchemy.orm import Session

from currents.core.errors import ConflictError, NotFoundError, UnauthorizedError
from currents.models.post import POST_STATUS_DRAFT, POST_STATUS_PUBLISHED, Post
from currents.models.profile import Profile
from currents.repositories.post_repo import PostRepository, store_errors
from currents.schemas.post import PostResponse
from currents.services.validation import (
    require_content,
    validate_post_create,
    validate_post_update,
)

logger = logging.getLogger(__name__)

__all__ = ["PostService", "to_post_response"]


def _require_author(author_id: str | None) -> str:
    if not author_id:
        raise UnauthorizedError("Authentication required", status_code=401)
    return author_id


class PostService:
    """Replacement engine and entry point for every post write."""

    def __init__(self, repo: PostRepository) -> None:
        self.repo = repo

    @property
    def session(self) -> Session:
        return self.repo.session

    @contextmanager
    def _unit_of_work(self, operation: str) -> Iterator[None]:
        """Commit the block as one transaction, rolling everything back on failure."""
        try:
            yield
            with store_errors(operation):
                self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def create(self, author_id: str | None, data: Mapping[str, Any]) -> Post:
        """Create a post from a raw payload, publishing unless it asks for a draft."""
        payload = validate_post_create(data)
        fields = {
            "title": payload.title,
            "content": payload.content,
            "excerpt": payload.excerpt,
            "slug": payload.slug,
        }
        if payload.status == POST_STATUS_DRAFT:
            return self.create_draft(author_id, **fields)
        return self.publish(author_id, **fields)

    def publish(
        self,
        author_id: str | None,
        title: str,
        content: str,
        excerpt: str | None = None,
        slug: str | None = None,
    ) -> Post:
        """Publish a new post and make it the author's only active post.

        Args:
            author_id: Verified id of the publishing author.
            title: Post title (1-255 characters after trimming).
            content: Non-empty body.
            excerpt: Optional summary; derived from the content when omitted.
            slug: Optional custom slug; derived from the title when omitted.

        Returns:
            The newly active post.

        Raises:
            UnauthorizedError: If no author id is supplied.
            ValidationError: On invalid input; nothing has been written.
            NotFoundError: If the author has no profile yet.
            ConflictError: If a concurrent publish by the same author won the
                race. The caller may retry.
        """
        author_id = _require_author(author_id)
        payload = validate_post_create(
            {"title": title, "content": content, "excerpt": excerpt, "slug": slug}
        )
        require_content(payload.content)

        with self._unit_of_work("publish post"):
            self._require_profile(author_id)
            previous = self.repo.archive_active(author_id)
            post = self.repo.create(
                author_id=author_id,
                title=payload.title,
                content=payload.content,
                excerpt=payload.excerpt,
                slug=payload.slug,
                status=POST_STATUS_PUBLISHED,
            )

        if previous is not None:
            logger.info("Author %s published post %s, archiving %s", author_id, post.id, previous.id)
        else:
            logger.info("Author %s published first active post %s", author_id, post.id)
        return post

    def create_draft(
        self,
        author_id: str | None,
        title: str,
        content: str = "",
        excerpt: str | None = None,
        slug: str | None = None,
    ) -> Post:
        """Save a draft; the author's active post is untouched."""
        author_id = _require_author(author_id)
        payload = validate_post_create(
            {"title": title, "content": content, "excerpt": excerpt, "slug": slug}
        )
        with self._unit_of_work("create draft"):
            self._require_profile(author_id)
            post = self.repo.create(
                author_id=author_id,
                title=payload.title,
                content=payload.content,
                excerpt=payload.excerpt,
                slug=payload.slug,
                status=POST_STATUS_DRAFT,
            )
        logger.debug("Author %s saved draft %s", author_id, post.id)
        return post

    def update(self, post_id: str, author_id: str | None, data: Mapping[str, Any]) -> Post:
        """Edit a post in place without replacing it.

        Only the owner may edit, and only while the post has not been archived.
        Moving a draft to ``published`` promotes it with the same
        archive-then-promote transaction as ``publish``.
        """
        author_id = _require_author(author_id)
        changes = validate_post_update(data).model_dump(exclude_unset=True, exclude_none=True)

        with self._unit_of_work("update post"):
            post = self.repo.get_by_id(post_id, for_update=True)
            self._check_owner(post, author_id)
            if post.is_archived:
                raise ConflictError("Archived posts cannot be edited")

            target_status = changes.get("status", post.status)
            if target_status == POST_STATUS_PUBLISHED:
                require_content(changes.get("content", post.content))
            if post.status == POST_STATUS_DRAFT and target_status == POST_STATUS_PUBLISHED:
                self._require_profile(author_id)
                previous = self.repo.archive_active(author_id)
                if previous is not None:
                    logger.info("Draft %s promoted, archiving %s", post.id, previous.id)
            post = self.repo.update(post.id, changes)
        return post

    def delete(self, post_id: str, author_id: str | None) -> None:
        """Delete one of the author's posts."""
        author_id = _require_author(author_id)
        with self._unit_of_work("delete post"):
            post = self.repo.get_by_id(post_id)
            self._check_owner(post, author_id)
            self.repo.delete(post.id)
        logger.info("Author %s deleted post %s", author_id, post_id)

    def archive(self, post_id: str, author_id: str | None) -> Post:
        """Retire the author's post without publishing a replacement."""
        author_id = _require_author(author_id)
        with self._unit_of_work("archive post"):
            post = self.repo.get_by_id(post_id)
            self._check_owner(post, author_id)
            post = self.repo.archive(post.id)
        return post

    def _require_profile(self, author_id: str) -> None:
        with store_errors("fetch profile"):
            profile = self.session.get(Profile, author_id)
        if profile is None:
            raise NotFoundError("User not found")

    @staticmethod
    def _check_owner(post: Post, author_id: str) -> None:
        if post.author_id != author_id:
            raise UnauthorizedError()

    # Reads

    def get_active(self, author_id: str) -> Post:
        """Return the author's current post."""
        return self.repo.get_active(author_id)

    def get_by_slug(self, slug: str) -> Post:
        """Return a post by slug."""
        return self.repo.get_by_slug(slug)

    def history(self, author_id: str) -> list[Post]:
        """Return every post by the author, archived included."""
        return self.repo.list_by_author(author_id)

    def drafts(self, author_id: str) -> list[Post]:
        """Return the author's unpublished drafts."""
        return self.repo.list_drafts(author_id)


def to_post_response(post: Post) -> PostResponse:
    """Convert a Post ORM instance to an API schema."""
    return PostResponse.model_validate(post)

"""Newest-first pagination over every author's active post."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from currents.models.post import Post
from currents.repositories.post_repo import PostRepository
from currents.services.validation import parse_pagination

__all__ = ["FeedPage", "FeedPaginator"]


@dataclass(frozen=True)
class FeedPage:
    """One page of the feed plus the flags a client needs to keep paging."""

    posts: list[Post]
    page: int
    limit: int
    has_next: bool

    @property
    def has_prev(self) -> bool:
        return self.page > 1


class FeedPaginator:
    """Offset pagination of active posts across all authors.

    Posts published while a client is paging may shift later pages; a single
    page is always one consistent query.
    """

    def __init__(self, repo: PostRepository) -> None:
        self.repo = repo

    def list_active_posts(self, page: Any = 1, page_size: Any = 20) -> FeedPage:
        """Return page ``page`` of ``page_size`` active posts.

        Raises:
            ValidationError: If ``page`` < 1 or ``page_size`` is outside 1..100.
        """
        params = parse_pagination(page, page_size)
        rows = self.repo.list_active_paginated(params.page, params.limit, lookahead=1)
        return FeedPage(
            posts=rows[: params.limit],
            page=params.page,
            limit=params.limit,
            has_next=len(rows) > params.limit,
        )

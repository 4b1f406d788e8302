"""Slug derivation and collision handling for post URLs."""

from __future__ import annotations

import hashlib
import logging
import time
from collections.abc import Callable

from slugify import slugify as _slugify

from currents.models.post import SLUG_MAX_LENGTH

logger = logging.getLogger(__name__)

__all__ = ["fallback_slug", "resolve_unique", "slugify"]


def fallback_slug(title: str) -> str:
    """Return the stable slug used when a title has no usable characters."""
    digest = hashlib.sha256(title.encode("utf-8")).hexdigest()[:8]
    return f"post-{digest}"


def slugify(title: str) -> str:
    """Map a title to a lowercase, hyphenated, URL-safe identifier.

    Examples:
        >>> slugify("My First Post!")
        'my-first-post'
        >>> slugify("Test @ Post #1 - Special & Characters!")
        'test-post-1-special-characters'

    Titles with no usable characters fall back to ``fallback_slug``, so the
    result is never empty.
    """
    slug = _slugify(
        title or "",
        max_length=SLUG_MAX_LENGTH,
        separator="-",
        lowercase=True,
    )
    return slug or fallback_slug(title or "")


def resolve_unique(
    candidate: str,
    exists: Callable[[str], bool],
    max_attempts: int = 20,
) -> str:
    """Return ``candidate`` or the first free disambiguated variant of it.

    Tries ``candidate``, then ``candidate-2`` ... ``candidate-<max_attempts>``;
    if all of those are taken, appends a millisecond timestamp instead. A race
    that still collides is left for the store's unique index to reject.
    """
    if not exists(candidate):
        return candidate

    for counter in range(2, max_attempts + 1):
        option = f"{candidate}-{counter}"
        if not exists(option):
            return option

    token = int(time.time() * 1000)
    logger.info("Slug %r exhausted %d counters; using timestamp suffix", candidate, max_attempts)
    return f"{candidate}-{token}"

"""Plain-text helpers: derived excerpts and social preview card strings."""
from __future__ import annotations

from currents.schemas.og import OgCard

OG_TITLE_LIMIT = 60
OG_EXCERPT_LIMIT = 120
ELLIPSIS = "..."


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` characters, ending in an ellipsis when cut."""
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def derive_excerpt(content: str, length: int = 160) -> str | None:
    """Build an excerpt from the first ``length`` characters of ``content``."""
    if not content:
        return None
    excerpt = content[:length].strip()
    if len(content) > length:
        excerpt += ELLIPSIS
    return excerpt or None


def build_og_card(
    title: str | None,
    author: str | None,
    author_name: str | None = None,
    excerpt: str | None = None,
) -> OgCard:
    """Return the display strings for a post preview image."""
    display_author = author or "anonymous"
    return OgCard(
        title=truncate(title or "Untitled Post", OG_TITLE_LIMIT),
        author=display_author,
        author_name=author_name or display_author,
        excerpt=truncate(excerpt or "", OG_EXCERPT_LIMIT),
    )

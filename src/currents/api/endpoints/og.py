"""Social preview card text."""

from fastapi import APIRouter, Query

from currents.schemas.og import OgCard
from currents.services.text import build_og_card

router = APIRouter(prefix="/og", tags=["og"])


@router.get("", response_model=OgCard)
async def og_card(
    title: str | None = Query(None),
    author: str | None = Query(None),
    author_name: str | None = Query(None, alias="authorName"),
    excerpt: str | None = Query(None),
) -> OgCard:
    """Return the truncated strings a preview image renders for a post."""
    return build_og_card(title, author, author_name, excerpt)

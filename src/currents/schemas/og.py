"""Schema for social preview (Open Graph) card text."""

from pydantic import BaseModel


class OgCard(BaseModel):
    """Display strings for a post's preview image."""

    title: str
    author: str
    author_name: str
    excerpt: str

"""API endpoint modules."""

from .og import router as og_router
from .posts import router as posts_router
from .profiles import router as profiles_router

__all__ = [
    "og_router",
    "posts_router",
    "profiles_router",
]

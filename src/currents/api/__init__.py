"""HTTP API endpoints."""

from .endpoints import og_router, posts_router, profiles_router

__all__ = [
    "og_router",
    "posts_router",
    "profiles_router",
]

"""Data access helpers for author profiles."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from currents.core.errors import NotFoundError
from currents.models.profile import Profile
from currents.repositories.post_repo import store_errors

__all__ = ["ProfileRepository"]


class ProfileRepository:
    """Thin wrapper around database access for profile entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_id(self, profile_id: str) -> Profile | None:
        """Return a profile by identifier, or None."""
        with store_errors("fetch profile"):
            return self.session.get(Profile, profile_id)

    def find_by_username(self, username: str) -> Profile | None:
        """Return a profile by username, or None."""
        with store_errors("fetch profile by username"):
            result = self.session.execute(select(Profile).where(Profile.username == username))
            return result.scalars().first()

    def get_by_username(self, username: str) -> Profile:
        """Return a profile by username or raise ``NotFoundError``."""
        profile = self.find_by_username(username)
        if profile is None:
            raise NotFoundError("User not found")
        return profile

    def create(
        self,
        *,
        profile_id: str,
        username: str,
        email: str = "",
        full_name: str | None = None,
        bio: str | None = None,
        avatar_url: str | None = None,
    ) -> Profile:
        """Insert a new profile and return it."""
        profile = Profile(
            id=profile_id,
            username=username,
            email=email,
            full_name=full_name,
            bio=bio,
            avatar_url=avatar_url,
        )
        self.session.add(profile)
        with store_errors("create profile"):
            self.session.flush()
        return profile

    def delete(self, profile: Profile) -> None:
        """Remove a profile; the store cascades the delete to its posts."""
        self.session.delete(profile)
        with store_errors("delete profile"):
            self.session.flush()

"""CRUD-style helpers for managing author profiles."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from currents.core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from currents.models.profile import Profile
from currents.repositories.profile_repo import ProfileRepository
from currents.repositories.post_repo import store_errors
from currents.schemas.profile import ProfileCreate
from currents.services.validation import validate

logger = logging.getLogger(__name__)

__all__ = ["ProfileService"]


class ProfileService:
    """Profile lookups plus the ensure/delete operations used by the API."""

    def __init__(self, repo: ProfileRepository) -> None:
        self.repo = repo

    def get_by_username(self, username: str) -> Profile:
        """Return the profile registered under ``username``."""
        return self.repo.get_by_username(username)

    def ensure_profile(self, profile_id: str | None, data: Mapping[str, Any]) -> tuple[Profile, bool]:
        """Return the caller's profile, creating it on first use.

        Returns:
            The profile and whether it was created by this call.

        Raises:
            ValidationError: If the payload is invalid or the username is taken.
        """
        if not profile_id:
            raise UnauthorizedError("Authentication required", status_code=401)

        existing = self.repo.find_by_id(profile_id)
        if existing is not None:
            return existing, False

        payload = validate(ProfileCreate, data)
        if self.repo.find_by_username(payload.username) is not None:
            raise ValidationError.for_field("username", "Username is already taken")

        session = self.repo.session
        try:
            profile = self.repo.create(profile_id=profile_id, **payload.model_dump())
            with store_errors("create profile"):
                session.commit()
        except ConflictError:
            session.rollback()
            # Another request may have registered the same id in the meantime.
            existing = self.repo.find_by_id(profile_id)
            if existing is None:
                raise
            return existing, False

        logger.info("Created profile %s (%s)", profile.id, profile.username)
        return profile, True

    def delete_profile(self, profile_id: str | None) -> None:
        """Delete the caller's profile and, through the store, all of its posts."""
        if not profile_id:
            raise UnauthorizedError("Authentication required", status_code=401)
        profile = self.repo.find_by_id(profile_id)
        if profile is None:
            raise NotFoundError("User not found")

        session = self.repo.session
        try:
            self.repo.delete(profile)
            with store_errors("delete profile"):
                session.commit()
        except Exception:
            session.rollback()
            raise
        logger.info("Deleted profile %s", profile_id)

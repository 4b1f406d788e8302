"""Bearer token helpers for the authentication boundary.

Sign-in itself lives with the identity provider; this module only issues and
verifies the HS256 tokens whose ``sub`` claim carries the profile id.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from currents.core.errors import UnauthorizedError
from currents.core.settings import settings


def create_access_token(subject: str) -> str:
    """Create JWT access token for user authentication."""
    to_encode: dict[str, object] = {"sub": subject}
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_subject(token: str) -> str:
    """Return the verified ``sub`` claim of ``token``.

    Raises:
        UnauthorizedError: If the token is malformed, expired or has no subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise UnauthorizedError("Could not validate credentials", status_code=401) from err

    subject = payload.get("sub")
    if not subject or not isinstance(subject, str):
        raise UnauthorizedError("Could not validate credentials", status_code=401)
    return subject

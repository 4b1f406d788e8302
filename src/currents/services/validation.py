"""Input contracts for post writes and feed pagination.

Pydantic does the parsing; this module turns its failures into the
``ValidationError`` the rest of the application understands, with one
``{"field", "message"}`` entry per offending field.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from currents.core.errors import FieldError, ValidationError
from currents.schemas.post import PaginationParams, PostCreate, PostUpdate

ModelT = TypeVar("ModelT", bound=BaseModel)

__all__ = [
    "field_errors",
    "parse_pagination",
    "require_content",
    "validate",
    "validate_post_create",
    "validate_post_update",
]


def field_errors(exc: PydanticValidationError | Any) -> list[FieldError]:
    """Flatten pydantic error dicts into field/message pairs.

    Works for both ``pydantic.ValidationError`` and FastAPI's
    ``RequestValidationError``; ``body``/``query`` location prefixes are dropped.
    """
    results: list[FieldError] = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        ctx = error.get("ctx") or {}
        # Messages raised from our own validators arrive wrapped as "Value error, ...".
        if isinstance(ctx.get("error"), Exception):
            message = str(ctx["error"])
        else:
            message = str(error.get("msg", "Invalid value"))
        results.append({"field": ".".join(loc) or "body", "message": message})
    return results


def validate(model: type[ModelT], data: Mapping[str, Any], message: str | None = None) -> ModelT:
    """Parse ``data`` into ``model`` or raise ``ValidationError``."""
    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError(field_errors(exc), message=message) from exc


def validate_post_create(data: Mapping[str, Any]) -> PostCreate:
    """Validate a create/publish payload."""
    return validate(PostCreate, data)


def validate_post_update(data: Mapping[str, Any]) -> PostUpdate:
    """Validate a partial update payload; unknown fields are rejected."""
    return validate(PostUpdate, data)


def parse_pagination(page: Any = None, limit: Any = None) -> PaginationParams:
    """Coerce raw ``page``/``limit`` values, applying defaults only when absent."""
    raw: dict[str, Any] = {}
    if page is not None and page != "":
        raw["page"] = page
    if limit is not None and limit != "":
        raw["limit"] = limit
    return validate(PaginationParams, raw, message="Invalid pagination parameters")


def require_content(content: str | None) -> str:
    """Return ``content`` when it can be published, else raise."""
    if content is None or not content.strip():
        raise ValidationError.for_field("content", "Please enter some content")
    return content

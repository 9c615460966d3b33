"""
Schema validation for inbound payloads and outbound forms.
"""

from collections.abc import Mapping
from typing import Any, TypeVar

import pydantic

from core.errors import ValidationError

M = TypeVar("M", bound=pydantic.BaseModel)


def format_issues(error: pydantic.ValidationError) -> list[str]:
    """Flatten pydantic errors into 'field.path: message' lines."""
    issues = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "<root>"
        issues.append(f"{location}: {detail['msg']}")
    return issues


def parse_dto(schema: type[M], payload: Any) -> M:
    """
    Validate a remote store payload against its DTO schema.

    Raises:
        ValidationError: payload shape does not match the schema
    """
    if isinstance(payload, schema):
        return payload
    if not isinstance(payload, Mapping):
        raise ValidationError(
            f"{schema.__name__} payload must be an object",
            [f"<root>: got {type(payload).__name__}"],
        )
    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid {schema.__name__} payload", format_issues(e)) from e


def validate_form(schema: type[M], data: Mapping[str, Any]) -> M:
    """
    Validate user-submitted form data before a write request.

    Raises:
        ValidationError: one or more fields are missing or invalid
    """
    try:
        return schema.model_validate(dict(data))
    except pydantic.ValidationError as e:
        raise ValidationError(f"{schema.__name__} validation failed", format_issues(e)) from e

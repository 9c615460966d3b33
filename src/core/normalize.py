"""
Value normalizers for irregular remote store fields.

Pure functions: colors, phone numbers, foreign-key references, legacy status
aliases and role detection.
"""

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from core.config import (
    DEFAULT_ACCENT_COLOR,
    EMPLOYEE_TYPE_ROLES,
    PROJECT_STATUS_ALIASES,
    TASK_STATUS_ALIASES,
)

HEX_DIGITS = re.compile(r"^(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")

ROLE_ADMIN = "admin"
ROLE_OFFICE_CREW = "officeCrew"
ROLE_FIELD_CREW = "fieldCrew"

REFERENCE_ID_KEYS = ("unique_id", "uniqueId", "id", "_id")


def normalize_color(value: str | None, default: str = DEFAULT_ACCENT_COLOR) -> str:
    """
    Normalize a color string to '#'-prefixed hex where possible.

    "#abc" -> "#abc", "59779F" -> "#59779F", "" -> default, "red" -> "red".
    """
    if not value:
        return default
    if value.startswith("#"):
        return value
    if HEX_DIGITS.match(value):
        return f"#{value}"
    return value


def normalize_phone(value: str | int | float | None) -> str | None:
    """Coerce a string-or-number phone field to a string; 0 becomes "0"."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return str(round(value))
    return None


def resolve_reference(ref: Any) -> str | None:
    """
    Reduce a foreign-key reference to its bare id.

    References arrive as a bare id string or as an object carrying an id plus a
    display label ({"unique_id": ..., "text": ...}); the label is dropped.
    """
    if ref is None:
        return None
    if isinstance(ref, str):
        return ref or None
    if isinstance(ref, Mapping):
        for key in REFERENCE_ID_KEYS:
            candidate = ref.get(key)
            if isinstance(candidate, str) and candidate:
                return candidate
        return None
    candidate = getattr(ref, "unique_id", None)
    if isinstance(candidate, str) and candidate:
        return candidate
    return None


def resolve_references(refs: Iterable[Any] | None) -> list[str]:
    """Resolve a list of references, dropping empty ones."""
    if not refs:
        return []
    resolved = (resolve_reference(ref) for ref in refs)
    return [ref_id for ref_id in resolved if ref_id]


def normalize_task_status(status: str) -> str:
    """Map legacy task status aliases ("Scheduled") to canonical values."""
    return TASK_STATUS_ALIASES.get(status, status)


def normalize_project_status(status: str) -> str:
    """Map legacy project status aliases ("Pending") to canonical values."""
    return PROJECT_STATUS_ALIASES.get(status, status)


def employee_type_to_role(employee_type: str | None) -> str:
    """Map the store's employee-type text to a role; unknown -> field crew."""
    if not employee_type:
        return ROLE_FIELD_CREW
    return EMPLOYEE_TYPE_ROLES.get(employee_type, ROLE_FIELD_CREW)


def detect_role(
    user_id: str,
    employee_type: str | None,
    company_admin_ids: Iterable[str] | None = None,
) -> str:
    """
    Resolve a user's role.

    Priority:
    1. user id in the company's admin list -> admin (wins over employee type)
    2. employee type mapped via EMPLOYEE_TYPE_ROLES
    3. field crew
    """
    if company_admin_ids is not None and user_id in set(company_admin_ids):
        return ROLE_ADMIN
    return employee_type_to_role(employee_type)

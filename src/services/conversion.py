"""
DTO -> domain model conversion (and the reverse mapping for writes).

Every *_dto_to_model function accepts a DTO instance or a raw mapping (which
is validated against the DTO schema first) and returns the domain model, or
None when the record cannot satisfy its structural invariants (missing id,
unparseable required date). Callers drop the None results; convert_many does
that and counts them.
"""

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

from core.config import (
    DEFAULT_ACCENT_COLOR,
    DEFAULT_CLIENT_NAME,
    DEFAULT_COMPANY_NAME,
    DEFAULT_EVENT_TITLE,
    DEFAULT_PROJECT_COLOR,
    DEFAULT_SUB_CLIENT_NAME,
)
from core.dates import parse_external_date, to_iso
from core.normalize import (
    detect_role,
    normalize_color,
    normalize_phone,
    normalize_project_status,
    normalize_task_status,
    resolve_reference,
    resolve_references,
)
from core.validation import parse_dto
from models.dto import (
    BubbleImage,
    CalendarEventDTO,
    ClientDTO,
    CompanyDTO,
    ProjectDTO,
    SubClientDTO,
    TaskDTO,
    TaskTypeDTO,
    UserDTO,
    address_coordinates,
    address_text,
)
from models.entities import (
    CalendarEvent,
    Client,
    Company,
    Project,
    SubClient,
    Task,
    TaskType,
    User,
)
from models.enums import (
    PaymentSchedule,
    ProjectStatus,
    SubscriptionPlan,
    SubscriptionStatus,
    TaskStatus,
    UserRole,
    UserType,
    enum_values,
)

logger = logging.getLogger(__name__)

M = TypeVar("M")

PROJECT_STATUSES = enum_values(ProjectStatus)
TASK_STATUSES = enum_values(TaskStatus)
SUBSCRIPTION_STATUSES = enum_values(SubscriptionStatus)
SUBSCRIPTION_PLANS = enum_values(SubscriptionPlan)
PAYMENT_SCHEDULES = enum_values(PaymentSchedule)
USER_TYPES = enum_values(UserType)


# =============================================================================
# HELPERS
# =============================================================================


def _completion_percent(value: int | float | str | None) -> float:
    """Completion as 0-100; numeric strings accepted, anything else is 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        percent = float(value)
    except ValueError:
        return 0
    if percent != percent:  # NaN
        return 0
    return min(100.0, max(0.0, percent))


def _lowercase_choice(value: str | None, choices: set[str]) -> str | None:
    if not value:
        return None
    normalized = value.strip().lower()
    return normalized if normalized in choices else None


def _logo_url(logo: BubbleImage | str | None) -> str | None:
    if isinstance(logo, str):
        return logo or None
    if logo is None:
        return None
    return logo.url or None


# =============================================================================
# PROJECT
# =============================================================================


def project_dto_to_model(dto: ProjectDTO | Mapping[str, Any]) -> Project | None:
    dto = parse_dto(ProjectDTO, dto)
    if not dto.id:
        return None

    status = normalize_project_status(dto.status or "")
    latitude, longitude = address_coordinates(dto.address)

    return Project(
        id=dto.id,
        name=dto.project_name or "",
        address=address_text(dto.address),
        latitude=latitude,
        longitude=longitude,
        client_id=resolve_reference(dto.client),
        client_name=dto.client_name,
        company_id=resolve_reference(dto.company) or "",
        status=status if status in PROJECT_STATUSES else ProjectStatus.RFQ,
        start_date=parse_external_date(dto.start_date),
        completion=_completion_percent(dto.completion),
        task_ids=resolve_references(dto.tasks),
        calendar_event_ids=resolve_references(dto.calendar_events),
        image_urls=[url for url in dto.project_images or [] if url],
        all_day=bool(dto.all_day),
        duration=dto.duration,
        description=dto.description,
        notes=dto.team_notes,
        deleted_at=parse_external_date(dto.deleted_at),
    )


# =============================================================================
# TASK
# =============================================================================


def task_dto_to_model(
    dto: TaskDTO | Mapping[str, Any],
    default_color: str = DEFAULT_ACCENT_COLOR,
) -> Task | None:
    dto = parse_dto(TaskDTO, dto)
    if not dto.id:
        return None

    status = normalize_task_status(dto.status or "")

    return Task(
        id=dto.id,
        project_id=resolve_reference(dto.project_id) or "",
        calendar_event_id=resolve_reference(dto.calendar_event_id),
        company_id=resolve_reference(dto.company_id) or "",
        status=status if status in TASK_STATUSES else TaskStatus.BOOKED,
        color=normalize_color(dto.task_color, default=default_color),
        task_index=dto.task_index,
        notes=dto.task_notes,
        team_member_ids=resolve_references(dto.team_members),
        task_type_id=resolve_reference(dto.type) or "",
        deleted_at=parse_external_date(dto.deleted_at),
    )


# =============================================================================
# CALENDAR EVENT
# =============================================================================


def _event_duration(value: int | float | None) -> int:
    # Non-finite values (NaN/Infinity from the JSON decoder) count as one day
    if not value or not math.isfinite(value):
        return 1
    return max(1, round(value))


def calendar_event_dto_to_model(dto: CalendarEventDTO | Mapping[str, Any]) -> CalendarEvent | None:
    """
    Convert a calendar event, repairing reversed date ranges.

    Returns None when id, start or end is missing or a date does not parse.
    """
    dto = parse_dto(CalendarEventDTO, dto)
    if not dto.id:
        return None
    if dto.start_date in (None, "") or dto.end_date in (None, ""):
        return None

    start = parse_external_date(dto.start_date)
    end = parse_external_date(dto.end_date)
    if start is None or end is None:
        return None
    if end < start:
        start, end = end, start

    return CalendarEvent(
        id=dto.id,
        color=normalize_color(dto.color),
        company_id=resolve_reference(dto.company_id) or "",
        project_id=resolve_reference(dto.project_id) or "",
        task_id=resolve_reference(dto.task_id),
        duration=_event_duration(dto.duration),
        start_date=start,
        end_date=end,
        title=(dto.title or "").strip() or DEFAULT_EVENT_TITLE,
        team_member_ids=resolve_references(dto.team_members),
        deleted_at=parse_external_date(dto.deleted_at),
    )


# =============================================================================
# CLIENTS
# =============================================================================


def client_dto_to_model(dto: ClientDTO | Mapping[str, Any]) -> Client | None:
    dto = parse_dto(ClientDTO, dto)
    if not dto.id:
        return None

    latitude, longitude = address_coordinates(dto.address)

    return Client(
        id=dto.id,
        name=dto.name or DEFAULT_CLIENT_NAME,
        email=dto.email_address,
        phone=normalize_phone(dto.phone_number),
        address=address_text(dto.address),
        latitude=latitude,
        longitude=longitude,
        company_id=resolve_reference(dto.parent_company),
        sub_client_ids=resolve_references(dto.sub_clients),
        notes=dto.notes,
        avatar_url=dto.avatar,
        created_at=parse_external_date(dto.created_date),
        deleted_at=parse_external_date(dto.deleted_at),
    )


def sub_client_dto_to_model(dto: SubClientDTO | Mapping[str, Any]) -> SubClient | None:
    dto = parse_dto(SubClientDTO, dto)
    if not dto.id:
        return None

    return SubClient(
        id=dto.id,
        name=dto.name or DEFAULT_SUB_CLIENT_NAME,
        title=dto.title,
        email=dto.email_address,
        phone=normalize_phone(dto.phone_number),
        address=address_text(dto.address),
        client_id=resolve_reference(dto.parent_client),
        deleted_at=parse_external_date(dto.deleted_at),
    )


# =============================================================================
# USER
# =============================================================================


def user_dto_to_model(
    dto: UserDTO | Mapping[str, Any],
    company_admin_ids: Iterable[str] | None = None,
) -> User | None:
    """
    Convert a user, deriving the role.

    Args:
        dto: raw user record
        company_admin_ids: the company's admin list; membership overrides the
            user's employee type
    """
    dto = parse_dto(UserDTO, dto)
    if not dto.id:
        return None

    # authentication.email.email is the login address and wins over the profile field
    auth_email = None
    if dto.authentication and dto.authentication.email:
        auth_email = dto.authentication.email.email

    return User(
        id=dto.id,
        first_name=dto.name_first or "",
        last_name=dto.name_last or "",
        email=auth_email or dto.email or None,
        phone=normalize_phone(dto.phone),
        company_id=resolve_reference(dto.company),
        role=UserRole(detect_role(dto.id, dto.employee_type, company_admin_ids)),
        avatar_url=dto.avatar,
        user_type=dto.user_type if dto.user_type in USER_TYPES else None,
        user_color=dto.user_color,
        deleted_at=parse_external_date(dto.deleted_at),
    )


# =============================================================================
# COMPANY
# =============================================================================


def company_dto_to_model(dto: CompanyDTO | Mapping[str, Any]) -> Company | None:
    dto = parse_dto(CompanyDTO, dto)
    if not dto.id:
        return None

    latitude, longitude = address_coordinates(dto.location)
    period = dto.subscription_period

    return Company(
        id=dto.id,
        name=dto.company_name or DEFAULT_COMPANY_NAME,
        external_id=dto.company_id,
        location=address_text(dto.location),
        latitude=latitude,
        longitude=longitude,
        logo_url=_logo_url(dto.logo),
        default_project_color=dto.default_project_color or DEFAULT_PROJECT_COLOR,
        admin_ids=resolve_references(dto.admin),
        seated_employee_ids=resolve_references(dto.seated_employees),
        project_ids=resolve_references(dto.projects),
        task_type_ids=resolve_references(dto.task_types),
        subscription_status=_lowercase_choice(dto.subscription_status, SUBSCRIPTION_STATUSES),
        subscription_plan=_lowercase_choice(dto.subscription_plan, SUBSCRIPTION_PLANS),
        subscription_period=period if period in PAYMENT_SCHEDULES else None,
        subscription_end=parse_external_date(dto.subscription_end),
        trial_start_date=parse_external_date(dto.trial_start_date),
        trial_end_date=parse_external_date(dto.trial_end_date),
        seat_grace_start_date=parse_external_date(dto.seat_grace_start_date),
        max_seats=dto.max_seats or 0,
        deleted_at=parse_external_date(dto.deleted_at),
    )


# =============================================================================
# TASK TYPE
# =============================================================================


def task_type_dto_to_model(dto: TaskTypeDTO | Mapping[str, Any]) -> TaskType | None:
    dto = parse_dto(TaskTypeDTO, dto)
    if not dto.id:
        return None

    return TaskType(
        id=dto.id,
        color=normalize_color(dto.color),
        display=dto.display or "",
        is_default=bool(dto.is_default),
        deleted_at=parse_external_date(dto.deleted_at),
    )


# =============================================================================
# BATCHES
# =============================================================================


@dataclass
class ConversionBatch:
    """Converted records plus the ids of the ones that were skipped."""

    items: list = field(default_factory=list)
    skipped_ids: list[str | None] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.skipped_ids)


def convert_many(
    converter: Callable[..., M | None],
    records: Iterable[Any],
    **kwargs: Any,
) -> ConversionBatch:
    """
    Convert a list of records, dropping the ones that convert to None.

    Schema violations (ValidationError) still propagate; only structurally
    incomplete records are skipped.
    """
    batch = ConversionBatch()
    for record in records:
        model = converter(record, **kwargs)
        if model is None:
            record_id = record.get("_id") if isinstance(record, Mapping) else getattr(record, "id", None)
            batch.skipped_ids.append(record_id)
            continue
        batch.items.append(model)

    if batch.skipped:
        logger.warning(
            "%s skipped %d of %d records: %s",
            converter.__name__,
            batch.skipped,
            batch.skipped + len(batch.items),
            ", ".join(str(record_id) for record_id in batch.skipped_ids),
        )
    return batch


# =============================================================================
# MODEL -> DTO (writes)
# =============================================================================

# Form field -> store field, per entity
PROJECT_FIELDS = {
    "name": "projectName",
    "address": "address",
    "start_date": "startDate",
    "duration": "duration",
    "status": "status",
    "notes": "teamNotes",
    "client_id": "client",
    "company_id": "company",
    "all_day": "allDay",
    "description": "description",
    "completion": "completion",
    "deleted_at": "deletedAt",
}
TASK_FIELDS = {
    "project_id": "projectId",
    "company_id": "companyId",
    "calendar_event_id": "calendarEventId",
    "task_type_id": "type",
    "status": "status",
    "color": "taskColor",
    "notes": "taskNotes",
    "team_member_ids": "teamMembers",
    "task_index": "taskIndex",
    "deleted_at": "deletedAt",
}
CALENDAR_EVENT_FIELDS = {
    "project_id": "projectId",
    "company_id": "companyId",
    "task_id": "taskId",
    "title": "title",
    "start_date": "startDate",
    "end_date": "endDate",
    "color": "color",
    "duration": "duration",
    "team_member_ids": "teamMembers",
    "deleted_at": "deletedAt",
}
CLIENT_FIELDS = {
    "name": "name",
    "email": "emailAddress",
    "phone": "phoneNumber",
    "address": "address",
    "notes": "notes",
    "company_id": "parentCompany",
    "deleted_at": "deletedAt",
}
SUB_CLIENT_FIELDS = {
    "name": "name",
    "title": "title",
    "email": "emailAddress",
    "phone": "phoneNumber",
    "address": "address",
    "client_id": "parentClient",
    "deleted_at": "deletedAt",
}
TASK_TYPE_FIELDS = {
    "display": "display",
    "color": "color",
    "is_default": "isDefault",
    "deleted_at": "deletedAt",
}

# Fields the store holds as geographic address objects
ADDRESS_FIELDS = {"address"}


def _to_store_value(store_key: str, value: Any) -> Any:
    if isinstance(value, datetime):
        return to_iso(value)
    if isinstance(value, Enum):
        return value.value
    if store_key in ADDRESS_FIELDS and isinstance(value, str):
        return {"address": value}
    return value


def model_to_dto(fields: Mapping[str, Any], field_map: Mapping[str, str]) -> dict[str, Any]:
    """
    Map model/form fields onto store field names for a write request.

    Only keys present in fields are written; unknown keys are ignored.
    """
    dto: dict[str, Any] = {}
    for name, store_key in field_map.items():
        if name in fields:
            dto[store_key] = _to_store_value(store_key, fields[name])
    return dto


def project_model_to_dto(fields: Mapping[str, Any]) -> dict[str, Any]:
    return model_to_dto(fields, PROJECT_FIELDS)


def task_model_to_dto(fields: Mapping[str, Any]) -> dict[str, Any]:
    return model_to_dto(fields, TASK_FIELDS)


def calendar_event_model_to_dto(fields: Mapping[str, Any]) -> dict[str, Any]:
    return model_to_dto(fields, CALENDAR_EVENT_FIELDS)


def client_model_to_dto(fields: Mapping[str, Any]) -> dict[str, Any]:
    return model_to_dto(fields, CLIENT_FIELDS)


def sub_client_model_to_dto(fields: Mapping[str, Any]) -> dict[str, Any]:
    return model_to_dto(fields, SUB_CLIENT_FIELDS)


def task_type_model_to_dto(fields: Mapping[str, Any]) -> dict[str, Any]:
    return model_to_dto(fields, TASK_TYPE_FIELDS)

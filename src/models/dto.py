"""
Data transfer objects: payload shapes exactly as the remote store returns them.

Field names follow the store (camelCase, plus a few irregular keys such as
"_id", "Created Date" and "Display"); attributes are snake_case. Unknown
fields are ignored. Presence of ids and dates is checked by the converters,
not here, so one incomplete record can be skipped without failing a batch.

Quirks handled by the type declarations:
- references arrive as a bare id or as {"unique_id": ..., "text": ...}
- dates arrive as ISO strings, UNIX seconds or UNIX milliseconds
- SubClient/User phone numbers arrive as strings or numbers
- TaskType uses "_id" or "id", and "display" or "Display"
"""

from typing import Any, Generic, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Ambiguous external encodings
DateValue = str | int | float | None
PhoneValue = str | int | float | None


class BubbleModel(BaseModel):
    """Base for every store payload."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# PRIMITIVES
# =============================================================================


class ReferenceObject(BubbleModel):
    """Object form of a foreign key: id plus a display label."""

    unique_id: str = Field(validation_alias=AliasChoices("unique_id", "uniqueId", "id"))
    text: str | None = Field(default=None, validation_alias=AliasChoices("text", "label"))


# A foreign key: bare id string or ReferenceObject
BubbleReference = str | ReferenceObject


class BubbleAddress(BubbleModel):
    address: str = ""
    lat: float | None = None
    lng: float | None = None


class BubbleImage(BubbleModel):
    url: str | None = None
    filename: str | None = None


# An address sometimes arrives as plain text instead of a geographic object
AddressValue = BubbleAddress | str | None


def address_text(value: AddressValue) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    return value.address or None


def address_coordinates(value: AddressValue) -> tuple[float | None, float | None]:
    if isinstance(value, BubbleAddress):
        return value.lat, value.lng
    return None, None


# =============================================================================
# ENVELOPES
# =============================================================================


class ListPayload(BubbleModel, Generic[T]):
    """Unwrapped list response: {cursor, results, count, remaining}."""

    cursor: int = 0
    results: list[T] = Field(default_factory=list)
    count: int = 0
    remaining: int = 0


class ListEnvelope(BubbleModel, Generic[T]):
    response: ListPayload[T]


class ObjectEnvelope(BubbleModel, Generic[T]):
    response: T


class CreationResponse(BubbleModel):
    """POST /obj/<type> answers with just the new id."""

    status: str = ""
    id: str


class WorkflowResponse(BubbleModel):
    status: str = ""
    response: dict[str, Any] | None = None


# =============================================================================
# ENTITY DTOs
# =============================================================================


class ProjectDTO(BubbleModel):
    id: str | None = Field(default=None, alias="_id")
    project_name: str | None = None
    address: AddressValue = None
    all_day: bool | None = None
    client: BubbleReference | None = None
    client_name: str | None = None
    company: BubbleReference | None = None
    completion: int | float | str | None = None
    description: str | None = None
    start_date: DateValue = None
    status: str | None = None
    team_notes: str | None = None
    project_images: list[str] | None = None
    duration: int | float | None = None
    tasks: list[BubbleReference] | None = None
    calendar_events: list[BubbleReference] | None = None
    deleted_at: DateValue = None
    created_date: DateValue = Field(default=None, alias="Created Date")
    modified_date: DateValue = Field(default=None, alias="Modified Date")


class TaskDTO(BubbleModel):
    id: str | None = Field(default=None, alias="_id")
    calendar_event_id: BubbleReference | None = None
    company_id: BubbleReference | None = None
    project_id: BubbleReference | None = None
    status: str | None = None
    task_color: str | None = None
    task_index: int | None = None
    task_notes: str | None = None
    team_members: list[BubbleReference] | None = None
    type: BubbleReference | None = None
    deleted_at: DateValue = None


class CalendarEventDTO(BubbleModel):
    id: str | None = Field(default=None, alias="_id")
    color: str | None = None
    company_id: BubbleReference | None = None
    project_id: BubbleReference | None = None
    task_id: BubbleReference | None = None
    duration: int | float | None = None
    start_date: DateValue = None
    end_date: DateValue = None
    team_members: list[BubbleReference] | None = None
    title: str | None = None
    deleted_at: DateValue = None


class ClientDTO(BubbleModel):
    id: str | None = Field(default=None, alias="_id")
    name: str | None = None
    email_address: str | None = None
    phone_number: PhoneValue = None
    address: AddressValue = None
    parent_company: BubbleReference | None = None
    sub_clients: list[BubbleReference] | None = None
    notes: str | None = None
    avatar: str | None = None
    deleted_at: DateValue = None
    created_date: DateValue = Field(default=None, alias="Created Date")


class SubClientDTO(BubbleModel):
    id: str | None = Field(default=None, alias="_id")
    name: str | None = None
    title: str | None = None
    email_address: str | None = None
    phone_number: PhoneValue = None
    address: AddressValue = None
    parent_client: BubbleReference | None = None
    deleted_at: DateValue = None


class EmailCredential(BubbleModel):
    email: str | None = None
    email_confirmed: bool | None = Field(default=None, alias="email_confirmed")


class Authentication(BubbleModel):
    email: EmailCredential | None = None


class UserDTO(BubbleModel):
    id: str | None = Field(default=None, alias="_id")
    name_first: str | None = None
    name_last: str | None = None
    employee_type: str | None = None
    user_type: str | None = None
    avatar: str | None = None
    company: BubbleReference | None = None
    email: str | None = None
    phone: PhoneValue = None
    user_color: str | None = None
    authentication: Authentication | None = None
    deleted_at: DateValue = None


class CompanyDTO(BubbleModel):
    id: str | None = Field(default=None, alias="_id")
    company_name: str | None = None
    company_id: str | None = None
    location: AddressValue = None
    logo: BubbleImage | str | None = None
    projects: list[BubbleReference] | None = None
    admin: list[BubbleReference] | None = None
    seated_employees: list[BubbleReference] | None = None
    task_types: list[BubbleReference] | None = None
    default_project_color: str | None = None
    subscription_status: str | None = None
    subscription_plan: str | None = None
    subscription_period: str | None = None
    subscription_end: DateValue = None
    max_seats: int | None = None
    seat_grace_start_date: DateValue = None
    trial_start_date: DateValue = None
    trial_end_date: DateValue = None
    deleted_at: DateValue = None


class TaskTypeDTO(BubbleModel):
    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    color: str
    display: str | None = Field(default=None, validation_alias=AliasChoices("display", "Display"))
    is_default: bool | None = None
    deleted_at: DateValue = None

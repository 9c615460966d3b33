"""
Form schemas for outbound writes.

Create/update payloads are validated here before a write request is sent.
Update forms carry the target id and leave every other field optional; only
the fields that were set are written back.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from core.config import DEFAULT_ACCENT_COLOR
from core.dates import as_utc
from models.enums import ProjectStatus, TaskStatus

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

# Blank email inputs are allowed and mean "no email"
OptionalEmail = EmailStr | Literal[""] | None


class Form(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class UpdateForm(Form):
    id: str = Field(min_length=1)


# =============================================================================
# PROJECTS
# =============================================================================


class CreateProjectForm(Form):
    name: str = Field(min_length=1, max_length=200)
    company_id: str = Field(min_length=1)
    address: str | None = None
    start_date: datetime | None = None
    duration: float | None = Field(default=None, ge=1)
    status: ProjectStatus = ProjectStatus.RFQ
    notes: str | None = None
    client_id: str | None = None
    all_day: bool = True
    description: str | None = None


class UpdateProjectForm(UpdateForm):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    address: str | None = None
    start_date: datetime | None = None
    duration: float | None = Field(default=None, ge=1)
    status: ProjectStatus | None = None
    notes: str | None = None
    client_id: str | None = None
    all_day: bool | None = None
    description: str | None = None
    completion: float | None = Field(default=None, ge=0, le=100)


# =============================================================================
# TASKS
# =============================================================================


class CreateTaskForm(Form):
    project_id: str = Field(min_length=1)
    company_id: str = Field(min_length=1)
    task_type_id: str = Field(min_length=1)
    status: TaskStatus = TaskStatus.BOOKED
    color: str = DEFAULT_ACCENT_COLOR
    notes: str | None = None
    team_member_ids: list[str] = Field(default_factory=list)


class UpdateTaskForm(UpdateForm):
    status: TaskStatus | None = None
    color: str | None = None
    notes: str | None = None
    task_type_id: str | None = None
    team_member_ids: list[str] | None = None
    task_index: int | None = None


# =============================================================================
# CALENDAR EVENTS
# =============================================================================


class CreateCalendarEventForm(Form):
    project_id: str = Field(min_length=1)
    company_id: str = Field(min_length=1)
    task_id: str | None = None
    title: str = Field(min_length=1, max_length=200)
    start_date: datetime
    end_date: datetime | None = None
    color: str = DEFAULT_ACCENT_COLOR
    duration: int = Field(default=1, ge=1)
    team_member_ids: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_date_order(self) -> "CreateCalendarEventForm":
        if self.end_date is not None and as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("end_date must not precede start_date")
        return self


class UpdateCalendarEventForm(UpdateForm):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    start_date: datetime | None = None
    end_date: datetime | None = None
    color: str | None = None
    duration: int | None = Field(default=None, ge=1)
    team_member_ids: list[str] | None = None

    @model_validator(mode="after")
    def check_date_order(self) -> "UpdateCalendarEventForm":
        if self.start_date and self.end_date and as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("end_date must not precede start_date")
        return self


# =============================================================================
# CLIENTS
# =============================================================================


class CreateClientForm(Form):
    name: str = Field(min_length=1, max_length=200)
    company_id: str = Field(min_length=1)
    email: OptionalEmail = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class UpdateClientForm(UpdateForm):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: OptionalEmail = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class CreateSubClientForm(Form):
    name: str = Field(min_length=1, max_length=200)
    client_id: str = Field(min_length=1)
    title: str | None = None
    email: OptionalEmail = None
    phone: str | None = None
    address: str | None = None


class UpdateSubClientForm(UpdateForm):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    title: str | None = None
    email: OptionalEmail = None
    phone: str | None = None
    address: str | None = None


# =============================================================================
# TASK TYPES
# =============================================================================


class CreateTaskTypeForm(Form):
    display: str = Field(min_length=1, max_length=100)
    color: str = Field(pattern=HEX_COLOR_PATTERN)
    company_id: str = Field(min_length=1)
    is_default: bool = False


class UpdateTaskTypeForm(UpdateForm):
    display: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    is_default: bool | None = None

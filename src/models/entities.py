"""
Domain models: the canonical, internally consistent entity shapes handed to
the rest of the application.

Built fresh by the converters on every fetch; never mutated in place. Soft
deletion is represented only by deleted_at.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.config import DEFAULT_ACCENT_COLOR, DEFAULT_EVENT_TITLE, DEFAULT_PROJECT_COLOR
from models.enums import (
    PaymentSchedule,
    ProjectStatus,
    SubscriptionPlan,
    SubscriptionStatus,
    TaskStatus,
    UserRole,
    UserType,
)


class Entity(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class Project(Entity):
    name: str
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    client_id: str | None = None
    client_name: str | None = None
    company_id: str = ""
    status: ProjectStatus = ProjectStatus.RFQ
    start_date: datetime | None = None
    completion: float = Field(default=0, ge=0, le=100)
    task_ids: list[str] = Field(default_factory=list)
    calendar_event_ids: list[str] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list)
    all_day: bool = False
    duration: float | None = None
    description: str | None = None
    notes: str | None = None


class Task(Entity):
    project_id: str = ""
    calendar_event_id: str | None = None
    company_id: str = ""
    status: TaskStatus = TaskStatus.BOOKED
    color: str = DEFAULT_ACCENT_COLOR
    task_index: int | None = None
    notes: str | None = None
    team_member_ids: list[str] = Field(default_factory=list)
    task_type_id: str = ""


class CalendarEvent(Entity):
    """A scheduled span on the calendar; start_date <= end_date always holds."""

    color: str = DEFAULT_ACCENT_COLOR
    company_id: str = ""
    project_id: str = ""
    task_id: str | None = None
    duration: int = Field(default=1, ge=1)
    start_date: datetime
    end_date: datetime
    title: str = Field(default=DEFAULT_EVENT_TITLE, min_length=1)
    team_member_ids: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_date_order(self) -> "CalendarEvent":
        if self.end_date < self.start_date:
            raise ValueError("end_date precedes start_date")
        return self


class Client(Entity):
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    company_id: str | None = None
    sub_client_ids: list[str] = Field(default_factory=list)
    notes: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None


class SubClient(Entity):
    name: str
    title: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    client_id: str | None = None


class User(Entity):
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    phone: str | None = None
    company_id: str | None = None
    role: UserRole = UserRole.FIELD_CREW
    avatar_url: str | None = None
    user_type: UserType | None = None
    user_color: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Company(Entity):
    name: str
    external_id: str | None = None
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    logo_url: str | None = None
    default_project_color: str = DEFAULT_PROJECT_COLOR
    admin_ids: list[str] = Field(default_factory=list)
    seated_employee_ids: list[str] = Field(default_factory=list)
    project_ids: list[str] = Field(default_factory=list)
    task_type_ids: list[str] = Field(default_factory=list)
    subscription_status: SubscriptionStatus | None = None
    subscription_plan: SubscriptionPlan | None = None
    subscription_period: PaymentSchedule | None = None
    subscription_end: datetime | None = None
    trial_start_date: datetime | None = None
    trial_end_date: datetime | None = None
    seat_grace_start_date: datetime | None = None
    max_seats: int = 0


class TaskType(Entity):
    color: str = DEFAULT_ACCENT_COLOR
    display: str = ""
    is_default: bool = False

"""
Enumerations used by the domain models.

Values are the exact strings the remote store emits and accepts, except for
UserRole which is derived locally.
"""

from enum import Enum


class ProjectStatus(str, Enum):
    RFQ = "RFQ"
    ESTIMATED = "Estimated"
    ACCEPTED = "Accepted"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CLOSED = "Closed"
    ARCHIVED = "Archived"


class TaskStatus(str, Enum):
    BOOKED = "Booked"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class UserRole(str, Enum):
    ADMIN = "admin"
    OFFICE_CREW = "officeCrew"
    FIELD_CREW = "fieldCrew"


class UserType(str, Enum):
    EMPLOYEE = "Employee"
    COMPANY = "Company"


class SubscriptionStatus(str, Enum):
    TRIAL = "trial"
    ACTIVE = "active"
    GRACE = "grace"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class SubscriptionPlan(str, Enum):
    TRIAL = "trial"
    STARTER = "starter"
    TEAM = "team"
    BUSINESS = "business"


class PaymentSchedule(str, Enum):
    MONTHLY = "Monthly"
    ANNUAL = "Annual"


def enum_values(enum_cls: type[Enum]) -> set[str]:
    return {member.value for member in enum_cls}

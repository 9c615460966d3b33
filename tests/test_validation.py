"""Tests for schema validation, forms and domain model invariants."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from core.errors import ValidationError
from core.validation import parse_dto, validate_form
from models.dto import ListPayload, ProjectDTO, TaskTypeDTO
from models.entities import CalendarEvent, User
from models.enums import UserRole
from models.forms import (
    CreateCalendarEventForm,
    CreateClientForm,
    CreateProjectForm,
    CreateTaskTypeForm,
    UpdateCalendarEventForm,
    UpdateProjectForm,
)

UTC = timezone.utc


class TestParseDto:
    def test_camel_case_fields(self):
        dto = parse_dto(ProjectDTO, {"_id": "p1", "projectName": "Roof", "teamNotes": "ladder"})
        assert dto.id == "p1"
        assert dto.project_name == "Roof"
        assert dto.team_notes == "ladder"

    def test_unknown_fields_ignored(self):
        assert parse_dto(ProjectDTO, {"_id": "p1", "somethingNew": 1}).id == "p1"

    def test_irregular_keys(self):
        dto = parse_dto(ProjectDTO, {"_id": "p1", "Created Date": "2025-01-01T00:00:00Z"})
        assert dto.created_date == "2025-01-01T00:00:00Z"

    def test_list_payload(self):
        listing = parse_dto(ListPayload[dict], {"cursor": 0, "results": [{"_id": "a"}], "count": 1, "remaining": 0})
        assert listing.results == [{"_id": "a"}]

    def test_shape_mismatch_lists_issues(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_dto(ProjectDTO, {"_id": "p1", "allDay": "sometimes"})
        assert exc_info.value.issues[0].startswith("allDay")
        assert "allDay" in str(exc_info.value)

    def test_non_mapping_rejected(self):
        with pytest.raises(ValidationError):
            parse_dto(ProjectDTO, ["p1"])

    def test_dto_instance_passes_through(self):
        dto = TaskTypeDTO.model_validate({"_id": "tt1", "color": "#fff"})
        assert parse_dto(TaskTypeDTO, dto) is dto


class TestForms:
    def test_project_defaults(self):
        form = validate_form(CreateProjectForm, {"name": "Roof", "company_id": "co1"})
        assert form.status.value == "RFQ"
        assert form.all_day is True

    def test_project_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            validate_form(CreateProjectForm, {"name": "Roof", "company_id": "co1", "bogus": True})

    def test_update_requires_id(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_form(UpdateProjectForm, {"name": "Roof"})
        assert any(issue.startswith("id") for issue in exc_info.value.issues)

    def test_update_completion_range(self):
        with pytest.raises(ValidationError):
            validate_form(UpdateProjectForm, {"id": "p1", "completion": 120})

    def test_event_end_before_start(self):
        with pytest.raises(ValidationError):
            validate_form(
                CreateCalendarEventForm,
                {
                    "project_id": "p1",
                    "company_id": "co1",
                    "title": "Install",
                    "start_date": "2025-11-20T00:00:00Z",
                    "end_date": "2025-11-18T00:00:00Z",
                },
            )

    def test_event_mixed_offsets_compared_in_utc(self):
        form = validate_form(
            CreateCalendarEventForm,
            {
                "project_id": "p1",
                "company_id": "co1",
                "title": "Install",
                "start_date": "2025-11-18T09:00:00Z",
                "end_date": "2025-11-19T09:00:00",
            },
        )
        assert form.end_date == datetime(2025, 11, 19, 9)

    def test_event_mixed_offsets_reversed(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_form(
                CreateCalendarEventForm,
                {
                    "project_id": "p1",
                    "company_id": "co1",
                    "title": "Install",
                    "start_date": "2025-11-19T09:00:00Z",
                    "end_date": "2025-11-18T09:00:00",
                },
            )
        assert "end_date must not precede start_date" in str(exc_info.value)

    def test_event_update_mixed_offsets_reversed(self):
        with pytest.raises(ValidationError):
            validate_form(
                UpdateCalendarEventForm,
                {"id": "e1", "start_date": "2025-11-19T09:00:00", "end_date": "2025-11-18T09:00:00+00:00"},
            )

    @pytest.mark.parametrize("email", ["", None, "crew@example.com"])
    def test_client_email_optional(self, email):
        form = validate_form(CreateClientForm, {"name": "Acme", "company_id": "co1", "email": email})
        assert form.email == email

    @pytest.mark.parametrize("color", ["#B5A381", "#b5a381"])
    def test_task_type_color_valid(self, color):
        assert validate_form(CreateTaskTypeForm, {"display": "Quote", "color": color, "company_id": "co1"})

    @pytest.mark.parametrize("color", ["B5A381", "#FFF", "red"])
    def test_task_type_color_invalid(self, color):
        with pytest.raises(ValidationError):
            validate_form(CreateTaskTypeForm, {"display": "Quote", "color": color, "company_id": "co1"})


class TestEntities:
    def test_calendar_event_rejects_reversed_dates(self):
        with pytest.raises(PydanticValidationError):
            CalendarEvent(
                id="e1",
                start_date=datetime(2025, 11, 20, tzinfo=UTC),
                end_date=datetime(2025, 11, 18, tzinfo=UTC),
            )

    def test_calendar_event_requires_id(self):
        with pytest.raises(PydanticValidationError):
            CalendarEvent(
                id="",
                start_date=datetime(2025, 11, 18, tzinfo=UTC),
                end_date=datetime(2025, 11, 18, tzinfo=UTC),
            )

    def test_models_are_frozen(self):
        user = User(id="u1", first_name="Sam")
        with pytest.raises(PydanticValidationError):
            user.first_name = "Alex"

    def test_soft_delete_flag(self):
        assert User(id="u1", deleted_at=datetime(2025, 1, 1, tzinfo=UTC)).is_deleted
        assert not User(id="u1").is_deleted

    def test_is_admin_follows_role(self):
        assert User(id="u1", role=UserRole.ADMIN).is_admin
        assert not User(id="u1", role=UserRole.OFFICE_CREW).is_admin

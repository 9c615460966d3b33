"""Tests for value normalizers."""

import pytest

from core.config import DEFAULT_ACCENT_COLOR
from core.normalize import (
    detect_role,
    employee_type_to_role,
    normalize_color,
    normalize_phone,
    normalize_project_status,
    normalize_task_status,
    resolve_reference,
    resolve_references,
)
from models.dto import ReferenceObject


class TestNormalizeColor:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("#59779F", "#59779F"),
            ("#abc", "#abc"),
            ("59779F", "#59779F"),
            ("abc", "#abc"),
            ("red", "red"),
            ("", DEFAULT_ACCENT_COLOR),
            (None, DEFAULT_ACCENT_COLOR),
        ],
    )
    def test_values(self, value, expected):
        assert normalize_color(value) == expected

    @pytest.mark.parametrize("value", ["#59779F", "59779F", "abc", "red", "", None, "12345"])
    def test_idempotent(self, value):
        once = normalize_color(value)
        assert normalize_color(once) == once

    def test_custom_default(self):
        assert normalize_color(None, default="#000000") == "#000000"


class TestNormalizePhone:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("604-555-0100", "604-555-0100"),
            (6045550100, "6045550100"),
            (6045550100.0, "6045550100"),
            (0, "0"),
            (None, None),
        ],
    )
    def test_values(self, value, expected):
        assert normalize_phone(value) == expected


class TestResolveReference:
    def test_bare_id(self):
        assert resolve_reference("abc") == "abc"

    def test_mapping(self):
        assert resolve_reference({"unique_id": "abc", "text": "Label"}) == "abc"

    def test_reference_object(self):
        assert resolve_reference(ReferenceObject(unique_id="abc", text="Label")) == "abc"

    def test_empty(self):
        assert resolve_reference("") is None
        assert resolve_reference(None) is None
        assert resolve_reference({"text": "no id"}) is None

    def test_list_drops_empty(self):
        refs = ["a", "", {"unique_id": "b"}, None, {"text": "x"}]
        assert resolve_references(refs) == ["a", "b"]

    def test_list_none(self):
        assert resolve_references(None) == []


class TestStatusAliases:
    def test_scheduled_maps_to_booked(self):
        assert normalize_task_status("Scheduled") == "Booked"

    @pytest.mark.parametrize("status", ["Booked", "In Progress", "Completed", "Cancelled", "Whatever"])
    def test_other_task_statuses_unchanged(self, status):
        assert normalize_task_status(status) == status

    def test_pending_project_maps_to_rfq(self):
        assert normalize_project_status("Pending") == "RFQ"


class TestRoles:
    @pytest.mark.parametrize(
        "employee_type, expected",
        [
            ("Admin", "admin"),
            ("Office Crew", "officeCrew"),
            ("Field Crew", "fieldCrew"),
            ("Something Else", "fieldCrew"),
            (None, "fieldCrew"),
        ],
    )
    def test_employee_type_to_role(self, employee_type, expected):
        assert employee_type_to_role(employee_type) == expected

    def test_admin_list_wins_over_employee_type(self):
        assert detect_role("u1", "Field Crew", ["u1"]) == "admin"

    def test_not_in_admin_list_uses_employee_type(self):
        assert detect_role("u1", "Office Crew", ["u2"]) == "officeCrew"

    def test_no_admin_list(self):
        assert detect_role("u1", None) == "fieldCrew"

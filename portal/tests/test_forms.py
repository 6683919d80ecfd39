"""Tests for form validation, edit-session helpers and entity builders."""
from __future__ import annotations

import re

import pytest

from portal.forms import (
    FormValidationError,
    add_tech_tag,
    build_account,
    build_profile,
    build_project,
    build_stakeholder,
    new_id,
    remove_tech_tag,
    set_champion,
    set_financial,
    validate_account_form,
    validate_project_form,
    validate_stakeholder_form,
)
from portal.models import Account, Project, Stakeholder, StrategicProfile

ACCOUNT_FORM = {
    "account_name": "Acme Corp",
    "account_leader": "Ana",
    "delivery_unit": "DU1",
    "target_2026": 1000,
    "current_revenue": 800,
    "forecast_revenue": 600,
}

PROJECT_FORM = {
    "project_name": "Data Lake",
    "project_manager": "Riley",
    "project_summary": "Lakehouse migration",
    "tech_stack": ["Spark", "Delta"],
    "circle": "Data",
}

STAKEHOLDER_FORM = {
    "name": "Sam",
    "project_id": "proj-1",
    "designation": "CTO",
    "department": "Engineering",
    "value_chain_category": "Technology",
}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_account_ok(self):
        assert validate_account_form(ACCOUNT_FORM) == {}

    def test_account_missing_fields(self):
        errors = validate_account_form({"account_name": "  ", "target_2026": 0})
        assert errors == {
            "account_name": "Account name is required",
            "account_leader": "Account leader is required",
            "delivery_unit": "Delivery unit is required",
            "target_2026": "Target 2026 must be > 0",
        }

    def test_project_requires_a_technology(self):
        errors = validate_project_form({**PROJECT_FORM, "tech_stack": ["  "]})
        assert errors == {"tech_stack": "At least one technology is required"}

    def test_project_requires_circle(self):
        errors = validate_project_form({**PROJECT_FORM, "circle": ""})
        assert errors == {"circle": "Circle is required"}

    def test_stakeholder_requires_project(self):
        errors = validate_stakeholder_form({**STAKEHOLDER_FORM, "project_id": ""})
        assert errors == {"project_id": "Project selection is required"}

    def test_stakeholder_ok(self):
        assert validate_stakeholder_form(STAKEHOLDER_FORM) == {}


# ---------------------------------------------------------------------------
# Edit-session helpers
# ---------------------------------------------------------------------------


class TestEditHelpers:
    def test_forecast_edit_restamps_shortfall(self):
        values = set_financial({"target_2026": 1000, "forecast_revenue": 800, "shortfall": 200}, "forecast_revenue", 950)
        assert values["forecast_revenue"] == 950
        assert values["shortfall"] == 50

    def test_current_revenue_edit_leaves_shortfall(self):
        values = set_financial({"target_2026": 1000, "forecast_revenue": 800, "shortfall": 200}, "current_revenue", 10)
        assert values["shortfall"] == 200

    def test_set_champion_overwrites_score(self):
        values = set_champion({"relationship_score": 2, "connections": ["A"]}, True)
        assert values["is_champion"] is True
        assert values["relationship_score"] == 9
        assert set_champion(values, False)["relationship_score"] == 6

    def test_tech_tags(self):
        tags = add_tech_tag([], " Spark ")
        tags = add_tech_tag(tags, "Spark")
        tags = add_tech_tag(tags, "")
        tags = add_tech_tag(tags, "Kafka")
        assert tags == ["Spark", "Kafka"]
        assert remove_tech_tag(tags, "Spark") == ["Kafka"]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


class TestBuilders:
    def test_new_id_format(self):
        assert re.fullmatch(r"acc-\d{13}", new_id("acc"))

    def test_build_account_new(self):
        account = build_account(ACCOUNT_FORM)
        assert account.account_id.startswith("acc-")
        assert account.created_at
        assert account.updated_at == account.created_at
        assert account.shortfall == 400
        assert account.account_health_score == 75

    def test_build_account_edit_keeps_identity(self):
        existing = Account(account_id="acc-1", account_name="Old", created_at="2025-01-01", team_size=9)
        account = build_account({**ACCOUNT_FORM, "account_id": "hijack"}, existing)
        assert account.account_id == "acc-1"
        assert account.created_at == "2025-01-01"
        assert account.account_name == "Acme Corp"
        assert account.team_size == 9

    def test_build_account_invalid(self):
        with pytest.raises(FormValidationError) as exc_info:
            build_account({**ACCOUNT_FORM, "target_2026": -5})
        assert exc_info.value.errors == {"target_2026": "Target 2026 must be > 0"}

    def test_build_profile(self):
        profile = build_profile({**ACCOUNT_FORM, "executive_sponsor": "Pat", "qbr_happening": "Yes"})
        assert profile.executive_sponsor == "Pat"
        assert profile.qbr_happening == "Yes"
        assert profile.account_id == ""

    def test_build_profile_edit(self):
        existing = StrategicProfile(id="sd-1", executive_sponsor="Pat")
        profile = build_profile({"influencer": "Dana", "id": "ignored"}, existing)
        assert profile.id == "sd-1"
        assert profile.executive_sponsor == "Pat"
        assert profile.influencer == "Dana"

    def test_build_project_new(self):
        project = build_project({**PROJECT_FORM, "status": "INACTIVE"}, "acc-1")
        assert project.project_id.startswith("proj-")
        assert project.account_id == "acc-1"
        assert project.status == "ACTIVE"

    def test_build_project_edit_keeps_status(self):
        existing = Project(project_id="proj-1", account_id="acc-1", status="INACTIVE", **PROJECT_FORM)
        project = build_project({**PROJECT_FORM, "project_name": "Lakehouse"}, "acc-1", existing)
        assert project.project_id == "proj-1"
        assert project.status == "INACTIVE"
        assert project.project_name == "Lakehouse"

    def test_build_project_invalid(self):
        with pytest.raises(FormValidationError) as exc_info:
            build_project({**PROJECT_FORM, "tech_stack": []}, "acc-1")
        assert "tech_stack" in exc_info.value.errors

    def test_build_stakeholder_derives_fields(self):
        project = Project(project_id="proj-1", account_id="acc-1", **PROJECT_FORM)
        stakeholder = build_stakeholder(
            {**STAKEHOLDER_FORM, "is_champion": True, "relationship_score": 1},
            "acc-1",
            project_lookup={"proj-1": project}.get,
        )
        assert stakeholder.stakeholder_id.startswith("stk-")
        assert stakeholder.relationship_score == 8
        assert stakeholder.project_name == "Data Lake"

    def test_build_stakeholder_edit(self):
        existing = Stakeholder(stakeholder_id="stk-1", account_id="acc-1", created_at="2025-01-01", **STAKEHOLDER_FORM)
        stakeholder = build_stakeholder({**STAKEHOLDER_FORM, "name": "Sam Lee"}, "acc-1", existing=existing)
        assert stakeholder.stakeholder_id == "stk-1"
        assert stakeholder.created_at == "2025-01-01"
        assert stakeholder.name == "Sam Lee"
        assert stakeholder.relationship_score == 5

    def test_build_stakeholder_invalid(self):
        with pytest.raises(FormValidationError, match="Stakeholder name is required"):
            build_stakeholder({**STAKEHOLDER_FORM, "name": ""}, "acc-1")

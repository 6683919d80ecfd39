"""Form submission helpers: required-field validation and entity construction.

Validation runs before anything is sent to a store. A form with errors raises
:class:`FormValidationError` carrying a field -> message mapping, and nothing
is submitted. Builders stamp ids, timestamps and derived fields so callers
never set those by hand.
"""
from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from portal.models import Account, Project, Stakeholder, StrategicProfile
from portal.rules import derived_financials, relationship_score, shortfall
from portal.store import now_iso

_PROFILE_KEYS = set(StrategicProfile.model_fields) - {"id", "account_id", "account_name", "created_at", "updated_at"}


class FormValidationError(ValueError):
    """Form failed required-field checks; ``errors`` maps field to message."""
    def __init__(self, errors: dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


def new_id(prefix: str) -> str:
    """Client-side id in the ``<prefix>-<epoch millis>`` format."""
    return f"{prefix}-{int(time.time() * 1000)}"


def _blank(value: Any) -> bool:
    return not str(value or "").strip()


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_account_form(form: dict[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(form.get("account_name")):
        errors["account_name"] = "Account name is required"
    if _blank(form.get("account_leader")):
        errors["account_leader"] = "Account leader is required"
    if _blank(form.get("delivery_unit")):
        errors["delivery_unit"] = "Delivery unit is required"
    if (form.get("target_2026") or 0) <= 0:
        errors["target_2026"] = "Target 2026 must be > 0"
    return errors


def validate_project_form(form: dict[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(form.get("project_name")):
        errors["project_name"] = "Project name is required"
    if _blank(form.get("project_manager")):
        errors["project_manager"] = "Project manager is required"
    if _blank(form.get("project_summary")):
        errors["project_summary"] = "Project summary is required"
    if not [t for t in form.get("tech_stack") or [] if not _blank(t)]:
        errors["tech_stack"] = "At least one technology is required"
    if not form.get("circle"):
        errors["circle"] = "Circle is required"
    return errors


def validate_stakeholder_form(form: dict[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(form.get("name")):
        errors["name"] = "Stakeholder name is required"
    if not form.get("project_id"):
        errors["project_id"] = "Project selection is required"
    if not form.get("designation"):
        errors["designation"] = "Designation is required"
    if not form.get("department"):
        errors["department"] = "Department is required"
    if not form.get("value_chain_category"):
        errors["value_chain_category"] = "Value chain category is required"
    return errors


def _check(errors: dict[str, str]) -> None:
    if errors:
        raise FormValidationError(errors)


# ---------------------------------------------------------------------------
# Edit-session recomputation
# ---------------------------------------------------------------------------


def set_financial(values: dict[str, Any], field: str, value: float) -> dict[str, Any]:
    """Set one financial input; shortfall follows target/forecast edits."""
    out = {**values, field: value}
    if field in ("target_2026", "forecast_revenue"):
        out["shortfall"] = shortfall(out.get("target_2026") or 0, out.get("forecast_revenue") or 0)
    return out


def set_champion(values: dict[str, Any], is_champion: bool) -> dict[str, Any]:
    """Toggle champion status; the relationship score is overwritten."""
    connections = values.get("connections") or []
    return {
        **values,
        "is_champion": is_champion,
        "relationship_score": relationship_score(is_champion, len(connections)),
    }


def add_tech_tag(tags: list[str], tag: str) -> list[str]:
    tag = tag.strip()
    if not tag or tag in tags:
        return list(tags)
    return [*tags, tag]


def remove_tech_tag(tags: list[str], tag: str) -> list[str]:
    return [t for t in tags if t != tag]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_account(form: dict[str, Any], existing: Account | None = None) -> Account:
    """Validated account from form data, new (``acc-`` id) or an edit of *existing*."""
    _check(validate_account_form(form))
    now = now_iso()
    data = {**(existing.model_dump() if existing else {}), **form}
    data.update(derived_financials(
        data.get("target_2026") or 0, data.get("current_revenue") or 0, data.get("forecast_revenue") or 0,
    ))
    data["updated_at"] = now
    if existing is None:
        data["account_id"] = new_id("acc")
        data["created_at"] = now
    else:
        data["account_id"] = existing.account_id
    return Account.model_validate(data)


def build_profile(form: dict[str, Any], existing: StrategicProfile | None = None) -> StrategicProfile:
    """Strategic profile from the strategy section of an account form."""
    fields = {k: v for k, v in form.items() if k in _PROFILE_KEYS}
    if existing is not None:
        return existing.model_copy(update={**fields, "updated_at": now_iso()})
    return StrategicProfile(id="", **fields)


def build_project(
    form: dict[str, Any], account_id: str, existing: Project | None = None,
) -> Project:
    _check(validate_project_form(form))
    now = now_iso()
    data = {**(existing.model_dump() if existing else {}), **form}
    data.update(
        account_id=account_id,
        status=existing.status if existing else "ACTIVE",
        updated_at=now,
    )
    if existing is None:
        data["project_id"] = new_id("proj")
        data["created_at"] = now
    else:
        data["project_id"] = existing.project_id
    return Project.model_validate(data)


def build_stakeholder(
    form: dict[str, Any],
    account_id: str,
    project_lookup: Callable[[str], Project | None] | None = None,
    existing: Stakeholder | None = None,
) -> Stakeholder:
    _check(validate_stakeholder_form(form))
    now = now_iso()
    data = {**(existing.model_dump() if existing else {}), **form}
    connections = data.get("connections") or []
    data.update(
        account_id=account_id,
        relationship_score=relationship_score(bool(data.get("is_champion")), len(connections)),
        updated_at=now,
    )
    project = project_lookup(data["project_id"]) if project_lookup else None
    if project is not None:
        data["project_name"] = project.project_name
    if existing is None:
        data["stakeholder_id"] = new_id("stk")
        data["created_at"] = now
    else:
        data["stakeholder_id"] = existing.stakeholder_id
    return Stakeholder.model_validate(data)

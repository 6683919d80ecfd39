"""Translation between backend wire records and domain models.

Pure functions, no I/O. Reading from the wire fills every absent field with the
domain default (``""``, ``0`` or ``False``); writing to the wire renames domain
fields back and converts the string enums the domain uses for backend booleans.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from portal.models import (
    FOCUS_TIERS,
    INCUMBENCY_STRENGTHS,
    RATE_CARD_HEALTH,
    Account,
    StrategicProfile,
)
from portal.rules import shortfall
from portal.schemas import (
    AccountDashboardCreate,
    AccountDashboardResponse,
    AccountDashboardUpdate,
    StakeholderDetailsCreate,
    StakeholderDetailsResponse,
    StakeholderDetailsUpdate,
)

# ---------------------------------------------------------------------------
# Field tables: (domain name, wire name)
# ---------------------------------------------------------------------------

ACCOUNT_FIELDS = (
    ("account_leader", "account_leader"),
    ("delivery_unit", "delivery_unit"),
    ("industry", "industry"),
    ("domain", "domain"),
    ("account_focus", "account_focus"),
    ("company_revenue", "company_revenue"),
    ("last_year_business", "last_year_business_done"),
    ("target_projection_2026_accounts", "target_projection_2026_accounts"),
    ("target_projection_2026_delivery", "target_projection_2026_delivery"),
    ("current_pipeline_value", "current_pipeline_value"),
    ("revenue_attrition_risk", "revenue_attrition_possibility"),
    ("target_2026", "target_2026"),
    ("current_revenue", "current_revenue"),
    ("forecast_revenue", "forecast_revenue"),
    ("shortfall", "shortfall"),
    ("account_health_score", "account_health_score"),
    ("delivery_owner", "delivery_owner"),
    ("client_partner", "client_partner"),
    ("engagement_age", "engagement_age"),
    ("current_engagement_areas", "current_engagement_areas"),
    ("team_size", "team_size"),
    ("engagement_models", "engagement_models"),
    ("rate_card_health", "current_rate_card_health"),
    ("active_projects_count", "number_of_active_projects"),
    ("overall_delivery_health", "overall_delivery_health"),
    ("value_chain_fit", "where_we_fit_in_value_chain"),
    ("current_nps", "current_nps"),
    ("champion_name", "champion_customer_side"),
    ("champion_profile", "champion_profile"),
    ("decision_maker_connect", "connect_with_decision_maker"),
    ("total_active_connects", "total_active_connects"),
    ("roadmap_visibility_2026", "visibility_client_roadmap_2026"),
    ("cross_sell_areas", "identified_areas_cross_up_selling"),
    ("executive_connect_frequency", "nitor_executive_connect_frequency"),
    ("growth_action_plan_ready", "growth_action_plan_30days_ready"),
    ("miro_board_link", "miro_board_link"),
)

PROFILE_FIELDS = (
    ("executive_sponsor", "executive_sponsor"),
    ("technical_decision_maker", "technical_decision_maker"),
    ("influencer", "influencers"),
    ("neutral_stakeholders", "neutral_stakeholders"),
    ("negative_stakeholder", "negative_stakeholder"),
    ("succession_risk", "succession_risk"),
    ("key_competitors", "key_competitors"),
    ("our_positioning", "our_positioning_vs_competition"),
    ("incumbency_strength", "incumbency_strength"),
    ("areas_competition_stronger", "areas_competition_stronger"),
    ("white_spaces_we_own", "white_spaces_we_own"),
    ("account_review_cadence", "account_review_cadence_frequency"),
    ("technical_audit_frequency", "technical_audit_frequency"),
)

_ACCOUNT_TO_WIRE = dict(ACCOUNT_FIELDS, account_name="account_name")
_PROFILE_TO_WIRE = dict(PROFILE_FIELDS, account_name="account_name")


# ---------------------------------------------------------------------------
# Enum coercion
# ---------------------------------------------------------------------------


def qbr_from_wire(value: bool | None) -> str:
    return "Yes" if value else "No"


def qbr_to_wire(value: str | None) -> bool:
    return value == "Yes"


def familiarity_from_wire(value: bool | None) -> str:
    return "Familiar" if value else "Unfamiliar"


def familiarity_to_wire(value: str | None) -> bool:
    return value == "Familiar"


def _choice(value: str | None, allowed: tuple[str, ...], default: str | None = None) -> str | None:
    return value if value in allowed else default


def _defaulted(model: type[BaseModel], field: str, value: Any) -> Any:
    return model.model_fields[field].default if value is None else value


# ---------------------------------------------------------------------------
# Wire -> domain
# ---------------------------------------------------------------------------


def account_from_wire(wire: AccountDashboardResponse) -> Account:
    fields = {
        name: _defaulted(Account, name, getattr(wire, wire_name))
        for name, wire_name in ACCOUNT_FIELDS
    }
    fields.update(
        account_leader=wire.account_leader or wire.delivery_owner or wire.client_partner or "Unknown",
        delivery_unit=wire.delivery_unit or "Unknown",
        industry=wire.industry or "Technology",
        target_2026=wire.target_2026 or wire.target_projection_2026_accounts or 0,
        current_revenue=wire.current_revenue or wire.last_year_business_done or 0,
        forecast_revenue=wire.forecast_revenue or wire.current_pipeline_value or 0,
        shortfall=wire.shortfall or shortfall(wire.target_2026 or 0, wire.forecast_revenue or 0),
        account_focus=_choice(wire.account_focus, FOCUS_TIERS),
        rate_card_health=_choice(wire.current_rate_card_health, RATE_CARD_HEALTH),
        customer_value_chain=familiarity_from_wire(wire.know_customer_value_chain),
    )
    return Account(
        account_id=wire.account_id,
        account_name=wire.account_name,
        created_at=wire.created_at,
        updated_at=wire.updated_at,
        status="ACTIVE",
        **fields,
    )


def profile_from_wire(wire: StakeholderDetailsResponse) -> StrategicProfile:
    fields = {
        name: _defaulted(StrategicProfile, name, getattr(wire, wire_name))
        for name, wire_name in PROFILE_FIELDS
    }
    fields["incumbency_strength"] = _choice(wire.incumbency_strength, INCUMBENCY_STRENGTHS, "Low")
    return StrategicProfile(
        id=wire.id,
        account_id=wire.account_id,
        account_name=wire.account_name,
        qbr_happening=qbr_from_wire(wire.qbr_happening),
        created_at=wire.created_at,
        updated_at=wire.updated_at,
        **fields,
    )


# ---------------------------------------------------------------------------
# Domain -> wire
# ---------------------------------------------------------------------------


def account_to_create(account: Account) -> AccountDashboardCreate:
    data = {wire_name: getattr(account, name) for name, wire_name in ACCOUNT_FIELDS}
    data["know_customer_value_chain"] = familiarity_to_wire(account.customer_value_chain)
    return AccountDashboardCreate(account_name=account.account_name, **data)


def account_to_update(updates: dict[str, Any]) -> AccountDashboardUpdate:
    """Build a partial patch from domain-named fields.

    Keys with no wire counterpart (ids, timestamps, nested collections,
    profile fields) are dropped.
    """
    data: dict[str, Any] = {}
    for key, value in updates.items():
        if key == "customer_value_chain":
            data["know_customer_value_chain"] = familiarity_to_wire(value)
        elif key in _ACCOUNT_TO_WIRE:
            data[_ACCOUNT_TO_WIRE[key]] = value
    return AccountDashboardUpdate(**data)


def profile_to_create(
    profile: StrategicProfile, account_id: str, account_name: str,
) -> StakeholderDetailsCreate:
    data = {wire_name: getattr(profile, name) for name, wire_name in PROFILE_FIELDS}
    return StakeholderDetailsCreate(
        account_id=account_id,
        account_name=account_name,
        qbr_happening=qbr_to_wire(profile.qbr_happening),
        **data,
    )


def profile_to_update(updates: dict[str, Any]) -> StakeholderDetailsUpdate:
    data: dict[str, Any] = {}
    for key, value in updates.items():
        if key == "qbr_happening":
            data["qbr_happening"] = qbr_to_wire(value)
        elif key in _PROFILE_TO_WIRE:
            data[_PROFILE_TO_WIRE[key]] = value
    return StakeholderDetailsUpdate(**data)

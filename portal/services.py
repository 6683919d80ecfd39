"""List-view helpers over cached domain objects: search, filters and stats."""
from __future__ import annotations

from collections import Counter

from portal.models import Account, Project, Stakeholder
from portal.rules import HealthStatus, metric_status, shortfall_status

ALL = "all"


def parse_connections(connected_with: str | None) -> list[str]:
    """Split a project's free-text ``connected_with`` into stakeholder names."""
    return [name.strip() for name in (connected_with or "").split(",") if name.strip()]


def project_connections(projects: list[Project]) -> dict[str, list[str]]:
    """Project id -> connected names; a display-time join, not a stored relation."""
    return {p.project_id: parse_connections(p.connected_with) for p in projects}


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def filter_accounts(
    accounts: list[Account], *, search: str | None = None, delivery_unit: str = ALL,
) -> list[Account]:
    items = accounts
    if search:
        q = search.lower()
        items = [a for a in items if q in a.account_name.lower()
                 or q in a.account_leader.lower() or q in a.account_id.lower()]
    if delivery_unit != ALL:
        items = [a for a in items if a.delivery_unit == delivery_unit]
    return items


def filter_stakeholders(
    stakeholders: list[Stakeholder], *, search: str | None = None,
    category: str = ALL, champion: str = ALL,
) -> list[Stakeholder]:
    """Filter by text, value-chain category and champion flag.

    ``champion`` is ``"all"``, ``"champion"`` or ``"non-champion"``.
    """
    items = stakeholders
    if search:
        q = search.lower()
        items = [s for s in items if q in s.name.lower()
                 or q in s.designation.lower() or q in s.project_name.lower()]
    if category != ALL:
        items = [s for s in items if s.value_chain_category == category]
    if champion == "champion":
        items = [s for s in items if s.is_champion]
    elif champion == "non-champion":
        items = [s for s in items if not s.is_champion]
    return items


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


def account_status(account: Account) -> dict[str, HealthStatus]:
    return {
        "health": metric_status("health_score", account.account_health_score),
        "shortfall": shortfall_status(account.shortfall, account.target_2026),
    }


def compute_stats(accounts: list[Account], stakeholders: list[Stakeholder] | None = None) -> dict:
    by_focus: Counter[str] = Counter()
    by_unit: Counter[str] = Counter()
    by_health: Counter[str] = Counter()
    for account in accounts:
        by_focus[account.account_focus or "Unassigned"] += 1
        by_unit[account.delivery_unit or "Unknown"] += 1
        by_health[metric_status("health_score", account.account_health_score).value] += 1
    stakeholders = stakeholders or []
    return {
        "total": len(accounts),
        "total_target_2026": sum(a.target_2026 for a in accounts),
        "total_forecast": sum(a.forecast_revenue for a in accounts),
        "total_shortfall": sum(a.shortfall for a in accounts),
        "strategic_profiles": sum(len(a.strategic_profiles) for a in accounts),
        "stakeholders": len(stakeholders),
        "champions": sum(1 for s in stakeholders if s.is_champion),
        "by_focus": dict(by_focus),
        "by_delivery_unit": dict(by_unit),
        "by_health": dict(by_health),
    }

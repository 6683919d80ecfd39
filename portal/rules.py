"""Derived-value rules shared by the store, forms and list helpers.

None of these values are trusted once stored. Every write site that changes an
input (champion flag, connections, target, forecast, current revenue) calls the
matching function again and overwrites the derived field.

Status banding
--------------
All display bands use the same three-level shape::

    value >= good     -> Good
    value >= warning  -> Warning
    otherwise         -> Critical

Per-metric thresholds live in ``STATUS_THRESHOLDS``. Shortfall percentage is
lower-is-better, so it has its own ceilings (``SHORTFALL_PCT_BANDS``) and is
only banded through ``shortfall_status``, which negates value and ceilings so
the inclusive ``>=`` comparison still applies.
"""
from __future__ import annotations

import math
from enum import Enum

BASE_RELATIONSHIP_SCORE = 5
CHAMPION_BONUS = 3
MAX_CONNECTION_BONUS = 2


class HealthStatus(str, Enum):
    GOOD = "Good"
    WARNING = "Warning"
    CRITICAL = "Critical"


STATUS_THRESHOLDS: dict[str, tuple[float, float]] = {
    "health_score": (70, 50),
    "relationship_score": (8, 5),
    "circle_penetration": (70, 40),
}

# Ceilings, not floors: <=10% Good, <=25% Warning.
SHORTFALL_PCT_BANDS: tuple[float, float] = (10, 25)


def clamp(low: float, high: float, value: float) -> float:
    return max(low, min(high, value))


def relationship_score(is_champion: bool, connections_count: int = 0) -> int:
    score = BASE_RELATIONSHIP_SCORE
    if is_champion:
        score += CHAMPION_BONUS
    score += min(max(connections_count, 0), MAX_CONNECTION_BONUS)
    return int(clamp(1, 10, score))


def shortfall(target_2026: float, forecast: float) -> float:
    """Gap between target and forecast; negative when forecast exceeds target."""
    return target_2026 - forecast


def health_score(current_revenue: float, forecast: float) -> float:
    """Forecast retention rate as a 0-100 percentage."""
    if not current_revenue:
        return 0
    return clamp(0, 100, forecast * 100 / current_revenue)


def classify(value: float, good: float, warning: float) -> HealthStatus:
    if value >= good:
        return HealthStatus.GOOD
    if value >= warning:
        return HealthStatus.WARNING
    return HealthStatus.CRITICAL


def metric_status(metric: str, value: float) -> HealthStatus:
    good, warning = STATUS_THRESHOLDS[metric]
    return classify(value, good, warning)


def shortfall_status(shortfall_value: float, target_2026: float) -> HealthStatus:
    """Band a shortfall by its share of the target (<=10% Good, <=25% Warning)."""
    if not target_2026:
        return HealthStatus.GOOD if shortfall_value <= 0 else HealthStatus.CRITICAL
    pct = shortfall_value * 100 / target_2026
    if math.isnan(pct):
        return HealthStatus.CRITICAL
    good, warning = SHORTFALL_PCT_BANDS
    return classify(-pct, -good, -warning)


def derived_financials(
    target_2026: float, current_revenue: float, forecast: float,
) -> dict[str, float]:
    """Shortfall and health score for one set of financial inputs."""
    return {
        "shortfall": shortfall(target_2026, forecast),
        "account_health_score": health_score(current_revenue, forecast),
    }

"""Pydantic wire schemas for the account-dashboard and stakeholder-details API."""
from __future__ import annotations

from pydantic import BaseModel


class _AccountFields(BaseModel):
    account_leader: str | None = None
    industry: str | None = None
    domain: str | None = None
    company_revenue: float | None = None
    know_customer_value_chain: bool | None = None
    account_focus: str | None = None
    delivery_unit: str | None = None
    delivery_owner: str | None = None
    client_partner: str | None = None
    where_we_fit_in_value_chain: str | None = None
    engagement_age: int | None = None
    last_year_business_done: float | None = None
    target_2026: float | None = None
    current_revenue: float | None = None
    forecast_revenue: float | None = None
    shortfall: float | None = None
    account_health_score: float | None = None
    target_projection_2026_accounts: float | None = None
    target_projection_2026_delivery: float | None = None
    current_pipeline_value: float | None = None
    revenue_attrition_possibility: str | None = None
    current_engagement_areas: str | None = None
    team_size: int | None = None
    engagement_models: str | None = None
    current_rate_card_health: str | None = None
    number_of_active_projects: int | None = None
    overall_delivery_health: str | None = None
    current_nps: float | None = None
    champion_customer_side: str | None = None
    champion_profile: str | None = None
    connect_with_decision_maker: bool | None = None
    total_active_connects: int | None = None
    visibility_client_roadmap_2026: str | None = None
    identified_areas_cross_up_selling: str | None = None
    nitor_executive_connect_frequency: str | None = None
    growth_action_plan_30days_ready: bool | None = None
    miro_board_link: str | None = None


class AccountDashboardResponse(_AccountFields):
    account_id: str
    account_name: str
    created_at: str
    updated_at: str


class AccountDashboardCreate(_AccountFields):
    account_name: str


class AccountDashboardUpdate(_AccountFields):
    account_name: str | None = None


class _StakeholderDetailsFields(BaseModel):
    executive_sponsor: str | None = None
    technical_decision_maker: str | None = None
    influencers: str | None = None
    neutral_stakeholders: str | None = None
    negative_stakeholder: str | None = None
    succession_risk: str | None = None
    key_competitors: str | None = None
    our_positioning_vs_competition: str | None = None
    incumbency_strength: str | None = None
    areas_competition_stronger: str | None = None
    white_spaces_we_own: str | None = None
    account_review_cadence_frequency: str | None = None
    qbr_happening: bool | None = None
    technical_audit_frequency: str | None = None


class StakeholderDetailsResponse(_StakeholderDetailsFields):
    id: str
    account_id: str
    account_name: str
    created_at: str
    updated_at: str


class StakeholderDetailsCreate(_StakeholderDetailsFields):
    account_id: str
    account_name: str


class StakeholderDetailsUpdate(_StakeholderDetailsFields):
    account_name: str | None = None

"""Domain models for accounts, projects, stakeholders and strategic profiles."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, field_validator

FocusTier = Literal["Platinum", "Gold", "Silver"]
RateCardHealth = Literal["Above", "At", "Below"]
CircleName = Literal["Cloud", "Data", "AI", "Security", "DevOps"]
ValueChainCategory = Literal["Resources", "Technology", "Engineering", "Business"]
IncumbencyStrength = Literal["High", "Medium", "Low"]
YesNo = Literal["Yes", "No"]
Familiarity = Literal["Familiar", "Unfamiliar"]
ProjectStatus = Literal["ACTIVE", "INACTIVE"]

# ---------------------------------------------------------------------------
# Picklists
# ---------------------------------------------------------------------------

FOCUS_TIERS = ("Platinum", "Gold", "Silver")
RATE_CARD_HEALTH = ("Above", "At", "Below")
CIRCLES = ("Cloud", "Data", "AI", "Security", "DevOps")
VALUE_CHAIN_CATEGORIES = ("Resources", "Technology", "Engineering", "Business")
INCUMBENCY_STRENGTHS = ("High", "Medium", "Low")

DELIVERY_UNITS = ("BFSI", "DU1", "DU2", "DU3", "DU4", "DU5")

INDUSTRIES = (
    "Financial Services", "Healthcare Technology", "Software & SaaS",
    "Professional Services", "Banking", "Technology Consulting", "Retail",
    "Manufacturing", "Telecommunications", "Energy",
)

DESIGNATIONS = (
    "VP", "Director", "Senior Manager", "Manager", "Team Lead",
    "Senior Engineer", "Engineer", "Architect", "Principal Engineer",
    "CTO", "CEO", "CFO",
)

DEPARTMENTS = (
    "Engineering", "Operations", "Business", "IT", "Product",
    "Sales", "Marketing", "Finance", "HR", "Executive",
)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class Project(BaseModel):
    project_id: str
    account_id: str
    project_name: str
    project_manager: str
    project_summary: str
    tech_stack: list[str] = []
    circle: CircleName
    connected_with: str = ""
    competitor_name: str = ""
    competitive_risk: str = ""
    status: ProjectStatus = "ACTIVE"
    created_at: str = ""
    updated_at: str = ""

    @field_validator("tech_stack")
    @classmethod
    def unique_tags(cls, v: list[str]) -> list[str]:
        seen: list[str] = []
        for tag in v:
            tag = tag.strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen


class Stakeholder(BaseModel):
    stakeholder_id: str
    account_id: str
    project_id: str
    project_name: str = ""
    name: str
    designation: str
    department: str
    value_chain_category: ValueChainCategory
    # Derived from is_champion and connections; see portal.rules.relationship_score
    relationship_score: int = 5
    is_champion: bool = False
    connections: list[str] = []
    created_at: str = ""
    updated_at: str = ""


class StrategicProfile(BaseModel):
    id: str
    account_id: str = ""
    account_name: str = ""
    # Stakeholder landscape
    executive_sponsor: str = ""
    technical_decision_maker: str = ""
    influencer: str = ""
    neutral_stakeholders: str = ""
    negative_stakeholder: str = ""
    succession_risk: str = ""
    # Competition
    key_competitors: str = ""
    our_positioning: str = ""
    incumbency_strength: IncumbencyStrength = "Low"
    areas_competition_stronger: str = ""
    white_spaces_we_own: str = ""
    # Internal readiness
    account_review_cadence: str = ""
    qbr_happening: YesNo = "No"
    technical_audit_frequency: str = ""
    created_at: str = ""
    updated_at: str = ""


class Account(BaseModel):
    account_id: str
    account_name: str
    # General
    account_leader: str = ""
    delivery_unit: str = ""
    industry: str = ""
    domain: str = ""
    account_focus: FocusTier | None = None
    customer_value_chain: Familiarity = "Unfamiliar"
    # Financial
    company_revenue: float = 0
    last_year_business: float = 0
    target_projection_2026_accounts: float = 0
    target_projection_2026_delivery: float = 0
    current_pipeline_value: float = 0
    revenue_attrition_risk: str = ""
    target_2026: float = 0
    current_revenue: float = 0
    forecast_revenue: float = 0
    shortfall: float = 0
    account_health_score: float = 0
    # Delivery
    delivery_owner: str = ""
    client_partner: str = ""
    engagement_age: int = 0
    current_engagement_areas: str = ""
    team_size: int = 0
    engagement_models: str = ""
    rate_card_health: RateCardHealth | None = None
    active_projects_count: int = 0
    overall_delivery_health: str = ""
    # Strategy / relationship
    value_chain_fit: str = ""
    current_nps: float = 0
    champion_name: str = ""
    champion_profile: str = ""
    decision_maker_connect: bool = False
    total_active_connects: int = 0
    roadmap_visibility_2026: str = ""
    cross_sell_areas: str = ""
    executive_connect_frequency: str = ""
    growth_action_plan_ready: bool = False
    miro_board_link: str = ""

    created_at: str = ""
    updated_at: str = ""

    status: ProjectStatus = "ACTIVE"
    projects: list[Project] = []
    stakeholders: list[Stakeholder] = []
    strategic_profiles: list[StrategicProfile] = []

    @property
    def strategic_profile(self) -> StrategicProfile | None:
        """The account's profile; the cache holds at most one."""
        return self.strategic_profiles[0] if self.strategic_profiles else None

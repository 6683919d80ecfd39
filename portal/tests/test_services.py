"""Tests for list-view helpers and spreadsheet export."""
from __future__ import annotations

import openpyxl

from portal.exporter import account_rows, stakeholder_rows, write_table_xlsx, write_xlsx
from portal.models import Account, Project, Stakeholder, StrategicProfile
from portal.rules import HealthStatus
from portal.services import (
    account_status,
    compute_stats,
    filter_accounts,
    filter_stakeholders,
    parse_connections,
    project_connections,
)


def _accounts() -> list[Account]:
    return [
        Account(account_id="acc-1", account_name="Acme Corp", account_leader="Ana", delivery_unit="DU1",
                account_focus="Gold", target_2026=1000, forecast_revenue=950, shortfall=50,
                account_health_score=80,
                strategic_profiles=[StrategicProfile(id="sd-1", executive_sponsor="Pat", qbr_happening="Yes")]),
        Account(account_id="acc-2", account_name="Globex", account_leader="Bo", delivery_unit="DU2",
                target_2026=500, forecast_revenue=300, shortfall=200, account_health_score=40),
        Account(account_id="acc-3", account_name="Initech", account_leader="Ana", delivery_unit="DU1",
                account_focus="Gold", target_2026=0, forecast_revenue=0, account_health_score=60),
    ]


def _stakeholders() -> list[Stakeholder]:
    base = {"account_id": "acc-1", "project_id": "proj-1", "department": "IT"}
    return [
        Stakeholder(stakeholder_id="stk-1", name="Sam", designation="CTO", project_name="Data Lake",
                    value_chain_category="Technology", is_champion=True, **base),
        Stakeholder(stakeholder_id="stk-2", name="Lee", designation="VP", project_name="CRM",
                    value_chain_category="Business", **base),
    ]


class TestConnections:
    def test_parse(self):
        assert parse_connections(" Sam, Lee ,,  ") == ["Sam", "Lee"]
        assert parse_connections(None) == []

    def test_by_project(self):
        project = Project(project_id="proj-1", account_id="acc-1", project_name="P", project_manager="M",
                          project_summary="S", tech_stack=["x"], circle="AI", connected_with="Sam, Lee")
        assert project_connections([project]) == {"proj-1": ["Sam", "Lee"]}


class TestFilters:
    def test_search_matches_name_leader_or_id(self):
        accounts = _accounts()
        assert [a.account_id for a in filter_accounts(accounts, search="globex")] == ["acc-2"]
        assert [a.account_id for a in filter_accounts(accounts, search="ana")] == ["acc-1", "acc-3"]
        assert [a.account_id for a in filter_accounts(accounts, search="ACC-3")] == ["acc-3"]

    def test_delivery_unit(self):
        result = filter_accounts(_accounts(), delivery_unit="DU1", search="init")
        assert [a.account_id for a in result] == ["acc-3"]

    def test_no_filters_returns_everything(self):
        assert len(filter_accounts(_accounts())) == 3

    def test_stakeholder_filters(self):
        stakeholders = _stakeholders()
        assert [s.name for s in filter_stakeholders(stakeholders, search="crm")] == ["Lee"]
        assert [s.name for s in filter_stakeholders(stakeholders, category="Technology")] == ["Sam"]
        assert [s.name for s in filter_stakeholders(stakeholders, champion="champion")] == ["Sam"]
        assert [s.name for s in filter_stakeholders(stakeholders, champion="non-champion")] == ["Lee"]


class TestStats:
    def test_account_status(self):
        acme, globex, initech = _accounts()
        assert account_status(acme) == {"health": HealthStatus.GOOD, "shortfall": HealthStatus.GOOD}
        assert account_status(globex) == {"health": HealthStatus.CRITICAL, "shortfall": HealthStatus.CRITICAL}
        assert account_status(initech)["health"] is HealthStatus.WARNING

    def test_compute_stats(self):
        stats = compute_stats(_accounts(), _stakeholders())
        assert stats["total"] == 3
        assert stats["total_target_2026"] == 1500
        assert stats["total_forecast"] == 1250
        assert stats["total_shortfall"] == 250
        assert stats["strategic_profiles"] == 1
        assert stats["stakeholders"] == 2
        assert stats["champions"] == 1
        assert stats["by_focus"] == {"Gold": 2, "Unassigned": 1}
        assert stats["by_delivery_unit"] == {"DU1": 2, "DU2": 1}
        assert stats["by_health"] == {"Good": 1, "Critical": 1, "Warning": 1}

    def test_empty(self):
        stats = compute_stats([])
        assert stats["total"] == 0
        assert stats["by_focus"] == {}


class TestExport:
    def test_account_rows(self):
        rows = account_rows(_accounts())
        assert rows[0]["Account Name"] == "Acme Corp"
        assert rows[0]["Executive Sponsor"] == "Pat"
        assert rows[0]["QBR Happening"] == "Yes"
        assert rows[1]["Focus"] == ""
        assert rows[1]["Executive Sponsor"] == ""

    def test_stakeholder_rows(self):
        rows = stakeholder_rows(_stakeholders())
        assert rows[0]["Champion"] == "Yes"
        assert rows[1]["Champion"] == "No"

    def test_write_xlsx(self, tmp_path):
        out = write_xlsx(account_rows(_accounts()), tmp_path / "exports" / "accounts", "Accounts")
        assert out.suffix == ".xlsx"
        ws = openpyxl.load_workbook(out).active
        assert ws.title == "Accounts"
        assert ws.cell(row=1, column=2).value == "Account Name"
        assert ws.cell(row=2, column=2).value == "Acme Corp"
        assert ws.max_row == 4

    def test_write_table_with_merges(self, tmp_path):
        out = write_table_xlsx(
            [["Summary", None], ["Total", 3]], tmp_path / "summary.xlsx",
            merges=["A1:B1"], col_widths=[20, 10],
        )
        ws = openpyxl.load_workbook(out).active
        assert "A1:B1" in {str(r) for r in ws.merged_cells.ranges}
        assert ws.column_dimensions["A"].width == 20
        assert ws.cell(row=2, column=2).value == 3

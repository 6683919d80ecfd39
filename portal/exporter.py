"""Spreadsheet export: flatten domain objects to rows and write ``.xlsx`` files."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import openpyxl
from openpyxl.utils import get_column_letter

from portal.models import Account, Stakeholder

log = logging.getLogger(__name__)

ACCOUNT_COLUMNS = (
    ("Account ID", "account_id"),
    ("Account Name", "account_name"),
    ("Account Leader", "account_leader"),
    ("Delivery Unit", "delivery_unit"),
    ("Industry", "industry"),
    ("Focus", "account_focus"),
    ("Target 2026", "target_2026"),
    ("Current Revenue", "current_revenue"),
    ("Forecast", "forecast_revenue"),
    ("Shortfall", "shortfall"),
    ("Health Score", "account_health_score"),
    ("Team Size", "team_size"),
    ("Rate Card", "rate_card_health"),
    ("NPS", "current_nps"),
)

STAKEHOLDER_COLUMNS = (
    ("Name", "name"),
    ("Designation", "designation"),
    ("Department", "department"),
    ("Project", "project_name"),
    ("Value Chain", "value_chain_category"),
    ("Champion", "is_champion"),
    ("Relationship Score", "relationship_score"),
)


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return value


def account_rows(accounts: list[Account]) -> list[dict[str, Any]]:
    rows = []
    for account in accounts:
        row = {header: _cell(getattr(account, field)) for header, field in ACCOUNT_COLUMNS}
        profile = account.strategic_profile
        row["Executive Sponsor"] = profile.executive_sponsor if profile else ""
        row["QBR Happening"] = profile.qbr_happening if profile else ""
        rows.append(row)
    return rows


def stakeholder_rows(stakeholders: list[Stakeholder]) -> list[dict[str, Any]]:
    return [
        {header: _cell(getattr(s, field)) for header, field in STAKEHOLDER_COLUMNS}
        for s in stakeholders
    ]


def write_xlsx(rows: list[dict[str, Any]], path: str | Path, sheet_title: str = "Sheet1") -> Path:
    """Write row dicts to a single-sheet workbook; headers come from the first row."""
    headers = list(rows[0]) if rows else []
    return write_table_xlsx([headers, *([r.get(h, "") for h in headers] for r in rows)], path, sheet_title)


def write_table_xlsx(
    table: list[list[Any]],
    path: str | Path,
    sheet_title: str = "Sheet1",
    merges: list[str] | None = None,
    col_widths: list[int] | None = None,
) -> Path:
    """Write a list of rows (first row usually headers) to a workbook.

    ``merges`` takes Excel ranges such as ``"A1:C1"``.
    """
    path = Path(path)
    if path.suffix != ".xlsx":
        path = path.with_suffix(".xlsx")
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title
    for row in table:
        ws.append(list(row))
    for cell_range in merges or []:
        ws.merge_cells(cell_range)
    for idx, width in enumerate(col_widths or [], start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    log.info("Exported %d rows to %s", max(len(table) - 1, 0), path)
    return path

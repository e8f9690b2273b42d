#!/usr/bin/env python3
"""
Helpers for writing tokenization reports to Excel.

Thin wrapper around openpyxl: one table per sheet, bold header row,
auto-sized columns and optional row highlighting (used to flag filenames
that produced no tokens or left unknown fragments behind).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

MAX_COLUMN_WIDTH = 60
HIGHLIGHT_COLOR = "FFF2CC"


@dataclass(frozen=True)
class ExcelSheetData:
    """
    One report tab: a header row followed by data rows.

    Attributes:
        name: Sheet/tab name.
        headers: Ordered list of column headers.
        rows: Row values already ordered to match headers.
        highlighted_rows: Optional per-row flags; flagged rows get a fill.
    """

    name: str
    headers: Sequence[str]
    rows: Sequence[Sequence[Any]]
    highlighted_rows: Optional[Sequence[bool]] = None


def _column_width(ws, col_idx: int, header: str) -> int:
    col_letter = get_column_letter(col_idx)
    longest = len(header)
    for cell in ws[col_letter]:
        if cell.value is not None:
            longest = max(longest, len(str(cell.value)))
    return min(longest + 2, MAX_COLUMN_WIDTH)


def _write_sheet(ws, sheet: ExcelSheetData) -> None:
    ws.title = sheet.name

    header_font = Font(bold=True)
    for col_idx, header in enumerate(sheet.headers, 1):
        ws.cell(row=1, column=col_idx, value=header).font = header_font

    fill = PatternFill(start_color=HIGHLIGHT_COLOR, end_color=HIGHLIGHT_COLOR, fill_type="solid")
    flags = list(sheet.highlighted_rows or [])

    for row_offset, row in enumerate(sheet.rows):
        highlight = row_offset < len(flags) and bool(flags[row_offset])
        for col_idx, value in enumerate(row, 1):
            cell = ws.cell(row=row_offset + 2, column=col_idx, value=value)
            if highlight:
                cell.fill = fill

    for col_idx, header in enumerate(sheet.headers, 1):
        ws.column_dimensions[get_column_letter(col_idx)].width = _column_width(ws, col_idx, header)

    if sheet.rows:
        ref = f"A1:{get_column_letter(len(sheet.headers))}{len(sheet.rows) + 1}"
        table = Table(displayName="".join(ch for ch in sheet.name if ch.isalnum()) + "Table", ref=ref)
        table.tableStyleInfo = TableStyleInfo(name="TableStyleMedium2", showRowStripes=True)
        ws.add_table(table)

    ws.freeze_panes = "A2"


def write_excel_workbook(output_path: Path | str, sheets: Sequence[ExcelSheetData]) -> Path:
    """
    Render the given sheets, in order, into a new workbook.

    Missing parent directories are created. Raises ValueError when no sheet
    is given.
    """
    if not sheets:
        raise ValueError("At least one sheet must be provided to write a workbook.")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    for idx, sheet in enumerate(sheets):
        _write_sheet(wb.active if idx == 0 else wb.create_sheet(), sheet)

    wb.save(output_path)
    return output_path

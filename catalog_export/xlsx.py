"""XLSX encoding of a ``TabularDocument`` via openpyxl.

Rules:
- Sheet order is the document's sheet order; hidden sheets stay hidden
- Caption rows are bold on a light blue fill
- Outline levels and collapsed flags become row dimensions; outline
  summaries sit above their detail rows
- Validation rules become list validations pointing at the auxiliary ranges
"""

from __future__ import annotations

import io
import os
from typing import Any

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font, PatternFill
from openpyxl.utils.cell import absolute_coordinate, get_column_letter, quote_sheetname
from openpyxl.worksheet.datavalidation import DataValidation
from openpyxl.worksheet.worksheet import Worksheet

from .document import CellRange, Sheet, TabularDocument, ValidationRule
from .fileio import atomic_write_bytes, ensure_dir
from .tabular import CAPTION_FILL

CAPTION_FONT = Font(bold=True)
CAPTION_PATTERN = PatternFill(fill_type="solid", start_color=CAPTION_FILL, end_color=CAPTION_FILL)


def source_formula(source: CellRange) -> str:
    """``'Sheet'!$A$1:$A$n`` reference for a domain range."""
    letter = get_column_letter(source.column)
    first = absolute_coordinate(f"{letter}{source.first_row}")
    last = absolute_coordinate(f"{letter}{source.last_row}")
    return f"{quote_sheetname(source.sheet)}!{first}:{last}"


def _write_sheet(ws: Worksheet, sheet: Sheet) -> None:
    for row_index, row in enumerate(sheet.rows, start=1):
        for position, value in enumerate(row.cells, start=1):
            if value is None and not row.caption:
                continue
            if isinstance(value, str):
                value = ILLEGAL_CHARACTERS_RE.sub("", value)
            cell = ws.cell(row=row_index, column=row.offset + position, value=value)
            if isinstance(value, str) and cell.data_type == "f":
                # Exported text is data, never a formula.
                cell.data_type = "s"
            if row.caption:
                cell.font = CAPTION_FONT
                cell.fill = CAPTION_PATTERN
        if row.outline_level:
            dims = ws.row_dimensions[row_index]
            dims.outline_level = row.outline_level
            if row.collapsed:
                dims.hidden = True
                dims.collapsed = True


def _add_validation(ws: Worksheet, rule: ValidationRule) -> None:
    if not rule.spans:
        return
    dv = DataValidation(
        type="list",
        formula1=source_formula(rule.source),
        allow_blank=rule.allow_blank,
    )
    letter = get_column_letter(rule.column)
    for first, last in rule.spans:
        dv.add(f"{letter}{first}:{letter}{last}")
    ws.add_data_validation(dv)


def to_workbook(document: TabularDocument) -> Workbook:
    wb = Workbook()
    # Remove default sheet so we control sheet order.
    default_ws = wb.active
    if default_ws is not None:
        wb.remove(default_ws)

    for sheet in document.sheets:
        ws = wb.create_sheet(sheet.name)
        _write_sheet(ws, sheet)
        if sheet.hidden:
            ws.sheet_state = "hidden"
        else:
            ws.sheet_properties.outlinePr.summaryBelow = False

    for rule in document.validations:
        _add_validation(wb[rule.sheet], rule)

    return wb


def to_xlsx_bytes(document: TabularDocument) -> bytes:
    buffer = io.BytesIO()
    to_workbook(document).save(buffer)
    return buffer.getvalue()


def save(document: TabularDocument, path: Any) -> None:
    """Write ``document`` to ``path`` atomically."""
    ensure_dir(os.path.dirname(str(path)))
    atomic_write_bytes(str(path), to_xlsx_bytes(document))

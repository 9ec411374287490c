"""Abstract tabular document model.

This is what the writers populate and what a container encoder (see
``xlsx.py``) receives. Rows and columns are 1-based, as in a spreadsheet.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import ConfigurationError
from .values import CellValue

MAX_ROWS = 1_048_576
MAX_COLUMNS = 16_384


@dataclass
class Row:
    """One sheet row.

    ``offset`` is the number of empty columns before the first cell;
    detail rows use it to sit to the right of the master columns.
    """

    cells: List[CellValue] = field(default_factory=list)
    offset: int = 0
    outline_level: int = 0
    collapsed: bool = False
    caption: bool = False

    def value(self, column: int) -> CellValue:
        index = column - 1 - self.offset
        if 0 <= index < len(self.cells):
            return self.cells[index]
        return None

    def values(self) -> Tuple[CellValue, ...]:
        return (None,) * self.offset + tuple(self.cells)


@dataclass
class Sheet:
    name: str
    hidden: bool = False
    rows: List[Row] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def append(self, row: Row) -> int:
        """Append ``row`` and return its 1-based index."""
        if len(self.rows) >= MAX_ROWS:
            raise ConfigurationError(f"Sheet {self.name!r} exceeds {MAX_ROWS} rows")
        self.rows.append(row)
        return len(self.rows)

    def row(self, index: int) -> Row:
        return self.rows[index - 1]

    def set_cell(self, row: int, column: int, value: CellValue) -> None:
        """Random-access write used for column-oriented auxiliary sheets."""
        while len(self.rows) < row:
            self.rows.append(Row())
        target = self.rows[row - 1]
        if target.offset:
            target.cells = [None] * target.offset + target.cells
            target.offset = 0
        while len(target.cells) < column:
            target.cells.append(None)
        target.cells[column - 1] = value

    def iter_values(self) -> Iterator[Tuple[CellValue, ...]]:
        for row in self.rows:
            yield row.values()


@dataclass(frozen=True)
class CellRange:
    """A single-column block of cells on one sheet."""

    sheet: str
    column: int
    first_row: int
    last_row: int

    @property
    def size(self) -> int:
        return self.last_row - self.first_row + 1


@dataclass
class ValidationRule:
    """Binds cells of one column on a primary sheet to a domain source range.

    ``spans`` lists inclusive (first_row, last_row) pairs; contiguous rows
    are merged as they are covered.
    """

    sheet: str
    column: int
    source: CellRange
    allow_blank: bool = False
    spans: List[Tuple[int, int]] = field(default_factory=list)

    def cover(self, row: int) -> None:
        if self.spans and self.spans[-1][1] + 1 == row:
            first, _ = self.spans[-1]
            self.spans[-1] = (first, row)
        elif not self.spans or self.spans[-1][1] < row:
            self.spans.append((row, row))
        else:
            raise ValueError(f"Rows must be covered in ascending order (got {row})")

    def covers(self, row: int) -> bool:
        return any(first <= row <= last for first, last in self.spans)


@dataclass
class TabularDocument:
    """Ordered sheets with unique names, plus validation bindings."""

    sheets: List[Sheet] = field(default_factory=list)
    validations: List[ValidationRule] = field(default_factory=list)
    _by_name: Dict[str, Sheet] = field(default_factory=dict, repr=False)

    def add_sheet(self, name: str, hidden: bool = False) -> Sheet:
        if name in self._by_name:
            raise ConfigurationError(f"Duplicate sheet name: {name!r}")
        sheet = Sheet(name=name, hidden=hidden)
        self.sheets.append(sheet)
        self._by_name[name] = sheet
        return sheet

    def sheet(self, name: str) -> Sheet:
        return self._by_name[name]

    def has_sheet(self, name: str) -> bool:
        return name in self._by_name

    @property
    def primary(self) -> Optional[Sheet]:
        for sheet in self.sheets:
            if not sheet.hidden:
                return sheet
        return None

    @property
    def auxiliary_sheets(self) -> List[Sheet]:
        return [s for s in self.sheets if s.hidden]

    def validations_for(self, sheet: str, column: int) -> List[ValidationRule]:
        return [v for v in self.validations if v.sheet == sheet and v.column == column]

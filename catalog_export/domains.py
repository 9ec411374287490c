"""Auxiliary domain sheets backing dropdown validation.

Each distinct (code, label) domain is written once, as a column of codes on
a hidden auxiliary sheet. Spreadsheet list validation matches literal cell
values, so the codes (not the labels) are what the column holds.

Reuse is keyed on the domain's structure, never on field names: two fields
with identical domains share one column, two fields with different domains
get two columns even when their names look alike.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from .descriptors import FieldDescriptor, domain_fingerprint
from .document import MAX_COLUMNS, MAX_ROWS, CellRange, Sheet, TabularDocument, ValidationRule
from .errors import ConfigurationError
from .naming import auxiliary_sheet_name
from .values import to_cell_value

logger = logging.getLogger(__name__)

Fingerprint = Tuple[Tuple[str, Any, str], ...]


class DomainSheetAllocator:
    """Allocates domain columns on hidden sheets for one primary sheet.

    One instance belongs to exactly one export call (and, for master/detail
    exports, to exactly one of the two descriptor lists). Auxiliary sheets
    are created lazily, so an export with no domain-bearing fields produces
    none. When a sheet runs out of columns the next domain overflows onto a
    new sheet named ``DataFor<base>Filters2`` and so on.
    """

    def __init__(
        self,
        document: TabularDocument,
        primary_sheet: str,
        *,
        base_name: Optional[str] = None,
        max_columns: int = MAX_COLUMNS,
        max_rows: int = MAX_ROWS,
    ):
        if max_columns < 1 or max_rows < 1:
            raise ValueError("max_columns and max_rows must be positive")
        self._document = document
        self._primary = primary_sheet
        self._base = base_name or primary_sheet
        self._max_columns = max_columns
        self._max_rows = max_rows

        self._ranges: Dict[Fingerprint, CellRange] = {}
        self._names: Dict[str, Fingerprint] = {}
        self._sheet: Optional[Sheet] = None
        self._ordinal = 0
        self._next_column = 1

    @property
    def allocation_count(self) -> int:
        return len(self._ranges)

    def register(self, descriptor: FieldDescriptor[Any]) -> Optional[CellRange]:
        """Return the source range for ``descriptor``'s domain, allocating it if new.

        Returns None for fields without a domain (free-form input).
        """
        fingerprint = domain_fingerprint(descriptor.domain)
        known = self._names.get(descriptor.name)
        if known is not None and known != fingerprint:
            raise ConfigurationError(
                f"Field {descriptor.name!r} registered with two different domains"
            )
        self._names[descriptor.name] = fingerprint

        if not descriptor.domain:
            return None

        existing = self._ranges.get(fingerprint)
        if existing is not None:
            logger.debug(
                "Reusing domain range %s!C%d for field %s",
                existing.sheet,
                existing.column,
                descriptor.name,
            )
            return existing

        if len(descriptor.domain) > self._max_rows:
            raise ConfigurationError(
                f"Domain of field {descriptor.name!r} has {len(descriptor.domain)} "
                f"entries; an auxiliary column holds at most {self._max_rows}"
            )

        sheet = self._target_sheet()
        column = self._next_column
        for row_index, (code, _label) in enumerate(descriptor.domain, start=1):
            sheet.set_cell(row_index, column, to_cell_value(code))
        self._next_column += 1

        allocated = CellRange(
            sheet=sheet.name,
            column=column,
            first_row=1,
            last_row=len(descriptor.domain),
        )
        self._ranges[fingerprint] = allocated
        logger.debug(
            "Allocated domain for field %s at %s!C%d (%d entries)",
            descriptor.name,
            sheet.name,
            column,
            allocated.size,
        )
        return allocated

    def bind(
        self,
        descriptor: FieldDescriptor[Any],
        column: int,
        *,
        first_row: Optional[int] = None,
        last_row: Optional[int] = None,
    ) -> Optional[ValidationRule]:
        """Emit a validation rule for ``descriptor`` at ``column`` of the primary sheet.

        With ``first_row``/``last_row`` the rule covers that span up front;
        otherwise the caller covers rows one by one as they are written.
        ``allow_blank`` is carried on the rule only: blanks are never rejected
        by the writer.
        """
        source = self.register(descriptor)
        if source is None:
            return None
        rule = ValidationRule(
            sheet=self._primary,
            column=column,
            source=source,
            allow_blank=descriptor.allow_blank,
        )
        if first_row is not None:
            rule.spans.append((first_row, last_row if last_row is not None else first_row))
        self._document.validations.append(rule)
        return rule

    def _target_sheet(self) -> Sheet:
        if self._sheet is None or self._next_column > self._max_columns:
            # Another allocator on the same document may already own a name.
            self._ordinal += 1
            name = auxiliary_sheet_name(self._base, self._ordinal)
            while self._document.has_sheet(name):
                self._ordinal += 1
                name = auxiliary_sheet_name(self._base, self._ordinal)
            self._sheet = self._document.add_sheet(name, hidden=True)
            self._next_column = 1
            logger.debug("Created auxiliary sheet %s", name)
        return self._sheet

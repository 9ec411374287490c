"""Tabular document writer.

Layout of the primary sheet:
- row 1: caption row, one styled cell per resolved descriptor
- row 2..N+1: one row per record, in input order

Records are consumed in a single forward pass; everything that depends on
the descriptor list (caption, auxiliary domains, validation bindings) is
decided before the first record is read.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence, Union

from .descriptors import FieldDescriptor, check_unique_names
from .document import MAX_COLUMNS, MAX_ROWS, Row, Sheet, TabularDocument, ValidationRule
from .domains import DomainSheetAllocator
from .errors import AccessorFault, ConfigurationError
from .naming import safe_sheet_name
from .values import CellValue, to_cell_value

logger = logging.getLogger(__name__)

SheetSpec = Union[str, type]

# Caption row fill, RGB(184, 204, 228).
CAPTION_FILL = "B8CCE4"


def sheet_title(spec: SheetSpec) -> str:
    return safe_sheet_name(spec.__name__ if isinstance(spec, type) else str(spec))


class TabularDocumentWriter:
    """Writes one record sequence into a new ``TabularDocument``.

    A writer instance holds only options; every ``write`` call builds its own
    document and allocators, so one instance may serve concurrent exports.
    """

    # Plain exports bind each domain column once, over every data row the
    # sheet can hold. Interleaved layouts cover rows individually instead.
    whole_column_validation = True

    def __init__(
        self,
        *,
        use_dropdown_lists: bool = True,
        max_domain_columns: int = MAX_COLUMNS,
    ):
        self.use_dropdown_lists = use_dropdown_lists
        self.max_domain_columns = max_domain_columns

    def write(
        self,
        sheet: SheetSpec,
        descriptors: Sequence[FieldDescriptor[Any]],
        records: Iterable[Any],
    ) -> TabularDocument:
        """Write ``records`` under a caption built from ``descriptors``.

        ``descriptors`` must already be resolved for this invocation.
        Raises ``ConfigurationError`` before anything is written and
        ``AccessorFault`` if a field fails for a record; no partial
        document is ever returned.
        """
        check_unique_names(descriptors)
        document = TabularDocument()
        primary = document.add_sheet(sheet_title(sheet))
        allocator = self.new_allocator(document, primary.name)

        rules = self.bind_columns(allocator, descriptors, offset=0)
        self.write_caption(primary, descriptors)

        count = 0
        for index, record in enumerate(records):
            self.write_record(primary, record, index, descriptors, rules)
            count += 1

        logger.info(
            "Wrote %d %s rows (%d columns, %d validation rules)",
            count,
            primary.name,
            len(descriptors),
            len(document.validations),
        )
        return document

    def new_allocator(
        self, document: TabularDocument, primary: str, base_name: Optional[str] = None
    ) -> Optional[DomainSheetAllocator]:
        if not self.use_dropdown_lists:
            return None
        return DomainSheetAllocator(
            document,
            primary,
            base_name=base_name,
            max_columns=self.max_domain_columns,
        )

    def bind_columns(
        self,
        allocator: Optional[DomainSheetAllocator],
        descriptors: Sequence[FieldDescriptor[Any]],
        *,
        offset: int,
    ) -> List[Optional[ValidationRule]]:
        """Bind every domain-bearing descriptor; returns one slot per column."""
        if offset + len(descriptors) > MAX_COLUMNS:
            raise ConfigurationError(
                f"{offset + len(descriptors)} columns exceed the sheet limit of {MAX_COLUMNS}"
            )
        rules: List[Optional[ValidationRule]] = []
        for position, descriptor in enumerate(descriptors, start=1):
            if allocator is None or not descriptor.has_domain:
                rules.append(None)
                continue
            if self.whole_column_validation:
                rule = allocator.bind(
                    descriptor, offset + position, first_row=2, last_row=MAX_ROWS
                )
            else:
                rule = allocator.bind(descriptor, offset + position)
            rules.append(rule)
        return rules

    def write_caption(
        self,
        sheet: Sheet,
        descriptors: Sequence[FieldDescriptor[Any]],
        *,
        offset: int = 0,
        outline_level: int = 0,
        collapsed: bool = False,
    ) -> int:
        cells: List[CellValue] = [d.name for d in descriptors]
        return sheet.append(
            Row(
                cells=cells,
                offset=offset,
                outline_level=outline_level,
                collapsed=collapsed,
                caption=True,
            )
        )

    def write_record(
        self,
        sheet: Sheet,
        record: Any,
        record_index: int,
        descriptors: Sequence[FieldDescriptor[Any]],
        rules: Sequence[Optional[ValidationRule]],
        *,
        offset: int = 0,
        outline_level: int = 0,
        collapsed: bool = False,
    ) -> int:
        cells = [evaluate(d, record, record_index) for d in descriptors]
        row_index = sheet.append(
            Row(
                cells=cells,
                offset=offset,
                outline_level=outline_level,
                collapsed=collapsed,
            )
        )
        if not self.whole_column_validation:
            for rule in rules:
                if rule is not None:
                    rule.cover(row_index)
        return row_index


def evaluate(descriptor: FieldDescriptor[Any], record: Any, record_index: int) -> CellValue:
    """Run one accessor; any failure becomes an ``AccessorFault``."""
    try:
        value = descriptor.accessor(record)
    except Exception as exc:
        raise AccessorFault(descriptor.name, record_index, exc) from exc
    return to_cell_value(value)

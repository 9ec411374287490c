"""Master/detail block writer.

After each master row, the record's detail items (if any) are written as a
block directly below it:

    row r      master                       outline 0
    row r+1    <offset> detail caption      outline 1, collapsed
    row r+2..  <offset> one row per item    outline 1, collapsed
    next row   next master                  outline 0

Detail fields are resolved separately and have their own domain allocator,
so detail domains are never merged with master domains.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Sequence

from .descriptors import FieldDescriptor, block_offset, check_unique_names
from .document import TabularDocument
from .errors import AccessorFault
from .tabular import SheetSpec, TabularDocumentWriter, sheet_title

logger = logging.getLogger(__name__)

DETAIL_OUTLINE_LEVEL = 1


class MasterDetailBlockWriter(TabularDocumentWriter):
    """Tabular writer that interleaves collapsed detail blocks.

    ``detail_items`` maps a master record to its detail items; the block's
    column offset comes from the detail descriptors' ``layout_offset``.
    """

    # Master and detail rows share columns, so validation covers rows
    # individually rather than whole columns.
    whole_column_validation = False

    def __init__(
        self,
        detail_descriptors: Sequence[FieldDescriptor[Any]],
        detail_items: Callable[[Any], Iterable[Any]],
        *,
        detail_name: str = "Details",
        **options: Any,
    ):
        super().__init__(**options)
        self.detail_descriptors = tuple(detail_descriptors)
        self.detail_items = detail_items
        self.detail_name = detail_name

    def write(
        self,
        sheet: SheetSpec,
        descriptors: Sequence[FieldDescriptor[Any]],
        records: Iterable[Any],
    ) -> TabularDocument:
        check_unique_names(descriptors)
        check_unique_names(self.detail_descriptors)
        offset = block_offset(self.detail_descriptors)

        document = TabularDocument()
        primary = document.add_sheet(sheet_title(sheet))
        master_allocator = self.new_allocator(document, primary.name)
        detail_allocator = self.new_allocator(
            document, primary.name, base_name=sheet_title(self.detail_name)
        )

        master_rules = self.bind_columns(master_allocator, descriptors, offset=0)
        detail_rules = self.bind_columns(
            detail_allocator, self.detail_descriptors, offset=offset
        )
        self.write_caption(primary, descriptors)

        masters = 0
        blocks = 0
        for index, record in enumerate(records):
            self.write_record(primary, record, index, descriptors, master_rules)
            masters += 1

            items = self._collect_details(record, index)
            if not items:
                continue

            self.write_caption(
                primary,
                self.detail_descriptors,
                offset=offset,
                outline_level=DETAIL_OUTLINE_LEVEL,
                collapsed=True,
            )
            for item in items:
                self.write_record(
                    primary,
                    item,
                    index,
                    self.detail_descriptors,
                    detail_rules,
                    offset=offset,
                    outline_level=DETAIL_OUTLINE_LEVEL,
                    collapsed=True,
                )
            blocks += 1

        logger.info(
            "Wrote %d %s rows with %d detail blocks (%d rows total)",
            masters,
            primary.name,
            blocks,
            primary.row_count,
        )
        return document

    def _collect_details(self, record: Any, index: int) -> List[Any]:
        try:
            return list(self.detail_items(record))
        except Exception as exc:
            raise AccessorFault(self.detail_name, index, exc) from exc

"""Tests for interleaved master/detail blocks."""

import pytest

from catalog_export.descriptors import FieldDescriptor
from catalog_export.errors import AccessorFault, ConfigurationError
from catalog_export.master_detail import MasterDetailBlockWriter

KINDS = (("a", "Alpha"), ("b", "Beta"))

MASTER = [
    FieldDescriptor("Id", lambda r: r["id"]),
    FieldDescriptor("Kind", lambda r: r["kind"], domain=KINDS),
]

DETAIL = [
    FieldDescriptor("ItemId", lambda i: i["id"], layout_offset=2),
    FieldDescriptor("ItemKind", lambda i: i["kind"], domain=KINDS, layout_offset=2),
]

RECORDS = [
    {"id": 1, "kind": "a", "items": [{"id": 11, "kind": "a"}, {"id": 12, "kind": "b"}]},
    {"id": 2, "kind": "b", "items": []},
    {"id": 3, "kind": "a", "items": [{"id": 31, "kind": "b"}]},
]


def _write(records=RECORDS, detail=DETAIL, **options):
    writer = MasterDetailBlockWriter(detail, lambda r: r["items"], **options)
    return writer.write("Item", MASTER, records)


def test_detail_rows_follow_their_master_row():
    primary = _write().primary
    layout = [(row.cells[0], row.outline_level, row.collapsed, row.caption) for row in primary.rows]

    assert layout == [
        ("Id", 0, False, True),
        (1, 0, False, False),
        ("ItemId", 1, True, True),
        (11, 1, True, False),
        (12, 1, True, False),
        (2, 0, False, False),
        (3, 0, False, False),
        ("ItemId", 1, True, True),
        (31, 1, True, False),
    ]


def test_detail_rows_sit_at_the_layout_offset():
    primary = _write().primary
    assert primary.row(3).offset == 2
    assert primary.row(4).values() == (None, None, 11, "a")
    assert primary.row(4).value(3) == 11
    assert primary.row(2).values() == (1, "a")


def test_validation_covers_only_matching_rows():
    document = _write()
    (master_rule,) = document.validations_for("Item", 2)
    (detail_rule,) = document.validations_for("Item", 4)

    assert master_rule.spans == [(2, 2), (6, 7)]
    assert detail_rule.spans == [(4, 5), (9, 9)]


def test_detail_domains_use_their_own_allocator():
    document = _write(detail_name="Lines")
    names = [sheet.name for sheet in document.auxiliary_sheets]

    assert names == ["DataForItemFilters", "DataForLinesFilters"]
    master_rule, detail_rule = document.validations
    assert master_rule.source.sheet != detail_rule.source.sheet


def test_masters_without_details_are_plain_rows():
    records = [{"id": 1, "kind": "a", "items": []}, {"id": 2, "kind": "b", "items": []}]
    primary = _write(records).primary
    assert primary.row_count == 3
    assert all(row.outline_level == 0 for row in primary.rows)


def test_detail_collection_failure_names_the_block():
    records = [{"id": 1, "kind": "a", "items": []}, {"id": 2, "kind": "b"}]
    with pytest.raises(AccessorFault) as info:
        _write(records, detail_name="Lines")
    assert info.value.field == "Lines"
    assert info.value.record_index == 1


def test_inconsistent_detail_offsets_are_rejected():
    detail = [
        FieldDescriptor("ItemId", lambda i: i["id"], layout_offset=2),
        FieldDescriptor("ItemKind", lambda i: i["kind"], layout_offset=3),
    ]
    with pytest.raises(ConfigurationError):
        _write(detail=detail)


def test_without_dropdowns_layout_is_unchanged():
    document = _write(use_dropdown_lists=False)
    assert document.validations == []
    assert document.auxiliary_sheets == []
    assert document.primary.row_count == 9


def test_detail_name_equal_to_the_sheet_name_gets_its_own_auxiliary_sheet():
    document = _write(detail_name="Item")
    names = [sheet.name for sheet in document.auxiliary_sheets]

    assert names == ["DataForItemFilters", "DataForItemFilters2"]
    master_rule, detail_rule = document.validations
    assert master_rule.source.sheet == "DataForItemFilters"
    assert detail_rule.source.sheet == "DataForItemFilters2"

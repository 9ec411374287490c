"""Tests for the tabular document writer."""

from datetime import datetime, timedelta, timezone
from enum import IntEnum

import pytest

from catalog_export.descriptors import FieldDescriptor, ModeFlags, resolve
from catalog_export.document import MAX_ROWS
from catalog_export.errors import AccessorFault, ConfigurationError
from catalog_export.tabular import TabularDocumentWriter, sheet_title

SIZES = (("S", "Small"), ("M", "Medium"))


class Shade(IntEnum):
    Light = 1
    Dark = 2


def _three_fields():
    return [
        FieldDescriptor("Field1", lambda r: r["a"]),
        FieldDescriptor("Field2", lambda r: r["size"], domain=SIZES),
        FieldDescriptor("Field3", lambda r: r["c"], toggle="extra"),
    ]


RECORDS = [
    {"a": 1, "size": "S", "c": "x"},
    {"a": 2, "size": "M", "c": "y"},
    {"a": 3, "size": None, "c": "z"},
]


def test_two_of_three_fields_with_one_domain():
    fields = resolve(_three_fields(), ModeFlags(toggles={"extra": False}))
    document = TabularDocumentWriter().write("Item", fields, RECORDS)

    primary = document.primary
    assert primary.name == "Item"
    assert primary.row(1).cells == ["Field1", "Field2"]
    assert primary.row(1).caption

    (aux,) = document.auxiliary_sheets
    assert aux.name == "DataForItemFilters"
    assert aux.row_count == 2

    (rule,) = document.validations
    assert rule.column == 2
    assert rule.source.sheet == aux.name
    assert (rule.source.first_row, rule.source.last_row) == (1, 2)
    assert rule.spans == [(2, MAX_ROWS)]


def test_row_k_comes_from_record_k_minus_one():
    fields = resolve(_three_fields(), ModeFlags(toggles={"extra": True}))
    primary = TabularDocumentWriter().write("Item", fields, RECORDS).primary

    assert primary.row_count == len(RECORDS) + 1
    for k, record in enumerate(RECORDS, start=2):
        assert primary.row(k).cells == [record["a"], record["size"], record["c"]]
        assert primary.row(k).outline_level == 0


def test_records_are_consumed_in_one_pass():
    pulled = []

    def produce():
        for record in RECORDS:
            pulled.append(record["a"])
            yield record

    fields = resolve(_three_fields(), ModeFlags(toggles={"extra": False}))
    primary = TabularDocumentWriter().write("Item", fields, produce()).primary
    assert pulled == [1, 2, 3]
    assert primary.row_count == 4


def test_empty_input_gives_caption_only():
    fields = resolve(_three_fields(), ModeFlags(toggles={"extra": False}))
    document = TabularDocumentWriter().write("Item", fields, [])
    assert document.primary.row_count == 1
    assert len(document.validations) == 1


def test_accessor_fault_aborts_with_field_and_index():
    fields = [FieldDescriptor("Id", lambda r: r["id"])]
    with pytest.raises(AccessorFault) as info:
        TabularDocumentWriter().write("Item", fields, [{"id": 1}, {}])

    assert info.value.field == "Id"
    assert info.value.record_index == 1
    assert isinstance(info.value.__cause__, KeyError)


def test_without_dropdowns_no_auxiliary_sheets_are_made():
    fields = resolve(_three_fields(), ModeFlags(toggles={"extra": False}))
    document = TabularDocumentWriter(use_dropdown_lists=False).write("Item", fields, RECORDS)

    assert document.auxiliary_sheets == []
    assert document.validations == []
    assert document.primary.row(2).cells == [1, "S"]


def test_duplicate_names_fail_before_writing():
    fields = [FieldDescriptor("Id", len), FieldDescriptor("Id", len)]
    with pytest.raises(ConfigurationError):
        TabularDocumentWriter().write("Item", fields, RECORDS)


def test_values_are_coerced_to_cell_types():
    aware = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    fields = [
        FieldDescriptor("Shade", lambda r: Shade.Dark),
        FieldDescriptor("When", lambda r: aware),
    ]
    row = TabularDocumentWriter().write("Item", fields, [object()]).primary.row(2)
    assert row.cells == [2, datetime(2024, 5, 1, 10, 0)]


def test_sheet_title_uses_the_record_type_name():
    class Manufacturer:
        pass

    assert sheet_title(Manufacturer) == "Manufacturer"
    assert sheet_title("Bad:Name?") == "Bad_Name_"

from __future__ import annotations

from datetime import date, datetime

import pytest

from sheet_query.models.errors import SchemaDefinitionError, UnknownColumnError
from sheet_query.models.schema import Column, ColumnType, TableSchema


def test_from_mapping_keeps_declared_order():
    schema = TableSchema.from_mapping(12, {"UUID": "string", "User Name": "string", "Age": "number"})

    assert schema.id == 12
    assert schema.column_names == ("UUID", "User Name", "Age")
    assert schema.column("Age").type is ColumnType.NUMBER


def test_schema_is_immutable(group_schema):
    with pytest.raises(AttributeError):
        group_schema.id = 5  # type: ignore[misc]


@pytest.mark.parametrize(
    "build",
    [
        lambda: TableSchema.of(1, [("A", "string"), ("A", "number")]),
        lambda: TableSchema.of(1, []),
        lambda: TableSchema.of("1", [("A", "string")]),  # type: ignore[arg-type]
        lambda: TableSchema.of(True, [("A", "string")]),  # type: ignore[arg-type]
        lambda: TableSchema.of(1, [("", "string")]),
        lambda: TableSchema.of(1, [(" Name", "string")]),
        lambda: TableSchema.of(1, [("Name\t", "string")]),
        lambda: TableSchema.of(1, [("A", "int")]),
    ],
)
def test_malformed_schemas_are_rejected(build):
    with pytest.raises(SchemaDefinitionError):
        build()


def test_column_type_parse_is_case_insensitive():
    assert ColumnType.parse("Date") is ColumnType.DATE
    assert ColumnType.parse(" BOOLEAN ") is ColumnType.BOOLEAN
    assert Column("When", "date").type is ColumnType.DATE


def test_column_type_accepts():
    assert ColumnType.STRING.accepts("x")
    assert not ColumnType.STRING.accepts(1)
    assert ColumnType.NUMBER.accepts(1) and ColumnType.NUMBER.accepts(2.5)
    assert not ColumnType.NUMBER.accepts(True)
    assert ColumnType.BOOLEAN.accepts(False)
    assert not ColumnType.BOOLEAN.accepts(0)
    assert ColumnType.DATE.accepts(date(2024, 1, 1))
    assert ColumnType.DATE.accepts(datetime(2024, 1, 1, 9, 30))
    assert all(t.accepts(None) for t in ColumnType)


def test_blank_record_fills_defaults(user_schema):
    record = user_schema.blank_record(Name="Carol")

    assert record == {
        "User ID": "",
        "Group ID": "",
        "Name": "Carol",
        "Age": 0,
        "Is Employed": False,
    }


def test_blank_record_rejects_unknown_columns(user_schema):
    with pytest.raises(UnknownColumnError):
        user_schema.blank_record(Nickname="C")


def test_date_has_no_default():
    with pytest.raises(TypeError):
        ColumnType.DATE.default_value()

"""Unit tests for TableInfo and ColumnInfo."""

from __future__ import annotations

import pyarrow as pa
import pytest
from pydantic import ValidationError
from pyiceberg.schema import Schema
from pyiceberg.types import (
    DoubleType,
    ListType,
    LongType,
    NestedField,
    StringType,
    TimestampType,
)

from floe_partitions.config import PartitionTransformType, TableIdentifier
from floe_partitions.errors import TypeIncompatibilityError
from floe_partitions.tables import PARTITIONING_PROPERTY, ColumnInfo, TableInfo


@pytest.fixture
def columns() -> list[ColumnInfo]:
    """Return the orders table columns."""
    return [
        ColumnInfo(field_id=1, name="order_key", field_type=LongType(), required=True),
        ColumnInfo(field_id=2, name="ts", field_type=TimestampType(), required=True),
        ColumnInfo(field_id=3, name="price", field_type=DoubleType(), required=True),
        ColumnInfo(field_id=4, name="comment", field_type=StringType(), comment="free text"),
        ColumnInfo(
            field_id=5,
            name="notes",
            field_type=ListType(element_id=6, element_type=StringType()),
        ),
    ]


@pytest.fixture
def table(columns: list[ColumnInfo]) -> TableInfo:
    """Return an orders TableInfo."""
    return TableInfo(
        id=1,
        schema_name="bronze",
        table_name="orders",
        columns=columns,
        properties={PARTITIONING_PROPERTY: ["day(ts)", "BUCKET(order_key, 16)"]},
        comment="Orders",
    )


class TestColumnInfo:
    """Tests for ColumnInfo."""

    def test_to_nested_field(self) -> None:
        """Test conversion to an Iceberg NestedField."""
        column = ColumnInfo(field_id=3, name="price", field_type=DoubleType(), required=True, comment="usd")

        field = column.to_nested_field()

        assert field.field_id == 3
        assert field.name == "price"
        assert field.field_type == DoubleType()
        assert field.required is True
        assert field.doc == "usd"

    def test_from_nested_field(self) -> None:
        """Test conversion from an Iceberg NestedField."""
        field = NestedField(field_id=7, name="note", field_type=StringType(), required=False, doc="n")

        column = ColumnInfo.from_nested_field(field)

        assert column == ColumnInfo(field_id=7, name="note", field_type=StringType(), comment="n")

    def test_field_id_must_be_positive(self) -> None:
        """Test field ids start at 1."""
        with pytest.raises(ValidationError):
            ColumnInfo(field_id=0, name="x", field_type=LongType())


class TestTableInfo:
    """Tests for TableInfo."""

    def test_identifier(self, table: TableInfo) -> None:
        """Test the identifier combines namespace and name."""
        assert table.identifier == TableIdentifier(namespace="bronze", name="orders")
        assert str(table.identifier) == "bronze.orders"

    def test_columns_are_tuple(self, table: TableInfo) -> None:
        """Test columns are stored immutably."""
        assert isinstance(table.columns, tuple)
        assert len(table.columns) == 5

    def test_properties_are_copied(self, columns: list[ColumnInfo]) -> None:
        """Test mutating the caller's mapping does not change the table."""
        properties: dict[str, object] = {"owner": "data-eng"}
        table = TableInfo(id=1, schema_name="s", table_name="t", columns=columns, properties=properties)
        properties["owner"] = "someone-else"

        assert table.properties == {"owner": "data-eng"}

    def test_frozen(self, table: TableInfo) -> None:
        """Test TableInfo is immutable."""
        with pytest.raises(ValidationError):
            table.table_name = "other"  # type: ignore[misc]

    def test_duplicate_column_names_rejected(self) -> None:
        """Test column names must be unique."""
        with pytest.raises(ValidationError, match="Duplicate column names"):
            TableInfo(
                id=1,
                schema_name="s",
                table_name="t",
                columns=[
                    ColumnInfo(field_id=1, name="a", field_type=LongType()),
                    ColumnInfo(field_id=2, name="a", field_type=LongType()),
                ],
            )

    def test_duplicate_field_ids_rejected(self) -> None:
        """Test column field ids must be unique."""
        with pytest.raises(ValidationError, match="Duplicate column field ids"):
            TableInfo(
                id=1,
                schema_name="s",
                table_name="t",
                columns=[
                    ColumnInfo(field_id=1, name="a", field_type=LongType()),
                    ColumnInfo(field_id=1, name="b", field_type=LongType()),
                ],
            )

    def test_column_by_id(self, table: TableInfo) -> None:
        """Test column lookup by field id."""
        assert table.column(3).name == "price"

    def test_column_by_id_missing(self, table: TableInfo) -> None:
        """Test missing field ids raise KeyError."""
        with pytest.raises(KeyError):
            table.column(99)

    def test_column_by_name(self, table: TableInfo) -> None:
        """Test column lookup by case-insensitive name."""
        assert table.column_by_name("COMMENT").comment == "free text"

    def test_column_by_name_missing(self, table: TableInfo) -> None:
        """Test missing names raise KeyError."""
        with pytest.raises(KeyError):
            table.column_by_name("nope")

    def test_to_iceberg_schema(self, table: TableInfo) -> None:
        """Test columns become a schema with the same ids and names."""
        schema = table.to_iceberg_schema(schema_id=4)

        assert schema.schema_id == 4
        assert [f.name for f in schema.fields] == ["order_key", "ts", "price", "comment", "notes"]
        assert [f.field_id for f in schema.fields] == [1, 2, 3, 4, 5]


    def test_from_arrow_schema(self) -> None:
        """Test a PyArrow schema becomes columns with fresh ids."""
        table = TableInfo.from_schema(
            id=2,
            schema_name="bronze",
            table_name="events",
            schema=pa.schema(
                [
                    pa.field("event_id", pa.int64(), nullable=False),
                    pa.field("ts", pa.timestamp("us")),
                ]
            ),
            properties={PARTITIONING_PROPERTY: ["hour(TS)", "bucket(event_id, 8)"]},
        )

        assert [(c.field_id, c.name) for c in table.columns] == [(1, "event_id"), (2, "ts")]
        assert table.columns[0].field_type == LongType()
        assert table.columns[0].required is True
        assert table.columns[1].field_type == TimestampType()
        assert table.partition_spec().source_ids() == [2, 1]

    def test_from_iceberg_schema(self, orders_schema: Schema) -> None:
        """Test an Iceberg schema keeps its field ids."""
        table = TableInfo.from_schema(
            id=3, schema_name="bronze", table_name="orders", schema=orders_schema, comment="c"
        )

        assert [c.field_id for c in table.columns] == [1, 2, 3, 4, 5]
        assert table.to_iceberg_schema().fields == orders_schema.fields
        assert table.properties == {}
        assert table.comment == "c"

class TestTableInfoCopies:
    """Tests for the with_* copy methods."""

    def test_with_columns(self, table: TableInfo) -> None:
        """Test with_columns replaces columns and keeps the rest."""
        updated = table.with_columns([ColumnInfo(field_id=1, name="id", field_type=LongType())])

        assert [c.name for c in updated.columns] == ["id"]
        assert updated.table_name == "orders"
        assert len(table.columns) == 5

    def test_with_properties(self, table: TableInfo) -> None:
        """Test with_properties replaces properties."""
        updated = table.with_properties({"format-version": "2"})

        assert updated.properties == {"format-version": "2"}
        assert PARTITIONING_PROPERTY in table.properties

    def test_with_comment(self, table: TableInfo) -> None:
        """Test with_comment replaces and clears the comment."""
        assert table.with_comment("New").comment == "New"
        assert table.with_comment(None).comment is None

    def test_with_columns_validates(self, table: TableInfo) -> None:
        """Test copies are validated."""
        with pytest.raises(ValidationError):
            table.with_columns(
                [
                    ColumnInfo(field_id=1, name="a", field_type=LongType()),
                    ColumnInfo(field_id=2, name="a", field_type=LongType()),
                ]
            )


class TestTablePartitionSpec:
    """Tests for TableInfo.partition_spec."""

    def test_parses_partitioning_property(self, table: TableInfo) -> None:
        """Test declarations are validated against the table's columns."""
        spec = table.partition_spec()

        assert [f.transform_type for f in spec.fields] == [
            PartitionTransformType.DAY,
            PartitionTransformType.BUCKET,
        ]
        assert spec.fields[1].transform.param == 16

    def test_missing_property(self, table: TableInfo) -> None:
        """Test tables without the property are unpartitioned."""
        assert table.with_properties({}).partition_spec().is_unpartitioned

    def test_single_string_property(self, table: TableInfo) -> None:
        """Test a single declaration string is accepted."""
        spec = table.with_properties({PARTITIONING_PROPERTY: "comment"}).partition_spec()

        assert spec.fields[0].source_name == "comment"

    def test_invalid_declaration(self, table: TableInfo) -> None:
        """Test invalid declarations surface the partition error."""
        broken = table.with_properties({PARTITIONING_PROPERTY: ["notes"]})

        with pytest.raises(TypeIncompatibilityError, match="list<string>"):
            broken.partition_spec()

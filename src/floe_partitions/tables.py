"""Table records for partition-aware table management.

TableInfo describes a table by namespace, name, columns, properties and
comment. The ``partitioning`` property holds the table's partition field
declarations and is validated against the table's own columns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pyiceberg.schema import Schema
from pyiceberg.types import IcebergType, NestedField

from floe_partitions.config import PartitionSpec, TableIdentifier
from floe_partitions.partitions import build_partition_spec
from floe_partitions.schema import iceberg_schema_from_arrow

if TYPE_CHECKING:
    import pyarrow as pa

PARTITIONING_PROPERTY = "partitioning"


class ColumnInfo(BaseModel):
    """A table column.

    Attributes:
        field_id: Unique positive Iceberg field id.
        name: Column name.
        field_type: Iceberg type of the column.
        required: Whether the column is non-nullable.
        comment: Optional column comment.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    field_id: int = Field(..., ge=1, description="Iceberg field id")
    name: str = Field(..., min_length=1, description="Column name")
    field_type: IcebergType = Field(..., description="Iceberg column type")
    required: bool = Field(default=False, description="Whether the column is non-nullable")
    comment: str | None = Field(default=None, description="Column comment")

    def to_nested_field(self) -> NestedField:
        """Return the column as an Iceberg NestedField."""
        return NestedField(
            field_id=self.field_id,
            name=self.name,
            field_type=self.field_type,
            required=self.required,
            doc=self.comment,
        )

    @classmethod
    def from_nested_field(cls, field: NestedField) -> ColumnInfo:
        """Build a column from an Iceberg NestedField."""
        return cls(
            field_id=field.field_id,
            name=field.name,
            field_type=field.field_type,
            required=field.required,
            comment=field.doc,
        )


class TableInfo(BaseModel):
    """A table known to the table-management layer.

    Attributes:
        id: Table id.
        schema_name: Namespace the table lives in.
        table_name: Table name.
        columns: Columns in schema order.
        properties: Table properties (copied on construction).
        comment: Optional table comment.

    Example:
        >>> info = TableInfo(
        ...     id=1,
        ...     schema_name="bronze",
        ...     table_name="orders",
        ...     columns=[ColumnInfo(field_id=1, name="order_key", field_type=LongType())],
        ...     properties={"partitioning": ["bucket(order_key, 16)"]},
        ... )
        >>> str(info.identifier)
        'bronze.orders'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int = Field(..., description="Table id")
    schema_name: str = Field(..., min_length=1, description="Namespace of the table")
    table_name: str = Field(..., min_length=1, description="Table name")
    columns: tuple[ColumnInfo, ...] = Field(default=(), description="Columns in schema order")
    properties: dict[str, Any] = Field(default_factory=dict, description="Table properties")
    comment: str | None = Field(default=None, description="Table comment")

    @field_validator("properties")
    @classmethod
    def copy_properties(cls, v: dict[str, Any]) -> dict[str, Any]:
        """Detach properties from the caller's mapping."""
        return dict(v)

    @field_validator("columns")
    @classmethod
    def validate_unique_columns(cls, v: tuple[ColumnInfo, ...]) -> tuple[ColumnInfo, ...]:
        """Validate column names and field ids are unique."""
        names = [c.name for c in v]
        if len(set(names)) != len(names):
            msg = f"Duplicate column names: {names}"
            raise ValueError(msg)
        ids = [c.field_id for c in v]
        if len(set(ids)) != len(ids):
            msg = f"Duplicate column field ids: {ids}"
            raise ValueError(msg)
        return v

    @classmethod
    def from_schema(
        cls,
        *,
        id: int,
        schema_name: str,
        table_name: str,
        schema: pa.Schema | Schema,
        properties: dict[str, Any] | None = None,
        comment: str | None = None,
    ) -> TableInfo:
        """Build a table whose columns are the top-level fields of a schema.

        PyArrow schemas are converted first; their fields get fresh Iceberg
        ids from 1 in schema order.

        Example:
            >>> TableInfo.from_schema(
            ...     id=1,
            ...     schema_name="bronze",
            ...     table_name="orders",
            ...     schema=pa.schema([pa.field("order_key", pa.int64(), nullable=False)]),
            ... )
        """
        iceberg_schema = iceberg_schema_from_arrow(schema)
        return cls(
            id=id,
            schema_name=schema_name,
            table_name=table_name,
            columns=tuple(ColumnInfo.from_nested_field(f) for f in iceberg_schema.fields),
            properties=properties or {},
            comment=comment,
        )

    @property
    def identifier(self) -> TableIdentifier:
        """Return the fully qualified table identifier."""
        return TableIdentifier(namespace=self.schema_name, name=self.table_name)

    def column(self, field_id: int) -> ColumnInfo:
        """Return the column with the given field id.

        Raises:
            KeyError: If no column has that field id.
        """
        for column in self.columns:
            if column.field_id == field_id:
                return column
        raise KeyError(field_id)

    def column_by_name(self, name: str) -> ColumnInfo:
        """Return the column with the given name, matched case-insensitively.

        Raises:
            KeyError: If no column has that name.
        """
        lowered = name.lower()
        for column in self.columns:
            if column.name.lower() == lowered:
                return column
        raise KeyError(name)

    def to_iceberg_schema(self, schema_id: int = 0) -> Schema:
        """Return the columns as an Iceberg schema."""
        return Schema(*(c.to_nested_field() for c in self.columns), schema_id=schema_id)

    def partition_spec(self) -> PartitionSpec:
        """Parse the ``partitioning`` property against this table's columns.

        Returns:
            PartitionSpec; empty when the property is absent.

        Raises:
            PartitionSpecError: If a declaration is invalid.
        """
        declarations = self.properties.get(PARTITIONING_PROPERTY) or []
        if isinstance(declarations, str):
            declarations = [declarations]
        return build_partition_spec(self.to_iceberg_schema(), declarations)

    def with_columns(self, columns: list[ColumnInfo] | tuple[ColumnInfo, ...]) -> TableInfo:
        """Return a copy with the given columns."""
        return self._copy_with(columns=tuple(columns))

    def with_properties(self, properties: dict[str, Any]) -> TableInfo:
        """Return a copy with the given properties."""
        return self._copy_with(properties=properties)

    def with_comment(self, comment: str | None) -> TableInfo:
        """Return a copy with the given comment."""
        return self._copy_with(comment=comment)

    def _copy_with(self, **updates: Any) -> TableInfo:
        # model_copy skips validation; rebuild so validators run on the update
        data = {
            "id": self.id,
            "schema_name": self.schema_name,
            "table_name": self.table_name,
            "columns": self.columns,
            "properties": self.properties,
            "comment": self.comment,
        }
        data.update(updates)
        return TableInfo(**data)

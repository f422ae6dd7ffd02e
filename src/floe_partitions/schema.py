"""Schema helpers for partition source resolution.

This module provides:
- Case-insensitive lookup of top-level source fields
- Primitive/non-primitive classification and type rendering
- Transform/source type compatibility rules
- PyArrow to Iceberg schema conversion
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pyiceberg.schema import Schema
from pyiceberg.types import (
    BinaryType,
    DateType,
    DecimalType,
    DoubleType,
    FloatType,
    IcebergType,
    IntegerType,
    LongType,
    PrimitiveType,
    StringType,
    TimestampType,
    TimestamptzType,
)

from floe_partitions.config import PartitionTransformType
from floe_partitions.errors import TypeIncompatibilityError, UnresolvedColumnError

if TYPE_CHECKING:
    import pyarrow as pa
    from pyiceberg.types import NestedField

_TEMPORAL_TYPES: tuple[type[IcebergType], ...] = (DateType, TimestampType, TimestamptzType)
_UNBUCKETABLE_TYPES: tuple[type[IcebergType], ...] = (FloatType, DoubleType)
_TRUNCATABLE_TYPES: tuple[type[IcebergType], ...] = (
    IntegerType,
    LongType,
    DecimalType,
    StringType,
    BinaryType,
)


def find_source_field(schema: Schema, name: str) -> NestedField:
    """Resolve a top-level field by case-insensitive name.

    Nested fields are never partition sources, so only ``schema.fields`` is
    searched. When several fields differ only by case, the first in schema
    order wins.

    Args:
        schema: Iceberg schema to search.
        name: Column name as written in the declaration.

    Returns:
        The matching schema field, carrying the schema's own casing.

    Raises:
        UnresolvedColumnError: If no top-level field matches.

    Example:
        >>> find_source_field(schema, "COMMENT").name
        'comment'
    """
    lowered = name.lower()
    for field in schema.fields:
        if field.name.lower() == lowered:
            return field
    raise UnresolvedColumnError(lowered)


def find_field_by_id(schema: Schema, field_id: int) -> NestedField:
    """Resolve a top-level field by id.

    Raises:
        UnresolvedColumnError: If the schema has no top-level field with that id.
    """
    for field in schema.fields:
        if field.field_id == field_id:
            return field
    raise UnresolvedColumnError(field_id)


def is_primitive(iceberg_type: IcebergType) -> bool:
    """Return True for scalar types, False for list, struct and map."""
    return isinstance(iceberg_type, PrimitiveType)


def type_name(iceberg_type: IcebergType) -> str:
    """Render a type the way it appears in error messages (e.g. ``list<string>``)."""
    return str(iceberg_type)


def can_transform(transform_type: PartitionTransformType, source_type: IcebergType) -> bool:
    """Return True if the transform accepts values of ``source_type``."""
    if transform_type == PartitionTransformType.VOID:
        return True
    if not is_primitive(source_type):
        return False
    if transform_type == PartitionTransformType.IDENTITY:
        return True
    if transform_type.is_temporal:
        return isinstance(source_type, _TEMPORAL_TYPES)
    if transform_type == PartitionTransformType.BUCKET:
        return not isinstance(source_type, _UNBUCKETABLE_TYPES)
    if transform_type == PartitionTransformType.TRUNCATE:
        return isinstance(source_type, _TRUNCATABLE_TYPES)
    msg = f"Unsupported transform type: {transform_type}"
    raise ValueError(msg)


def check_transform(transform_type: PartitionTransformType, source_type: IcebergType) -> None:
    """Raise if the transform cannot be applied to ``source_type``.

    Args:
        transform_type: Transform being declared.
        source_type: Type of the resolved source field.

    Raises:
        TypeIncompatibilityError: With the message for the failing pairing.
    """
    if can_transform(transform_type, source_type):
        return

    rendered = type_name(source_type)
    keyword = transform_type.value
    if transform_type == PartitionTransformType.IDENTITY:
        msg = f"Cannot partition by non-primitive source field: {rendered}"
    elif transform_type == PartitionTransformType.BUCKET:
        msg = f"Cannot bucket by type: {rendered}"
    elif transform_type == PartitionTransformType.TRUNCATE:
        msg = f"Cannot truncate type: {rendered}"
    else:
        msg = f"Cannot partition type {rendered} by {keyword}"
    raise TypeIncompatibilityError(msg, source_type=rendered, transform=keyword)


def iceberg_schema_from_arrow(schema: pa.Schema | Schema) -> Schema:
    """Convert a PyArrow schema to an Iceberg schema.

    Fields without Iceberg field-id metadata get fresh ids assigned from 1,
    in schema order. Iceberg schemas are returned unchanged.

    Args:
        schema: PyArrow or Iceberg schema.

    Returns:
        Iceberg Schema.

    Example:
        >>> iceberg_schema_from_arrow(pa.schema([pa.field("id", pa.int64())]))
    """
    if isinstance(schema, Schema):
        return schema

    from pyiceberg.io.pyarrow import _ConvertToIcebergWithoutIDs, visit_pyarrow
    from pyiceberg.schema import assign_fresh_schema_ids

    iceberg_schema_without_ids = visit_pyarrow(
        schema,
        _ConvertToIcebergWithoutIDs(),
    )
    return assign_fresh_schema_ids(iceberg_schema_without_ids)

"""Canonical rendering of partition fields.

Transform keywords render lowercase and columns render with the schema's own
casing, so re-parsing a rendered declaration yields the same PartitionField.
"""

from __future__ import annotations

from pyiceberg.schema import Schema

from floe_partitions.config import PartitionField, PartitionSpec, PartitionTransformType
from floe_partitions.schema import find_field_by_id


def to_partition_field(schema: Schema, field: PartitionField) -> str:
    """Render one partition field as its canonical declaration.

    Args:
        schema: Schema the field was validated against.
        field: Partition field to render.

    Returns:
        Canonical declaration, e.g. ``"bucket(order_key, 42)"``.

    Raises:
        UnresolvedColumnError: If ``field.source_id`` is not in the schema.

    Example:
        >>> to_partition_field(schema, parse_partition_field(schema, "TRuncate(COMMENT, 13)"))
        'truncate(comment, 13)'
    """
    column = find_field_by_id(schema, field.source_id).name
    transform_type = field.transform_type

    if transform_type == PartitionTransformType.IDENTITY:
        return column
    if transform_type.requires_param:
        return f"{transform_type.value}({column}, {field.transform.param})"
    return f"{transform_type.value}({column})"


def to_partition_fields(schema: Schema, spec: PartitionSpec) -> list[str]:
    """Render every field of a spec, in spec order."""
    return [to_partition_field(schema, field) for field in spec.fields]

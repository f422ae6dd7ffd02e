"""Partition field declaration parsing and PyIceberg spec mapping.

This module provides:
- parse_partition_field: validate one declaration against a schema
- build_partition_spec: validate an ordered list of declarations
- to_iceberg_partition_spec / from_iceberg_partition_spec: mapping to and
  from PyIceberg partition specs

Declarations follow this grammar (keywords and column names are
case-insensitive):

    identity  := column
    year      := "year(" column ")"        (also month, day, hour, void)
    bucket    := "bucket(" column "," n ")"
    truncate  := "truncate(" column "," n ")"
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from pyiceberg.partitioning import PartitionField as IcebergPartitionField
from pyiceberg.partitioning import PartitionSpec as IcebergPartitionSpec
from pyiceberg.schema import Schema
from pyiceberg.transforms import (
    BucketTransform,
    DayTransform,
    HourTransform,
    IdentityTransform,
    MonthTransform,
    Transform,
    TruncateTransform,
    VoidTransform,
    YearTransform,
)

from floe_partitions.config import (
    MAX_TRANSFORM_PARAM,
    IcebergSpecConfig,
    PartitionField,
    PartitionSpec,
    PartitionTransform,
    PartitionTransformType,
)
from floe_partitions.errors import PartitionSpecError, PartitionSyntaxError
from floe_partitions.observability import get_logger, partition_operation
from floe_partitions.schema import check_transform, find_field_by_id, find_source_field

_CALL_PATTERN = re.compile(r"(?P<keyword>[^(]*)\((?P<args>[^()]*)\)", re.DOTALL)
_INTEGER_PATTERN = re.compile(r"[0-9]+")

_CALL_KEYWORDS: dict[str, PartitionTransformType] = {
    t.value: t for t in PartitionTransformType if t != PartitionTransformType.IDENTITY
}

# Default partition field name suffixes, as assigned by Iceberg's spec builder
_NAME_SUFFIXES: dict[PartitionTransformType, str] = {
    PartitionTransformType.YEAR: "year",
    PartitionTransformType.MONTH: "month",
    PartitionTransformType.DAY: "day",
    PartitionTransformType.HOUR: "hour",
    PartitionTransformType.BUCKET: "bucket",
    PartitionTransformType.TRUNCATE: "trunc",
    PartitionTransformType.VOID: "null",
}


def parse_partition_field(schema: Schema, declaration: str) -> PartitionField:
    """Parse and validate one partition field declaration.

    Args:
        schema: Table schema the declaration refers to.
        declaration: Declaration text, e.g. ``"bucket(order_key, 42)"``.

    Returns:
        Validated PartitionField bound to the schema's casing of the column.

    Raises:
        PartitionSyntaxError: If the declaration is malformed.
        UnresolvedColumnError: If the column is not a top-level schema field.
        TypeIncompatibilityError: If the transform does not accept the
            column's type.

    Example:
        >>> parse_partition_field(schema, "YEAR(ts)").transform_type
        <PartitionTransformType.YEAR: 'year'>
    """
    column, transform = _parse_declaration(declaration)
    source = find_source_field(schema, column)
    check_transform(transform.transform_type, source.field_type)

    field = PartitionField(
        source_id=source.field_id,
        source_name=source.name,
        transform=transform,
    )
    get_logger().debug(
        "partition_field_parsed",
        declaration=declaration,
        source_id=field.source_id,
        transform=str(transform),
    )
    return field


def _parse_declaration(declaration: str) -> tuple[str, PartitionTransform]:
    """Split a declaration into its column name and transform."""
    text = declaration.strip()

    if "(" not in text and ")" not in text:
        if not text:
            raise PartitionSyntaxError(declaration)
        return text, PartitionTransform(transform_type=PartitionTransformType.IDENTITY)

    match = _CALL_PATTERN.fullmatch(text)
    if match is None:
        raise PartitionSyntaxError(declaration)

    transform_type = _CALL_KEYWORDS.get(match.group("keyword").strip().lower())
    if transform_type is None:
        raise PartitionSyntaxError(declaration)

    args = [arg.strip() for arg in match.group("args").split(",")]
    expected_args = 2 if transform_type.requires_param else 1
    if len(args) != expected_args or not args[0]:
        raise PartitionSyntaxError(declaration)

    if not transform_type.requires_param:
        return args[0], PartitionTransform(transform_type=transform_type)

    if not _INTEGER_PATTERN.fullmatch(args[1]):
        raise PartitionSyntaxError(declaration)
    param = int(args[1])
    if param > MAX_TRANSFORM_PARAM:
        raise PartitionSyntaxError(declaration)
    if param == 0:
        if transform_type == PartitionTransformType.BUCKET:
            msg = f"Invalid number of buckets: {param} (must be > 0)"
        else:
            msg = f"Invalid truncate width: {param} (must be > 0)"
        raise PartitionSyntaxError(declaration, msg)
    return args[0], PartitionTransform(transform_type=transform_type, param=param)


def build_partition_spec(
    schema: Schema,
    declarations: Iterable[str],
    *,
    spec_id: int = 0,
) -> PartitionSpec:
    """Build a PartitionSpec from declarations, in order.

    Stops at the first invalid declaration; no partial spec is returned.

    Args:
        schema: Table schema the declarations refer to.
        declarations: Partition field declarations in partition order.
        spec_id: Id of the resulting spec.

    Returns:
        PartitionSpec with one field per declaration.

    Example:
        >>> spec = build_partition_spec(schema, ["order_key", "bucket(order_key, 42)"])
        >>> [f.transform_type.value for f in spec.fields]
        ['identity', 'bucket']
    """
    declarations = list(declarations)
    with partition_operation(
        "build_partition_spec",
        num_fields=len(declarations),
        spec_id=spec_id,
        schema_id=schema.schema_id,
    ):
        fields = tuple(parse_partition_field(schema, d) for d in declarations)
        return PartitionSpec(spec_id=spec_id, fields=fields)


def to_iceberg_partition_spec(
    spec: PartitionSpec,
    config: IcebergSpecConfig | None = None,
) -> IcebergPartitionSpec:
    """Convert a PartitionSpec to a PyIceberg PartitionSpec.

    Partition field ids are assigned sequentially from
    ``config.first_field_id`` and names follow Iceberg's defaults
    (``ts_day``, ``order_key_bucket``, ``comment_trunc``, ...).

    Args:
        spec: Validated partition spec.
        config: Conversion options (defaults to IcebergSpecConfig()).

    Returns:
        PyIceberg PartitionSpec.

    Raises:
        PartitionSpecError: If two fields would get the same partition name.
    """
    config = config or IcebergSpecConfig()

    with partition_operation(
        "to_iceberg_partition_spec",
        num_fields=len(spec.fields),
        spec_id=config.spec_id,
    ):
        fields: list[IcebergPartitionField] = []
        names: set[str] = set()
        for i, field in enumerate(spec.fields):
            name = partition_field_name(field)
            if name in names:
                msg = f"Cannot add duplicate partition field name: {name}"
                raise PartitionSpecError(msg, details={"source": field.source_name})
            names.add(name)
            fields.append(
                IcebergPartitionField(
                    source_id=field.source_id,
                    field_id=config.first_field_id + i,
                    transform=_to_iceberg_transform(field.transform),
                    name=name,
                )
            )
        return IcebergPartitionSpec(*fields, spec_id=config.spec_id)


def from_iceberg_partition_spec(schema: Schema, spec: IcebergPartitionSpec) -> PartitionSpec:
    """Convert a PyIceberg PartitionSpec into a validated PartitionSpec.

    Args:
        schema: Schema the PyIceberg spec is bound to.
        spec: PyIceberg partition spec.

    Returns:
        PartitionSpec with the same field order and spec id.

    Raises:
        PartitionSpecError: If a transform has no declaration form.
        UnresolvedColumnError: If a source id is not a top-level schema field.
        TypeIncompatibilityError: If a transform does not accept its source type.
    """
    fields: list[PartitionField] = []
    for iceberg_field in spec.fields:
        source = find_field_by_id(schema, iceberg_field.source_id)
        transform = _from_iceberg_transform(iceberg_field.transform)
        check_transform(transform.transform_type, source.field_type)
        fields.append(
            PartitionField(
                source_id=source.field_id,
                source_name=source.name,
                transform=transform,
            )
        )
    return PartitionSpec(spec_id=spec.spec_id, fields=tuple(fields))


def partition_field_name(field: PartitionField) -> str:
    """Return the default Iceberg partition field name for a field."""
    suffix = _NAME_SUFFIXES.get(field.transform_type)
    if suffix is None:
        return field.source_name
    return f"{field.source_name}_{suffix}"


def _to_iceberg_transform(transform: PartitionTransform) -> Transform[Any, Any]:
    """Convert PartitionTransform to PyIceberg Transform."""
    transform_map: dict[PartitionTransformType, type[Transform[Any, Any]]] = {
        PartitionTransformType.IDENTITY: IdentityTransform,
        PartitionTransformType.YEAR: YearTransform,
        PartitionTransformType.MONTH: MonthTransform,
        PartitionTransformType.DAY: DayTransform,
        PartitionTransformType.HOUR: HourTransform,
        PartitionTransformType.VOID: VoidTransform,
    }

    if transform.transform_type in transform_map:
        # Concrete transforms take no arguments; mypy sees the RootModel signature
        transform_cls = transform_map[transform.transform_type]
        return transform_cls()  # type: ignore[call-arg]

    assert transform.param is not None  # Enforced by PartitionTransform
    if transform.transform_type == PartitionTransformType.BUCKET:
        return BucketTransform(transform.param)
    if transform.transform_type == PartitionTransformType.TRUNCATE:
        return TruncateTransform(transform.param)

    msg = f"Unsupported transform type: {transform.transform_type}"
    raise ValueError(msg)


def _from_iceberg_transform(transform: Transform[Any, Any]) -> PartitionTransform:
    """Convert PyIceberg Transform to PartitionTransform."""
    if isinstance(transform, BucketTransform):
        return PartitionTransform(
            transform_type=PartitionTransformType.BUCKET,
            param=transform.num_buckets,
        )
    if isinstance(transform, TruncateTransform):
        return PartitionTransform(
            transform_type=PartitionTransformType.TRUNCATE,
            param=transform.width,
        )

    simple_transforms: list[tuple[type[Transform[Any, Any]], PartitionTransformType]] = [
        (IdentityTransform, PartitionTransformType.IDENTITY),
        (YearTransform, PartitionTransformType.YEAR),
        (MonthTransform, PartitionTransformType.MONTH),
        (DayTransform, PartitionTransformType.DAY),
        (HourTransform, PartitionTransformType.HOUR),
        (VoidTransform, PartitionTransformType.VOID),
    ]
    for transform_cls, transform_type in simple_transforms:
        if isinstance(transform, transform_cls):
            return PartitionTransform(transform_type=transform_type)

    msg = f"Unsupported partition transform: {transform}"
    raise PartitionSpecError(msg)

"""floe-partitions: Iceberg partition field declarations for floe-runtime.

This package provides:
- Parsing and validation of partition field declarations against a schema
- Canonical rendering of validated partition fields
- Mapping to and from PyIceberg partition specs
- Conversion of Iceberg values to engine values
- TableInfo records with a validated ``partitioning`` property

Example:
    >>> from floe_partitions import build_partition_spec, to_partition_fields
    >>>
    >>> spec = build_partition_spec(schema, ["order_key", "BUCKET(order_key, 42)"])
    >>> to_partition_fields(schema, spec)
    ['order_key', 'bucket(order_key, 42)']
"""

from __future__ import annotations

__version__ = "0.1.0"

# Public API exports
__all__ = [
    # Parsing
    "parse_partition_field",
    "build_partition_spec",
    "to_iceberg_partition_spec",
    "from_iceberg_partition_spec",
    # Canonical rendering
    "to_partition_field",
    "to_partition_fields",
    # Value conversion
    "convert_iceberg_value",
    # Models
    "PartitionTransformType",
    "PartitionTransform",
    "PartitionField",
    "PartitionSpec",
    "IcebergSpecConfig",
    "TableIdentifier",
    "TableInfo",
    "ColumnInfo",
    # Exceptions
    "PartitionSpecError",
    "PartitionSyntaxError",
    "UnresolvedColumnError",
    "TypeIncompatibilityError",
    "UnsupportedTypeError",
]

# Lazy imports keep `import floe_partitions` free of PyIceberg import cost


def __getattr__(name: str) -> object:
    """Lazy import of public API members."""
    if name in (
        "parse_partition_field",
        "build_partition_spec",
        "to_iceberg_partition_spec",
        "from_iceberg_partition_spec",
    ):
        from floe_partitions import partitions as partitions_module

        return getattr(partitions_module, name)
    if name in ("to_partition_field", "to_partition_fields"):
        from floe_partitions import canonical as canonical_module

        return getattr(canonical_module, name)
    if name == "convert_iceberg_value":
        from floe_partitions.values import convert_iceberg_value

        return convert_iceberg_value
    if name in (
        "PartitionTransformType",
        "PartitionTransform",
        "PartitionField",
        "PartitionSpec",
        "IcebergSpecConfig",
        "TableIdentifier",
    ):
        from floe_partitions import config as config_module

        return getattr(config_module, name)
    if name in ("TableInfo", "ColumnInfo"):
        from floe_partitions import tables as tables_module

        return getattr(tables_module, name)
    if name in (
        "PartitionSpecError",
        "PartitionSyntaxError",
        "UnresolvedColumnError",
        "TypeIncompatibilityError",
        "UnsupportedTypeError",
    ):
        from floe_partitions import errors as errors_module

        return getattr(errors_module, name)
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

"""Pydantic models for floe-partitions.

This module provides:
- TableIdentifier: Table identifier model
- PartitionTransformType: Enum for partition transform types
- PartitionTransform: Transform kind with its optional parameter
- PartitionField: A validated partition field descriptor
- PartitionSpec: Ordered partition fields bound to one schema
- IcebergSpecConfig: Options for producing PyIceberg partition specs
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Self


class TableIdentifier(BaseModel):
    """Table identifier with namespace and name.

    Attributes:
        namespace: Namespace (can be nested, e.g., "bronze.raw").
        name: Table name without namespace prefix.

    Example:
        >>> tid = TableIdentifier(namespace="bronze", name="orders")
        >>> str(tid)
        'bronze.orders'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    namespace: str = Field(
        ...,
        min_length=1,
        description="Namespace (can be nested with dots)",
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Table name",
    )

    def __str__(self) -> str:
        """Return fully qualified table identifier."""
        return f"{self.namespace}.{self.name}"


# Bucket counts and truncate widths are 32-bit ints in Iceberg
MAX_TRANSFORM_PARAM = 2**31 - 1


class PartitionTransformType(str, Enum):
    """Partition transform kinds.

    Defines how partition values are computed from source columns:
    - IDENTITY: Use column value as-is
    - YEAR: Extract year from date or timestamp
    - MONTH: Extract year-month from date or timestamp
    - DAY: Extract date from date or timestamp
    - HOUR: Extract date-hour from date or timestamp
    - BUCKET: Hash into N buckets
    - TRUNCATE: Truncate to width W
    - VOID: Always null, drops the column from partitioning
    """

    IDENTITY = "identity"
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"
    BUCKET = "bucket"
    TRUNCATE = "truncate"
    VOID = "void"

    @property
    def is_temporal(self) -> bool:
        """Return True for the year/month/day/hour transforms."""
        return self in _TEMPORAL_TRANSFORMS

    @property
    def requires_param(self) -> bool:
        """Return True for transforms that carry an integer parameter."""
        return self in _PARAMETERIZED_TRANSFORMS


_TEMPORAL_TRANSFORMS = frozenset(
    {
        PartitionTransformType.YEAR,
        PartitionTransformType.MONTH,
        PartitionTransformType.DAY,
        PartitionTransformType.HOUR,
    }
)
_PARAMETERIZED_TRANSFORMS = frozenset(
    {PartitionTransformType.BUCKET, PartitionTransformType.TRUNCATE}
)


class PartitionTransform(BaseModel):
    """Transform applied to a partition source column.

    Attributes:
        transform_type: Kind of transform.
        param: Bucket count for BUCKET, width for TRUNCATE, None otherwise.

    Example:
        >>> PartitionTransform(transform_type=PartitionTransformType.BUCKET, param=16)
        PartitionTransform(transform_type=<PartitionTransformType.BUCKET: 'bucket'>, param=16)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    transform_type: PartitionTransformType = Field(
        ...,
        description="Type of partition transform",
    )
    param: int | None = Field(
        default=None,
        ge=1,
        le=MAX_TRANSFORM_PARAM,
        description="Transform parameter (buckets for BUCKET, width for TRUNCATE)",
    )

    @model_validator(mode="after")
    def validate_param(self) -> Self:
        """Validate param is present exactly when the transform takes one."""
        if self.transform_type.requires_param and self.param is None:
            msg = f"Transform type {self.transform_type.value} requires 'param'"
            raise ValueError(msg)
        if not self.transform_type.requires_param and self.param is not None:
            msg = f"Transform type {self.transform_type.value} does not take 'param'"
            raise ValueError(msg)
        return self

    def __str__(self) -> str:
        """Return the Iceberg spelling of the transform (e.g. "bucket[16]")."""
        if self.param is None:
            return self.transform_type.value
        return f"{self.transform_type.value}[{self.param}]"


class PartitionField(BaseModel):
    """A partition field validated against a schema.

    Instances are produced by ``parse_partition_field``; building one by hand
    skips the type compatibility checks.

    Attributes:
        source_id: Field id of the source column in the schema.
        source_name: Source column name as stored in the schema.
        transform: Transform applied to the source column.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    source_id: int = Field(
        ...,
        ge=1,
        description="Schema field id of the source column",
    )
    source_name: str = Field(
        ...,
        min_length=1,
        description="Schema name of the source column",
    )
    transform: PartitionTransform = Field(
        ...,
        description="Transform applied to the source column",
    )

    @property
    def transform_type(self) -> PartitionTransformType:
        """Return the transform kind."""
        return self.transform.transform_type


class PartitionSpec(BaseModel):
    """Ordered partition fields of a table.

    Field order is the declaration order. The same source column may appear
    under several transforms.

    Attributes:
        spec_id: Partition spec id.
        fields: Partition fields in declaration order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    spec_id: int = Field(
        default=0,
        ge=0,
        description="Partition spec id",
    )
    fields: tuple[PartitionField, ...] = Field(
        default=(),
        description="Partition fields in declaration order",
    )

    def __len__(self) -> int:
        """Return the number of partition fields."""
        return len(self.fields)

    @property
    def is_unpartitioned(self) -> bool:
        """Return True if the spec has no fields, or only void fields."""
        return all(f.transform_type == PartitionTransformType.VOID for f in self.fields)

    def source_ids(self) -> list[int]:
        """Return the source field ids in declaration order."""
        return [f.source_id for f in self.fields]


class IcebergSpecConfig(BaseModel):
    """Options for converting a PartitionSpec to a PyIceberg PartitionSpec.

    Attributes:
        spec_id: Spec id of the produced PyIceberg spec (default 0).
        first_field_id: Id assigned to the first partition field (default 1000).

    Example:
        >>> config = IcebergSpecConfig(spec_id=1, first_field_id=1001)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    spec_id: int = Field(
        default=0,
        ge=0,
        description="Spec id of the produced PyIceberg partition spec",
    )
    first_field_id: int = Field(
        default=1000,
        ge=1,
        description="Partition field id assigned to the first field",
    )

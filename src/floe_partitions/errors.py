"""Custom exceptions for floe-partitions.

This module defines the exception hierarchy:
- PartitionSpecError (base)
- PartitionSyntaxError
- UnresolvedColumnError
- TypeIncompatibilityError
- UnsupportedTypeError

The message of each partition error is part of the public contract: callers
compare ``str(error)`` against it, so context is kept on attributes instead of
in ``details``.
"""

from __future__ import annotations

__all__ = [
    "PartitionSpecError",
    "PartitionSyntaxError",
    "UnresolvedColumnError",
    "TypeIncompatibilityError",
    "UnsupportedTypeError",
]


class PartitionSpecError(Exception):
    """Base exception for all floe partition operations.

    Attributes:
        message: Human-readable error description.
        details: Optional additional context about the error.

    Example:
        >>> try:
        ...     build_partition_spec(schema, ["bucket(id)"])
        ... except PartitionSpecError as e:
        ...     print(f"Partitioning error: {e}")
    """

    def __init__(self, message: str, *, details: dict[str, str] | None = None) -> None:
        """Initialize PartitionSpecError.

        Args:
            message: Human-readable error description.
            details: Optional additional context about the error.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with details if present."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class PartitionSyntaxError(PartitionSpecError):
    """Partition field declaration is malformed.

    Raised when:
    - The keyword before ``(`` is not a known transform
    - A transform call has the wrong number of arguments
    - A bucket count or truncate width is not a positive integer

    Example:
        >>> parse_partition_field(schema, "bucket()")
        Traceback (most recent call last):
        PartitionSyntaxError: Invalid partition field declaration: bucket()
    """

    def __init__(self, declaration: str, message: str | None = None) -> None:
        """Initialize PartitionSyntaxError.

        Args:
            declaration: The declaration exactly as supplied by the caller.
            message: Optional custom error message.
        """
        super().__init__(message or f"Invalid partition field declaration: {declaration}")
        self.declaration = declaration


class UnresolvedColumnError(PartitionSpecError):
    """Declared source column does not exist in the schema.

    Example:
        >>> parse_partition_field(schema, "year(ABC)")
        Traceback (most recent call last):
        UnresolvedColumnError: Cannot find source column: abc
    """

    def __init__(self, column: str | int) -> None:
        """Initialize UnresolvedColumnError.

        Args:
            column: Lowercased column name, or the source field id when the
                lookup was by id.
        """
        super().__init__(f"Cannot find source column: {column}")
        self.column = column


class TypeIncompatibilityError(PartitionSpecError):
    """Transform cannot be applied to the source column's type.

    Raised when:
    - An identity partition is declared on a list, struct or map column
    - A time transform is applied to a non-temporal column
    - A bucket is applied to a float/double column
    - A truncate is applied to a column that is not string, binary,
      integer or decimal

    Example:
        >>> parse_partition_field(schema, "bucket(price, 42)")
        Traceback (most recent call last):
        TypeIncompatibilityError: Cannot bucket by type: double
    """

    def __init__(self, message: str, *, source_type: str, transform: str) -> None:
        """Initialize TypeIncompatibilityError.

        Args:
            message: Human-readable error description.
            source_type: Rendered type of the source column (e.g. "list<string>").
            transform: Transform keyword that was rejected.
        """
        super().__init__(message)
        self.source_type = source_type
        self.transform = transform


class UnsupportedTypeError(PartitionSpecError):
    """Iceberg type has no engine value representation.

    Example:
        >>> convert_iceberg_value(ListType(1, StringType()), ["a"])
        Traceback (most recent call last):
        UnsupportedTypeError: Unsupported type: list<string>
    """

    def __init__(self, iceberg_type: str) -> None:
        """Initialize UnsupportedTypeError.

        Args:
            iceberg_type: Rendered Iceberg type that cannot be converted.
        """
        super().__init__(f"Unsupported type: {iceberg_type}")
        self.iceberg_type = iceberg_type

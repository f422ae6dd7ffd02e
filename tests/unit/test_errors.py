"""Unit tests for floe-partitions custom exceptions."""

from __future__ import annotations

from floe_partitions.errors import (
    PartitionSpecError,
    PartitionSyntaxError,
    TypeIncompatibilityError,
    UnresolvedColumnError,
    UnsupportedTypeError,
)


class TestPartitionSpecError:
    """Tests for the base exception."""

    def test_message_only(self) -> None:
        """Test str is the message when there are no details."""
        error = PartitionSpecError("boom")

        assert str(error) == "boom"
        assert error.details == {}

    def test_with_details(self) -> None:
        """Test details are appended to the message."""
        error = PartitionSpecError("boom", details={"source": "ts"})

        assert str(error) == "boom (source=ts)"


class TestPartitionSyntaxError:
    """Tests for PartitionSyntaxError."""

    def test_default_message(self) -> None:
        """Test the default message quotes the declaration."""
        error = PartitionSyntaxError("bucket()")

        assert str(error) == "Invalid partition field declaration: bucket()"
        assert error.declaration == "bucket()"
        assert isinstance(error, PartitionSpecError)

    def test_custom_message(self) -> None:
        """Test a custom message replaces the default."""
        error = PartitionSyntaxError("bucket(x, 0)", "Invalid number of buckets: 0 (must be > 0)")

        assert str(error) == "Invalid number of buckets: 0 (must be > 0)"
        assert error.declaration == "bucket(x, 0)"


class TestUnresolvedColumnError:
    """Tests for UnresolvedColumnError."""

    def test_message(self) -> None:
        """Test the message names the column."""
        error = UnresolvedColumnError("abc")

        assert str(error) == "Cannot find source column: abc"
        assert error.column == "abc"
        assert isinstance(error, PartitionSpecError)


class TestTypeIncompatibilityError:
    """Tests for TypeIncompatibilityError."""

    def test_attributes(self) -> None:
        """Test context is kept out of the message."""
        error = TypeIncompatibilityError(
            "Cannot bucket by type: double", source_type="double", transform="bucket"
        )

        assert str(error) == "Cannot bucket by type: double"
        assert error.source_type == "double"
        assert error.transform == "bucket"


class TestUnsupportedTypeError:
    """Tests for UnsupportedTypeError."""

    def test_message(self) -> None:
        """Test the message names the type."""
        error = UnsupportedTypeError("list<string>")

        assert str(error) == "Unsupported type: list<string>"
        assert isinstance(error, PartitionSpecError)

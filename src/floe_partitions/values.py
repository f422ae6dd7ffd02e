"""Conversion of Iceberg values to query engine values.

Partition values and column statistics read from Iceberg metadata use
PyIceberg's Python representation (``int`` days for dates, ``int`` micros
for times and timestamps, ``Decimal``, ``uuid.UUID``, ...). The engine keeps
every value in a fixed native layout:

- integer types widen to 64-bit ``int``
- ``float`` becomes its IEEE-754 single precision bit pattern
- decimals become unscaled integers: an ``int`` for precision <= 18 ("short"),
  an ``Int128`` otherwise ("long")
- strings and binary become ``bytes``
- times become picoseconds of day, timestamps stay micros since epoch and
  timestamps with zone become ``LongTimestampWithTimeZone`` in UTC
- UUIDs become their 16 big-endian bytes
"""

from __future__ import annotations

import math
import struct
from collections.abc import Callable
from decimal import Decimal
from typing import Any, NamedTuple
from uuid import UUID

from pyiceberg.types import (
    BinaryType,
    BooleanType,
    DateType,
    DecimalType,
    DoubleType,
    FloatType,
    IcebergType,
    IntegerType,
    LongType,
    StringType,
    TimestampType,
    TimestamptzType,
    TimeType,
    UUIDType,
)

from floe_partitions.errors import UnsupportedTypeError

MAX_SHORT_PRECISION = 18
UTC_TIME_ZONE_KEY = 0

PICOSECONDS_PER_MICROSECOND = 1_000_000
MICROSECONDS_PER_MILLISECOND = 1_000

_FLOAT_NAN_BITS = 0x7FC00000
_INT64_MASK = (1 << 64) - 1


class Int128(NamedTuple):
    """128-bit two's complement integer split into signed 64-bit halves."""

    high: int
    low: int

    @classmethod
    def from_int(cls, value: int) -> Int128:
        """Split a Python int into high and low halves."""
        if not -(1 << 127) <= value < (1 << 127):
            msg = f"Value out of range for Int128: {value}"
            raise ValueError(msg)
        return cls(high=value >> 64, low=_to_signed_64(value & _INT64_MASK))

    def to_int(self) -> int:
        """Reassemble the Python int."""
        return (self.high << 64) | (self.low & _INT64_MASK)


class LongTimestampWithTimeZone(NamedTuple):
    """Timestamp with zone at picosecond precision."""

    epoch_millis: int
    picos_of_milli: int
    time_zone_key: int


def convert_iceberg_value(iceberg_type: IcebergType, value: Any) -> Any:
    """Convert a value from its Iceberg representation to the engine's.

    Args:
        iceberg_type: Iceberg type of the value.
        value: Value in PyIceberg's representation, or None.

    Returns:
        Engine value, or None for a None input.

    Raises:
        UnsupportedTypeError: If the type has no engine representation
            (list, struct, map, fixed).
        ValueError: If a decimal does not fit its declared precision and scale.

    Example:
        >>> convert_iceberg_value(DecimalType(10, 2), Decimal("12.34"))
        1234
        >>> convert_iceberg_value(TimeType(), 1)
        1000000
    """
    if value is None:
        return None
    converter = _CONVERTERS.get(type(iceberg_type))
    if converter is None:
        raise UnsupportedTypeError(str(iceberg_type))
    return converter(iceberg_type, value)


def _to_signed_64(value: int) -> int:
    return value - (1 << 64) if value >= (1 << 63) else value


def _float_bits(value: float) -> int:
    if math.isnan(value):
        return _FLOAT_NAN_BITS
    bits: int = struct.unpack(">i", struct.pack(">f", value))[0]
    return bits


def _unscaled_decimal(value: Decimal, precision: int, scale: int) -> int:
    """Return the unscaled integer of ``value`` at ``scale``, without rounding."""
    if not value.is_finite():
        msg = f"Cannot encode non-finite decimal: {value}"
        raise ValueError(msg)

    sign, digits, exponent = value.as_tuple()
    assert isinstance(exponent, int)  # Finite decimals have int exponents
    unscaled = int("".join(map(str, digits)) or "0")
    shift = exponent + scale
    if shift >= 0:
        unscaled *= 10**shift
    else:
        unscaled, remainder = divmod(unscaled, 10**-shift)
        if remainder:
            msg = f"Decimal {value} cannot be represented with scale {scale}"
            raise ValueError(msg)

    if unscaled >= 10**precision:
        msg = f"Decimal {value} overflows decimal({precision}, {scale})"
        raise ValueError(msg)
    return -unscaled if sign else unscaled


def _convert_decimal(iceberg_type: DecimalType, value: Any) -> int | Int128:
    if not isinstance(value, Decimal):
        value = Decimal(value)
    unscaled = _unscaled_decimal(value, iceberg_type.precision, iceberg_type.scale)
    if iceberg_type.precision <= MAX_SHORT_PRECISION:
        return unscaled
    return Int128.from_int(unscaled)


def _convert_timestamptz(_: IcebergType, value: Any) -> LongTimestampWithTimeZone:
    epoch_micros = int(value)
    return LongTimestampWithTimeZone(
        epoch_millis=epoch_micros // MICROSECONDS_PER_MILLISECOND,
        picos_of_milli=(epoch_micros % MICROSECONDS_PER_MILLISECOND) * PICOSECONDS_PER_MICROSECOND,
        time_zone_key=UTC_TIME_ZONE_KEY,
    )


def _convert_uuid(_: IcebergType, value: Any) -> bytes:
    if not isinstance(value, UUID):
        value = UUID(bytes=bytes(value)) if isinstance(value, (bytes, bytearray)) else UUID(value)
    return value.bytes


_CONVERTERS: dict[type[IcebergType], Callable[[Any, Any], Any]] = {
    BooleanType: lambda _, v: v,
    IntegerType: lambda _, v: int(v),
    LongType: lambda _, v: int(v),
    FloatType: lambda _, v: _float_bits(float(v)),
    DoubleType: lambda _, v: float(v),
    DecimalType: _convert_decimal,
    StringType: lambda _, v: str(v).encode("utf-8"),
    BinaryType: lambda _, v: bytes(v),
    DateType: lambda _, v: int(v),
    TimeType: lambda _, v: int(v) * PICOSECONDS_PER_MICROSECOND,
    TimestampType: lambda _, v: int(v),
    TimestamptzType: _convert_timestamptz,
    UUIDType: _convert_uuid,
}

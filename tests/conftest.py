"""Shared pytest fixtures for floe-partitions tests."""

from __future__ import annotations

import sys

import pytest
import structlog
from pyiceberg.schema import Schema
from pyiceberg.types import (
    DoubleType,
    ListType,
    LongType,
    NestedField,
    StringType,
    TimestampType,
)


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture
def orders_schema() -> Schema:
    """Return the reference orders schema.

    Fields:
        1 order_key long (required)
        2 ts timestamp (required)
        3 price double (required)
        4 comment string (optional)
        5 notes list<string> (optional)
    """
    return Schema(
        NestedField(field_id=1, name="order_key", field_type=LongType(), required=True),
        NestedField(field_id=2, name="ts", field_type=TimestampType(), required=True),
        NestedField(field_id=3, name="price", field_type=DoubleType(), required=True),
        NestedField(field_id=4, name="comment", field_type=StringType(), required=False),
        NestedField(
            field_id=5,
            name="notes",
            field_type=ListType(element_id=6, element_type=StringType(), element_required=True),
            required=False,
        ),
    )

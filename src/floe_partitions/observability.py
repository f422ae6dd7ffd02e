"""Logging and tracing for partition spec operations.

Partition operations run inside ``partition_operation``, which opens an
OpenTelemetry span named ``partition.<operation>`` and logs the outcome
through structlog as ``partition.<operation>_completed`` or
``partition.<operation>_failed``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer
    from structlog.stdlib import BoundLogger

_logger: BoundLogger | None = None
_tracer: Tracer | None = None

TRACER_NAME = "floe.partitions"


def get_logger() -> BoundLogger:
    """Return the package logger."""
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(TRACER_NAME)
    assert _logger is not None  # Type narrowing for mypy
    return _logger


def get_tracer() -> Tracer:
    """Return the package OpenTelemetry tracer."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def configure_logging(*, log_level: str = "INFO", json_format: bool = True) -> None:
    """Route structlog through stdlib logging at ``log_level``.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render JSON lines if True, console output otherwise.
    """
    renderer: Any = (
        structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=getattr(logging, log_level.upper()))


@contextmanager
def partition_operation(
    operation: str,
    *,
    num_fields: int | None = None,
    spec_id: int | None = None,
    schema_id: int | None = None,
) -> Iterator[Span]:
    """Trace and log one partition spec operation.

    Attributes left as None are not recorded. A raised exception marks the
    span as failed, is logged with its message, and propagates.

    Args:
        operation: Operation name (e.g., "build_partition_spec").
        num_fields: Number of partition fields involved.
        spec_id: Partition spec id.
        schema_id: Id of the schema the spec is bound to.

    Yields:
        OpenTelemetry Span instance.

    Example:
        >>> with partition_operation("build_partition_spec", num_fields=2, spec_id=0):
        ...     build()
    """
    name = f"partition.{operation}"
    attrs: dict[str, Any] = {"partition.operation": operation}
    for key, value in (
        ("partition.num_fields", num_fields),
        ("partition.spec_id", spec_id),
        ("partition.schema_id", schema_id),
    ):
        if value is not None:
            attrs[key] = value

    logger = get_logger()
    with get_tracer().start_as_current_span(name, attributes=attrs) as s:
        try:
            yield s
        except Exception as exc:
            s.set_status(Status(StatusCode.ERROR, str(exc)))
            s.record_exception(exc)
            logger.error(f"{name}_failed", error=str(exc), **attrs)
            raise
        s.set_status(Status(StatusCode.OK))
        logger.info(f"{name}_completed", **attrs)

"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from app.shared.telemetry.logging import get_logger, request_id_var, setup_logging
from app.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from app.shared.telemetry.tracing import get_trace_id, traced

__all__ = [
    "TelemetryConfig",
    "get_logger",
    "get_telemetry",
    "get_trace_id",
    "request_id_var",
    "set_telemetry",
    "setup_logging",
    "traced",
]

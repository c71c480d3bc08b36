"""Tracing decorator for service methods."""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

P = ParamSpec("P")
T = TypeVar("T")

# Only these argument names become span attributes; values are ids, never payloads.
_SPAN_ARG_NAMES = frozenset(
    {"tenant_id", "role_id", "target_user_id", "organization_id", "user_id"}
)

_tracer = trace.get_tracer(__name__)


def _span_attributes(kwargs: dict[str, Any]) -> dict[str, str]:
    return {
        f"arg.{name}": str(value)
        for name, value in kwargs.items()
        if name in _SPAN_ARG_NAMES and value is not None
    }


def traced(
    operation_name: str | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Run an async function inside a span named operation_name.

    Exceptions are recorded on the span and re-raised unchanged.
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        span_name = operation_name or f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            with _tracer.start_as_current_span(
                span_name, attributes=_span_attributes(kwargs)
            ) as span:
                try:
                    result = await func(*args, **kwargs)
                except Exception as exc:
                    span.set_status(Status(StatusCode.ERROR, type(exc).__name__))
                    span.record_exception(exc)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        return wrapper

    return decorator


def get_trace_id() -> str | None:
    """Return the current trace ID as 32-char hex, or None outside a span."""
    ctx = trace.get_current_span().get_span_context()
    return format(ctx.trace_id, "032x") if ctx.is_valid else None

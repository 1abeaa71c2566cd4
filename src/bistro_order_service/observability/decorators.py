"""OpenTelemetry tracing decorators."""

import asyncio
import functools
from collections.abc import Callable
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span

from bistro_order_service.exceptions import BistroServiceError

F = TypeVar("F", bound=Callable[..., Any])


def _record_failure(span: Span, error: Exception) -> None:
    span.set_attribute("success", False)
    span.set_attribute("error.type", type(error).__name__)
    if isinstance(error, BistroServiceError):
        span.set_attribute("http.status_code", error.status_code)
    span.record_exception(error)


def traced(span_name: str | None = None, service_name: str = "bistro-order-svc") -> Callable[[F], F]:
    """Decorator that runs the wrapped function inside its own span.

    Service errors additionally tag the span with the HTTP status they map
    to, so rejected credentials and forbidden calls can be told apart from
    store failures. Works for both coroutines and plain functions.

    Args:
        span_name: Name for the span (defaults to the function name)
        service_name: Tracer name and ``service.name`` attribute

    Example:
        @traced("record_payment")
        async def record_payment(self, payment: PaymentCreate) -> PaymentRecordResult:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__qualname__
        tracer = trace.get_tracer(service_name)

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name, record_exception=False) as span:
                span.set_attribute("service.name", service_name)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _record_failure(span, e)
                    raise
                span.set_attribute("success", True)
                return result

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name, record_exception=False) as span:
                span.set_attribute("service.name", service_name)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _record_failure(span, e)
                    raise
                span.set_attribute("success", True)
                return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator

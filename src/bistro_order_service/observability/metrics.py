"""Custom metrics for the bistro order service."""

from opentelemetry import metrics

meter = metrics.get_meter("bistro-order-svc")

credentials_issued_counter = meter.create_counter(
    name="credentials_issued_total",
    description="Total number of access credentials issued",
    unit="1",
)

credentials_rejected_counter = meter.create_counter(
    name="credentials_rejected_total",
    description="Total number of rejected access credentials by reason",
    unit="1",
)

payments_recorded_counter = meter.create_counter(
    name="payments_recorded_total",
    description="Total number of payments stored",
    unit="1",
)

# Payments whose cart entries could not be removed afterwards
cart_cleanup_failure_counter = meter.create_counter(
    name="cart_cleanup_failure_total",
    description="Total number of payments left with undeleted cart entries",
    unit="1",
)

payment_provider_response_time = meter.create_histogram(
    name="payment_provider_response_time_seconds",
    description="Response time for payment provider calls",
    unit="s",
)


def record_credential_issued() -> None:
    """Record an issued access credential."""
    credentials_issued_counter.add(1)


def record_credential_rejected(reason: str) -> None:
    """Record a rejected access credential.

    Args:
        reason: Why it was rejected ("missing", "invalid", "expired")
    """
    credentials_rejected_counter.add(1, {"reason": reason})


def record_payment_recorded(cart_entry_count: int) -> None:
    """Record a stored payment.

    Args:
        cart_entry_count: Number of cart entries the payment consumed
    """
    payments_recorded_counter.add(1, {"has_cart_entries": cart_entry_count > 0})


def record_cart_cleanup_failure() -> None:
    """Record a payment whose cart entries were not deleted."""
    cart_cleanup_failure_counter.add(1)


def record_payment_provider_call(operation: str, duration_seconds: float) -> None:
    """Record a payment provider API call.

    Args:
        operation: The operation performed (e.g., "create_payment_intent")
        duration_seconds: Duration in seconds
    """
    payment_provider_response_time.record(duration_seconds, {"operation": operation})

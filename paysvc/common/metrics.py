"""Prometheus metric definitions for the payment service."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)
payments_created_total = Counter("payments_created_total", "Total payments created", ["service"])
payment_status_updates_total = Counter(
    "payment_status_updates_total",
    "Total status updates by target status",
    ["service", "status"],
)
payments_deleted_total = Counter("payments_deleted_total", "Total payments deleted", ["service"])
payment_validation_failures_total = Counter(
    "payment_validation_failures_total",
    "Total payment requests rejected by validation",
    ["service"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")

"""Prometheus metric definitions for the gateway."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


gateway_requests_total = Counter(
    "gateway_requests_total",
    "Total handler invocations",
    ["service", "operation"],
)
gateway_success_total = Counter(
    "gateway_success_total",
    "Handler invocations that completed successfully",
    ["service", "operation"],
)
gateway_failure_total = Counter(
    "gateway_failure_total",
    "Handler invocations that failed",
    ["service", "operation", "tier"],
)
provider_call_seconds = Histogram(
    "provider_call_seconds",
    "Latency of individual Stripe API calls",
    ["service", "call"],
)
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


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")

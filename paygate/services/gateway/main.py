"""Public HTTP surface for the Stripe checkout gateway.

Maps handler outcomes to status codes: local validation errors become 400
with a specific message, anything raised while talking to Stripe becomes a
500 with a generic message.
"""

from time import perf_counter
from typing import Callable
from uuid import uuid4

from fastapi import Depends, FastAPI, Header, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from paygate.common.config import settings
from paygate.common.logging import configure_logging, logger, operation_ctx, trace_id_ctx
from paygate.common.metrics import (
    gateway_failure_total,
    gateway_requests_total,
    gateway_success_total,
    http_request_duration_seconds,
    http_requests_total,
    metrics_response,
)
from paygate.common.startup import log_startup_config
from paygate.common.tracing import instrument_app, setup_tracing
from paygate.services.gateway.provider import StripeProvider
from paygate.services.gateway.service import INVALID_BODY, GatewayService, RequestValidationFailed
from paygate.services.gateway.store import build_customer_store

configure_logging()
setup_tracing(settings.service_name)
log_startup_config(
    settings,
    [
        "stripe_secret_key",
        "stripe_api_version",
        "payment_mode",
        "default_amount",
        "default_currency",
        "subscription_price_id",
        "customer_store_url",
    ],
)
service = GatewayService(
    StripeProvider(settings),
    build_customer_store(settings.customer_store_url, settings.customer_store_ttl_seconds),
    settings,
)
app = FastAPI(title="Paygate Stripe Gateway")
instrument_app(app)


def get_service() -> GatewayService:
    return service


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    """Record request count and latency for every HTTP call."""

    start = perf_counter()
    route = request.url.path
    method = request.method
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        route_obj = request.scope.get("route")
        if route_obj is not None and getattr(route_obj, "path", None):
            route = route_obj.path
        return response
    finally:
        elapsed = max(0.0, perf_counter() - start)
        http_request_duration_seconds.labels(
            service=settings.service_name,
            route=route,
            method=method,
        ).observe(elapsed)
        http_requests_total.labels(
            service=settings.service_name,
            route=route,
            method=method,
            status_code=str(status_code),
        ).inc()


async def dispatch(
    request: Request,
    operation: str,
    handler: Callable[[object], dict],
    success_status: int,
    failure_message: str,
    correlation_id: str | None,
) -> JSONResponse:
    """Run one handler and translate its outcome into a JSON response."""

    trace_id_ctx.set(correlation_id or str(uuid4()))
    operation_ctx.set(operation)
    gateway_requests_total.labels(service=settings.service_name, operation=operation).inc()

    try:
        payload = await request.json()
    except ValueError:
        gateway_failure_total.labels(service=settings.service_name, operation=operation, tier="validation").inc()
        logger.warning("request body is not valid JSON")
        return JSONResponse({"error": INVALID_BODY}, status_code=400)

    try:
        body = await run_in_threadpool(handler, payload)
    except RequestValidationFailed as exc:
        gateway_failure_total.labels(service=settings.service_name, operation=operation, tier="validation").inc()
        logger.warning("request rejected: %s", exc)
        return JSONResponse({"error": str(exc)}, status_code=400)
    except Exception:
        gateway_failure_total.labels(service=settings.service_name, operation=operation, tier="provider").inc()
        logger.exception("%s failed", operation)
        return JSONResponse({"error": failure_message}, status_code=500)

    gateway_success_total.labels(service=settings.service_name, operation=operation).inc()
    return JSONResponse(body, status_code=success_status)


@app.post("/api/stripe/payment")
async def create_payment(
    request: Request,
    svc: GatewayService = Depends(get_service),
    x_correlation_id: str | None = Header(default=None),
):
    """One-time payment intent, or a subscription when PAYMENT_MODE=subscription."""

    if svc.settings.payment_mode == "subscription":
        return await dispatch(
            request,
            "subscription",
            svc.create_subscription,
            200,
            "Failed to create subscription",
            x_correlation_id,
        )
    return await dispatch(
        request,
        "payment_intent",
        svc.create_payment_intent,
        201,
        "Failed to create payment intent",
        x_correlation_id,
    )


@app.post("/api/stripe/save-card")
async def save_card(
    request: Request,
    svc: GatewayService = Depends(get_service),
    x_correlation_id: str | None = Header(default=None),
):
    """Register the configured customer with the submitted card."""

    return await dispatch(request, "save_card", svc.save_card, 200, "Failed to save card", x_correlation_id)


@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""

    return metrics_response()


@app.get("/health")
def health():
    """Container health probe endpoint."""

    return {"ok": True}

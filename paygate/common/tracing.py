"""OpenTelemetry setup helpers for the FastAPI app and outbound Stripe calls."""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

from paygate.common.config import settings

tracer = trace.get_tracer("paygate")


def setup_tracing(service_name: str) -> None:
    """Register a tracer provider with OTLP HTTP exporter unless tracing is off."""

    if not settings.tracing_enabled:
        return
    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)


def instrument_app(app: FastAPI) -> None:
    """Attach FastAPI auto-instrumentation for request spans."""

    if settings.tracing_enabled:
        FastAPIInstrumentor.instrument_app(app)


def provider_span(call: str):
    """Client span around one Stripe API request."""

    return tracer.start_as_current_span(
        f"stripe {call}",
        kind=trace.SpanKind.CLIENT,
        attributes={"peer.service": "stripe", "stripe.call": call},
    )

"""OpenTelemetry wiring for the payment API."""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from paysvc.common.config import settings


def setup_tracing(app: FastAPI) -> bool:
    """Register an OTLP tracer provider and instrument `app`.

    Returns False without touching global OpenTelemetry state when tracing is
    switched off with `TRACING_ENABLED=false`.
    """

    if not settings.tracing_enabled:
        return False
    provider = TracerProvider(resource=Resource.create({"service.name": settings.service_name}))
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint))
    )
    trace.set_tracer_provider(provider)
    # /metrics and /health are scraped constantly; spans for them are noise.
    FastAPIInstrumentor.instrument_app(app, excluded_urls="metrics,health")
    return True

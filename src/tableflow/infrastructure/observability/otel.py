from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

logger = logging.getLogger(__name__)

# Probes and scrapes would drown the lifecycle spans.
UNTRACED_URLS = "health/live,health/ready,metrics"

_instrumented_apps: set[int] = set()
_provider: TracerProvider | None = None


def _sample_ratio() -> float:
    raw = os.getenv("OTEL_TRACES_SAMPLE_RATIO", "1.0")
    try:
        ratio = float(raw)
    except ValueError:
        logger.warning("otel_sample_ratio_invalid", extra={"reason": raw})
        return 1.0
    return min(max(ratio, 0.0), 1.0)


def _build_provider() -> TracerProvider:
    resource = Resource.create(
        {
            SERVICE_NAME: os.getenv("OTEL_SERVICE_NAME", "tableflow-api"),
            "deployment.environment": os.getenv("APP_ENV", "dev").lower(),
        }
    )
    provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(_sample_ratio())),
    )

    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        try:
            exporter = OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
            provider.add_span_processor(BatchSpanProcessor(exporter))
        except Exception:
            # Tracing is optional; the API keeps serving without an exporter.
            logger.exception("otel_exporter_setup_failed")
    return provider


def configure_otel(app: FastAPI) -> None:
    """Install one process-wide tracer provider and instrument ``app`` once.

    Spans carry W3C trace context, which the lifecycle layer copies into
    every published event envelope.
    """
    global _provider
    if _provider is None:
        _provider = _build_provider()
        trace.set_tracer_provider(_provider)
        set_global_textmap(TraceContextTextMapPropagator())

    if id(app) in _instrumented_apps:
        return
    FastAPIInstrumentor.instrument_app(app, tracer_provider=_provider, excluded_urls=UNTRACED_URLS)
    _instrumented_apps.add(id(app))

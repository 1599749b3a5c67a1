"""OpenTelemetry tracing for agent, LLM and tool spans.

Spans are always created through ``trace.get_tracer(__name__)``; until
init_telemetry installs a TracerProvider they are no-ops.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor, SpanExporter

from ..config import TelemetrySettings

logger = logging.getLogger(__name__)

DEFAULT_OTLP_ENDPOINT = "http://localhost:4317"

# Flush every second so short agent runs are exported promptly
BATCH_SCHEDULE_DELAY_MILLIS = 1000
BATCH_MAX_QUEUE_SIZE = 2048
BATCH_MAX_EXPORT_SIZE = 512

_provider: Optional[TracerProvider] = None


def init_telemetry(
    service_name: Optional[str] = None,
    otlp_endpoint: Optional[str] = None,
    exporter: Optional[SpanExporter] = None,
) -> TracerProvider:
    """Install a global TracerProvider. Later calls return the same provider.

    Args:
        service_name: Service name for traces (default: OTEL_SERVICE_NAME env or "toolweave")
        otlp_endpoint: OTLP gRPC collector endpoint (default: OTEL_EXPORTER_OTLP_ENDPOINT
            env or http://localhost:4317)
        exporter: Custom span exporter; spans are exported synchronously to it
            instead of batched to the OTLP collector

    Returns:
        The installed provider
    """
    global _provider
    if _provider is not None:
        return _provider

    from .. import __version__

    service_name = service_name or os.getenv("OTEL_SERVICE_NAME", "toolweave")
    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": __version__,
            "deployment.environment": os.getenv("DEPLOYMENT_ENV", "development"),
        }
    )
    provider = TracerProvider(resource=resource)

    if exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        target = type(exporter).__name__
    else:
        target = otlp_endpoint or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", DEFAULT_OTLP_ENDPOINT)
        provider.add_span_processor(
            BatchSpanProcessor(
                OTLPSpanExporter(endpoint=target, insecure=True),
                max_queue_size=BATCH_MAX_QUEUE_SIZE,
                schedule_delay_millis=BATCH_SCHEDULE_DELAY_MILLIS,
                max_export_batch_size=BATCH_MAX_EXPORT_SIZE,
            )
        )

    trace.set_tracer_provider(provider)
    _provider = provider
    logger.info("Tracing initialized: service=%s, exporter=%s", service_name, target)
    return provider


def init_telemetry_from_settings(settings: TelemetrySettings) -> bool:
    """Initialize tracing when the [telemetry] table enables it.

    Returns:
        True if telemetry is enabled
    """
    if not settings.enabled:
        return False
    init_telemetry(settings.service_name, settings.otlp_endpoint)
    return True


def shutdown_telemetry() -> None:
    """Flush pending spans and shut the provider down."""
    global _provider
    if _provider is None:
        return

    _provider.shutdown()
    _provider = None
    logger.info("Tracing shut down")


__all__ = ["init_telemetry", "init_telemetry_from_settings", "shutdown_telemetry"]

"""OpenTelemetry tracing setup.

Exporters: console (development), otlp (gRPC collector) or none. The
application instruments FastAPI, the SQLAlchemy engine, Redis and logging
once at startup when telemetry is enabled.
"""

from __future__ import annotations

import logging
import threading

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.config import Settings

logger = logging.getLogger(__name__)

EXPORTER_CONSOLE = "console"
EXPORTER_OTLP = "otlp"
EXPORTER_NONE = "none"


class TelemetryConfig:
    """Tracer provider for one process plus the instrumentations it installed."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
        sample_rate: float = 1.0,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.sample_rate = sample_rate
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> TelemetryConfig:
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
            sample_rate=settings.telemetry_sample_rate,
        )

    @staticmethod
    def _build_exporter(
        exporter_type: str, otlp_endpoint: str | None
    ) -> SpanExporter | None:
        if exporter_type == EXPORTER_NONE:
            return None
        if exporter_type == EXPORTER_OTLP:
            if not otlp_endpoint:
                logger.warning("OTLP exporter selected without endpoint; using console")
                return ConsoleSpanExporter()
            return OTLPSpanExporter(
                endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
            )
        if exporter_type != EXPORTER_CONSOLE:
            logger.warning("Unknown exporter type '%s', using console", exporter_type)
        return ConsoleSpanExporter()

    def setup(
        self, exporter_type: str = EXPORTER_CONSOLE, otlp_endpoint: str | None = None
    ) -> TracerProvider:
        """Create the tracer provider and make it the global one."""
        resource = Resource(
            attributes={
                SERVICE_NAME: self.service_name,
                SERVICE_VERSION: self.service_version,
                "deployment.environment": self.environment,
            }
        )
        provider = TracerProvider(
            resource=resource, sampler=TraceIdRatioBased(self.sample_rate)
        )
        exporter = self._build_exporter(exporter_type, otlp_endpoint)
        if exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)
        self.tracer_provider = provider
        logger.info(
            "OpenTelemetry initialized: service=%s, exporter=%s, sample_rate=%s",
            self.service_name,
            exporter_type,
            self.sample_rate,
        )
        return provider

    def instrument(self, app: FastAPI, engine: AsyncEngine | None = None) -> None:
        """Instrument FastAPI, SQLAlchemy (when an engine exists), Redis and logging."""
        if self.tracer_provider is None:
            return
        FastAPIInstrumentor.instrument_app(
            app, tracer_provider=self.tracer_provider, excluded_urls="/api/v1/health"
        )
        if engine is not None:
            SQLAlchemyInstrumentor().instrument(
                engine=engine.sync_engine, tracer_provider=self.tracer_provider
            )
        RedisInstrumentor().instrument(tracer_provider=self.tracer_provider)
        LoggingInstrumentor().instrument(tracer_provider=self.tracer_provider)

    def shutdown(self) -> None:
        """Flush remaining spans."""
        if self.tracer_provider is not None:
            self.tracer_provider.shutdown()
            self.tracer_provider = None


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    """Set (or clear) the process-wide telemetry instance."""
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry

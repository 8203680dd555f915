"""Optional OpenTelemetry tracing around solver calls.

Tracing is only switched on when ``TelemetryConfig.enabled`` is set and the
``telemetry`` extra is installed.  Without either, :class:`TelemetryManager`
is inert and :meth:`TelemetryManager.span` simply runs the enclosed block.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any, Iterator, Optional

from .config import TelemetryConfig

LOGGER = logging.getLogger(__name__)

if TYPE_CHECKING:  # pragma: no cover - typing only
    from fastapi import FastAPI

TRACER_NAME = "physiosim.engine"


def _build_tracer_provider(config: TelemetryConfig) -> Any:
    """Return an SDK tracer provider exporting over OTLP/HTTP, or ``None``."""

    try:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
        from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
    except ImportError:
        LOGGER.warning("OpenTelemetry SDK not installed; tracing disabled")
        return None

    resource = Resource.create(
        {
            "service.name": config.service_name,
            "deployment.environment": config.environment,
        }
    )
    provider = TracerProvider(resource=resource, sampler=ParentBased(TraceIdRatioBased(config.sampling_ratio)))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=config.exporter_endpoint)))
    return provider


@dataclass
class TelemetryManager:
    """Own the tracer provider for the process and hand out solver spans."""

    config: TelemetryConfig
    _provider: Any = None
    _tracer: Any = None

    @property
    def enabled(self) -> bool:
        return self._tracer is not None

    def configure(self) -> None:
        if not self.config.enabled:
            LOGGER.debug("Tracing disabled by configuration")
            return
        provider = _build_tracer_provider(self.config)
        if provider is None:
            return

        from opentelemetry import trace

        trace.set_tracer_provider(provider)
        self._provider = provider
        self._tracer = provider.get_tracer(TRACER_NAME)
        LOGGER.info(
            "Tracing %s at ratio %.2f (endpoint=%s)",
            self.config.service_name,
            self.config.sampling_ratio,
            self.config.exporter_endpoint or "default",
        )

    def instrument_app(self, app: "FastAPI") -> None:
        """Attach request spans to ``app`` when tracing is active."""

        if self._provider is None:
            return
        try:
            from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
        except ImportError:
            LOGGER.warning("opentelemetry-instrumentation-fastapi missing; HTTP spans disabled")
            return
        FastAPIInstrumentor.instrument_app(app, tracer_provider=self._provider)

    @contextmanager
    def span(self, name: str, **attributes: Any) -> Iterator[Optional[Any]]:
        """Trace the enclosed block under ``name``.

        Attributes are namespaced as ``physiosim.<key>``.  Yields the span, or
        ``None`` when tracing is off.
        """

        if self._tracer is None:
            yield None
            return
        namespaced = {f"physiosim.{key}": value for key, value in attributes.items()}
        with self._tracer.start_as_current_span(name, attributes=namespaced) as current:
            yield current

    def shutdown(self) -> None:
        """Flush pending spans; safe to call more than once."""

        provider, self._provider, self._tracer = self._provider, None, None
        if provider is not None:
            provider.shutdown()


def configure_telemetry(config: TelemetryConfig) -> TelemetryManager:
    manager = TelemetryManager(config=config)
    manager.configure()
    return manager


__all__ = ["TRACER_NAME", "TelemetryManager", "configure_telemetry"]

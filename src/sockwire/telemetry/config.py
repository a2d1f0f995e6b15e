"""
Process-wide telemetry setup.

``configure_telemetry`` installs an OpenTelemetry SDK tracer provider and a
structlog processor chain. Unset arguments come from the standard ``OTEL_*``
variables, and the log level from ``SOCKWIRE_LOG_LEVEL``.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import structlog
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "sockwire"
TRUE_VALUES = ("true", "1", "yes", "y", "t")


def get_env_bool(name: str, default: bool = False) -> bool:
    """Read a boolean flag; unset variables yield ``default``."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


def get_env_dict(name: str, default: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Read ``key=value`` pairs separated by commas.

    Pairs without ``=`` are ignored. An unset or empty variable yields
    ``default`` (or an empty dict).
    """
    raw = os.environ.get(name)
    if not raw:
        return default or {}

    pairs = {}
    for item in raw.split(","):
        key, sep, value = item.partition("=")
        if sep:
            pairs[key.strip()] = value.strip()
    return pairs


def _build_resource(service_name: str, attributes: Dict[str, str]) -> Resource:
    merged = {**get_env_dict("OTEL_RESOURCE_ATTRIBUTES"), **attributes}
    merged["service.name"] = service_name
    return Resource.create(merged)


def configure_telemetry(
    service_name: Optional[str] = None,
    resource_attributes: Optional[Dict[str, str]] = None,
    trace_enabled: Optional[bool] = None,
    log_level: Optional[str] = None,
    log_processors: Optional[List[Any]] = None,
    trace_exporters: Optional[List[str]] = None,
) -> bool:
    """
    Set up tracing and structured logging for the process.

    Args:
        service_name: ``service.name`` resource attribute. Defaults to
            ``OTEL_SERVICE_NAME``, then ``"sockwire"``.
        resource_attributes: Extra resource attributes, applied over
            ``OTEL_RESOURCE_ATTRIBUTES``.
        trace_enabled: Install a tracer provider. Defaults to the inverse of
            ``OTEL_SDK_DISABLED``.
        log_level: Standard logging level name. Defaults to
            ``SOCKWIRE_LOG_LEVEL``, then ``"INFO"``.
        log_processors: structlog processors run before rendering.
        trace_exporters: Exporter names. Defaults to ``OTEL_TRACES_EXPORTER``.

    Returns:
        Whether a tracer provider was installed.
    """
    if trace_enabled is None:
        trace_enabled = not get_env_bool("OTEL_SDK_DISABLED")
    if log_level is None:
        log_level = os.environ.get("SOCKWIRE_LOG_LEVEL", "INFO")

    if trace_enabled:
        provider = TracerProvider(
            resource=_build_resource(
                service_name or os.environ.get("OTEL_SERVICE_NAME", DEFAULT_SERVICE_NAME),
                resource_attributes or {},
            )
        )
        trace.set_tracer_provider(provider)
        _configure_exporters(provider, trace_exporters)

    _configure_structlog(log_level, log_processors)
    return trace_enabled


def _configure_exporters(tracer_provider, exporters=None):
    """Attach a span processor for every supported exporter name."""
    if exporters is None:
        exporters = [
            name.strip()
            for name in os.environ.get("OTEL_TRACES_EXPORTER", "console").split(",")
            if name.strip()
        ]

    for name in exporters:
        if name == "none":
            continue
        if name == "console":
            tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        else:
            logger.warning("Skipping unsupported trace exporter %r", name)


def _add_trace_context(_, __, event_dict):
    """structlog processor stamping events with the current span's ids."""
    context = trace.get_current_span().get_span_context()
    if context.is_valid:
        event_dict.setdefault("trace_id", format(context.trace_id, "032x"))
        event_dict.setdefault("span_id", format(context.span_id, "016x"))
    return event_dict


def _configure_structlog(log_level, processors=None):
    logging.basicConfig(format="%(message)s", level=getattr(logging, log_level.upper()))

    chain = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _add_trace_context,
        structlog.processors.TimeStamper(fmt="iso"),
        *(processors or []),
        # Rendering must stay last
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=chain,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

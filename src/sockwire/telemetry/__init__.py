"""
Telemetry for sockwire.

Structured logging goes through structlog and tracing through OpenTelemetry.
Without an explicit configure_telemetry() call, structlog uses its default
console renderer and OpenTelemetry hands out non-recording spans.
"""

from sockwire.telemetry.config import configure_telemetry
from sockwire.telemetry.facade import LoggingFacade, TracingFacade


def get_telemetry(name: str) -> tuple:
    """
    Get tracer and logger instances for the given name.

    Args:
        name: The name to use for the tracer and logger

    Returns:
        A tuple containing a tracer and logger
    """
    return TracingFacade(name), LoggingFacade(name)


__all__ = [
    "LoggingFacade",
    "TracingFacade",
    "configure_telemetry",
    "get_telemetry",
]

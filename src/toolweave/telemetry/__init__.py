"""Logging and OpenTelemetry setup."""

from .logs import ROOT_LOGGER_NAME, configure_logging
from .tracing import init_telemetry, init_telemetry_from_settings, shutdown_telemetry

__all__ = [
    "ROOT_LOGGER_NAME",
    "configure_logging",
    "init_telemetry",
    "init_telemetry_from_settings",
    "shutdown_telemetry",
]

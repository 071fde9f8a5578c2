"""Shared telemetry: logging setup and (optional) OpenTelemetry tracing.

TelemetryConfig is imported from entitystore.shared.telemetry.telemetry only
when tracing is enabled, so the OpenTelemetry packages are not loaded otherwise.
"""

from entitystore.shared.telemetry.logging import setup_logging

__all__ = ["setup_logging"]

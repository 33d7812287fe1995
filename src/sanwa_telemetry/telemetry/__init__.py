"""Telemetry rows as handed over by the CSV collaborator.

Public API
----------
TelemetryRow        - one sample (timestamp + named metrics)
value_at_time       - metric lookup for playback/report consumers
metric_series       - one metric as a float list
format_ms           - ``HH:MM:SS.cc`` formatting
"""

from sanwa_telemetry.telemetry.lookup import format_ms, metric_series, value_at_time
from sanwa_telemetry.telemetry.models import (
    LAP_METRIC,
    STEERING_METRIC,
    THROTTLE_METRIC,
    TelemetryRow,
)

__all__ = [
    "LAP_METRIC",
    "STEERING_METRIC",
    "THROTTLE_METRIC",
    "TelemetryRow",
    "format_ms",
    "metric_series",
    "value_at_time",
]

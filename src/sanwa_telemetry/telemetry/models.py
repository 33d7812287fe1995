"""Telemetry row model."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from sanwa_telemetry.signals.filters import numeric_value

STEERING_METRIC = "ST(%)"
"""Steering position in percent, negative = left."""

THROTTLE_METRIC = "TH(%)"
"""Throttle position in percent, negative = brake."""

LAP_METRIC = "LAP"
"""Lap label written by the logger (used when laps come from labels)."""


@dataclass(frozen=True)
class TelemetryRow:
    """A single sample of the recorded stream.

    Rows are produced by the CSV collaborator and are treated as immutable.
    The analysis relies on ``time_ms`` being non-decreasing across a session
    but does not check it.
    """

    time_ms: float
    """Elapsed recording time in milliseconds."""

    values: Mapping[str, object] = field(default_factory=dict)
    """Metric name → raw cell value (string or number)."""

    def get(self, metric: str) -> float:
        """Return *metric* coerced with :func:`numeric_value` (0.0 if absent)."""
        return numeric_value(self.values.get(metric))

    def has(self, metric: str) -> bool:
        return metric in self.values

    def rebased(self, offset_ms: float) -> TelemetryRow:
        """Return a copy with ``time_ms`` shifted back by *offset_ms*."""
        return TelemetryRow(time_ms=self.time_ms - offset_ms, values=self.values)

    @classmethod
    def from_dict(cls, d: dict) -> TelemetryRow:
        """Create a row from ``{"time_ms": ..., "values": {...}}``."""
        return cls(time_ms=numeric_value(d.get("time_ms")), values=dict(d.get("values") or {}))

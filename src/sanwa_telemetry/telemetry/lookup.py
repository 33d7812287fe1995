"""Row lookup and time formatting helpers."""

from __future__ import annotations

import bisect
from collections.abc import Sequence

from sanwa_telemetry.telemetry.models import TelemetryRow


def metric_series(rows: Sequence[TelemetryRow], metric: str) -> list[float]:
    """Return the numeric values of *metric* for every row (0.0 where missing)."""
    return [row.get(metric) for row in rows]


def value_at_time(rows: Sequence[TelemetryRow], metric: str, time_ms: float) -> float:
    """Value of *metric* at *time_ms*.

    An exact timestamp hit returns that row; otherwise the first row after
    *time_ms* is used, clamped to the last row.  Returns 0.0 for no rows.
    """
    if not rows:
        return 0.0
    times = [row.time_ms for row in rows]
    idx = bisect.bisect_left(times, time_ms)
    idx = min(idx, len(rows) - 1)
    return rows[idx].get(metric)


def format_ms(ms: float) -> str:
    """Format milliseconds as ``HH:MM:SS.cc`` (negative input clamps to zero)."""
    ms = max(0.0, ms)
    total_seconds = int(ms // 1000)
    hh = total_seconds // 3600
    mm = (total_seconds % 3600) // 60
    ss = total_seconds % 60
    frac = int((ms % 1000) // 10)
    return f"{hh:02d}:{mm:02d}:{ss:02d}.{frac:02d}"

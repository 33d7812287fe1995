"""Synthetic telemetry sessions shared by the test suites."""

from __future__ import annotations

import math
import random
from collections.abc import Callable

from sanwa_telemetry.telemetry.models import (
    LAP_METRIC,
    STEERING_METRIC,
    THROTTLE_METRIC,
    TelemetryRow,
)


def make_rows(
    steering: Callable[[float], float],
    n: int,
    interval_ms: float,
    throttle: Callable[[float], float] | float = 50.0,
    lap_ms: float | None = None,
) -> list[TelemetryRow]:
    """Return *n* rows sampled every *interval_ms*.

    *steering* / *throttle* map the sample time (ms) to a percentage.  When
    *lap_ms* is given each row also carries a 1-based ``LAP`` label.
    """
    rows = []
    for i in range(n):
        t = i * interval_ms
        th = throttle(t) if callable(throttle) else throttle
        values: dict[str, object] = {STEERING_METRIC: steering(t), THROTTLE_METRIC: th}
        if lap_ms is not None:
            values[LAP_METRIC] = int(t // lap_ms) + 1
        rows.append(TelemetryRow(time_ms=t, values=values))
    return rows


def square_wave_session(
    n: int = 3000,
    interval_ms: float = 60.0,
    period_ms: float = 20000.0,
    amplitude: float = 80.0,
) -> list[TelemetryRow]:
    """Half a period full left (-amplitude), half full right, throttle +50%."""
    def steering(t: float) -> float:
        return -amplitude if (t % period_ms) < period_ms / 2 else amplitude

    return make_rows(steering, n, interval_ms)


def sine_session(
    period_ms: float = 10000.0,
    n: int = 2000,
    interval_ms: float = 50.0,
    amplitude: float = 60.0,
) -> list[TelemetryRow]:
    return make_rows(
        lambda t: amplitude * math.sin(2 * math.pi * t / period_ms), n, interval_ms
    )


def noise_session(n: int = 4000, interval_ms: float = 20.0, seed: int = 7) -> list[TelemetryRow]:
    rng = random.Random(seed)
    values = [rng.gauss(0.0, 30.0) for _ in range(n)]
    return [
        TelemetryRow(time_ms=i * interval_ms, values={STEERING_METRIC: v, THROTTLE_METRIC: 50.0})
        for i, v in enumerate(values)
    ]

"""Dead-reckoning of a lap path from steering and throttle.

A simple bicycle-like forward model: steering biases the heading rate
(through :func:`~sanwa_telemetry.signals.filters.steer_curve` and a
speed-dependent grip loss) and throttle/brake scale the forward speed.  It is
not physically exact; it only has to produce a topologically faithful loop.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from sanwa_telemetry.signals.filters import mean, moving_average, percentile, steer_curve
from sanwa_telemetry.telemetry.models import STEERING_METRIC, THROTTLE_METRIC, TelemetryRow
from sanwa_telemetry.track.models import CourseConfig, CoursePoint

_TURN_RATE = 0.15
_MIN_SPEED = 0.3
_DIRECTION_DEADBAND = 5.0


@dataclass
class SessionScale:
    """Normalisation constants shared by every lap of one reconstruction."""

    steer_max: float
    throttle_max: float


@dataclass
class _HeadingState:
    """Integrator state for one lap; heading starts pointing +y."""

    x: float = 0.0
    y: float = 0.0
    angle: float = math.pi / 2
    last_time: float | None = None


def session_scale(
    rows: Sequence[TelemetryRow],
    steer_metric: str = STEERING_METRIC,
    throttle_metric: str = THROTTLE_METRIC,
) -> SessionScale:
    """95th percentile of ``|steering|`` and ``|throttle|``, floored at 1."""
    steer = [abs(row.get(steer_metric)) for row in rows]
    throttle = [abs(row.get(throttle_metric)) for row in rows]
    return SessionScale(
        steer_max=max(1.0, percentile(steer, 0.95)),
        throttle_max=max(1.0, percentile(throttle, 0.95)),
    )


def detect_direction(rows: Sequence[TelemetryRow], metric: str = STEERING_METRIC) -> str:
    """``'cw'`` if the mean of the significant steering samples is >= 0, else ``'ccw'``.

    Samples with ``|steering| <= 5`` are ignored.
    """
    values = [v for v in (row.get(metric) for row in rows) if abs(v) > _DIRECTION_DEADBAND]
    total = mean(values)
    return "cw" if total >= 0 else "ccw"


def build_lap_points(
    rows: Sequence[TelemetryRow],
    scale: SessionScale,
    config: CourseConfig,
    direction: str,
    steer_metric: str = STEERING_METRIC,
    throttle_metric: str = THROTTLE_METRIC,
) -> list[CoursePoint]:
    """Integrate one lap of rows (re-based to start at 0 ms) into a path.

    Args:
        rows: Ordered rows of a single lap.
        scale: Session-wide normalisation constants.
        config: Model parameters.
        direction: ``'cw'`` or ``'ccw'``; ``'cw'`` flips the steering sign.

    Returns:
        One :class:`CoursePoint` per row, ``time`` = the row's ``time_ms``.
    """
    steering = moving_average([row.get(steer_metric) for row in rows], config.smooth_window)
    throttle = moving_average([row.get(throttle_metric) for row in rows], config.smooth_window)
    direction_sign = -1.0 if direction == "cw" else 1.0

    state = _HeadingState()
    points: list[CoursePoint] = []
    for row, steer, th in zip(rows, steering, throttle):
        dt = config.base_dt if state.last_time is None else row.time_ms - state.last_time
        if dt <= 0:
            dt = config.base_dt
        dt = max(1.0, dt)
        state.last_time = row.time_ms
        step = dt / config.base_dt

        accel_ratio = max(0.0, th / scale.throttle_max)
        brake_ratio = max(0.0, -th / scale.throttle_max)
        speed_ratio = max(0.0, accel_ratio * (1.0 - brake_ratio * config.brake_speed_loss))

        curve = steer_curve(steer, scale.steer_max, config.steer_gamma)
        curvature = (
            curve
            * config.steer_gain
            * direction_sign
            * (1.0 - config.steer_speed_loss * speed_ratio)
        )
        speed = _MIN_SPEED + (1.0 - _MIN_SPEED) * speed_ratio
        segment = speed * config.base_speed * step

        state.angle += curvature * _TURN_RATE * step
        state.x += math.cos(state.angle) * segment
        state.y += math.sin(state.angle) * segment
        points.append(CoursePoint(x=state.x, y=state.y, time=row.time_ms))

    return points

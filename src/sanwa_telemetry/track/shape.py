"""Canonical course shape from multi-lap telemetry.

Algorithm:
1. Slice the session into per-lap row lists (detected boundaries or logged lap
   labels), each re-based to start at 0 ms.
2. Dead-reckon every lap with session-wide normalisation constants.
3. Resample all laps onto ``resample_count`` canonical times and average.
4. Close the loop, then rotate it so it starts on the longest straight.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sanwa_telemetry.laps.models import LapBoundary
from sanwa_telemetry.signals.filters import mean
from sanwa_telemetry.telemetry.models import (
    LAP_METRIC,
    STEERING_METRIC,
    THROTTLE_METRIC,
    TelemetryRow,
)
from sanwa_telemetry.track.dead_reckoning import build_lap_points, detect_direction, session_scale
from sanwa_telemetry.track.geometry import average_paths, close_loop, rotate_to_longest_straight
from sanwa_telemetry.track.models import CourseConfig, CourseShape

_logger = logging.getLogger(__name__)


def _rebase(rows: list[TelemetryRow]) -> list[TelemetryRow]:
    origin = rows[0].time_ms
    return [row.rebased(origin) for row in rows]


def slice_laps_by_period(
    rows: Sequence[TelemetryRow], laps: Sequence[LapBoundary], period_ms: float
) -> list[list[TelemetryRow]]:
    """Rows in ``[lap.start_ms, lap.start_ms + period_ms]`` for every lap, re-based.

    Slices with fewer than two rows are dropped.
    """
    slices: list[list[TelemetryRow]] = []
    for lap in laps:
        end = lap.start_ms + period_ms
        window = [row for row in rows if lap.start_ms <= row.time_ms <= end]
        if len(window) >= 2:
            slices.append(_rebase(window))
    return slices


def slice_laps_by_label(
    rows: Sequence[TelemetryRow], metric: str = LAP_METRIC
) -> list[list[TelemetryRow]]:
    """Group consecutive rows sharing a lap label, re-based; short groups dropped."""
    groups: list[list[TelemetryRow]] = []
    current: list[TelemetryRow] = []
    current_label: float | None = None
    for row in rows:
        label = row.get(metric)
        if current and label != current_label:
            groups.append(current)
            current = []
        current.append(row)
        current_label = label
    if current:
        groups.append(current)
    return [_rebase(group) for group in groups if len(group) >= 2]


class CourseShapeReconstructor:
    """Reconstruct one canonical closed course path.

    Args:
        config: Dead-reckoning and averaging options.
        steer_metric: Steering metric name.
        throttle_metric: Throttle metric name.
        lap_metric: Lap label metric name (``lap_source == 'lap'``).
    """

    def __init__(
        self,
        config: CourseConfig | None = None,
        steer_metric: str = STEERING_METRIC,
        throttle_metric: str = THROTTLE_METRIC,
        lap_metric: str = LAP_METRIC,
    ) -> None:
        self.config = config or CourseConfig()
        self.steer_metric = steer_metric
        self.throttle_metric = throttle_metric
        self.lap_metric = lap_metric

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reconstruct(
        self,
        rows: Sequence[TelemetryRow],
        laps: Sequence[LapBoundary] = (),
        period_ms: float = 0.0,
    ) -> CourseShape:
        """Build the canonical course shape.

        Args:
            rows: The whole session, time-ordered.
            laps: Detected lap boundaries (ignored for ``lap_source == 'lap'``).
            period_ms: Lap duration used for slicing; defaults to the mean
                boundary duration when 0.

        Returns:
            The closed, rotated :class:`CourseShape`; empty with duration 0
            when no usable lap remains.
        """
        slices, duration = self._slice(rows, laps, period_ms)
        if not slices or duration <= 0:
            _logger.warning("Course shape: no usable laps")
            return CourseShape()

        cfg = self.config
        scale = session_scale(rows, self.steer_metric, self.throttle_metric)
        direction = cfg.direction
        if direction == "auto":
            direction = detect_direction(rows, self.steer_metric)

        paths = [
            build_lap_points(
                lap_rows, scale, cfg, direction, self.steer_metric, self.throttle_metric
            )
            for lap_rows in slices
        ]
        averaged = average_paths(paths, duration, cfg.resample_count)
        closed = close_loop(averaged)
        points = rotate_to_longest_straight(closed, duration, cfg.straight_turn_threshold)
        _logger.debug(
            "Course shape: %d laps, %d points, %.0f ms, %s",
            len(slices), len(points), duration, direction,
        )
        return CourseShape(
            points=points,
            lap_duration_ms=duration,
            lap_count=len(slices),
            direction=direction,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _slice(
        self,
        rows: Sequence[TelemetryRow],
        laps: Sequence[LapBoundary],
        period_ms: float,
    ) -> tuple[list[list[TelemetryRow]], float]:
        """Return ``(per-lap rows, resolved lap duration)``."""
        if self.config.lap_source == "lap":
            if not any(row.has(self.lap_metric) for row in rows):
                _logger.warning("Lap labels requested but no row carries %r", self.lap_metric)
                return [], 0.0
            slices = slice_laps_by_label(rows, self.lap_metric)
            durations = [s[-1].time_ms for s in slices]
            duration = mean(durations)
            return slices, duration

        if not laps:
            return [], 0.0
        if period_ms <= 0:
            period_ms = sum(lap.duration_ms for lap in laps) / len(laps)
        return slice_laps_by_period(rows, laps, period_ms), period_ms

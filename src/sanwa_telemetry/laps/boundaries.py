"""Lap boundary location from an estimated lap period.

Three strategies are tried in order; the first one that yields at least one
plausible lap wins:

1. :class:`TemplateMatcher`: phase-optimised template cross-correlation.
2. :class:`StraightSectionMatcher`: recurring long near-zero steering runs.
3. :class:`FixedIntervalSlicer`: plain ``period_ms`` slices (low confidence).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sanwa_telemetry.laps.models import LapBoundary, LapDetection, PeriodEstimate
from sanwa_telemetry.signals.filters import mean, ncc
from sanwa_telemetry.telemetry.lookup import metric_series
from sanwa_telemetry.telemetry.models import STEERING_METRIC, TelemetryRow

_logger = logging.getLogger(__name__)


def _laps_from_cuts(
    cut_times: list[float], period_ms: float, lo_factor: float, hi_factor: float
) -> list[LapBoundary]:
    """Pair consecutive cut timestamps into laps, dropping implausible durations."""
    lo = lo_factor * period_ms
    hi = hi_factor * period_ms
    laps: list[LapBoundary] = []
    for start, end in zip(cut_times, cut_times[1:]):
        duration = end - start
        if duration > 0 and lo <= duration <= hi:
            laps.append(LapBoundary(lap_index=len(laps) + 1, start_ms=start, end_ms=end))
    return laps


# ---------------------------------------------------------------------------
# Strategy A: template matching
# ---------------------------------------------------------------------------

class TemplateMatcher:
    """Locate lap cuts by matching an averaged one-lap steering template.

    Args:
        min_period_samples: Periods shorter than this (in samples) are skipped.
        search_fraction: Per-lap refinement window, ± this fraction of a period.
        min_duration_factor: Shortest accepted lap, as a multiple of the period.
        max_duration_factor: Longest accepted lap, as a multiple of the period.
    """

    method = "template"

    def __init__(
        self,
        min_period_samples: int = 10,
        search_fraction: float = 0.15,
        min_duration_factor: float = 0.5,
        max_duration_factor: float = 2.0,
    ) -> None:
        self.min_period_samples = min_period_samples
        self.search_fraction = search_fraction
        self.min_duration_factor = min_duration_factor
        self.max_duration_factor = max_duration_factor

    def locate(
        self, times: list[float], steering: list[float], period_ms: float
    ) -> list[LapBoundary] | None:
        n = len(times)
        if n < 2:
            return None
        interval = (times[-1] - times[0]) / (n - 1)
        if interval <= 0:
            return None
        period = round(period_ms / interval)
        if period < self.min_period_samples or n < 2 * period:
            _logger.debug("Template matching skipped: period %d samples, %d rows", period, n)
            return None

        centre = mean(steering)
        signal = [v - centre for v in steering]

        phase = self._best_phase(signal, period)
        windows = self._windows(signal, phase, period)
        template = [sum(col) / len(windows) for col in zip(*windows)]

        cuts = self._refine_cuts(signal, template, phase, period)
        cut_times = [times[i] for i in cuts]
        laps = _laps_from_cuts(
            cut_times, period_ms, self.min_duration_factor, self.max_duration_factor
        )
        return laps or None

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _windows(signal: list[float], phase: int, period: int) -> list[list[float]]:
        """Consecutive non-overlapping full windows starting at *phase*."""
        return [
            signal[start:start + period]
            for start in range(phase, len(signal) - period + 1, period)
        ]

    def _phase_score(self, signal: list[float], phase: int, period: int) -> float:
        """Mean NCC between each pair of adjacent windows at *phase*."""
        windows = self._windows(signal, phase, period)
        if len(windows) < 2:
            return -1.0
        scores = [ncc(a, b) for a, b in zip(windows, windows[1:])]
        return sum(scores) / len(scores)

    def _best_phase(self, signal: list[float], period: int) -> int:
        step = max(1, period // 100)
        best_phase = 0
        best_score = -2.0
        for phase in range(0, period, step):
            score = self._phase_score(signal, phase, period)
            if score > best_score:
                best_phase, best_score = phase, score

        if step > 1:
            coarse = best_phase
            for phase in range(max(0, coarse - step), min(period, coarse + step + 1)):
                score = self._phase_score(signal, phase, period)
                if score > best_score:
                    best_phase, best_score = phase, score
        _logger.debug("Template phase %d (score %.3f)", best_phase, best_score)
        return best_phase

    def _refine_cuts(
        self, signal: list[float], template: list[float], phase: int, period: int
    ) -> list[int]:
        """Snap each expected cut to the best local template match.

        The end of the last full window is kept as-is (there is no full period
        after it to match against).
        """
        n = len(signal)
        radius = max(1, round(self.search_fraction * period))
        cuts: list[int] = []
        expected = phase
        while expected + period <= n:
            lo = max(0, expected - radius)
            hi = min(n - period, expected + radius)
            best_idx = expected
            best_score = -2.0
            for start in range(lo, hi + 1):
                score = ncc(template, signal[start:start + period])
                if score > best_score:
                    best_idx, best_score = start, score
            cuts.append(best_idx)
            expected += period

        if cuts:
            cuts.append(min(n - 1, cuts[-1] + period))
        return cuts


# ---------------------------------------------------------------------------
# Strategy B: straight sections
# ---------------------------------------------------------------------------

@dataclass
class Straight:
    """A run of near-zero steering."""

    start_ms: float
    end_ms: float

    @property
    def duration_ms(self) -> float:
        return self.end_ms - self.start_ms

    @property
    def center_ms(self) -> float:
        return (self.start_ms + self.end_ms) / 2.0


def find_straights(
    times: list[float],
    steering: list[float],
    steer_threshold: float = 5.0,
    min_duration_ms: float = 500.0,
) -> list[Straight]:
    """Maximal runs with ``|steering| <= steer_threshold`` lasting *min_duration_ms*."""
    straights: list[Straight] = []
    run_start: int | None = None
    for i, value in enumerate(steering):
        if abs(value) <= steer_threshold:
            if run_start is None:
                run_start = i
            continue
        if run_start is not None:
            straights.append(Straight(times[run_start], times[i - 1]))
            run_start = None
    if run_start is not None:
        straights.append(Straight(times[run_start], times[-1]))
    return [s for s in straights if s.duration_ms >= min_duration_ms]


class StraightSectionMatcher:
    """Cut laps at the recurring main straight.

    Args:
        steer_threshold: ``|steering|`` at or below this counts as straight.
        min_straight_ms: Shortest run treated as a straight.
        main_fraction: Straights at least this fraction of the longest one are
            main-straight candidates.
        min_gap_factor: Candidates closer than this many periods to the previous
            one are dropped.
        max_gap_factor: A gap above this many periods restarts the chain.
    """

    method = "straight"

    def __init__(
        self,
        steer_threshold: float = 5.0,
        min_straight_ms: float = 500.0,
        main_fraction: float = 0.6,
        min_gap_factor: float = 0.5,
        max_gap_factor: float = 1.5,
    ) -> None:
        self.steer_threshold = steer_threshold
        self.min_straight_ms = min_straight_ms
        self.main_fraction = main_fraction
        self.min_gap_factor = min_gap_factor
        self.max_gap_factor = max_gap_factor

    def locate(
        self, times: list[float], steering: list[float], period_ms: float
    ) -> list[LapBoundary] | None:
        straights = find_straights(
            times, steering, self.steer_threshold, self.min_straight_ms
        )
        if len(straights) < 2:
            return None

        longest = max(s.duration_ms for s in straights)
        candidates = [s for s in straights if s.duration_ms >= self.main_fraction * longest]

        lo = self.min_gap_factor * period_ms
        hi = self.max_gap_factor * period_ms
        laps: list[LapBoundary] = []
        anchor = candidates[0]
        for straight in candidates[1:]:
            gap = straight.center_ms - anchor.center_ms
            if gap < lo:
                continue
            if gap <= hi:
                laps.append(LapBoundary(
                    lap_index=len(laps) + 1,
                    start_ms=anchor.end_ms,
                    end_ms=straight.end_ms,
                ))
            anchor = straight
        _logger.debug("Straight matching: %d candidates, %d laps", len(candidates), len(laps))
        return laps or None


# ---------------------------------------------------------------------------
# Strategy C: fixed interval
# ---------------------------------------------------------------------------

class FixedIntervalSlicer:
    """Slice the session into whole ``period_ms`` intervals from the first sample."""

    method = "fixed"

    def locate(
        self, times: list[float], steering: list[float], period_ms: float
    ) -> list[LapBoundary] | None:
        if not times or period_ms <= 0:
            return None
        start = times[0]
        end = times[-1]
        laps: list[LapBoundary] = []
        while start + period_ms <= end:
            laps.append(LapBoundary(
                lap_index=len(laps) + 1, start_ms=start, end_ms=start + period_ms
            ))
            start += period_ms
        return laps or None


# ---------------------------------------------------------------------------
# Locator
# ---------------------------------------------------------------------------

class LapBoundaryLocator:
    """Run the boundary strategies in priority order.

    Args:
        strategies: Ordered strategies; defaults to template → straight → fixed.
            Each exposes ``method`` and ``locate(times, steering, period_ms)``
            returning a lap list or ``None``.
        metric: Steering metric name.
    """

    def __init__(self, strategies: Sequence | None = None, metric: str = STEERING_METRIC) -> None:
        if strategies is None:
            strategies = (TemplateMatcher(), StraightSectionMatcher(), FixedIntervalSlicer())
        self.strategies = tuple(strategies)
        self.metric = metric

    def locate(self, rows: Sequence[TelemetryRow], estimate: PeriodEstimate) -> LapDetection:
        """Return the laps found by the first successful strategy."""
        if estimate.period_ms <= 0 or not rows:
            return LapDetection()

        times = [row.time_ms for row in rows]
        steering = metric_series(rows, self.metric)

        for strategy in self.strategies:
            laps = strategy.locate(times, steering, estimate.period_ms)
            if laps:
                method = strategy.method
                low = estimate.low_confidence or method == FixedIntervalSlicer.method
                if method == FixedIntervalSlicer.method:
                    _logger.warning("Lap boundaries fell back to fixed %.0f ms slices",
                                    estimate.period_ms)
                else:
                    _logger.info("Lap boundaries by %s: %d laps", method, len(laps))
                return LapDetection(laps=laps, method=method, low_confidence=low)

        _logger.warning("No lap boundaries found for period %.0f ms", estimate.period_ms)
        return LapDetection(low_confidence=True)

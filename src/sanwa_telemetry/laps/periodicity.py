"""Lap period estimation from the steering signal.

The driver repeats roughly the same steering inputs every lap, so the lag of
the strongest autocorrelation peak is the lap period.  A coarse pass over at
most ``max_candidates`` lags is followed by a single-sample refinement around
the winner, which keeps the cost close to linear in the row count.
"""

from __future__ import annotations

import logging
import math
import operator
from collections.abc import Sequence

from sanwa_telemetry.laps.models import PeriodEstimate
from sanwa_telemetry.telemetry.lookup import metric_series
from sanwa_telemetry.telemetry.models import STEERING_METRIC, TelemetryRow

_logger = logging.getLogger(__name__)


def _lagged_correlation(series: list[float], lag: int) -> float:
    """Mean of ``x[i] * x[i + lag]`` over the overlapping samples."""
    count = len(series) - lag
    if count <= 0:
        return 0.0
    return sum(map(operator.mul, series, series[lag:])) / count


class PeriodicityDetector:
    """Estimate the dominant lap period via two-pass autocorrelation.

    Args:
        min_rows: Fewer rows than this yields :meth:`PeriodEstimate.none`.
        min_lap_s: Shortest lag searched, in seconds.
        max_lap_s: Longest lag searched, in seconds.  The lag is also capped
            at half the series so every candidate overlaps enough samples.
        max_candidates: Upper bound on lags evaluated by the coarse pass.
        confidence_threshold: ``confidence_ratio`` below this is low confidence.
        min_period_ms: Periods shorter than this are low confidence.
        harmonic_tolerance: A sub-multiple of the best lag replaces it only when
            its correlation nearly ties the best (at least this fraction of
            it).  A repeat inside the lap, such as two similar halves, stays
            below the bound.  Set to a value above 1 to disable.
    """

    def __init__(
        self,
        min_rows: int = 100,
        min_lap_s: float = 5.0,
        max_lap_s: float = 120.0,
        max_candidates: int = 500,
        confidence_threshold: float = 0.15,
        min_period_ms: float = 5000.0,
        harmonic_tolerance: float = 0.98,
    ) -> None:
        if max_candidates < 1:
            raise ValueError("max_candidates must be >= 1")
        self.min_rows = min_rows
        self.min_lap_s = min_lap_s
        self.max_lap_s = max_lap_s
        self.max_candidates = max_candidates
        self.confidence_threshold = confidence_threshold
        self.min_period_ms = min_period_ms
        self.harmonic_tolerance = harmonic_tolerance

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def estimate(
        self,
        rows: Sequence[TelemetryRow],
        metric: str = STEERING_METRIC,
    ) -> PeriodEstimate:
        """Estimate the lap period of *metric* over *rows*."""
        n = len(rows)
        if n < self.min_rows or not any(row.has(metric) for row in rows):
            _logger.warning("No period estimate: %d rows, metric %r", n, metric)
            return PeriodEstimate.none()

        interval = (rows[-1].time_ms - rows[0].time_ms) / (n - 1)
        if interval <= 0:
            _logger.warning("No period estimate: non-positive sample interval")
            return PeriodEstimate.none()

        raw = metric_series(rows, metric)
        centre = sum(raw) / n
        series = [v - centre for v in raw]
        variance = sum(v * v for v in series) / n
        if variance <= 0:
            _logger.warning("Steering signal is constant; no periodicity")
            return PeriodEstimate(
                period_ms=0.0,
                confidence_ratio=0.0,
                low_confidence=True,
                sample_interval_ms=interval,
            )

        min_lag = max(1, round(self.min_lap_s * 1000.0 / interval))
        max_lag = min(round(self.max_lap_s * 1000.0 / interval), n // 2)
        if max_lag < min_lag:
            _logger.warning(
                "No period estimate: lag range %d..%d is empty", min_lag, max_lag
            )
            return PeriodEstimate.none()

        best_lag, best_corr = self._search(series, min_lag, max_lag)
        best_lag, best_corr = self._prefer_fundamental(series, best_lag, best_corr, min_lag)

        period_ms = best_lag * interval
        ratio = best_corr / variance
        low = ratio < self.confidence_threshold or period_ms < self.min_period_ms
        _logger.debug(
            "Period %.0f ms (lag %d, ratio %.3f, low=%s)", period_ms, best_lag, ratio, low
        )
        return PeriodEstimate(
            period_ms=period_ms,
            confidence_ratio=ratio,
            low_confidence=low,
            sample_interval_ms=interval,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _search(self, series: list[float], min_lag: int, max_lag: int) -> tuple[int, float]:
        """Coarse pass then unit-step refinement; returns ``(lag, correlation)``."""
        span = max_lag - min_lag + 1
        step = max(1, math.ceil(span / self.max_candidates))

        best_lag = min_lag
        best_corr = -math.inf
        for lag in range(min_lag, max_lag + 1, step):
            corr = _lagged_correlation(series, lag)
            if corr > best_corr:
                best_lag, best_corr = lag, corr

        if step > 1:
            lo = max(min_lag, best_lag - 2 * step)
            hi = min(max_lag, best_lag + 2 * step)
            best_lag, best_corr = self._refine(series, lo, hi, best_lag, best_corr)
        return best_lag, best_corr

    @staticmethod
    def _refine(
        series: list[float], lo: int, hi: int, best_lag: int, best_corr: float
    ) -> tuple[int, float]:
        for lag in range(lo, hi + 1):
            corr = _lagged_correlation(series, lag)
            if corr > best_corr:
                best_lag, best_corr = lag, corr
        return best_lag, best_corr

    def _prefer_fundamental(
        self, series: list[float], best_lag: int, best_corr: float, min_lag: int
    ) -> tuple[int, float]:
        """Replace a multiple of the lap period by the period itself.

        The mean lagged correlation of a periodic signal is about equally high
        at every multiple of the period, so the winner of the search can be
        2x or 3x the lap.  Among the sub-multiples that nearly tie the best
        (``harmonic_tolerance``) the shortest wins; partial repeats inside a
        lap correlate clearly lower and never qualify.
        """
        if best_corr <= 0:
            return best_lag, best_corr
        for divisor in range(best_lag // min_lag, 1, -1):
            centre = round(best_lag / divisor)
            lo = max(min_lag, centre - 2)
            hi = centre + 2
            lag, corr = self._refine(series, lo, hi, centre, _lagged_correlation(series, centre))
            if corr >= self.harmonic_tolerance * best_corr:
                _logger.debug("Lag %d replaced by sub-multiple %d", best_lag, lag)
                return lag, corr
        return best_lag, best_corr

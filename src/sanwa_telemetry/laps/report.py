"""Periodicity report assembly."""

from __future__ import annotations

from sanwa_telemetry.laps.models import LapDetection, PeriodEstimate, PeriodicityReport


def build_report(estimate: PeriodEstimate, detection: LapDetection) -> PeriodicityReport:
    """Combine a period estimate and its lap boundaries into a report.

    Best and average lap times come from the detected boundaries; with no laps
    they are 0 and ``method`` is ``'none'``.
    """
    laps = detection.laps
    durations = [lap.duration_ms for lap in laps]
    return PeriodicityReport(
        predicted_lap_count=len(laps),
        predicted_best_lap_ms=min(durations) if durations else 0.0,
        predicted_average_lap_ms=sum(durations) / len(durations) if durations else 0.0,
        detected_period_ms=estimate.period_ms,
        lap_times=list(laps),
        low_confidence=estimate.low_confidence or detection.low_confidence,
        method=detection.method,
        confidence_ratio=estimate.confidence_ratio,
    )

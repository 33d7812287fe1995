"""End-to-end session analysis: rows → lap period → lap boundaries → course shape."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sanwa_telemetry.laps.boundaries import LapBoundaryLocator
from sanwa_telemetry.laps.models import LapDetection, PeriodicityReport
from sanwa_telemetry.laps.periodicity import PeriodicityDetector
from sanwa_telemetry.laps.report import build_report
from sanwa_telemetry.telemetry.models import STEERING_METRIC, TelemetryRow
from sanwa_telemetry.track.models import CourseConfig, CourseShape
from sanwa_telemetry.track.shape import CourseShapeReconstructor

_logger = logging.getLogger(__name__)


@dataclass
class SessionAnalysis:
    """Periodicity report and course shape of one session."""

    periodicity: PeriodicityReport
    course: CourseShape

    def to_dict(self) -> dict:
        return {
            "periodicity": self.periodicity.to_dict(),
            "course": self.course.to_dict(),
        }


class SessionAnalyzer:
    """Run the whole analysis for one configuration.

    Every call snapshots the rows into its own tuple, so overlapping calls with
    different inputs never share intermediate state.

    Parameters
    ----------
    config:
        Course reconstruction options.
    detector / locator:
        Optional injected stages (tests, alternative thresholds).
    """

    def __init__(
        self,
        config: CourseConfig | None = None,
        detector: PeriodicityDetector | None = None,
        locator: LapBoundaryLocator | None = None,
        steer_metric: str = STEERING_METRIC,
    ) -> None:
        self.config = config or CourseConfig()
        self.detector = detector or PeriodicityDetector()
        self.locator = locator or LapBoundaryLocator(metric=steer_metric)
        self.steer_metric = steer_metric

    def analyze_periodicity(self, rows: Iterable[TelemetryRow]) -> PeriodicityReport:
        """Estimate the lap period and locate lap boundaries.

        Boundary detection is skipped when there is no period or it is low
        confidence; the report still carries the period and the flag.
        """
        snapshot = tuple(rows)
        estimate = self.detector.estimate(snapshot, self.steer_metric)
        if estimate.period_ms <= 0 or estimate.low_confidence:
            if estimate.low_confidence:
                _logger.warning(
                    "Low-confidence period %.0f ms (ratio %.3f); lap boundaries skipped",
                    estimate.period_ms, estimate.confidence_ratio,
                )
            detection = LapDetection()
        else:
            detection = self.locator.locate(snapshot, estimate)
        return build_report(estimate, detection)

    def course_shape(
        self,
        rows: Iterable[TelemetryRow],
        report: PeriodicityReport | None = None,
    ) -> CourseShape:
        """Reconstruct the course, detecting laps first unless *report* is given.

        With ``lap_source == 'lap'`` the logged lap labels are used instead.
        """
        snapshot = tuple(rows)
        reconstructor = CourseShapeReconstructor(self.config, steer_metric=self.steer_metric)
        if self.config.lap_source == "lap":
            return reconstructor.reconstruct(snapshot)
        if report is None:
            report = self.analyze_periodicity(snapshot)
        return reconstructor.reconstruct(
            snapshot, report.lap_times, report.detected_period_ms
        )

    def analyze(self, rows: Iterable[TelemetryRow]) -> SessionAnalysis:
        """Periodicity report plus course shape."""
        snapshot = tuple(rows)
        report = self.analyze_periodicity(snapshot)
        return SessionAnalysis(periodicity=report, course=self.course_shape(snapshot, report))

"""Lap period estimation and lap boundary detection."""

from sanwa_telemetry.laps.boundaries import (
    FixedIntervalSlicer,
    LapBoundaryLocator,
    StraightSectionMatcher,
    TemplateMatcher,
)
from sanwa_telemetry.laps.models import (
    LapBoundary,
    LapDetection,
    PeriodEstimate,
    PeriodicityReport,
)
from sanwa_telemetry.laps.periodicity import PeriodicityDetector
from sanwa_telemetry.laps.report import build_report

__all__ = [
    "FixedIntervalSlicer",
    "LapBoundary",
    "LapBoundaryLocator",
    "LapDetection",
    "PeriodEstimate",
    "PeriodicityDetector",
    "PeriodicityReport",
    "StraightSectionMatcher",
    "TemplateMatcher",
    "build_report",
]

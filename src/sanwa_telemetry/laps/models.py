"""Lap period and lap boundary data models."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field


@dataclass
class PeriodEstimate:
    """Dominant repetition period of the steering signal."""

    period_ms: float
    """Best-fit lap duration in milliseconds (0 = no estimate)."""

    confidence_ratio: float
    """Best autocorrelation divided by the signal variance (0..1+)."""

    low_confidence: bool
    """True when the ratio is below threshold or the period is implausibly short."""

    sample_interval_ms: float = 0.0
    """Mean sampling interval the lag was converted with."""

    @classmethod
    def none(cls) -> PeriodEstimate:
        """The zeroed "no estimate" result (flags unset)."""
        return cls(period_ms=0.0, confidence_ratio=0.0, low_confidence=False)


@dataclass
class LapBoundary:
    """One detected lap, ``[start_ms, end_ms)`` in recording time."""

    lap_index: int
    """Sequential lap number (1-based)."""

    start_ms: float
    end_ms: float

    @property
    def duration_ms(self) -> float:
        return self.end_ms - self.start_ms


@dataclass
class LapDetection:
    """Lap boundaries plus the strategy that produced them."""

    laps: list[LapBoundary] = field(default_factory=list)
    method: str = "none"
    """``'template'``, ``'straight'``, ``'fixed'`` or ``'none'``."""

    low_confidence: bool = False


@dataclass
class PeriodicityReport:
    """Lap prediction summary handed to the chart/table collaborators.

    ``lap_times`` is empty when no workable period was found; the remaining
    predicted fields are 0 in that case.
    """

    predicted_lap_count: int
    predicted_best_lap_ms: float
    predicted_average_lap_ms: float
    detected_period_ms: float
    lap_times: list[LapBoundary] = field(default_factory=list)
    low_confidence: bool = False
    method: str = "none"
    confidence_ratio: float = 0.0

    def to_dict(self) -> dict:
        """Return a JSON-serializable dict; each lap also carries ``duration_ms``."""
        d = dataclasses.asdict(self)
        for lap_dict, lap in zip(d["lap_times"], self.lap_times):
            lap_dict["duration_ms"] = lap.duration_ms
        return d

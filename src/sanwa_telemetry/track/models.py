"""Course shape data structures."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field

DIRECTIONS = ("auto", "cw", "ccw")
LAP_SOURCES = ("periodicity", "lap")


@dataclass
class CoursePoint:
    """A single point of the reconstructed course.

    Coordinates are arbitrary dead-reckoning units, not metres.
    """

    x: float
    y: float

    time: float
    """Position within one canonical lap, ``0..lap_duration_ms``."""


@dataclass
class CourseShape:
    """One canonical, closed lap path.

    ``points`` is cyclic: the point after the last one is the first one.
    """

    points: list[CoursePoint] = field(default_factory=list)
    lap_duration_ms: float = 0.0

    lap_count: int = 0
    """Number of laps averaged into the shape."""

    direction: str = ""
    """Resolved travel direction, ``'cw'`` or ``'ccw'`` (empty when no laps)."""

    def to_dict(self) -> dict:
        """Return a JSON-serializable dict (recursive via :func:`dataclasses.asdict`)."""
        return dataclasses.asdict(self)


@dataclass
class CourseConfig:
    """Dead-reckoning and averaging options for one reconstruction.

    Raises:
        ValueError: If an option is outside its documented range.
    """

    direction: str = "auto"
    """``'cw'``, ``'ccw'`` or ``'auto'`` (from the mean signed steering)."""

    base_speed: float = 2.0
    """Path length advanced per ``base_dt`` at speed factor 1 (full throttle)."""

    lap_source: str = "periodicity"
    """``'periodicity'`` (detected boundaries) or ``'lap'`` (logged lap labels)."""

    steer_gain: float = 1.0
    steer_speed_loss: float = 0.35
    """[0, 1]: how much speed reduces the turn rate."""

    brake_speed_loss: float = 0.6
    """[0, 1]: how much braking reduces the speed ratio."""

    steer_gamma: float = 1.0
    """[0.4, 2.5]: exponent of the steering response curve."""

    smooth_window: int = 5
    base_dt: float = 50.0
    """Reference sample interval in milliseconds."""

    resample_count: int = 240
    straight_turn_threshold: float = 0.08
    """Turn angle (radians) below which a point counts as straight."""

    def __post_init__(self) -> None:
        if self.direction not in DIRECTIONS:
            raise ValueError(f"direction must be one of {DIRECTIONS}, got {self.direction!r}")
        if self.lap_source not in LAP_SOURCES:
            raise ValueError(f"lap_source must be one of {LAP_SOURCES}, got {self.lap_source!r}")
        if not 0.0 <= self.steer_speed_loss <= 1.0:
            raise ValueError("steer_speed_loss must be in [0, 1]")
        if not 0.0 <= self.brake_speed_loss <= 1.0:
            raise ValueError("brake_speed_loss must be in [0, 1]")
        if not 0.4 <= self.steer_gamma <= 2.5:
            raise ValueError("steer_gamma must be in [0.4, 2.5]")
        if self.smooth_window < 1:
            raise ValueError("smooth_window must be >= 1")
        if self.base_dt <= 0:
            raise ValueError("base_dt must be > 0")
        if self.base_speed <= 0:
            raise ValueError("base_speed must be > 0")
        if self.resample_count < 2:
            raise ValueError("resample_count must be >= 2")

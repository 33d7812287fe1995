"""Course shape reconstruction by dead reckoning."""

from sanwa_telemetry.track.dead_reckoning import (
    SessionScale,
    build_lap_points,
    detect_direction,
    session_scale,
)
from sanwa_telemetry.track.geometry import (
    average_paths,
    close_loop,
    rotate_to_longest_straight,
    turn_angles,
)
from sanwa_telemetry.track.models import CourseConfig, CoursePoint, CourseShape
from sanwa_telemetry.track.shape import CourseShapeReconstructor

__all__ = [
    "CourseConfig",
    "CoursePoint",
    "CourseShape",
    "CourseShapeReconstructor",
    "SessionScale",
    "average_paths",
    "build_lap_points",
    "close_loop",
    "detect_direction",
    "rotate_to_longest_straight",
    "session_scale",
    "turn_angles",
]

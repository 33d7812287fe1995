"""Path geometry: resampling, multi-lap averaging, loop closure and rotation."""

from __future__ import annotations

import bisect
import math

from sanwa_telemetry.track.models import CoursePoint

# ---------------------------------------------------------------------------
# Resampling & averaging
# ---------------------------------------------------------------------------

def _interpolate(points: list[CoursePoint], times: list[float], t: float) -> tuple[float, float]:
    """Linear interpolation of ``(x, y)`` at *t*, clamped to the first/last point."""
    if t <= times[0]:
        return points[0].x, points[0].y
    if t >= times[-1]:
        return points[-1].x, points[-1].y
    idx = bisect.bisect_right(times, t)
    p0, p1 = points[idx - 1], points[idx]
    span = p1.time - p0.time
    if span < 1e-12:
        return p0.x, p0.y
    f = (t - p0.time) / span
    return p0.x + f * (p1.x - p0.x), p0.y + f * (p1.y - p0.y)


def canonical_times(duration_ms: float, count: int) -> list[float]:
    """*count* evenly spaced times covering ``[0, duration_ms]``."""
    if count < 2:
        raise ValueError("count must be >= 2")
    return [duration_ms * i / (count - 1) for i in range(count)]


def resample_path(
    points: list[CoursePoint], duration_ms: float, count: int
) -> list[tuple[float, float] | None]:
    """Sample *points* at the canonical times; ``None`` everywhere for an empty path."""
    grid = canonical_times(duration_ms, count)
    if not points:
        return [None] * count
    times = [p.time for p in points]
    return [_interpolate(points, times, t) for t in grid]


def average_paths(
    paths: list[list[CoursePoint]], duration_ms: float, count: int
) -> list[CoursePoint]:
    """Average several lap paths point-by-point on the canonical time grid.

    A lap that yields no sample at a grid time is skipped for that time only;
    grid times with no contributing lap are omitted.
    """
    grid = canonical_times(duration_ms, count)
    sampled = [resample_path(path, duration_ms, count) for path in paths]

    averaged: list[CoursePoint] = []
    for i, t in enumerate(grid):
        contributions = [s[i] for s in sampled if s[i] is not None]
        if not contributions:
            continue
        x = sum(c[0] for c in contributions) / len(contributions)
        y = sum(c[1] for c in contributions) / len(contributions)
        averaged.append(CoursePoint(x=x, y=y, time=t))
    return averaged


# ---------------------------------------------------------------------------
# Loop closure
# ---------------------------------------------------------------------------

def close_loop(points: list[CoursePoint]) -> list[CoursePoint]:
    """Distribute the end-to-start drift linearly so the path ends where it starts.

    Point *i* is shifted by ``-drift * i / (n - 1)``: the first point is
    untouched and the last one lands exactly on it.
    """
    n = len(points)
    if n < 2:
        return [CoursePoint(p.x, p.y, p.time) for p in points]
    first, last = points[0], points[-1]
    dx = last.x - first.x
    dy = last.y - first.y
    last_idx = n - 1
    closed = [
        CoursePoint(x=p.x - dx * i / last_idx, y=p.y - dy * i / last_idx, time=p.time)
        for i, p in enumerate(points)
    ]
    closed[-1] = CoursePoint(x=first.x, y=first.y, time=points[-1].time)
    return closed


# ---------------------------------------------------------------------------
# Canonical rotation
# ---------------------------------------------------------------------------

def turn_angles(points: list[CoursePoint]) -> list[float]:
    """Cyclic turn angle at every point, in ``[0, pi]``.

    The angle between the incoming and outgoing segment; a zero-length
    segment counts as a full U-turn (``pi``).
    """
    n = len(points)
    angles: list[float] = []
    for i in range(n):
        prev_pt = points[i - 1]
        pt = points[i]
        next_pt = points[(i + 1) % n]
        ax, ay = pt.x - prev_pt.x, pt.y - prev_pt.y
        bx, by = next_pt.x - pt.x, next_pt.y - pt.y
        norm = math.hypot(ax, ay) * math.hypot(bx, by)
        if norm < 1e-12:
            angles.append(math.pi)
            continue
        cos_theta = max(-1.0, min(1.0, (ax * bx + ay * by) / norm))
        angles.append(math.acos(cos_theta))
    return angles


def longest_straight_run(flags: list[bool]) -> tuple[int, int]:
    """Return ``(start, length)`` of the longest cyclic run of ``True``.

    ``(0, 0)`` when there is no ``True``; ``(0, n)`` when everything is.
    """
    n = len(flags)
    if not any(flags):
        return 0, 0
    if all(flags):
        return 0, n

    # Start scanning right after a False so no run is split by the wrap-around.
    origin = flags.index(False) + 1
    best_start, best_len = 0, 0
    run_start, run_len = 0, 0
    for k in range(n):
        i = (origin + k) % n
        if flags[i]:
            if run_len == 0:
                run_start = i
            run_len += 1
            if run_len > best_len:
                best_start, best_len = run_start, run_len
        else:
            run_len = 0
    return best_start, best_len


def rotate_to_longest_straight(
    points: list[CoursePoint], duration_ms: float, threshold: float = 0.08
) -> list[CoursePoint]:
    """Cyclically shift *points* so the middle of the straightest stretch is first.

    Point order is preserved (a pure rotation); ``time`` is re-linearised to
    ``duration_ms * i / (n - 1)`` afterwards.
    """
    n = len(points)
    if n < 3:
        return [CoursePoint(p.x, p.y, p.time) for p in points]
    flags = [angle < threshold for angle in turn_angles(points)]
    start, length = longest_straight_run(flags)
    shift = (start + length // 2) % n
    rotated = points[shift:] + points[:shift]
    return [
        CoursePoint(x=p.x, y=p.y, time=duration_ms * i / (n - 1))
        for i, p in enumerate(rotated)
    ]

"""Tests for resampling, averaging, loop closure and canonical rotation."""

from __future__ import annotations

import math
import random

import pytest

from sanwa_telemetry.track.geometry import (
    average_paths,
    canonical_times,
    close_loop,
    longest_straight_run,
    resample_path,
    rotate_to_longest_straight,
    turn_angles,
)
from sanwa_telemetry.track.models import CoursePoint

# ---------------------------------------------------------------------------
# Test-data helpers
# ---------------------------------------------------------------------------

def make_rectangle() -> list[CoursePoint]:
    """30 x 10 rectangle traced with unit steps, corners at 0, 30, 40, 70."""
    pts: list[tuple[float, float]] = []
    pts += [(float(x), 0.0) for x in range(0, 30)]
    pts += [(30.0, float(y)) for y in range(0, 10)]
    pts += [(float(x), 10.0) for x in range(30, 0, -1)]
    pts += [(0.0, float(y)) for y in range(10, 0, -1)]
    return [CoursePoint(x=x, y=y, time=float(i)) for i, (x, y) in enumerate(pts)]


def make_random_walk(n: int = 50, seed: int = 3) -> list[CoursePoint]:
    rng = random.Random(seed)
    x = y = 0.0
    points = []
    for i in range(n):
        x += rng.uniform(-1, 2)
        y += rng.uniform(-1, 1)
        points.append(CoursePoint(x=x, y=y, time=float(i)))
    return points


# ---------------------------------------------------------------------------
# Resampling & averaging
# ---------------------------------------------------------------------------

class TestResampling:
    def test_canonical_times_span_duration(self):
        grid = canonical_times(1000.0, 5)
        assert grid == [0.0, 250.0, 500.0, 750.0, 1000.0]

    def test_canonical_times_need_two_points(self):
        with pytest.raises(ValueError):
            canonical_times(1000.0, 1)

    def test_linear_interpolation_between_samples(self):
        path = [CoursePoint(0.0, 0.0, 0.0), CoursePoint(10.0, 20.0, 1000.0)]
        samples = resample_path(path, 1000.0, 3)
        assert samples[1] == pytest.approx((5.0, 10.0))

    def test_clamps_outside_lap_time_range(self):
        path = [CoursePoint(1.0, 1.0, 100.0), CoursePoint(2.0, 2.0, 200.0)]
        samples = resample_path(path, 1000.0, 3)
        assert samples[0] == (1.0, 1.0)
        assert samples[-1] == (2.0, 2.0)

    def test_empty_path_contributes_nothing(self):
        assert resample_path([], 1000.0, 4) == [None] * 4

    def test_average_of_offset_paths_is_the_middle(self):
        a = [CoursePoint(-1.0, 0.0, 0.0), CoursePoint(-1.0, 10.0, 1000.0)]
        b = [CoursePoint(1.0, 0.0, 0.0), CoursePoint(1.0, 10.0, 1000.0)]
        avg = average_paths([a, b], 1000.0, 11)
        assert len(avg) == 11
        for i, p in enumerate(avg):
            assert p.x == pytest.approx(0.0)
            assert p.y == pytest.approx(float(i))
            assert p.time == pytest.approx(100.0 * i)

    def test_empty_lap_is_skipped(self):
        a = [CoursePoint(2.0, 0.0, 0.0), CoursePoint(2.0, 4.0, 1000.0)]
        avg = average_paths([a, []], 1000.0, 3)
        assert [p.x for p in avg] == [2.0, 2.0, 2.0]

    def test_no_laps_gives_no_points(self):
        assert average_paths([], 1000.0, 5) == []


# ---------------------------------------------------------------------------
# Loop closure
# ---------------------------------------------------------------------------

class TestCloseLoop:
    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_last_point_equals_first(self, seed):
        closed = close_loop(make_random_walk(seed=seed))
        assert closed[-1].x == pytest.approx(closed[0].x)
        assert closed[-1].y == pytest.approx(closed[0].y)

    def test_first_point_is_untouched(self):
        walk = make_random_walk()
        closed = close_loop(walk)
        assert (closed[0].x, closed[0].y) == (walk[0].x, walk[0].y)

    def test_correction_grows_linearly(self):
        pts = [CoursePoint(float(i), 0.0, float(i)) for i in range(5)]  # drift = (4, 0)
        closed = close_loop(pts)
        assert [p.x for p in closed] == pytest.approx([0.0, 0.0, 0.0, 0.0, 0.0])

    def test_times_are_kept(self):
        walk = make_random_walk()
        assert [p.time for p in close_loop(walk)] == [p.time for p in walk]

    def test_input_is_not_mutated(self):
        walk = make_random_walk()
        before = [(p.x, p.y) for p in walk]
        close_loop(walk)
        assert [(p.x, p.y) for p in walk] == before

    def test_short_paths_are_copied(self):
        assert close_loop([]) == []
        single = [CoursePoint(1.0, 2.0, 0.0)]
        assert close_loop(single) == single


# ---------------------------------------------------------------------------
# Canonical rotation
# ---------------------------------------------------------------------------

class TestRotation:
    def test_turn_angles_of_rectangle(self):
        angles = turn_angles(make_rectangle())
        for i, angle in enumerate(angles):
            expected = math.pi / 2 if i in (0, 30, 40, 70) else 0.0
            assert angle == pytest.approx(expected, abs=1e-9)

    def test_zero_length_segment_is_a_u_turn(self):
        pts = [CoursePoint(0, 0, 0), CoursePoint(1, 0, 1), CoursePoint(1, 0, 2), CoursePoint(2, 1, 3)]
        assert turn_angles(pts)[1] == pytest.approx(math.pi)

    def test_longest_run_wraps_around(self):
        assert longest_straight_run([True, True, False, False, True, True, True]) == (4, 5)

    def test_longest_run_edge_cases(self):
        assert longest_straight_run([False, False]) == (0, 0)
        assert longest_straight_run([True, True, True]) == (0, 3)

    def test_rectangle_starts_mid_long_side(self):
        rotated = rotate_to_longest_straight(make_rectangle(), 7900.0)
        assert (rotated[0].x, rotated[0].y) == (15.0, 0.0)

    def test_rotation_is_a_cyclic_shift(self):
        original = make_rectangle()
        rotated = rotate_to_longest_straight(original, 7900.0)
        coords = [(p.x, p.y) for p in original]
        shifted = [(p.x, p.y) for p in rotated]
        shift = coords.index(shifted[0])
        assert shifted == coords[shift:] + coords[:shift]

    def test_times_are_relinearised(self):
        rotated = rotate_to_longest_straight(make_rectangle(), 7900.0)
        n = len(rotated)
        for i, p in enumerate(rotated):
            assert p.time == pytest.approx(7900.0 * i / (n - 1))

    def test_closed_random_walk_keeps_its_point_set(self):
        closed = close_loop(make_random_walk(80, seed=9))
        rotated = rotate_to_longest_straight(closed, 1000.0)
        assert sorted((p.x, p.y) for p in rotated) == sorted((p.x, p.y) for p in closed)

    def test_no_straight_means_no_shift(self):
        square = [CoursePoint(0, 0, 0), CoursePoint(1, 0, 1), CoursePoint(1, 1, 2), CoursePoint(0, 1, 3)]
        rotated = rotate_to_longest_straight(square, 300.0)
        assert [(p.x, p.y) for p in rotated] == [(p.x, p.y) for p in square]

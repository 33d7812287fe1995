"""Run the session analysis on a synthetic steering trace.

Usage:
  uv run python scripts/synthetic_session.py \\
      --lap-ms 20000 \\
      --interval-ms 60 \\
      --rows 3000 \\
      --noise 5 \\
      --output course.json

The trace alternates full left and full right steering every half lap, with
optional Gaussian noise, and is analysed exactly like a recorded session.
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys

from sanwa_telemetry.pipeline import SessionAnalyzer
from sanwa_telemetry.telemetry.lookup import format_ms
from sanwa_telemetry.telemetry.models import STEERING_METRIC, THROTTLE_METRIC, TelemetryRow
from sanwa_telemetry.track.models import CourseConfig


def _synthetic_rows(
    n: int, interval_ms: float, lap_ms: float, amplitude: float, noise: float, seed: int
) -> list[TelemetryRow]:
    rng = random.Random(seed)
    rows = []
    for i in range(n):
        t = i * interval_ms
        steer = -amplitude if (t % lap_ms) < lap_ms / 2 else amplitude
        if noise > 0:
            steer += rng.gauss(0.0, noise)
        rows.append(
            TelemetryRow(time_ms=t, values={STEERING_METRIC: steer, THROTTLE_METRIC: 50.0})
        )
    return rows


def main() -> None:
    ap = argparse.ArgumentParser(description="Analyse a synthetic steering session")
    ap.add_argument("--rows", type=int, default=3000, help="Number of samples")
    ap.add_argument("--interval-ms", type=float, default=60.0, help="Sample spacing (ms)")
    ap.add_argument("--lap-ms", type=float, default=20000.0, help="True lap duration (ms)")
    ap.add_argument("--amplitude", type=float, default=80.0, help="Steering amplitude (%%)")
    ap.add_argument("--noise", type=float, default=0.0, help="Gaussian noise sigma (%%)")
    ap.add_argument("--seed", type=int, default=0, help="Noise seed")
    ap.add_argument(
        "--direction", choices=("auto", "cw", "ccw"), default="auto", help="Course direction"
    )
    ap.add_argument("--output", default=None, help="Write the full analysis as JSON here")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log pipeline decisions")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    rows = _synthetic_rows(
        args.rows, args.interval_ms, args.lap_ms, args.amplitude, args.noise, args.seed
    )
    print(f"Samples   : {len(rows)} every {args.interval_ms:.0f} ms")
    print(f"True lap  : {format_ms(args.lap_ms)}")
    print()

    try:
        config = CourseConfig(direction=args.direction)
    except ValueError as exc:
        print(f"  [!] {exc}", file=sys.stderr)
        sys.exit(1)

    result = SessionAnalyzer(config).analyze(rows)
    report = result.periodicity

    print(f"Period    : {format_ms(report.detected_period_ms)}"
          f"  (ratio {report.confidence_ratio:.3f}"
          f"{', LOW CONFIDENCE' if report.low_confidence else ''})")
    print(f"Method    : {report.method}")
    print(f"Laps      : {report.predicted_lap_count}")
    for lap in report.lap_times:
        print(f"  #{lap.lap_index:<3d} {format_ms(lap.start_ms)} → {format_ms(lap.end_ms)}"
              f"  {format_ms(lap.duration_ms)}")
    if report.lap_times:
        print(f"Best      : {format_ms(report.predicted_best_lap_ms)}")
        print(f"Average   : {format_ms(report.predicted_average_lap_ms)}")
    print()

    course = result.course
    if course.points:
        xs = [p.x for p in course.points]
        ys = [p.y for p in course.points]
        print(f"Course    : {len(course.points)} points, {course.direction}, "
              f"{course.lap_count} laps averaged")
        print(f"Extent    : x {min(xs):.1f} .. {max(xs):.1f}  y {min(ys):.1f} .. {max(ys):.1f}")
    else:
        print("Course    : not reconstructed (no laps)")

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2)
        print(f"\nWritten   : {args.output}")


if __name__ == "__main__":
    main()

"""Generic numeric helpers shared by the lap and course analysis stages."""

from __future__ import annotations

import math
import re

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def numeric_value(raw: object) -> float:
    """Coerce a raw telemetry cell to ``float``.

    Everything except digits, ``.`` and ``-`` is stripped first, so values such
    as ``"'-45'"`` or ``"12 %"`` parse.  Returns 0.0 for ``None``, empty or
    unparseable input, and for NaN/Inf.  Never raises.
    """
    if raw is None:
        return 0.0
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else 0.0
    cleaned = _NON_NUMERIC.sub("", str(raw))
    if not cleaned:
        return 0.0
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def mean(values: list[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def percentile(values: list[float], p: float) -> float:
    """Nearest-rank percentile: element ``floor(len * p)`` of the sorted values.

    The index is clamped to the valid range.  Returns 0.0 for empty input.
    """
    if not values:
        return 0.0
    ordered = sorted(values)
    idx = min(max(int(math.floor(len(ordered) * p)), 0), len(ordered) - 1)
    return ordered[idx]


def moving_average(values: list[float], window: int) -> list[float]:
    """Centred moving average with half-width ``window // 2``.

    Near the edges only the available samples are averaged, so the kernel is
    asymmetric there.  A window below 2 returns a copy of *values*.
    """
    n = len(values)
    if n == 0:
        return []
    half = max(0, int(window) // 2)
    if half == 0:
        return list(values)
    result: list[float] = []
    for i in range(n):
        lo = max(0, i - half)
        hi = min(n, i + half + 1)
        result.append(sum(values[lo:hi]) / (hi - lo))
    return result


def steer_curve(value: float, max_value: float, gamma: float) -> float:
    """Nonlinear steering response in ``[-1, 1]``.

    *value* is normalised by *max_value* and clamped, then raised to *gamma*
    with the sign preserved (``0 -> 0``).  Returns 0.0 when *max_value* is 0.
    """
    if max_value == 0:
        return 0.0
    normalized = min(1.0, max(-1.0, value / max_value))
    if normalized == 0:
        return 0.0
    return math.copysign(abs(normalized) ** gamma, normalized)


def ncc(a: list[float], b: list[float]) -> float:
    """Normalised cross-correlation of two equal-length windows.

    ``dot(a, b) / (|a| * |b|)``; 0.0 when either window has zero magnitude.
    """
    dot = 0.0
    aa = 0.0
    bb = 0.0
    for x, y in zip(a, b):
        dot += x * y
        aa += x * x
        bb += y * y
    denom = math.sqrt(aa * bb)
    if denom < 1e-12:
        return 0.0
    return dot / denom

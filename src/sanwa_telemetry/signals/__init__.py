"""Numeric signal helpers."""

from sanwa_telemetry.signals.filters import (
    mean,
    moving_average,
    ncc,
    numeric_value,
    percentile,
    steer_curve,
)

__all__ = [
    "mean",
    "moving_average",
    "ncc",
    "numeric_value",
    "percentile",
    "steer_curve",
]

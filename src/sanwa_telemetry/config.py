"""Environment-driven defaults for :class:`~sanwa_telemetry.track.models.CourseConfig`.

Recognised variables (all optional)::

    SANWA_DIRECTION          auto | cw | ccw
    SANWA_LAP_SOURCE         periodicity | lap
    SANWA_BASE_SPEED         float
    SANWA_STEER_GAIN         float
    SANWA_STEER_SPEED_LOSS   float in [0, 1]
    SANWA_BRAKE_SPEED_LOSS   float in [0, 1]
    SANWA_STEER_GAMMA        float in [0.4, 2.5]
    SANWA_SMOOTH_WINDOW      int >= 1
    SANWA_BASE_DT            float (ms)
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from sanwa_telemetry.track.models import CourseConfig

_ENV_FIELDS: tuple[tuple[str, str, type], ...] = (
    # env var                   config field         type
    ("SANWA_DIRECTION",         "direction",         str),
    ("SANWA_LAP_SOURCE",        "lap_source",        str),
    ("SANWA_BASE_SPEED",        "base_speed",        float),
    ("SANWA_STEER_GAIN",        "steer_gain",        float),
    ("SANWA_STEER_SPEED_LOSS",  "steer_speed_loss",  float),
    ("SANWA_BRAKE_SPEED_LOSS",  "brake_speed_loss",  float),
    ("SANWA_STEER_GAMMA",       "steer_gamma",       float),
    ("SANWA_SMOOTH_WINDOW",     "smooth_window",     int),
    ("SANWA_BASE_DT",           "base_dt",           float),
)


def course_config_from_env(environ: Mapping[str, str] | None = None) -> CourseConfig:
    """Build a :class:`CourseConfig` from ``SANWA_*`` variables.

    Unset or blank variables keep the dataclass default.

    Raises:
        ValueError: If a variable does not parse or is out of range.
    """
    env = os.environ if environ is None else environ
    kwargs: dict = {}
    for var, name, kind in _ENV_FIELDS:
        raw = env.get(var, "").strip()
        if not raw:
            continue
        try:
            kwargs[name] = kind(raw.lower()) if kind is str else kind(raw)
        except ValueError as exc:
            raise ValueError(f"{var}={raw!r} is not a valid {kind.__name__}") from exc
    return CourseConfig(**kwargs)

"""Tests for environment-driven course configuration."""

from __future__ import annotations

import pytest

from sanwa_telemetry.config import course_config_from_env
from sanwa_telemetry.track.models import CourseConfig


def test_empty_environment_gives_defaults():
    assert course_config_from_env({}) == CourseConfig()


def test_variables_override_defaults():
    cfg = course_config_from_env({
        "SANWA_DIRECTION": "CW",
        "SANWA_LAP_SOURCE": "lap",
        "SANWA_SMOOTH_WINDOW": "9",
        "SANWA_STEER_GAMMA": "1.4",
        "SANWA_BASE_DT": "60",
    })
    assert cfg.direction == "cw"
    assert cfg.lap_source == "lap"
    assert cfg.smooth_window == 9
    assert cfg.steer_gamma == pytest.approx(1.4)
    assert cfg.base_dt == pytest.approx(60.0)


def test_blank_variable_is_ignored():
    assert course_config_from_env({"SANWA_STEER_GAIN": "  "}).steer_gain == 1.0


def test_unparseable_value_raises():
    with pytest.raises(ValueError, match="SANWA_BASE_SPEED"):
        course_config_from_env({"SANWA_BASE_SPEED": "fast"})


def test_out_of_range_value_raises():
    with pytest.raises(ValueError):
        course_config_from_env({"SANWA_STEER_SPEED_LOSS": "2"})


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("SANWA_DIRECTION", "ccw")
    assert course_config_from_env().direction == "ccw"

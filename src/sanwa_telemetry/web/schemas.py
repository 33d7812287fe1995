"""Pydantic request/response schemas for the analysis API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class RowIn(BaseModel):
    time_ms: float
    values: dict[str, float | str | None] = Field(default_factory=dict)


class CourseConfigIn(BaseModel):
    direction: Literal["auto", "cw", "ccw"] = "auto"
    base_speed: float = Field(2.0, gt=0)
    lap_source: Literal["periodicity", "lap"] = "periodicity"
    steer_gain: float = 1.0
    steer_speed_loss: float = Field(0.35, ge=0, le=1)
    brake_speed_loss: float = Field(0.6, ge=0, le=1)
    steer_gamma: float = Field(1.0, ge=0.4, le=2.5)
    smooth_window: int = Field(5, ge=1)
    base_dt: float = Field(50.0, gt=0)


class AnalyzeRequest(BaseModel):
    rows: list[RowIn]
    config: CourseConfigIn | None = None
    """Omitted → defaults from the ``SANWA_*`` environment."""


class HealthResponse(BaseModel):
    status: str
    version: str


class LapTimeOut(BaseModel):
    lap_index: int
    start_ms: float
    end_ms: float
    duration_ms: float


class PeriodicityResponse(BaseModel):
    predicted_lap_count: int
    predicted_best_lap_ms: float
    predicted_average_lap_ms: float
    detected_period_ms: float
    lap_times: list[LapTimeOut]
    low_confidence: bool
    method: str
    confidence_ratio: float
    best_lap: str
    """``predicted_best_lap_ms`` as ``HH:MM:SS.cc``."""


class CoursePointOut(BaseModel):
    x: float
    y: float
    time: float


class CourseResponse(BaseModel):
    points: list[CoursePointOut]
    lap_duration_ms: float
    lap_count: int
    direction: str


class AnalyzeResponse(BaseModel):
    periodicity: PeriodicityResponse
    course: CourseResponse


class ValueRequest(BaseModel):
    rows: list[RowIn]
    metric: str = "ST(%)"
    time_ms: float


class ValueResponse(BaseModel):
    metric: str
    time_ms: float
    time: str
    """``time_ms`` as ``HH:MM:SS.cc``."""
    value: float

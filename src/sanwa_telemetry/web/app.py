"""FastAPI application exposing the session analysis."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

from sanwa_telemetry.web.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    CourseResponse,
    HealthResponse,
    PeriodicityResponse,
    ValueRequest,
    ValueResponse,
)
from sanwa_telemetry.web.service import AnalysisService

load_dotenv()  # SANWA_* defaults may live in .env; must run before the service reads them

_logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", AnalyzeRequest, ValueRequest)
ResponseT = TypeVar("ResponseT")

VERSION = "0.1.0"

app = FastAPI(title="Sanwa Telemetry Analysis", version=VERSION)


def _run(fn: Callable[[RequestT], ResponseT], req: RequestT) -> ResponseT:
    try:
        return fn(req)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        _logger.exception("Analysis failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION)


@app.post("/api/periodicity", response_model=PeriodicityResponse)
def periodicity(req: AnalyzeRequest) -> PeriodicityResponse:
    """Lap period, lap boundaries and predicted lap times."""
    return _run(AnalysisService().periodicity, req)


@app.post("/api/course", response_model=CourseResponse)
def course(req: AnalyzeRequest) -> CourseResponse:
    """Canonical closed course shape."""
    return _run(AnalysisService().course, req)


@app.post("/api/analyze", response_model=AnalyzeResponse)
def analyze(req: AnalyzeRequest) -> AnalyzeResponse:
    """Periodicity report and course shape in one call."""
    return _run(AnalysisService().analyze, req)


@app.post("/api/value", response_model=ValueResponse)
def value(req: ValueRequest) -> ValueResponse:
    """Value of one metric at a playback time."""
    return _run(AnalysisService().value_at, req)

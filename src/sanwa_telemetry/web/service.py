"""AnalysisService — wraps :class:`SessionAnalyzer` for the Web API."""

from __future__ import annotations

from sanwa_telemetry.config import course_config_from_env
from sanwa_telemetry.laps.models import PeriodicityReport
from sanwa_telemetry.pipeline import SessionAnalysis, SessionAnalyzer
from sanwa_telemetry.telemetry.lookup import format_ms, value_at_time
from sanwa_telemetry.telemetry.models import TelemetryRow
from sanwa_telemetry.track.models import CourseConfig, CourseShape
from sanwa_telemetry.web.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    CourseResponse,
    PeriodicityResponse,
    ValueRequest,
    ValueResponse,
)


class AnalysisService:
    """Convert API payloads to rows, run the analysis, convert results back.

    Parameters
    ----------
    default_config:
        Used when a request carries no ``config``.  If None it is read from
        the ``SANWA_*`` environment on each request.
    """

    def __init__(self, default_config: CourseConfig | None = None) -> None:
        self._default_config = default_config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def periodicity(self, req: AnalyzeRequest) -> PeriodicityResponse:
        analyzer = SessionAnalyzer(self._config(req))
        return self._periodicity_out(analyzer.analyze_periodicity(self._rows(req)))

    def course(self, req: AnalyzeRequest) -> CourseResponse:
        analyzer = SessionAnalyzer(self._config(req))
        return self._course_out(analyzer.course_shape(self._rows(req)))

    def analyze(self, req: AnalyzeRequest) -> AnalyzeResponse:
        analyzer = SessionAnalyzer(self._config(req))
        result: SessionAnalysis = analyzer.analyze(self._rows(req))
        return AnalyzeResponse(
            periodicity=self._periodicity_out(result.periodicity),
            course=self._course_out(result.course),
        )

    def value_at(self, req: ValueRequest) -> ValueResponse:
        """Value of one metric at a playback time (next row after it, clamped)."""
        rows = self._rows(req)
        return ValueResponse(
            metric=req.metric,
            time_ms=req.time_ms,
            time=format_ms(req.time_ms),
            value=value_at_time(rows, req.metric, req.time_ms),
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _rows(req: AnalyzeRequest | ValueRequest) -> list[TelemetryRow]:
        """Rows in request order.

        Raises
        ------
        ValueError
            If the request carries no rows.
        """
        if not req.rows:
            raise ValueError("Request contains no telemetry rows")
        return [TelemetryRow.from_dict(r.model_dump()) for r in req.rows]

    def _config(self, req: AnalyzeRequest) -> CourseConfig:
        if req.config is not None:
            return CourseConfig(**req.config.model_dump())
        if self._default_config is not None:
            return self._default_config
        return course_config_from_env()

    @staticmethod
    def _periodicity_out(report: PeriodicityReport) -> PeriodicityResponse:
        return PeriodicityResponse(
            **report.to_dict(),
            best_lap=format_ms(report.predicted_best_lap_ms),
        )

    @staticmethod
    def _course_out(shape: CourseShape) -> CourseResponse:
        return CourseResponse(**shape.to_dict())

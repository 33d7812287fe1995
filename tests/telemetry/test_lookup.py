"""Tests for row lookup helpers and the row model."""

from __future__ import annotations

from sanwa_telemetry.telemetry.lookup import format_ms, metric_series, value_at_time
from sanwa_telemetry.telemetry.models import TelemetryRow

ROWS = [
    TelemetryRow(time_ms=0.0, values={"ST(%)": "'10'"}),
    TelemetryRow(time_ms=100.0, values={"ST(%)": "20"}),
    TelemetryRow(time_ms=200.0, values={"ST(%)": "-30"}),
]


class TestValueAtTime:
    def test_exact_hit(self):
        assert value_at_time(ROWS, "ST(%)", 100.0) == 20.0

    def test_between_rows_uses_next_row(self):
        assert value_at_time(ROWS, "ST(%)", 150.0) == -30.0

    def test_after_last_row_is_clamped(self):
        assert value_at_time(ROWS, "ST(%)", 5000.0) == -30.0

    def test_before_first_row(self):
        assert value_at_time(ROWS, "ST(%)", -50.0) == 10.0

    def test_no_rows(self):
        assert value_at_time([], "ST(%)", 0.0) == 0.0

    def test_missing_metric_is_zero(self):
        assert value_at_time(ROWS, "TH(%)", 100.0) == 0.0


class TestRowModel:
    def test_metric_series_coerces_values(self):
        assert metric_series(ROWS, "ST(%)") == [10.0, 20.0, -30.0]

    def test_rebased_shifts_time_only(self):
        row = ROWS[2].rebased(150.0)
        assert row.time_ms == 50.0
        assert row.values is ROWS[2].values

    def test_from_dict(self):
        row = TelemetryRow.from_dict({"time_ms": "1500", "values": {"TH(%)": 12}})
        assert row.time_ms == 1500.0
        assert row.get("TH(%)") == 12.0
        assert row.has("TH(%)")
        assert not row.has("ST(%)")


class TestFormatMs:
    def test_hours_minutes_seconds_centis(self):
        assert format_ms(3_723_456) == "01:02:03.45"

    def test_zero(self):
        assert format_ms(0) == "00:00:00.00"

    def test_negative_clamps_to_zero(self):
        assert format_ms(-500) == "00:00:00.00"

"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from sanwa_telemetry.telemetry.models import TelemetryRow
from sanwa_telemetry.web.app import app
from tests.helpers import square_wave_session


@pytest.fixture
def client(monkeypatch):
    """FastAPI test client with no ``SANWA_*`` overrides in the environment."""
    for var in ("SANWA_DIRECTION", "SANWA_LAP_SOURCE", "SANWA_STEER_GAMMA"):
        monkeypatch.delenv(var, raising=False)
    with TestClient(app) as c:
        yield c


def rows_payload(rows: list[TelemetryRow]) -> list[dict]:
    """Serialise rows the way a client posts them."""
    return [{"time_ms": r.time_ms, "values": dict(r.values)} for r in rows]


@pytest.fixture(scope="session")
def session_payload() -> dict:
    """Square-wave session with a 20 s lap, as a request body."""
    return {"rows": rows_payload(square_wave_session())}

"""Tests for the optionsbookie FastAPI application."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from optionsbookie.services.returns import calculate_yearly_annualized_ror_with_active_months
from optionsbookie.settings import ANN_ROR_ENV_VAR, AnnualizedRoRMethod, EngineSettings
from optionsbookie.web import create_app
from optionsbookie.web.app import SnapshotPayload
from optionsbookie.web.dependencies import get_settings


def _make_client(settings: EngineSettings | None = None) -> TestClient:
    app = create_app()
    if settings is not None:
        app.dependency_overrides[get_settings] = lambda: settings
    return TestClient(app)


@pytest.fixture
def payload(sample_snapshot_json):
    return json.loads(sample_snapshot_json.read_text(encoding="utf-8"))


def test_health():
    response = _make_client().get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_settings_default():
    response = _make_client().get("/api/settings")
    assert response.json() == {"annualization_method": "time-period"}


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv(ANN_ROR_ENV_VAR, "trade-weighted")
    response = _make_client().get("/api/settings")
    assert response.json() == {"annualization_method": "trade-weighted"}


def test_trades(payload):
    response = _make_client().post("/api/analytics/trades?as_of=2025-11-25", json=payload)

    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 7
    assert rows[0]["profit_loss"] == "298.68"
    assert rows[4]["days_held"] == 15


def test_summary_uses_configured_method(payload):
    settings = EngineSettings(annualization_method=AnnualizedRoRMethod.TRADE_WEIGHTED)
    response = _make_client(settings).post("/api/analytics/summary", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["portfolio"]["annualization_method"] == "trade-weighted"
    assert body["portfolio"]["realized_pnl"] == "437.03"
    assert body["active_months"]["year"] is None
    assert [year["year"] for year in body["years"]] == [2025]


def test_summary_query_overrides_method(payload):
    settings = EngineSettings(annualization_method=AnnualizedRoRMethod.TRADE_WEIGHTED)
    response = _make_client(settings).post(
        "/api/analytics/summary?method=time-period&year=2025", json=payload
    )

    assert response.status_code == 200
    body = response.json()
    assert body["portfolio"]["annualization_method"] == "time-period"
    assert body["active_months"]["year"] == 2025
    assert body["active_months"]["active_trading_days"] == 120


def test_monthly_chart(payload):
    response = _make_client().post("/api/analytics/monthly", json=payload)

    assert response.status_code == 200
    assert [point["month"] for point in response.json()] == ["Oct 2025", "Nov 2025"]


def test_monthly_single_month(payload):
    response = _make_client().post("/api/analytics/monthly?year=2025&month=11", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["total_pnl"] == "138.35"
    assert body["total_trades"] == 2


def test_monthly_requires_year_and_month_together(payload):
    response = _make_client().post("/api/analytics/monthly?year=2025", json=payload)
    assert response.status_code == 400


def test_monthly_rejects_month_out_of_range(payload):
    response = _make_client().post("/api/analytics/monthly?year=2025&month=13", json=payload)
    assert response.status_code == 422


def test_strategies(payload):
    response = _make_client().post("/api/analytics/strategies", json=payload)

    assert response.status_code == 200
    assert {row["strategy"] for row in response.json()} == {
        "Cash-Secured Put",
        "Covered Call",
        "Long Call",
        "Long Put",
    }


def test_tickers_with_leaders(payload):
    response = _make_client().post("/api/analytics/tickers?leaders=year&top=1", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert [item["ticker"] for item in body["tickers"]] == ["TTD", "AAPL", "AMD"]
    assert body["top_tickers_yearly"]["top_tickers"] == ["TTD"]
    assert body["leaders"][0]["year"] == 2025
    assert body["leaders"][0]["top_by_pnl"]["ticker"] == "TTD"


def test_tickers_without_leaders(payload):
    response = _make_client().post("/api/analytics/tickers", json=payload)

    assert response.status_code == 200
    assert "leaders" not in response.json()


def test_invalid_payload_is_rejected(payload):
    payload["transactions"][0]["callOrPut"] = "Straddle"
    response = _make_client().post("/api/analytics/summary", json=payload)

    assert response.status_code == 422


def test_empty_payload():
    response = _make_client().post("/api/analytics/summary", json={})

    assert response.status_code == 200
    assert response.json()["portfolio"]["realized_pnl"] == "0.00"
    assert response.json()["years"] == []


def test_summary_without_year_is_all_time(payload):
    response = _make_client().post("/api/analytics/summary", json=payload)

    snapshot = SnapshotPayload.model_validate(payload)
    all_time = calculate_yearly_annualized_ror_with_active_months(
        snapshot.transactions, snapshot.chains
    )
    active = response.json()["active_months"]
    assert active["year"] is None
    assert active["active_trading_days"] == all_time.active_trading_days


def test_summary_year_parameter_is_documented():
    schema = _make_client().get("/openapi.json").json()
    parameters = schema["paths"]["/api/analytics/summary"]["post"]["parameters"]
    year = next(item for item in parameters if item["name"] == "year")

    assert "all-time" in year["description"]

"""Tests for JSON report serialization."""

from __future__ import annotations

import json
from datetime import date
from decimal import Decimal

from optionsbookie.core.parser import load_snapshot
from optionsbookie.services.aggregation import (
    calculate_chain_aware_stock_performance,
    calculate_portfolio_summary,
    calculate_trade_metrics,
    calculate_yearly_summaries,
)
from optionsbookie.services.json_serializer import (
    serialize_annualized,
    serialize_decimal,
    serialize_portfolio_summary,
    serialize_stock_performance,
    serialize_trade_metrics,
    serialize_transaction,
    serialize_year_summary,
)
from optionsbookie.services.returns import AnnualizedReturn


def test_serialize_decimal():
    assert serialize_decimal(Decimal("150.00")) == "150"
    assert serialize_decimal(Decimal("1E+2")) == "100"
    assert serialize_decimal("text") == "text"


def test_serialize_annualized_keeps_status():
    assert serialize_annualized(AnnualizedReturn.ok(Decimal("48.666"))) == {
        "status": "ok",
        "value": "48.67",
    }
    assert serialize_annualized(AnnualizedReturn.invalid()) == {"status": "invalid", "value": None}
    assert serialize_annualized(AnnualizedReturn.not_applicable()) == {
        "status": "not_applicable",
        "value": "0.00",
    }


def test_serialize_transaction(make_transaction):
    data = serialize_transaction(make_transaction(id="t1", close_date=date(2025, 10, 3)))

    assert data["id"] == "t1"
    assert data["open_date"] == "2025-09-25"
    assert data["close_date"] == "2025-10-03"
    assert data["option_kind"] == "Put"
    assert data["status"] == "Open"


def test_serialize_trade_metrics_is_json_safe(make_transaction):
    txn = make_transaction(
        open_date=date(2025, 10, 5),
        close_date=date(2025, 10, 1),
        profit_loss=Decimal("100"),
        status="Closed",
    )
    row = calculate_trade_metrics([txn], as_of=date(2025, 10, 10))[0]
    data = json.loads(json.dumps(serialize_trade_metrics(row)))

    assert data["strategy"] == "Cash-Secured Put"
    assert data["collateral"] == "30000.00"
    assert data["break_even"] == "145.75"
    assert data["annualized_ror"] == {"status": "invalid", "value": None}
    assert data["realized"] is True


def test_serialize_reports(sample_snapshot_json):
    snapshot = load_snapshot(sample_snapshot_json)

    portfolio = serialize_portfolio_summary(
        calculate_portfolio_summary(snapshot.transactions, snapshot.chains)
    )
    assert portfolio["realized_pnl"] == "437.03"
    assert portfolio["annualization_method"] == "time-period"

    tickers = serialize_stock_performance(
        calculate_chain_aware_stock_performance(snapshot.transactions, snapshot.chains)
    )
    assert [item["ticker"] for item in tickers] == ["TTD", "AAPL", "AMD"]
    assert tickers[0]["pnl"] == "339.00"

    years = [
        serialize_year_summary(item)
        for item in calculate_yearly_summaries(snapshot.transactions, snapshot.chains)
    ]
    assert years[0]["year"] == 2025
    assert years[0]["best_month"]["month"] == "October 2025"
    assert [month["month_key"] for month in years[0]["months"]] == ["2025-11", "2025-10"]

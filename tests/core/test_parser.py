"""Tests for snapshot loading."""

from __future__ import annotations

import json
from datetime import date
from decimal import Decimal

import pytest

from optionsbookie.core.models import ChainStatus, TransactionStatus
from optionsbookie.core.parser import (
    PortfolioSnapshot,
    SnapshotLoadError,
    load_snapshot,
    parse_snapshot_payload,
)


def test_load_json_snapshot(sample_snapshot_json):
    snapshot = load_snapshot(sample_snapshot_json)

    assert isinstance(snapshot, PortfolioSnapshot)
    assert len(snapshot.transactions) == 7
    assert [chain.id for chain in snapshot.chains] == ["c-closed", "c-active"]
    assert snapshot.chains[0].status is ChainStatus.CLOSED
    assert snapshot.symbols == ["AAPL", "AMD", "MSFT", "NVDA", "TTD"]

    first = snapshot.transactions[0]
    assert first.profit_loss == Decimal("298.68")
    assert first.close_date == date(2025, 10, 3)
    assert snapshot.transactions[2].close_date == date(2025, 11, 20)


def test_load_csv_with_chain_file(sample_transactions_csv, sample_chains_csv):
    snapshot = load_snapshot(sample_transactions_csv, chains_file=sample_chains_csv)

    assert [txn.id for txn in snapshot.transactions] == ["t1", "t2", "t3"]
    assert snapshot.transactions[0].symbol == "AAPL"
    assert snapshot.transactions[0].chain_id is None
    assert snapshot.transactions[1].status is TransactionStatus.ROLLED
    assert snapshot.transactions[1].exit_price is None
    assert [chain.id for chain in snapshot.chains] == ["c-closed"]


def test_bare_list_is_read_as_transactions(sample_snapshot_json):
    payload = json.loads(sample_snapshot_json.read_text())["transactions"]
    snapshot = parse_snapshot_payload(payload)

    assert len(snapshot.transactions) == 7
    assert snapshot.chains == []


def test_invalid_json_payload_type():
    with pytest.raises(SnapshotLoadError, match="JSON object"):
        parse_snapshot_payload("transactions")


def test_invalid_record_reports_position(sample_snapshot_json):
    payload = json.loads(sample_snapshot_json.read_text())
    payload["transactions"][1]["tradeOpenDate"] = "yesterday"

    with pytest.raises(SnapshotLoadError, match="Transaction 2"):
        parse_snapshot_payload(payload)


def test_non_object_record_rejected():
    with pytest.raises(SnapshotLoadError, match="Chain 1: expected an object"):
        parse_snapshot_payload({"transactions": [], "chains": ["c-1"]})


def test_malformed_json_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SnapshotLoadError, match="invalid JSON"):
        load_snapshot(path)


def test_csv_errors_use_file_row_numbers(tmp_path):
    path = tmp_path / "trades.csv"
    path.write_text(
        "id,stockSymbol,tradeOpenDate,expiryDate,callOrPut,buyOrSell,strikePrice,premium,"
        "numberOfContracts\n"
        "t1,AAPL,2025-09-25,2025-10-17,Put,Sell,150,4.25,2\n"
        "t2,AAPL,2025-09-25,2025-10-17,Put,Sell,150,4.25,many\n",
        encoding="utf-8",
    )

    with pytest.raises(SnapshotLoadError, match="Row 3"):
        load_snapshot(path)


def test_empty_csv_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")

    with pytest.raises(SnapshotLoadError, match="empty"):
        load_snapshot(path)

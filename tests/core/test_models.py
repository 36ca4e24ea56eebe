"""Tests for transaction and chain models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from optionsbookie.core.models import (
    Chain,
    ChainStatus,
    Direction,
    OptionKind,
    Transaction,
    TransactionStatus,
)


def _payload(**overrides):
    payload = {
        "id": "t1",
        "stockSymbol": " aapl ",
        "tradeOpenDate": "2025-09-25",
        "expiryDate": "2025-10-17T00:00:00.000Z",
        "callOrPut": "put",
        "buyOrSell": "SELL",
        "strikePrice": "150",
        "premium": "4.25",
        "numberOfContracts": 2,
    }
    payload.update(overrides)
    return payload


def test_transaction_accepts_export_names():
    txn = Transaction.model_validate(_payload())

    assert txn.symbol == "AAPL"
    assert txn.open_date == date(2025, 9, 25)
    assert txn.expiry_date == date(2025, 10, 17)
    assert txn.option_kind is OptionKind.PUT
    assert txn.direction is Direction.SELL
    assert txn.strike == Decimal("150")
    assert txn.fees == Decimal("0")
    assert txn.status is TransactionStatus.OPEN
    assert txn.close_date is None
    assert txn.is_short is True
    assert txn.is_terminal is False


def test_transaction_accepts_field_names(make_transaction):
    txn = make_transaction(status="expired", close_date="2025-10-17")

    assert txn.status is TransactionStatus.EXPIRED
    assert txn.close_date == date(2025, 10, 17)
    assert txn.is_terminal is True


def test_option_kind_accepts_single_letter():
    assert OptionKind("C") is OptionKind.CALL
    assert OptionKind("p") is OptionKind.PUT


def test_blank_close_date_and_chain_become_none():
    txn = Transaction.model_validate(_payload(closeDate="", chainId="  "))

    assert txn.close_date is None
    assert txn.chain_id is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"tradeOpenDate": "09/25/2025"},
        {"expiryDate": "2025-13-01"},
        {"closeDate": "soon"},
        {"callOrPut": "Straddle"},
        {"buyOrSell": "Hold"},
        {"status": "Pending"},
        {"stockSymbol": "   "},
        {"numberOfContracts": -1},
        {"premium": "-1"},
    ],
)
def test_transaction_rejects_invalid_values(overrides):
    with pytest.raises(ValidationError):
        Transaction.model_validate(_payload(**overrides))


def test_transaction_is_frozen(make_transaction):
    txn = make_transaction()
    with pytest.raises(ValidationError):
        txn.premium = Decimal("1")


def test_position_spec(make_transaction):
    txn = make_transaction(strike=Decimal("152.50"))
    assert txn.position_spec == "AAPL $152.5 Put 2025-10-17"


def test_chain_status_aliases():
    assert Chain(id="c1", symbol="ttd", chainStatus="closed").status is ChainStatus.CLOSED
    assert Chain(id="c1", symbol="TTD", chainStatus="Open").status is ChainStatus.ACTIVE
    assert Chain(id="c1", symbol="TTD").status is ChainStatus.ACTIVE


def test_chain_fields(make_chain):
    chain = make_chain(
        status="Closed",
        option_kind="Put",
        original_strike="50",
        original_open_date="2025-10-01",
        total_chain_pnl="339",
    )

    assert chain.symbol == "TTD"
    assert chain.is_closed is True
    assert chain.option_kind is OptionKind.PUT
    assert chain.original_open_date == date(2025, 10, 1)
    assert chain.total_chain_pnl == Decimal("339")

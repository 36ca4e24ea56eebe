"""Tests for single-leg valuation."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from optionsbookie.core.models import StrategyKind
from optionsbookie.services.valuation import (
    calculate_break_even,
    calculate_collateral,
    calculate_profit_loss,
    calculate_total_deployed_capital,
    classify_strategy,
    is_leap,
    recorded_profit_loss,
)


def test_closed_sell_profit(make_transaction):
    txn = make_transaction(exit_price=Decimal("2.75"))
    assert calculate_profit_loss(txn) == Decimal("298.68")


def test_closed_buy_profit(make_transaction):
    txn = make_transaction(direction="Buy", exit_price=Decimal("6.50"))
    assert calculate_profit_loss(txn) == Decimal("448.68")


def test_open_buy_is_premium_debit(make_transaction):
    txn = make_transaction(direction="Buy")
    assert calculate_profit_loss(txn) == Decimal("-851.32")


def test_open_sell_is_premium_credit(make_transaction):
    txn = make_transaction()
    assert calculate_profit_loss(txn) == Decimal("848.68")


def test_zero_exit_price_values_leg_as_open(make_transaction):
    txn = make_transaction(exit_price=Decimal("0"))
    assert calculate_profit_loss(txn) == Decimal("848.68")


def test_explicit_exit_price_overrides_stored_one(make_transaction):
    txn = make_transaction(exit_price=Decimal("1.00"))
    assert calculate_profit_loss(txn, Decimal("2.75")) == Decimal("298.68")


def test_zero_contracts_leaves_only_fees(make_transaction):
    txn = make_transaction(contracts=0, exit_price=Decimal("2.75"))
    assert calculate_profit_loss(txn) == Decimal("-1.32")


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({}, Decimal("30000")),
        ({"option_kind": "Call"}, Decimal("30000")),
        ({"direction": "Buy"}, Decimal("850")),
        ({"direction": "Buy", "contracts": 1, "premium": Decimal("3.50")}, Decimal("350")),
        ({"collateral_amount": Decimal("5000")}, Decimal("5000")),
        ({"collateral_amount": Decimal("0")}, Decimal("30000")),
        ({"direction": "Buy", "premium": Decimal("0")}, Decimal("0")),
    ],
)
def test_collateral(make_transaction, overrides, expected):
    assert calculate_collateral(make_transaction(**overrides)) == expected


def test_break_even(make_transaction):
    assert calculate_break_even(make_transaction(option_kind="Call")) == Decimal("154.25")
    assert calculate_break_even(make_transaction(option_kind="Put")) == Decimal("145.75")


@pytest.mark.parametrize(
    ("kind", "direction", "expected"),
    [
        ("Put", "Sell", StrategyKind.CASH_SECURED_PUT),
        ("Call", "Sell", StrategyKind.COVERED_CALL),
        ("Call", "Buy", StrategyKind.LONG_CALL),
        ("Put", "Buy", StrategyKind.LONG_PUT),
    ],
)
def test_classify_strategy(make_transaction, kind, direction, expected):
    assert classify_strategy(make_transaction(option_kind=kind, direction=direction)) is expected


def test_recorded_profit_loss_defaults_to_zero(make_transaction):
    assert recorded_profit_loss(make_transaction()) == Decimal("0")
    assert recorded_profit_loss(make_transaction(profit_loss=Decimal("12.5"))) == Decimal("12.5")


def test_total_deployed_capital(make_transaction):
    txns = [make_transaction(), make_transaction(direction="Buy")]
    assert calculate_total_deployed_capital(txns) == Decimal("30850")
    assert calculate_total_deployed_capital([]) == Decimal("0")


def test_is_leap(make_transaction):
    opened = date(2025, 1, 15)
    assert is_leap(make_transaction(open_date=opened, expiry_date=date(2025, 11, 1))) is True
    assert is_leap(make_transaction(open_date=opened, expiry_date=date(2025, 10, 31))) is False

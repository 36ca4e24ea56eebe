"""
Position valuation for single option legs.

This module handles profit/loss, collateral (capital-at-risk), break-even and
strategy classification for individual transactions.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

from ..core.dates import months_between
from ..core.models import Direction, OptionKind, StrategyKind, Transaction

CONTRACT_MULTIPLIER = Decimal("100")
ZERO = Decimal("0")
LEAP_MONTHS = 9

_STRATEGIES: Dict[Tuple[OptionKind, Direction], StrategyKind] = {
    (OptionKind.PUT, Direction.SELL): StrategyKind.CASH_SECURED_PUT,
    (OptionKind.CALL, Direction.SELL): StrategyKind.COVERED_CALL,
    (OptionKind.CALL, Direction.BUY): StrategyKind.LONG_CALL,
    (OptionKind.PUT, Direction.BUY): StrategyKind.LONG_PUT,
}


def _notional(price_per_share: Decimal, contracts: int) -> Decimal:
    return price_per_share * Decimal(contracts) * CONTRACT_MULTIPLIER


def calculate_profit_loss(txn: Transaction, exit_price: Optional[Decimal] = None) -> Decimal:
    """
    Calculate the P&L of a leg, net of fees.

    With a positive exit price the leg is valued as closed at that price. A
    missing exit price, or one of exactly zero, values the leg at its opening
    premium: a debit for buys and a credit for sells.
    """
    price = txn.exit_price if exit_price is None else exit_price
    if price is not None and price > 0:
        per_share = price - txn.premium if txn.direction is Direction.BUY else txn.premium - price
        gross = _notional(per_share, txn.contracts)
    else:
        premium_value = _notional(txn.premium, txn.contracts)
        gross = -premium_value if txn.direction is Direction.BUY else premium_value
    return gross - txn.fees


def calculate_collateral(txn: Transaction) -> Decimal:
    """
    Capital-at-risk for a leg.

    A positive manual override wins. Short legs (puts and calls alike) tie up
    the strike notional; long legs risk the premium paid.
    """
    if txn.collateral_amount is not None and txn.collateral_amount > 0:
        return txn.collateral_amount
    if txn.direction is Direction.SELL:
        return _notional(txn.strike, txn.contracts)
    return _notional(txn.premium, txn.contracts)


def calculate_break_even(txn: Transaction) -> Decimal:
    """Underlying price at expiration where the leg neither gains nor loses."""
    if txn.option_kind is OptionKind.CALL:
        return txn.strike + txn.premium
    return txn.strike - txn.premium


def classify_strategy(txn: Transaction) -> StrategyKind:
    """Map the (kind, direction) pair of a leg to its strategy label."""
    return _STRATEGIES.get((txn.option_kind, txn.direction), StrategyKind.OTHER)


def recorded_profit_loss(txn: Transaction) -> Decimal:
    """Stored P&L snapshot of a leg, treating a missing value as zero."""
    return txn.profit_loss if txn.profit_loss is not None else ZERO


def calculate_total_deployed_capital(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of collateral across the given legs."""
    return sum((calculate_collateral(txn) for txn in transactions), ZERO)


def is_leap(txn: Transaction) -> bool:
    """True when the option expires more than nine calendar months after opening."""
    return months_between(txn.open_date, txn.expiry_date) > LEAP_MONTHS


__all__ = [
    "CONTRACT_MULTIPLIER",
    "ZERO",
    "calculate_break_even",
    "calculate_collateral",
    "calculate_profit_loss",
    "calculate_total_deployed_capital",
    "classify_strategy",
    "is_leap",
    "recorded_profit_loss",
]

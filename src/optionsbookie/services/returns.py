"""
Return-on-risk calculations.

RoR is P&L over collateral expressed as a percentage. Three annualization
methods are provided:

* per-trade time-based: one closed trade's RoR scaled by its holding period;
* period time-based: an aggregate RoR scaled by a fixed period length
  (30 days for a month, 365 for a year, days since inception for all-time);
* trade-weighted: the collateral-weighted mean of per-trade annualized RoR.

Portfolio-level helpers take the method as an explicit
:class:`~optionsbookie.settings.AnnualizedRoRMethod` argument.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, List, Optional, Union

from ..core.dates import DAYS_PER_MONTH_BUCKET, DateLike, calendar_days_between, today
from ..core.models import Transaction
from ..settings import (
    DEFAULT_ANNUALIZATION_METHOD,
    AnnualizedRoRMethod,
    resolve_annualization_method,
)
from .realization import ChainsArg, get_realized_transactions
from .valuation import ZERO, calculate_collateral, recorded_profit_loss

HUNDRED = Decimal("100")
DAYS_PER_YEAR = Decimal("365")
SAME_DAY_HOLDING_DAYS = Decimal("0.5")
MONTHLY_PERIOD_DAYS = DAYS_PER_MONTH_BUCKET
YEARLY_PERIOD_DAYS = 365

Number = Union[Decimal, int, float]

logger = logging.getLogger(__name__)


class ReturnStatus(str, Enum):
    OK = "ok"
    INVALID = "invalid"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True)
class AnnualizedReturn:
    """
    Result of annualizing a single trade.

    ``INVALID`` carries ``Decimal("NaN")`` (close date before open date) and
    ``NOT_APPLICABLE`` carries zero (trade not closed yet), so callers can tell
    both apart from a genuine zero return.
    """

    status: ReturnStatus
    value: Decimal

    @classmethod
    def ok(cls, value: Decimal) -> "AnnualizedReturn":
        return cls(ReturnStatus.OK, value)

    @classmethod
    def invalid(cls) -> "AnnualizedReturn":
        return cls(ReturnStatus.INVALID, Decimal("NaN"))

    @classmethod
    def not_applicable(cls) -> "AnnualizedReturn":
        return cls(ReturnStatus.NOT_APPLICABLE, ZERO)

    @property
    def is_ok(self) -> bool:
        return self.status is ReturnStatus.OK

    @property
    def is_invalid(self) -> bool:
        return self.status is ReturnStatus.INVALID


@dataclass(frozen=True)
class ActiveMonthsReturn:
    """Yearly return annualized over the months that actually saw new trades."""

    annualized_ror: Decimal
    active_trading_days: int
    base_ror: Decimal


def _as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def calculate_ror(txn: Transaction) -> Decimal:
    """RoR of one leg in percent; zero when the leg ties up no collateral."""
    collateral = calculate_collateral(txn)
    if collateral == 0:
        return ZERO
    return recorded_profit_loss(txn) / collateral * HUNDRED


def calculate_annualized_ror(txn: Transaction) -> AnnualizedReturn:
    """
    Annualize a closed trade's RoR over its holding period.

    Same-day trades are treated as held for half a day.
    """
    if txn.close_date is None:
        return AnnualizedReturn.not_applicable()
    held = calendar_days_between(txn.open_date, txn.close_date)
    if held is None or held < 0:
        logger.warning(
            "Transaction %s closes before it opens (%s -> %s)",
            txn.id,
            txn.open_date,
            txn.close_date,
        )
        return AnnualizedReturn.invalid()
    ror = calculate_ror(txn)
    if ror == 0:
        return AnnualizedReturn.ok(ZERO)
    days = Decimal(held) if held > 0 else SAME_DAY_HOLDING_DAYS
    return AnnualizedReturn.ok(ror * DAYS_PER_YEAR / days)


def calculate_time_based_annualized_ror(ror: Number, days: Number) -> Decimal:
    """Scale ``ror`` earned over ``days`` to a 365-day rate; degenerate input yields zero."""
    value = _as_decimal(ror)
    period = _as_decimal(days)
    if not value.is_finite() or not period.is_finite() or period <= 0:
        return ZERO
    return value * DAYS_PER_YEAR / period


def calculate_monthly_annualized_ror(ror: Number) -> Decimal:
    return calculate_time_based_annualized_ror(ror, MONTHLY_PERIOD_DAYS)


def calculate_yearly_annualized_ror(ror: Number) -> Decimal:
    return calculate_time_based_annualized_ror(ror, YEARLY_PERIOD_DAYS)


def calculate_all_time_annualized_ror(
    total_ror: Number, start_date: DateLike, *, as_of: Optional[date] = None
) -> Decimal:
    """Annualize ``total_ror`` over the days since ``start_date`` (at least one day)."""
    elapsed = calendar_days_between(start_date, as_of or today())
    if elapsed is None:
        return ZERO
    return calculate_time_based_annualized_ror(total_ror, max(elapsed, 1))


def calculate_portfolio_ror(
    transactions: Iterable[Transaction], chains: ChainsArg = None
) -> Decimal:
    """Capital-weighted RoR of realized legs: total P&L over total collateral."""
    realized = get_realized_transactions(transactions, chains)
    total_collateral = sum((calculate_collateral(txn) for txn in realized), ZERO)
    if total_collateral == 0:
        return ZERO
    total_pnl = sum((recorded_profit_loss(txn) for txn in realized), ZERO)
    return total_pnl / total_collateral * HUNDRED


def calculate_average_ror(
    transactions: Iterable[Transaction], chains: ChainsArg = None
) -> Decimal:
    """Simple mean of per-leg RoR over realized legs."""
    realized = get_realized_transactions(transactions, chains)
    if not realized:
        return ZERO
    return sum((calculate_ror(txn) for txn in realized), ZERO) / Decimal(len(realized))


def calculate_trade_weighted_annualized_ror(
    transactions: Iterable[Transaction], chains: ChainsArg = None
) -> Decimal:
    """
    Collateral-weighted mean of per-trade annualized RoR over realized legs.

    Legs with an invalid annualized value or no collateral are left out.
    """
    weighted_sum = ZERO
    total_collateral = ZERO
    for txn in get_realized_transactions(transactions, chains):
        annualized = calculate_annualized_ror(txn)
        if not annualized.value.is_finite():
            continue
        collateral = calculate_collateral(txn)
        if collateral <= 0:
            continue
        weighted_sum += annualized.value * collateral
        total_collateral += collateral
    if total_collateral == 0:
        return ZERO
    return weighted_sum / total_collateral


def calculate_active_trading_days(transactions: Iterable[Transaction]) -> int:
    """Distinct calendar months with an opened trade, times 30 days."""
    months = {(txn.open_date.year, txn.open_date.month) for txn in transactions}
    return len(months) * DAYS_PER_MONTH_BUCKET


def calculate_portfolio_annualized_ror(
    transactions: Iterable[Transaction],
    chains: ChainsArg = None,
    *,
    method: Union[AnnualizedRoRMethod, str] = DEFAULT_ANNUALIZATION_METHOD,
    period_days: Number = YEARLY_PERIOD_DAYS,
) -> Decimal:
    """Annualized portfolio RoR using the selected methodology."""
    txns: List[Transaction] = list(transactions)
    selected = resolve_annualization_method(method)
    if selected is AnnualizedRoRMethod.TRADE_WEIGHTED:
        return calculate_trade_weighted_annualized_ror(txns, chains)
    return calculate_time_based_annualized_ror(
        calculate_portfolio_ror(txns, chains), period_days
    )


def calculate_monthly_portfolio_annualized_ror(
    transactions: Iterable[Transaction],
    chains: ChainsArg = None,
    *,
    method: Union[AnnualizedRoRMethod, str] = DEFAULT_ANNUALIZATION_METHOD,
) -> Decimal:
    return calculate_portfolio_annualized_ror(
        transactions, chains, method=method, period_days=MONTHLY_PERIOD_DAYS
    )


def calculate_yearly_portfolio_annualized_ror(
    transactions: Iterable[Transaction],
    chains: ChainsArg = None,
    *,
    method: Union[AnnualizedRoRMethod, str] = DEFAULT_ANNUALIZATION_METHOD,
) -> Decimal:
    return calculate_portfolio_annualized_ror(
        transactions, chains, method=method, period_days=YEARLY_PERIOD_DAYS
    )


def calculate_yearly_annualized_ror_with_active_months(
    transactions: Iterable[Transaction],
    chains: ChainsArg = None,
    year: Optional[int] = None,
) -> ActiveMonthsReturn:
    """
    Annualize the RoR of trades opened in ``year`` over their active months.

    ``year=None`` covers every trade (all-time view); it does not fall back to
    the current calendar year. Pass the year explicitly for a one-year figure.
    """
    selected = [txn for txn in transactions if year is None or txn.open_date.year == year]
    active_days = calculate_active_trading_days(selected)
    base_ror = calculate_portfolio_ror(selected, chains)
    return ActiveMonthsReturn(
        annualized_ror=calculate_time_based_annualized_ror(base_ror, active_days),
        active_trading_days=active_days,
        base_ror=base_ror,
    )


__all__ = [
    "ActiveMonthsReturn",
    "AnnualizedReturn",
    "DAYS_PER_YEAR",
    "HUNDRED",
    "MONTHLY_PERIOD_DAYS",
    "ReturnStatus",
    "SAME_DAY_HOLDING_DAYS",
    "YEARLY_PERIOD_DAYS",
    "calculate_active_trading_days",
    "calculate_all_time_annualized_ror",
    "calculate_annualized_ror",
    "calculate_average_ror",
    "calculate_monthly_annualized_ror",
    "calculate_monthly_portfolio_annualized_ror",
    "calculate_portfolio_annualized_ror",
    "calculate_portfolio_ror",
    "calculate_ror",
    "calculate_time_based_annualized_ror",
    "calculate_trade_weighted_annualized_ror",
    "calculate_yearly_annualized_ror",
    "calculate_yearly_annualized_ror_with_active_months",
    "calculate_yearly_portfolio_annualized_ror",
]

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from ..core.models import StrategyKind, TransactionStatus
from ..settings import AnnualizedRoRMethod
from .returns import HUNDRED, AnnualizedReturn
from .valuation import ZERO


def win_rate(wins: int, count: int) -> Decimal:
    """Share of winning trades in percent; zero when there are no trades."""
    if count <= 0:
        return ZERO
    return Decimal(wins) / Decimal(count) * HUNDRED


@dataclass(frozen=True)
class MonthlyChartPoint:
    """Realized results attributed to one calendar month."""

    month_key: str  # YYYY-MM, sortable
    label: str  # e.g. "Jan 2025"
    pnl: Decimal
    trades: int
    collateral: Decimal
    ror: Decimal


@dataclass(frozen=True)
class MonthlyPnl:
    """Chain-aware realized totals for a single month."""

    year: int
    month: int  # 1-12
    total_pnl: Decimal
    total_trades: int
    fees: Decimal
    winning_trades: int
    losing_trades: int

    @property
    def win_rate(self) -> Decimal:
        return win_rate(self.winning_trades, self.total_trades)


@dataclass(frozen=True)
class TickerPerformance:
    """Realized results for one underlying."""

    ticker: str
    pnl: Decimal
    trades: int
    total_collateral: Decimal

    @property
    def ror(self) -> Decimal:
        if self.total_collateral == 0:
            return ZERO
        return self.pnl / self.total_collateral * HUNDRED


@dataclass(frozen=True)
class StrategyPerformance:
    """Per-strategy statistics; averages are taken over realized trades."""

    strategy: StrategyKind
    trade_count: int
    open_count: int
    realized_count: int
    total_pnl: Decimal
    avg_ror: Decimal
    avg_annualized_ror: Decimal
    win_rate: Decimal
    avg_days_held: Decimal
    avg_collateral: Decimal


@dataclass(frozen=True)
class MonthlyTopTickers:
    month_key: str
    label: str
    top_by_pnl: Optional[TickerPerformance]
    top_by_ror: Optional[TickerPerformance]


@dataclass(frozen=True)
class YearlyTopTickers:
    year: int
    top_by_pnl: Optional[TickerPerformance]
    top_by_ror: Optional[TickerPerformance]


@dataclass(frozen=True)
class YearlyTickerPoint:
    """P&L of the leading tickers within one year (chart row)."""

    year: int
    pnl_by_ticker: Dict[str, Decimal]


@dataclass(frozen=True)
class TopTickersYearlyPerformance:
    chart_data: List[YearlyTickerPoint]
    top_tickers: List[str]  # Ordered by total P&L, best first


@dataclass(frozen=True)
class MonthSummary:
    month_key: str
    label: str
    total_pnl: Decimal
    total_trades: int
    winning_trades: int
    losing_trades: int
    total_fees: Decimal
    average_days_held: Decimal

    @property
    def win_rate(self) -> Decimal:
        return win_rate(self.winning_trades, self.total_trades)


@dataclass(frozen=True)
class YearSummary:
    year: int
    total_pnl: Decimal
    total_trades: int
    winning_trades: int
    losing_trades: int
    total_fees: Decimal
    average_days_held: Decimal
    best_month: Optional[MonthSummary]
    worst_month: Optional[MonthSummary]
    months: List[MonthSummary] = field(default_factory=list)  # Newest month first

    @property
    def win_rate(self) -> Decimal:
        return win_rate(self.winning_trades, self.total_trades)


@dataclass(frozen=True)
class PortfolioSummary:
    """Headline figures for a whole snapshot."""

    open_positions: int
    closed_positions: int
    realized_pnl: Decimal
    unrealized_pnl: Decimal
    total_fees: Decimal
    win_rate: Decimal
    average_days_held: Decimal
    portfolio_ror: Decimal
    average_ror: Decimal
    annualized_ror: Decimal
    annualization_method: AnnualizedRoRMethod
    total_deployed_capital: Decimal


@dataclass(frozen=True)
class TradeMetrics:
    """Derived figures for one leg, as listed in trade tables."""

    transaction_id: str
    symbol: str
    strategy: StrategyKind
    status: TransactionStatus
    chain_id: Optional[str]
    profit_loss: Decimal
    collateral: Decimal
    break_even: Decimal
    ror: Decimal
    annualized_ror: AnnualizedReturn
    days_held: int
    days_to_expiry: int
    realized: bool
    is_leap: bool
    needs_status_update: bool

"""Top-performer rankings by month and by year."""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from ..core.dates import month_key, month_label, parse_month_key
from ..core.models import Transaction
from .aggregation import closed_attribution_entries, summarize_ticker_entries
from .aggregation_models import (
    MonthlyTopTickers,
    TickerPerformance,
    TopTickersYearlyPerformance,
    YearlyTickerPoint,
    YearlyTopTickers,
)
from .chains import AttributionEntry
from .realization import ChainsArg
from .valuation import ZERO

DEFAULT_TOP_TICKER_LIMIT = 5


def _leaders(
    entries: Iterable[AttributionEntry],
) -> Tuple[Optional[TickerPerformance], Optional[TickerPerformance]]:
    tickers = list(summarize_ticker_entries(entries).values())
    top_by_pnl = max(tickers, key=lambda item: item.pnl, default=None)
    top_by_ror = max(tickers, key=lambda item: item.ror, default=None)
    return top_by_pnl, top_by_ror


def calculate_monthly_top_tickers(
    transactions: Iterable[Transaction], chains: ChainsArg = None
) -> List[MonthlyTopTickers]:
    """Best ticker by P&L and by RoR for every month with realized trades."""
    by_month: Dict[str, List[AttributionEntry]] = defaultdict(list)
    for entry in closed_attribution_entries(transactions, chains):
        by_month[month_key(entry.close_date)].append(entry)

    results: List[MonthlyTopTickers] = []
    for key in sorted(by_month):
        top_by_pnl, top_by_ror = _leaders(by_month[key])
        results.append(
            MonthlyTopTickers(
                month_key=key,
                label=month_label(parse_month_key(key)),
                top_by_pnl=top_by_pnl,
                top_by_ror=top_by_ror,
            )
        )
    return results


def calculate_yearly_top_tickers(
    transactions: Iterable[Transaction], chains: ChainsArg = None
) -> List[YearlyTopTickers]:
    """Best ticker by P&L and by RoR for every year with realized trades."""
    by_year: Dict[int, List[AttributionEntry]] = defaultdict(list)
    for entry in closed_attribution_entries(transactions, chains):
        by_year[entry.close_date.year].append(entry)

    results: List[YearlyTopTickers] = []
    for year in sorted(by_year):
        top_by_pnl, top_by_ror = _leaders(by_year[year])
        results.append(YearlyTopTickers(year=year, top_by_pnl=top_by_pnl, top_by_ror=top_by_ror))
    return results


def calculate_top_tickers_yearly_performance(
    transactions: Iterable[Transaction],
    chains: ChainsArg = None,
    limit: int = DEFAULT_TOP_TICKER_LIMIT,
) -> TopTickersYearlyPerformance:
    """
    Year-by-year P&L of the ``limit`` tickers with the highest overall P&L.

    Each chart row lists every leading ticker, with zero for years in which it
    had no realized trades.
    """
    entries = closed_attribution_entries(transactions, chains)
    overall = summarize_ticker_entries(entries)
    ranked = sorted(overall.values(), key=lambda item: item.pnl, reverse=True)
    top_tickers = [item.ticker for item in ranked[:limit]]

    by_year: Dict[int, Dict[str, Decimal]] = {}
    for entry in entries:
        if entry.symbol not in top_tickers:
            continue
        row = by_year.setdefault(
            entry.close_date.year, {ticker: ZERO for ticker in top_tickers}
        )
        row[entry.symbol] += entry.profit_loss

    chart_data = [
        YearlyTickerPoint(year=year, pnl_by_ticker=dict(by_year[year])) for year in sorted(by_year)
    ]
    return TopTickersYearlyPerformance(chart_data=chart_data, top_tickers=top_tickers)


__all__ = [
    "DEFAULT_TOP_TICKER_LIMIT",
    "calculate_monthly_top_tickers",
    "calculate_top_tickers_yearly_performance",
    "calculate_yearly_top_tickers",
]

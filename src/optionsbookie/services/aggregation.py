"""
Period, strategy and ticker rollups.

Realized results are collapsed into :class:`~optionsbookie.services.chains.AttributionEntry`
objects first, so a closed roll chain counts as one trade in the month of its
final close. Strategy statistics work per leg, since every leg carries its own
strategy shape.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Union

from ..core.dates import days_held, days_to_expiry, month_key, month_label, parse_month_key
from ..core.models import StrategyKind, Transaction, TransactionStatus
from ..settings import (
    DEFAULT_ANNUALIZATION_METHOD,
    AnnualizedRoRMethod,
    resolve_annualization_method,
)
from .aggregation_models import (
    MonthlyChartPoint,
    MonthlyPnl,
    MonthSummary,
    PortfolioSummary,
    StrategyPerformance,
    TickerPerformance,
    TradeMetrics,
    YearSummary,
    win_rate,
)
from .chains import AttributionEntry, build_attribution_entries
from .realization import (
    ChainsArg,
    calculate_total_realized_pnl,
    calculate_unrealized_pnl,
    index_chains,
    is_realized,
    is_unrealized,
    should_update_trade_status,
)
from .returns import (
    HUNDRED,
    calculate_annualized_ror,
    calculate_average_ror,
    calculate_portfolio_annualized_ror,
    calculate_portfolio_ror,
    calculate_ror,
)
from .valuation import (
    ZERO,
    calculate_break_even,
    calculate_collateral,
    calculate_total_deployed_capital,
    classify_strategy,
    is_leap,
    recorded_profit_loss,
)


def _mean(values: List[Decimal]) -> Decimal:
    if not values:
        return ZERO
    return sum(values, ZERO) / Decimal(len(values))


def closed_attribution_entries(
    transactions: Iterable[Transaction], chains: ChainsArg = None
) -> List[AttributionEntry]:
    """Attribution entries that carry a close date, in snapshot order."""
    return [entry for entry in build_attribution_entries(transactions, chains) if entry.close_date]


def _entry_days_held(entry: AttributionEntry) -> Decimal:
    return Decimal(days_held(entry.open_date, entry.close_date))


def calculate_monthly_chart_data(
    transactions: Iterable[Transaction], chains: ChainsArg = None
) -> List[MonthlyChartPoint]:
    """Realized P&L, trade count and RoR per effective close month, oldest month first."""
    buckets: Dict[str, Dict[str, Union[Decimal, int]]] = {}
    for entry in closed_attribution_entries(transactions, chains):
        bucket = buckets.setdefault(
            month_key(entry.close_date), {"pnl": ZERO, "trades": 0, "collateral": ZERO}
        )
        bucket["pnl"] += entry.profit_loss
        bucket["trades"] += 1
        bucket["collateral"] += entry.collateral

    points: List[MonthlyChartPoint] = []
    for key in sorted(buckets):
        bucket = buckets[key]
        collateral = bucket["collateral"]
        ror = bucket["pnl"] / collateral * HUNDRED if collateral else ZERO
        points.append(
            MonthlyChartPoint(
                month_key=key,
                label=month_label(parse_month_key(key)),
                pnl=bucket["pnl"],
                trades=bucket["trades"],
                collateral=collateral,
                ror=ror,
            )
        )
    return points


def calculate_chain_aware_monthly_pnl(
    transactions: Iterable[Transaction],
    chains: ChainsArg,
    year: int,
    month: int,
) -> MonthlyPnl:
    """
    Realized totals for ``year``/``month`` (1-12).

    Fees include every leg of the chains closing in the month.
    """
    total_pnl = ZERO
    fees = ZERO
    trades = wins = losses = 0
    for entry in closed_attribution_entries(transactions, chains):
        if (entry.close_date.year, entry.close_date.month) != (year, month):
            continue
        total_pnl += entry.profit_loss
        fees += entry.fees
        trades += 1
        if entry.is_win:
            wins += 1
        elif entry.is_loss:
            losses += 1
    return MonthlyPnl(
        year=year,
        month=month,
        total_pnl=total_pnl,
        total_trades=trades,
        fees=fees,
        winning_trades=wins,
        losing_trades=losses,
    )


def summarize_ticker_entries(entries: Iterable[AttributionEntry]) -> Dict[str, TickerPerformance]:
    """Fold attribution entries into per-ticker totals, keyed by symbol."""
    totals: Dict[str, Dict[str, Union[Decimal, int]]] = {}
    for entry in entries:
        bucket = totals.setdefault(entry.symbol, {"pnl": ZERO, "trades": 0, "collateral": ZERO})
        bucket["pnl"] += entry.profit_loss
        bucket["trades"] += 1
        bucket["collateral"] += entry.collateral
    return {
        ticker: TickerPerformance(
            ticker=ticker,
            pnl=bucket["pnl"],
            trades=bucket["trades"],
            total_collateral=bucket["collateral"],
        )
        for ticker, bucket in totals.items()
    }


def calculate_chain_aware_stock_performance(
    transactions: Iterable[Transaction], chains: ChainsArg = None
) -> Dict[str, TickerPerformance]:
    """Realized P&L, trade count and collateral per ticker, counting closed chains once."""
    return summarize_ticker_entries(build_attribution_entries(transactions, chains))


def calculate_trade_metrics(
    transactions: Iterable[Transaction],
    chains: ChainsArg = None,
    *,
    as_of: Optional[date] = None,
    now: Optional[datetime] = None,
) -> List[TradeMetrics]:
    """Per-leg valuation, returns and holding figures in snapshot order."""
    chains_by_id = index_chains(chains)
    return [
        TradeMetrics(
            transaction_id=txn.id,
            symbol=txn.symbol,
            strategy=classify_strategy(txn),
            status=txn.status,
            chain_id=txn.chain_id,
            profit_loss=recorded_profit_loss(txn),
            collateral=calculate_collateral(txn),
            break_even=calculate_break_even(txn),
            ror=calculate_ror(txn),
            annualized_ror=calculate_annualized_ror(txn),
            days_held=days_held(txn.open_date, txn.close_date, as_of=as_of),
            days_to_expiry=days_to_expiry(txn.expiry_date, as_of=as_of),
            realized=is_realized(txn, chains_by_id),
            is_leap=is_leap(txn),
            needs_status_update=should_update_trade_status(txn, now=now),
        )
        for txn in transactions
    ]


def calculate_strategy_performance(
    transactions: Iterable[Transaction],
    chains: ChainsArg = None,
    *,
    as_of: Optional[date] = None,
) -> List[StrategyPerformance]:
    """Per-strategy statistics sorted by descending average RoR."""
    chains_by_id = index_chains(chains)
    grouped: Dict[StrategyKind, List[Transaction]] = defaultdict(list)
    for txn in transactions:
        grouped[classify_strategy(txn)].append(txn)

    results: List[StrategyPerformance] = []
    for strategy, txns in grouped.items():
        realized = [txn for txn in txns if is_realized(txn, chains_by_id)]
        open_count = sum(
            1
            for txn in txns
            if txn.status in (TransactionStatus.OPEN, TransactionStatus.ROLLED)
            and not is_realized(txn, chains_by_id)
        )
        annualized = [calculate_annualized_ror(txn) for txn in realized]
        wins = sum(1 for txn in realized if recorded_profit_loss(txn) > 0)
        results.append(
            StrategyPerformance(
                strategy=strategy,
                trade_count=len(txns),
                open_count=open_count,
                realized_count=len(realized),
                total_pnl=sum((recorded_profit_loss(txn) for txn in realized), ZERO),
                avg_ror=_mean([calculate_ror(txn) for txn in realized]),
                avg_annualized_ror=_mean([item.value for item in annualized if item.is_ok]),
                win_rate=win_rate(wins, len(realized)),
                avg_days_held=_mean(
                    [
                        Decimal(days_held(txn.open_date, txn.close_date, as_of=as_of))
                        for txn in realized
                    ]
                ),
                avg_collateral=_mean([calculate_collateral(txn) for txn in realized]),
            )
        )
    results.sort(key=lambda item: item.avg_ror, reverse=True)
    return results


def _summarize_month(key: str, entries: List[AttributionEntry]) -> MonthSummary:
    return MonthSummary(
        month_key=key,
        label=parse_month_key(key).strftime("%B %Y"),
        total_pnl=sum((entry.profit_loss for entry in entries), ZERO),
        total_trades=len(entries),
        winning_trades=sum(1 for entry in entries if entry.is_win),
        losing_trades=sum(1 for entry in entries if entry.is_loss),
        total_fees=sum((entry.fees for entry in entries), ZERO),
        average_days_held=_mean([_entry_days_held(entry) for entry in entries]),
    )


def calculate_yearly_summaries(
    transactions: Iterable[Transaction], chains: ChainsArg = None
) -> List[YearSummary]:
    """Per-year realized summaries with a monthly breakdown, newest year first."""
    by_year: Dict[int, List[AttributionEntry]] = defaultdict(list)
    for entry in closed_attribution_entries(transactions, chains):
        by_year[entry.close_date.year].append(entry)

    summaries: List[YearSummary] = []
    for year in sorted(by_year, reverse=True):
        entries = by_year[year]
        by_month: Dict[str, List[AttributionEntry]] = defaultdict(list)
        for entry in entries:
            by_month[month_key(entry.close_date)].append(entry)
        months = [_summarize_month(key, by_month[key]) for key in sorted(by_month, reverse=True)]
        summaries.append(
            YearSummary(
                year=year,
                total_pnl=sum((entry.profit_loss for entry in entries), ZERO),
                total_trades=len(entries),
                winning_trades=sum(1 for entry in entries if entry.is_win),
                losing_trades=sum(1 for entry in entries if entry.is_loss),
                total_fees=sum((entry.fees for entry in entries), ZERO),
                average_days_held=_mean([_entry_days_held(entry) for entry in entries]),
                best_month=max(months, key=lambda item: item.total_pnl, default=None),
                worst_month=min(months, key=lambda item: item.total_pnl, default=None),
                months=months,
            )
        )
    return summaries


def calculate_portfolio_summary(
    transactions: Iterable[Transaction],
    chains: ChainsArg = None,
    *,
    method: Union[AnnualizedRoRMethod, str] = DEFAULT_ANNUALIZATION_METHOD,
) -> PortfolioSummary:
    """Headline realized/unrealized figures and returns for a snapshot."""
    txns = list(transactions)
    chains_by_id = index_chains(chains)
    selected = resolve_annualization_method(method)
    entries = build_attribution_entries(txns, chains_by_id)
    closed = [entry for entry in entries if entry.close_date]
    return PortfolioSummary(
        open_positions=sum(1 for txn in txns if is_unrealized(txn, chains_by_id)),
        closed_positions=sum(1 for txn in txns if is_realized(txn, chains_by_id)),
        realized_pnl=calculate_total_realized_pnl(txns, chains_by_id),
        unrealized_pnl=calculate_unrealized_pnl(txns, chains_by_id),
        total_fees=sum((txn.fees for txn in txns), ZERO),
        win_rate=win_rate(sum(1 for entry in entries if entry.is_win), len(entries)),
        average_days_held=_mean([_entry_days_held(entry) for entry in closed]),
        portfolio_ror=calculate_portfolio_ror(txns, chains_by_id),
        average_ror=calculate_average_ror(txns, chains_by_id),
        annualized_ror=calculate_portfolio_annualized_ror(txns, chains_by_id, method=selected),
        annualization_method=selected,
        total_deployed_capital=calculate_total_deployed_capital(txns),
    )


__all__ = [
    "closed_attribution_entries",
    "calculate_chain_aware_monthly_pnl",
    "calculate_chain_aware_stock_performance",
    "calculate_monthly_chart_data",
    "calculate_portfolio_summary",
    "calculate_strategy_performance",
    "calculate_trade_metrics",
    "calculate_yearly_summaries",
    "summarize_ticker_entries",
]

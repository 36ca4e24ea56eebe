"""
Tickers command for optionsbookie CLI.

Shows realized results per underlying and the leading tickers per period.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from ..services.aggregation import calculate_chain_aware_stock_performance
from ..services.aggregation_models import TickerPerformance, TopTickersYearlyPerformance
from ..services.display import format_currency, format_pnl_currency, format_ror, format_signed_pnl
from ..services.json_serializer import (
    serialize_monthly_top_tickers,
    serialize_stock_performance,
    serialize_top_tickers_yearly,
    serialize_yearly_top_tickers,
)
from ..services.rankings import (
    DEFAULT_TOP_TICKER_LIMIT,
    calculate_monthly_top_tickers,
    calculate_top_tickers_yearly_performance,
    calculate_yearly_top_tickers,
)
from .common import chains_option, json_option, load_snapshot_or_abort, snapshot_argument

PeriodChoice = click.Choice(["month", "year"])
LeaderRow = Tuple[str, Optional[TickerPerformance], Optional[TickerPerformance]]


def _leader_text(item: Optional[TickerPerformance], *, by_ror: bool = False) -> str:
    if item is None:
        return "--"
    value = format_ror(item.ror) if by_ror else format_pnl_currency(item.pnl)
    return f"{item.ticker} ({value})"


def _build_ticker_table(performance: Dict[str, TickerPerformance]) -> Table:
    table = Table(title="Ticker Performance")
    table.add_column("Ticker", style="cyan", no_wrap=True)
    table.add_column("P&L", justify="right")
    table.add_column("Trades", justify="right")
    table.add_column("Collateral", justify="right")
    table.add_column("RoR", justify="right")
    for item in sorted(performance.values(), key=lambda entry: entry.pnl, reverse=True):
        table.add_row(
            item.ticker,
            format_signed_pnl(item.pnl),
            str(item.trades),
            format_currency(item.total_collateral),
            format_ror(item.ror),
        )
    return table


def _build_leaders_table(title: str, rows: List[LeaderRow]) -> Table:
    table = Table(title=title)
    table.add_column("Period", style="cyan", no_wrap=True)
    table.add_column("Top by P&L")
    table.add_column("Top by RoR")
    for label, top_by_pnl, top_by_ror in rows:
        table.add_row(label, _leader_text(top_by_pnl), _leader_text(top_by_ror, by_ror=True))
    return table


def _build_yearly_chart_table(performance: TopTickersYearlyPerformance) -> Table:
    table = Table(title=f"Top {len(performance.top_tickers)} Tickers by Year")
    table.add_column("Year", style="cyan", no_wrap=True)
    for ticker in performance.top_tickers:
        table.add_column(ticker, justify="right")
    for point in performance.chart_data:
        cells = [format_pnl_currency(point.pnl_by_ticker[name]) for name in performance.top_tickers]
        table.add_row(str(point.year), *cells)
    return table


@click.command()
@snapshot_argument
@chains_option
@click.option(
    "--leaders",
    type=PeriodChoice,
    default=None,
    help="Show the top ticker by P&L and by RoR for each month or year",
)
@click.option(
    "--top",
    "top_limit",
    type=click.IntRange(min=1),
    default=None,
    help=f"Show year-by-year P&L for the best N tickers (e.g. {DEFAULT_TOP_TICKER_LIMIT})",
)
@json_option
def tickers(
    snapshot_file: str,
    chains_file: Optional[str],
    leaders: Optional[str],
    top_limit: Optional[int],
    json_output: bool,
) -> None:
    """Display realized performance per ticker."""
    console = Console()
    snapshot = load_snapshot_or_abort(console, snapshot_file, chains_file)
    txns, chains = snapshot.transactions, snapshot.chains

    if leaders == "month":
        monthly_rows = calculate_monthly_top_tickers(txns, chains)
        if json_output:
            console.print_json(data=[serialize_monthly_top_tickers(row) for row in monthly_rows])
            return
        rows = [(row.label, row.top_by_pnl, row.top_by_ror) for row in monthly_rows]
        console.print(_build_leaders_table("Monthly Leaders", rows))
        return

    if leaders == "year":
        yearly_rows = calculate_yearly_top_tickers(txns, chains)
        if json_output:
            console.print_json(data=[serialize_yearly_top_tickers(row) for row in yearly_rows])
            return
        rows = [(str(row.year), row.top_by_pnl, row.top_by_ror) for row in yearly_rows]
        console.print(_build_leaders_table("Yearly Leaders", rows))
        return

    if top_limit is not None:
        performance = calculate_top_tickers_yearly_performance(txns, chains, limit=top_limit)
        if json_output:
            console.print_json(data=serialize_top_tickers_yearly(performance))
            return
        console.print(_build_yearly_chart_table(performance))
        return

    stock_performance = calculate_chain_aware_stock_performance(txns, chains)
    if json_output:
        console.print_json(data=serialize_stock_performance(stock_performance))
        return
    if not stock_performance:
        console.print("[yellow]No realized trades found.[/yellow]")
        return
    console.print(_build_ticker_table(stock_performance))

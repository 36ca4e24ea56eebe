"""
Trades command for optionsbookie CLI.

Lists every leg of a snapshot with its derived P&L, collateral and returns.
"""

from __future__ import annotations

from typing import List, Optional

import click
from rich.console import Console
from rich.table import Table

from ..services.aggregation import calculate_trade_metrics
from ..services.aggregation_models import TradeMetrics
from ..services.display import (
    format_annualized,
    format_currency,
    format_ror,
    format_signed_pnl,
)
from ..services.json_serializer import serialize_trade_metrics
from .common import (
    DateInput,
    as_of_option,
    chains_option,
    json_option,
    load_snapshot_or_abort,
    parse_date,
    snapshot_argument,
)


def _build_trades_table(rows: List[TradeMetrics]) -> Table:
    """Build a rich.Table listing per-trade metrics."""
    table = Table(title="Trades")
    table.add_column("Symbol", style="cyan", no_wrap=True)
    table.add_column("Strategy", style="magenta", no_wrap=True)
    table.add_column("Status", style="yellow", no_wrap=True)
    table.add_column("Chain", no_wrap=True)
    table.add_column("P&L", justify="right", no_wrap=True)
    table.add_column("Collateral", justify="right", no_wrap=True)
    table.add_column("Break-even", justify="right", no_wrap=True)
    table.add_column("RoR", justify="right", no_wrap=True)
    table.add_column("Annualized", justify="right", no_wrap=True)
    table.add_column("Held", justify="right", no_wrap=True)
    table.add_column("DTE", justify="right", no_wrap=True)

    for row in rows:
        status = row.status.value
        if row.needs_status_update:
            status = f"{status} [red](expired)[/red]"
        symbol = f"{row.symbol} [dim]LEAP[/dim]" if row.is_leap else row.symbol
        table.add_row(
            symbol,
            row.strategy.value,
            status,
            row.chain_id or "--",
            format_signed_pnl(row.profit_loss),
            format_currency(row.collateral),
            format_currency(row.break_even),
            format_ror(row.ror),
            format_annualized(row.annualized_ror),
            str(row.days_held),
            str(row.days_to_expiry),
        )
    return table


@click.command()
@snapshot_argument
@chains_option
@as_of_option
@click.option("--open-only", is_flag=True, help="Only display legs that are not yet realized")
@click.option("--ticker", help="Filter by ticker symbol")
@json_option
def trades(
    snapshot_file: str,
    chains_file: Optional[str],
    as_of: DateInput,
    open_only: bool,
    ticker: Optional[str],
    json_output: bool,
) -> None:
    """List trades with P&L, collateral and return-on-risk."""
    console = Console()
    snapshot = load_snapshot_or_abort(console, snapshot_file, chains_file)

    transactions = snapshot.transactions
    if ticker:
        wanted = ticker.strip().upper()
        transactions = [txn for txn in transactions if txn.symbol == wanted]

    rows = calculate_trade_metrics(transactions, snapshot.chains, as_of=parse_date(as_of))
    if open_only:
        rows = [row for row in rows if not row.realized]

    if json_output:
        console.print_json(data=[serialize_trade_metrics(row) for row in rows])
        return
    if not rows:
        console.print("[yellow]No transactions found matching the specified filters.[/yellow]")
        return
    console.print(_build_trades_table(rows))

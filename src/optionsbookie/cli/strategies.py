"""
Strategies command for optionsbookie CLI.

Compares the strategy shapes in a snapshot by their realized returns.
"""

from __future__ import annotations

from typing import List, Optional

import click
from rich.console import Console
from rich.table import Table

from ..services.aggregation import calculate_strategy_performance
from ..services.aggregation_models import StrategyPerformance
from ..services.display import format_currency, format_days, format_ror, format_signed_pnl
from ..services.json_serializer import serialize_strategy_performance
from .common import (
    DateInput,
    as_of_option,
    chains_option,
    json_option,
    load_snapshot_or_abort,
    parse_date,
    snapshot_argument,
)


def _build_strategy_table(rows: List[StrategyPerformance]) -> Table:
    table = Table(title="Strategy Performance")
    table.add_column("Strategy", style="cyan", no_wrap=True)
    table.add_column("Trades", justify="right")
    table.add_column("Open", justify="right")
    table.add_column("Realized", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Avg RoR", justify="right")
    table.add_column("Avg Annualized", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("Avg Days", justify="right")
    table.add_column("Avg Collateral", justify="right")
    for row in rows:
        table.add_row(
            row.strategy.value,
            str(row.trade_count),
            str(row.open_count),
            str(row.realized_count),
            format_signed_pnl(row.total_pnl),
            format_ror(row.avg_ror),
            format_ror(row.avg_annualized_ror),
            format_ror(row.win_rate),
            format_days(row.avg_days_held),
            format_currency(row.avg_collateral),
        )
    return table


@click.command()
@snapshot_argument
@chains_option
@as_of_option
@json_option
def strategies(
    snapshot_file: str,
    chains_file: Optional[str],
    as_of: DateInput,
    json_output: bool,
) -> None:
    """Display per-strategy statistics ranked by average RoR."""
    console = Console()
    snapshot = load_snapshot_or_abort(console, snapshot_file, chains_file)
    rows = calculate_strategy_performance(
        snapshot.transactions, snapshot.chains, as_of=parse_date(as_of)
    )

    if json_output:
        console.print_json(data=[serialize_strategy_performance(row) for row in rows])
        return
    if not rows:
        console.print("[yellow]No transactions found.[/yellow]")
        return
    console.print(_build_strategy_table(rows))

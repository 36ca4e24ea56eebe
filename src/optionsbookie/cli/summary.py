"""
Summary and monthly commands for optionsbookie CLI.

``summary`` shows the headline portfolio figures and per-year results;
``monthly`` shows realized results per close month.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..services.aggregation import (
    calculate_chain_aware_monthly_pnl,
    calculate_monthly_chart_data,
    calculate_portfolio_summary,
    calculate_yearly_summaries,
)
from ..services.aggregation_models import MonthlyChartPoint, PortfolioSummary, YearSummary
from ..services.display import (
    format_currency,
    format_days,
    format_pnl_currency,
    format_ror,
    format_signed_pnl,
)
from ..services.json_serializer import (
    serialize_active_months_return,
    serialize_monthly_chart_point,
    serialize_monthly_pnl,
    serialize_portfolio_summary,
    serialize_year_summary,
)
from ..services.returns import calculate_yearly_annualized_ror_with_active_months
from .common import (
    chains_option,
    json_option,
    load_snapshot_or_abort,
    method_option,
    resolve_method,
    snapshot_argument,
)


def _build_summary_panel(summary: PortfolioSummary) -> Panel:
    lines = [
        f"Realized P&L: {format_signed_pnl(summary.realized_pnl)}",
        f"Unrealized P&L: {format_signed_pnl(summary.unrealized_pnl)}",
        f"Total fees: {format_currency(summary.total_fees)}",
        f"Open positions: {summary.open_positions}    Closed: {summary.closed_positions}",
        f"Win rate: {format_ror(summary.win_rate)}",
        f"Average days held: {format_days(summary.average_days_held)}",
        f"Portfolio RoR: {format_ror(summary.portfolio_ror)}"
        f"    Average RoR: {format_ror(summary.average_ror)}",
        f"Annualized RoR ({summary.annualization_method.value}): "
        f"{format_ror(summary.annualized_ror)}",
        f"Deployed capital: {format_currency(summary.total_deployed_capital)}",
    ]
    return Panel("\n".join(lines), title="Portfolio Summary", expand=False)


def _build_yearly_table(summaries: List[YearSummary]) -> Table:
    table = Table(title="Yearly Performance")
    table.add_column("Year", style="cyan", no_wrap=True)
    table.add_column("P&L", justify="right")
    table.add_column("Trades", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("Fees", justify="right")
    table.add_column("Avg Days", justify="right")
    table.add_column("Best Month")
    table.add_column("Worst Month")
    for summary in summaries:
        best = summary.best_month
        worst = summary.worst_month
        table.add_row(
            str(summary.year),
            format_signed_pnl(summary.total_pnl),
            str(summary.total_trades),
            format_ror(summary.win_rate),
            format_currency(summary.total_fees),
            format_days(summary.average_days_held),
            f"{best.label}: {format_pnl_currency(best.total_pnl)}" if best else "--",
            f"{worst.label}: {format_pnl_currency(worst.total_pnl)}" if worst else "--",
        )
    return table


def _build_monthly_table(points: List[MonthlyChartPoint]) -> Table:
    table = Table(title="Monthly Realized P&L")
    table.add_column("Month", style="cyan", no_wrap=True)
    table.add_column("P&L", justify="right")
    table.add_column("Trades", justify="right")
    table.add_column("Collateral", justify="right")
    table.add_column("RoR", justify="right")
    for point in points:
        table.add_row(
            point.label,
            format_signed_pnl(point.pnl),
            str(point.trades),
            format_currency(point.collateral),
            format_ror(point.ror),
        )
    return table


@click.command()
@snapshot_argument
@chains_option
@method_option
@click.option(
    "--year",
    type=int,
    help="Annualize this year's RoR over its active months (no current-year default)",
)
@json_option
def summary(
    snapshot_file: str,
    chains_file: Optional[str],
    method: Optional[str],
    year: Optional[int],
    json_output: bool,
) -> None:
    """Display headline portfolio figures and yearly results."""
    console = Console()
    snapshot = load_snapshot_or_abort(console, snapshot_file, chains_file)
    selected = resolve_method(method)

    portfolio = calculate_portfolio_summary(snapshot.transactions, snapshot.chains, method=selected)
    yearly = calculate_yearly_summaries(snapshot.transactions, snapshot.chains)
    active = None
    if year is not None:
        active = calculate_yearly_annualized_ror_with_active_months(
            snapshot.transactions, snapshot.chains, year
        )

    if json_output:
        payload = {
            "portfolio": serialize_portfolio_summary(portfolio),
            "years": [serialize_year_summary(item) for item in yearly],
        }
        if active is not None:
            payload["active_months"] = {"year": year, **serialize_active_months_return(active)}
        console.print_json(data=payload)
        return

    console.print(_build_summary_panel(portfolio))
    if active is not None:
        console.print(
            f"[cyan]{year}: base RoR {format_ror(active.base_ror)} over "
            f"{active.active_trading_days} active days -> "
            f"{format_ror(active.annualized_ror)} annualized[/cyan]"
        )
    if yearly:
        console.print(_build_yearly_table(yearly))
    else:
        console.print("[yellow]No realized trades with close dates yet.[/yellow]")


@click.command()
@snapshot_argument
@chains_option
@click.option(
    "--month",
    "month_input",
    type=click.DateTime(formats=["%Y-%m"]),
    help="Show chain-aware totals for a single month (YYYY-MM)",
)
@json_option
def monthly(
    snapshot_file: str,
    chains_file: Optional[str],
    month_input: Optional[datetime],
    json_output: bool,
) -> None:
    """Display realized P&L grouped by effective close month."""
    console = Console()
    snapshot = load_snapshot_or_abort(console, snapshot_file, chains_file)

    if month_input is not None:
        result = calculate_chain_aware_monthly_pnl(
            snapshot.transactions, snapshot.chains, month_input.year, month_input.month
        )
        if json_output:
            console.print_json(data=serialize_monthly_pnl(result))
            return
        console.print(
            Panel(
                "\n".join(
                    [
                        f"P&L: {format_signed_pnl(result.total_pnl)}",
                        f"Trades: {result.total_trades}",
                        f"Fees: {format_currency(result.fees)}",
                        f"Win rate: {format_ror(result.win_rate)}",
                    ]
                ),
                title=month_input.strftime("%B %Y"),
                expand=False,
            )
        )
        return

    points = calculate_monthly_chart_data(snapshot.transactions, snapshot.chains)
    if json_output:
        console.print_json(data=[serialize_monthly_chart_point(point) for point in points])
        return
    if not points:
        console.print("[yellow]No realized trades with close dates yet.[/yellow]")
        return
    console.print(_build_monthly_table(points))

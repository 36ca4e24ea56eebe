"""Shared options and loading helpers for optionsbookie commands."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import click
from rich.console import Console

from ..core.parser import PortfolioSnapshot, SnapshotLoadError, load_snapshot
from ..settings import AnnualizedRoRMethod, load_settings, resolve_annualization_method

DateInput = Optional[datetime]

MethodChoice = click.Choice([method.value for method in AnnualizedRoRMethod], case_sensitive=False)

snapshot_argument = click.argument("snapshot_file", type=click.Path(exists=True, dir_okay=False))
chains_option = click.option(
    "--chains",
    "chains_file",
    type=click.Path(exists=True, dir_okay=False),
    help="CSV of roll chains to use with a transactions CSV",
)
as_of_option = click.option(
    "--as-of",
    "as_of",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Treat this date as today (YYYY-MM-DD)",
)
json_option = click.option(
    "--json-output",
    "json_output",
    is_flag=True,
    default=False,
    help="Output JSON instead of table",
)
method_option = click.option(
    "--method",
    type=MethodChoice,
    default=None,
    help="Annualization method (defaults to OPTIONSBOOKIE_ANN_ROR_TYPE or time-period)",
)


def parse_date(value: DateInput) -> Optional[date]:
    """Convert click DateTime to date object."""
    if value is None:
        return None
    return value.date()


def resolve_method(method: Optional[str]) -> AnnualizedRoRMethod:
    """Use the command-line choice when given, otherwise the configured default."""
    if method:
        return resolve_annualization_method(method)
    return load_settings().annualization_method


def load_snapshot_or_abort(
    console: Console, snapshot_file: str, chains_file: Optional[str] = None
) -> PortfolioSnapshot:
    """Load a snapshot, reporting validation problems and aborting on failure."""
    try:
        return load_snapshot(snapshot_file, chains_file=chains_file)
    except (SnapshotLoadError, OSError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise click.Abort() from exc

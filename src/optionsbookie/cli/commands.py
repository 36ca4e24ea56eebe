"""
Command-line interface for optionsbookie.

Provides the CLI command group and registers individual subcommands.
"""

from __future__ import annotations

import logging

import click

from .. import __version__
from .strategies import strategies
from .summary import monthly, summary
from .tickers import tickers
from .trades import trades


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log calculation details to stderr")
def main(verbose: bool):
    """optionsbookie - Options trade performance and return-on-risk reports."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


# Register CLI subcommands
main.add_command(trades)
main.add_command(summary)
main.add_command(monthly)
main.add_command(strategies)
main.add_command(tickers)


if __name__ == "__main__":
    main()

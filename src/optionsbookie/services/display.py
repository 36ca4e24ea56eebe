"""
Display formatting services for the optionsbookie CLI and API.

This module provides formatting functions for money, returns and contract
details shown in tables and summaries.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Tuple

from .returns import AnnualizedReturn, ReturnStatus

_CENT = Decimal("0.01")
_WHOLE = Decimal("1")


def format_currency(value: Optional[Decimal]) -> str:
    """Format a decimal value as currency."""
    if value is None:
        return "--"
    quantized = value.quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    quantized = abs(quantized)
    return f"{sign}${quantized:,.2f}"


def format_pnl_currency(value: Decimal) -> str:
    """Format P&L rounded to whole dollars, e.g. ``$1,235`` or ``-$1,235``."""
    rounded = value.quantize(_WHOLE, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.0f}"


def format_pnl_with_arrow(value: Decimal) -> Tuple[str, bool]:
    """Return the unsigned whole-dollar amount and whether the value is non-negative."""
    return format_pnl_currency(abs(value)), value >= 0


def format_signed_pnl(value: Decimal) -> str:
    """Rich markup for a P&L figure: green arrow up, red arrow down."""
    text, is_positive = format_pnl_with_arrow(value)
    if value == 0:
        return text
    return f"[green]▲ {text}[/green]" if is_positive else f"[red]▼ {text}[/red]"


def format_ror(value: Optional[Decimal]) -> str:
    """Format a return already expressed in percent (``1.6667`` -> ``1.67%``)."""
    if value is None or not value.is_finite():
        return "--"
    return f"{value.quantize(_CENT, rounding=ROUND_HALF_UP):,.2f}%"


def format_annualized(result: AnnualizedReturn) -> str:
    """Render a per-trade annualized return, keeping invalid and open trades distinct."""
    if result.status is ReturnStatus.INVALID:
        return "invalid"
    if result.status is ReturnStatus.NOT_APPLICABLE:
        return "--"
    return format_ror(result.value)


def format_days(value: Decimal) -> str:
    """Average holding period rounded to whole days."""
    return str(value.quantize(_WHOLE, rounding=ROUND_HALF_UP))


def format_strike(value: Decimal) -> str:
    """Strike price without trailing zeros (``150.00`` -> ``150``, ``152.50`` -> ``152.5``)."""
    text = f"{value.quantize(_CENT, rounding=ROUND_HALF_UP):.2f}"
    return text.rstrip("0").rstrip(".")


__all__ = [
    "format_annualized",
    "format_currency",
    "format_days",
    "format_pnl_currency",
    "format_pnl_with_arrow",
    "format_ror",
    "format_signed_pnl",
    "format_strike",
]

"""JSON serialization utilities for performance reports."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from ..core.models import Transaction
from .aggregation_models import (
    MonthlyChartPoint,
    MonthlyPnl,
    MonthlyTopTickers,
    MonthSummary,
    PortfolioSummary,
    StrategyPerformance,
    TickerPerformance,
    TopTickersYearlyPerformance,
    TradeMetrics,
    YearlyTopTickers,
    YearSummary,
)
from .returns import ActiveMonthsReturn, AnnualizedReturn


def serialize_decimal(value: Any) -> Any:
    """Serialize Decimal values to JSON-compatible format."""
    if isinstance(value, Decimal):
        normalized = value.normalize()
        return format(normalized, "f")
    return value


def _decimal_to_string(value: Decimal) -> str:
    """Convert Decimal to string with 2 decimal places."""
    return format(value.quantize(Decimal("0.01")), "f")


def serialize_annualized(result: AnnualizedReturn) -> Dict[str, Any]:
    """Keep the result status next to the value; invalid values serialize as ``None``."""
    value: Optional[str] = None
    if result.value.is_finite():
        value = _decimal_to_string(result.value)
    return {"status": result.status.value, "value": value}


def serialize_transaction(txn: Transaction) -> Dict[str, Any]:
    """Serialize a transaction using its field names."""
    return txn.model_dump(mode="json")


def serialize_trade_metrics(metrics: TradeMetrics) -> Dict[str, Any]:
    return {
        "transaction_id": metrics.transaction_id,
        "symbol": metrics.symbol,
        "strategy": metrics.strategy.value,
        "status": metrics.status.value,
        "chain_id": metrics.chain_id,
        "profit_loss": _decimal_to_string(metrics.profit_loss),
        "collateral": _decimal_to_string(metrics.collateral),
        "break_even": serialize_decimal(metrics.break_even),
        "ror": _decimal_to_string(metrics.ror),
        "annualized_ror": serialize_annualized(metrics.annualized_ror),
        "days_held": metrics.days_held,
        "days_to_expiry": metrics.days_to_expiry,
        "realized": metrics.realized,
        "is_leap": metrics.is_leap,
        "needs_status_update": metrics.needs_status_update,
    }


def serialize_monthly_chart_point(point: MonthlyChartPoint) -> Dict[str, Any]:
    return {
        "month_key": point.month_key,
        "month": point.label,
        "pnl": _decimal_to_string(point.pnl),
        "trades": point.trades,
        "collateral": _decimal_to_string(point.collateral),
        "ror": _decimal_to_string(point.ror),
    }


def serialize_monthly_pnl(monthly: MonthlyPnl) -> Dict[str, Any]:
    return {
        "year": monthly.year,
        "month": monthly.month,
        "total_pnl": _decimal_to_string(monthly.total_pnl),
        "total_trades": monthly.total_trades,
        "fees": _decimal_to_string(monthly.fees),
        "winning_trades": monthly.winning_trades,
        "losing_trades": monthly.losing_trades,
        "win_rate": _decimal_to_string(monthly.win_rate),
    }


def serialize_ticker_performance(
    performance: Optional[TickerPerformance],
) -> Optional[Dict[str, Any]]:
    if performance is None:
        return None
    return {
        "ticker": performance.ticker,
        "pnl": _decimal_to_string(performance.pnl),
        "trades": performance.trades,
        "total_collateral": _decimal_to_string(performance.total_collateral),
        "ror": _decimal_to_string(performance.ror),
    }


def serialize_stock_performance(
    performance: Mapping[str, TickerPerformance],
) -> List[Dict[str, Any]]:
    """Serialize per-ticker results, best P&L first."""
    ranked = sorted(performance.values(), key=lambda item: item.pnl, reverse=True)
    return [serialize_ticker_performance(item) for item in ranked]


def serialize_strategy_performance(item: StrategyPerformance) -> Dict[str, Any]:
    return {
        "strategy": item.strategy.value,
        "trade_count": item.trade_count,
        "open_count": item.open_count,
        "realized_count": item.realized_count,
        "total_pnl": _decimal_to_string(item.total_pnl),
        "avg_ror": _decimal_to_string(item.avg_ror),
        "avg_annualized_ror": _decimal_to_string(item.avg_annualized_ror),
        "win_rate": _decimal_to_string(item.win_rate),
        "avg_days_held": _decimal_to_string(item.avg_days_held),
        "avg_collateral": _decimal_to_string(item.avg_collateral),
    }


def serialize_monthly_top_tickers(item: MonthlyTopTickers) -> Dict[str, Any]:
    return {
        "month_key": item.month_key,
        "month": item.label,
        "top_by_pnl": serialize_ticker_performance(item.top_by_pnl),
        "top_by_ror": serialize_ticker_performance(item.top_by_ror),
    }


def serialize_yearly_top_tickers(item: YearlyTopTickers) -> Dict[str, Any]:
    return {
        "year": item.year,
        "top_by_pnl": serialize_ticker_performance(item.top_by_pnl),
        "top_by_ror": serialize_ticker_performance(item.top_by_ror),
    }


def serialize_top_tickers_yearly(performance: TopTickersYearlyPerformance) -> Dict[str, Any]:
    return {
        "top_tickers": list(performance.top_tickers),
        "chart_data": [
            {
                "year": point.year,
                "pnl_by_ticker": {
                    ticker: _decimal_to_string(pnl) for ticker, pnl in point.pnl_by_ticker.items()
                },
            }
            for point in performance.chart_data
        ],
    }


def _serialize_month_summary(month: Optional[MonthSummary]) -> Optional[Dict[str, Any]]:
    if month is None:
        return None
    return {
        "month_key": month.month_key,
        "month": month.label,
        "total_pnl": _decimal_to_string(month.total_pnl),
        "total_trades": month.total_trades,
        "winning_trades": month.winning_trades,
        "losing_trades": month.losing_trades,
        "win_rate": _decimal_to_string(month.win_rate),
        "total_fees": _decimal_to_string(month.total_fees),
        "average_days_held": _decimal_to_string(month.average_days_held),
    }


def serialize_year_summary(summary: YearSummary) -> Dict[str, Any]:
    return {
        "year": summary.year,
        "total_pnl": _decimal_to_string(summary.total_pnl),
        "total_trades": summary.total_trades,
        "winning_trades": summary.winning_trades,
        "losing_trades": summary.losing_trades,
        "win_rate": _decimal_to_string(summary.win_rate),
        "total_fees": _decimal_to_string(summary.total_fees),
        "average_days_held": _decimal_to_string(summary.average_days_held),
        "best_month": _serialize_month_summary(summary.best_month),
        "worst_month": _serialize_month_summary(summary.worst_month),
        "months": [_serialize_month_summary(month) for month in summary.months],
    }


def serialize_active_months_return(result: ActiveMonthsReturn) -> Dict[str, Any]:
    return {
        "annualized_ror": _decimal_to_string(result.annualized_ror),
        "active_trading_days": result.active_trading_days,
        "base_ror": _decimal_to_string(result.base_ror),
    }


def serialize_portfolio_summary(summary: PortfolioSummary) -> Dict[str, Any]:
    """Serialize a PortfolioSummary object to JSON-friendly structure."""
    return {
        "open_positions": summary.open_positions,
        "closed_positions": summary.closed_positions,
        "realized_pnl": _decimal_to_string(summary.realized_pnl),
        "unrealized_pnl": _decimal_to_string(summary.unrealized_pnl),
        "total_fees": _decimal_to_string(summary.total_fees),
        "win_rate": _decimal_to_string(summary.win_rate),
        "average_days_held": _decimal_to_string(summary.average_days_held),
        "portfolio_ror": _decimal_to_string(summary.portfolio_ror),
        "average_ror": _decimal_to_string(summary.average_ror),
        "annualized_ror": _decimal_to_string(summary.annualized_ror),
        "annualization_method": summary.annualization_method.value,
        "total_deployed_capital": _decimal_to_string(summary.total_deployed_capital),
    }

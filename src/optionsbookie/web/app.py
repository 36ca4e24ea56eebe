"""FastAPI application factory for the optionsbookie analytics API."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Literal, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from .. import __version__
from ..core.models import Chain, Transaction
from ..services.aggregation import (
    calculate_chain_aware_monthly_pnl,
    calculate_chain_aware_stock_performance,
    calculate_monthly_chart_data,
    calculate_portfolio_summary,
    calculate_strategy_performance,
    calculate_trade_metrics,
    calculate_yearly_summaries,
)
from ..services.json_serializer import (
    serialize_active_months_return,
    serialize_monthly_chart_point,
    serialize_monthly_pnl,
    serialize_monthly_top_tickers,
    serialize_portfolio_summary,
    serialize_stock_performance,
    serialize_strategy_performance,
    serialize_top_tickers_yearly,
    serialize_trade_metrics,
    serialize_year_summary,
    serialize_yearly_top_tickers,
)
from ..services.rankings import (
    DEFAULT_TOP_TICKER_LIMIT,
    calculate_monthly_top_tickers,
    calculate_top_tickers_yearly_performance,
    calculate_yearly_top_tickers,
)
from ..services.returns import calculate_yearly_annualized_ror_with_active_months
from ..settings import AnnualizedRoRMethod, EngineSettings
from .dependencies import get_settings

LeaderPeriod = Literal["month", "year"]


class SnapshotPayload(BaseModel):
    """Request body: the transactions and chains to analyze."""

    transactions: List[Transaction] = Field(default_factory=list)
    chains: List[Chain] = Field(default_factory=list)


def _select_method(
    method: Optional[AnnualizedRoRMethod], settings: EngineSettings
) -> AnnualizedRoRMethod:
    return method or settings.annualization_method


def create_app() -> FastAPI:
    """Construct and return the FastAPI application."""
    app = FastAPI(title="optionsbookie analytics", version=__version__)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/settings", tags=["api"])
    async def settings_api(settings: EngineSettings = Depends(get_settings)) -> dict[str, str]:
        return {"annualization_method": settings.annualization_method.value}

    @app.post("/api/analytics/trades", tags=["api"])
    async def trades_api(
        payload: SnapshotPayload,
        as_of: Optional[date] = Query(default=None),
    ) -> List[Dict[str, Any]]:
        """Per-leg P&L, collateral and returns."""
        rows = calculate_trade_metrics(payload.transactions, payload.chains, as_of=as_of)
        return [serialize_trade_metrics(row) for row in rows]

    @app.post("/api/analytics/summary", tags=["api"])
    async def summary_api(
        payload: SnapshotPayload,
        method: Optional[AnnualizedRoRMethod] = Query(default=None),
        year: Optional[int] = Query(
            default=None,
            description="Active-months RoR year; omitted means all-time, not the current year",
        ),
        settings: EngineSettings = Depends(get_settings),
    ) -> Dict[str, Any]:
        """Headline portfolio figures plus yearly summaries."""
        selected = _select_method(method, settings)
        portfolio = calculate_portfolio_summary(
            payload.transactions, payload.chains, method=selected
        )
        active = calculate_yearly_annualized_ror_with_active_months(
            payload.transactions, payload.chains, year
        )
        return {
            "portfolio": serialize_portfolio_summary(portfolio),
            "active_months": {"year": year, **serialize_active_months_return(active)},
            "years": [
                serialize_year_summary(item)
                for item in calculate_yearly_summaries(payload.transactions, payload.chains)
            ],
        }

    @app.post("/api/analytics/monthly", tags=["api"])
    async def monthly_api(
        payload: SnapshotPayload,
        year: Optional[int] = Query(default=None),
        month: Optional[int] = Query(default=None, ge=1, le=12),
    ) -> Any:
        """Monthly chart series, or chain-aware totals for one month."""
        if (year is None) != (month is None):
            raise HTTPException(status_code=400, detail="year and month must be given together")
        if year is not None and month is not None:
            result = calculate_chain_aware_monthly_pnl(
                payload.transactions, payload.chains, year, month
            )
            return serialize_monthly_pnl(result)
        points = calculate_monthly_chart_data(payload.transactions, payload.chains)
        return [serialize_monthly_chart_point(point) for point in points]

    @app.post("/api/analytics/strategies", tags=["api"])
    async def strategies_api(
        payload: SnapshotPayload,
        as_of: Optional[date] = Query(default=None),
    ) -> List[Dict[str, Any]]:
        """Per-strategy statistics, best average RoR first."""
        rows = calculate_strategy_performance(payload.transactions, payload.chains, as_of=as_of)
        return [serialize_strategy_performance(row) for row in rows]

    @app.post("/api/analytics/tickers", tags=["api"])
    async def tickers_api(
        payload: SnapshotPayload,
        leaders: Optional[LeaderPeriod] = Query(default=None),
        top: int = Query(default=DEFAULT_TOP_TICKER_LIMIT, ge=1),
    ) -> Dict[str, Any]:
        """Per-ticker results, leaders per period and the top tickers by year."""
        txns, chains = payload.transactions, payload.chains
        response: Dict[str, Any] = {
            "tickers": serialize_stock_performance(
                calculate_chain_aware_stock_performance(txns, chains)
            ),
            "top_tickers_yearly": serialize_top_tickers_yearly(
                calculate_top_tickers_yearly_performance(txns, chains, limit=top)
            ),
        }
        if leaders == "month":
            response["leaders"] = [
                serialize_monthly_top_tickers(row)
                for row in calculate_monthly_top_tickers(txns, chains)
            ]
        elif leaders == "year":
            response["leaders"] = [
                serialize_yearly_top_tickers(row)
                for row in calculate_yearly_top_tickers(txns, chains)
            ]
        return response

    return app

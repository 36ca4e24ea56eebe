"""
optionsbookie - Options trade performance analysis.

A Python package for computing P&L, capital-at-risk and return-on-risk for
option trades, including roll chains, and rolling them up into reports.
"""

__version__ = "0.1.0"

from .core.models import (
    Chain,
    ChainStatus,
    Direction,
    OptionKind,
    StrategyKind,
    Transaction,
    TransactionStatus,
)
from .core.parser import PortfolioSnapshot, SnapshotLoadError, load_snapshot
from .services.aggregation import calculate_portfolio_summary
from .services.returns import (
    AnnualizedReturn,
    calculate_annualized_ror,
    calculate_portfolio_annualized_ror,
    calculate_ror,
)
from .services.valuation import calculate_collateral, calculate_profit_loss
from .settings import AnnualizedRoRMethod, EngineSettings, load_settings

__all__ = [
    "AnnualizedReturn",
    "AnnualizedRoRMethod",
    "Chain",
    "ChainStatus",
    "Direction",
    "EngineSettings",
    "OptionKind",
    "PortfolioSnapshot",
    "SnapshotLoadError",
    "StrategyKind",
    "Transaction",
    "TransactionStatus",
    "calculate_annualized_ror",
    "calculate_collateral",
    "calculate_portfolio_annualized_ror",
    "calculate_portfolio_summary",
    "calculate_profit_loss",
    "calculate_ror",
    "load_settings",
    "load_snapshot",
]

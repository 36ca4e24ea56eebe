"""
Core data models for options trade performance analysis.

This module defines the Pydantic models for option transactions and roll
chains, plus the closed enumerations used to classify them. Models are frozen:
the engine treats every snapshot it receives as read-only.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .dates import parse_local_date


class _LabelEnum(str, Enum):
    """String enum whose members can be looked up case-insensitively."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None

    def __str__(self) -> str:
        return self.value


class OptionKind(_LabelEnum):
    CALL = "Call"
    PUT = "Put"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str) and value.strip().upper() in {"C", "P"}:
            return cls.CALL if value.strip().upper() == "C" else cls.PUT
        return super()._missing_(value)


class Direction(_LabelEnum):
    BUY = "Buy"
    SELL = "Sell"


class TransactionStatus(_LabelEnum):
    OPEN = "Open"
    CLOSED = "Closed"
    EXPIRED = "Expired"
    ASSIGNED = "Assigned"
    ROLLED = "Rolled"


class ChainStatus(_LabelEnum):
    ACTIVE = "Active"
    CLOSED = "Closed"

    @classmethod
    def _missing_(cls, value):
        # Older exports label running chains "Open".
        if isinstance(value, str) and value.strip().lower() == "open":
            return cls.ACTIVE
        return super()._missing_(value)


class StrategyKind(_LabelEnum):
    CASH_SECURED_PUT = "Cash-Secured Put"
    COVERED_CALL = "Covered Call"
    LONG_CALL = "Long Call"
    LONG_PUT = "Long Put"
    OTHER = "Other"


TERMINAL_STATUSES = frozenset(
    {TransactionStatus.CLOSED, TransactionStatus.EXPIRED, TransactionStatus.ASSIGNED}
)

_ENUM_FIELDS = {
    "option_kind": OptionKind,
    "direction": Direction,
    "status": TransactionStatus,
}


def _coerce_date(value, info: ValidationInfo):
    if value is None:
        return None
    parsed = parse_local_date(value)
    if parsed is None:
        raise ValueError(f"{info.field_name} must be a YYYY-MM-DD date, got {value!r}")
    return parsed


class Transaction(BaseModel):
    """A single option leg with its realized or marked outcome."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Transaction identifier")
    symbol: str = Field(..., alias="stockSymbol", description="Underlying symbol (e.g. 'AAPL')")
    open_date: date = Field(..., alias="tradeOpenDate", description="Trade open date")
    expiry_date: date = Field(..., alias="expiryDate", description="Option expiration date")
    option_kind: OptionKind = Field(..., alias="callOrPut")
    direction: Direction = Field(..., alias="buyOrSell")
    strike: Decimal = Field(..., alias="strikePrice", ge=0)
    premium: Decimal = Field(..., ge=0, description="Premium per share")
    contracts: int = Field(..., alias="numberOfContracts", ge=0)
    fees: Decimal = Field(Decimal("0"), ge=0)
    exit_price: Optional[Decimal] = Field(None, alias="exitPrice")
    close_date: Optional[date] = Field(None, alias="closeDate")
    profit_loss: Optional[Decimal] = Field(None, alias="profitLoss")
    collateral_amount: Optional[Decimal] = Field(None, alias="collateralAmount")
    status: TransactionStatus = TransactionStatus.OPEN
    chain_id: Optional[str] = Field(None, alias="chainId")
    portfolio_id: Optional[str] = Field(None, alias="portfolioId")

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v):
        symbol = v.strip().upper()
        if not symbol:
            raise ValueError("symbol must not be blank")
        return symbol

    @field_validator("option_kind", "direction", "status", mode="before")
    @classmethod
    def coerce_labels(cls, v, info: ValidationInfo):
        if isinstance(v, str):
            return _ENUM_FIELDS[info.field_name](v)
        return v

    @field_validator("open_date", "expiry_date", mode="before")
    @classmethod
    def validate_required_dates(cls, v, info: ValidationInfo):
        return _coerce_date(v, info)

    @field_validator("close_date", mode="before")
    @classmethod
    def validate_close_date(cls, v, info: ValidationInfo):
        if v == "":
            return None
        return _coerce_date(v, info)

    @field_validator("chain_id", "portfolio_id", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_short(self) -> bool:
        """True for premium-selling legs."""
        return self.direction is Direction.SELL

    @property
    def is_terminal(self) -> bool:
        """True when the leg reached Closed, Expired or Assigned."""
        return self.status in TERMINAL_STATUSES

    @property
    def position_spec(self) -> str:
        """Compact description of the contract, e.g. ``AAPL $150 Put 2025-10-17``."""
        strike = format(self.strike.normalize(), "f")
        return f"{self.symbol} ${strike} {self.option_kind.value} {self.expiry_date.isoformat()}"


class Chain(BaseModel):
    """A roll chain grouping successive legs of one position."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Chain identifier")
    symbol: str = Field(..., description="Underlying symbol")
    status: ChainStatus = Field(ChainStatus.ACTIVE, alias="chainStatus")
    option_kind: Optional[OptionKind] = Field(None, alias="optionType")
    original_strike: Optional[Decimal] = Field(None, alias="originalStrikePrice")
    original_open_date: Optional[date] = Field(None, alias="originalOpenDate")
    # Cached upstream; never used for calculations.
    total_chain_pnl: Optional[Decimal] = Field(None, alias="totalChainPnl")

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v):
        return v.strip().upper()

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v):
        if isinstance(v, str):
            return ChainStatus(v)
        return v

    @field_validator("option_kind", mode="before")
    @classmethod
    def coerce_option_kind(cls, v):
        if isinstance(v, str):
            return OptionKind(v) if v.strip() else None
        return v

    @field_validator("original_open_date", mode="before")
    @classmethod
    def validate_original_open_date(cls, v, info: ValidationInfo):
        if v == "":
            return None
        return _coerce_date(v, info)

    @property
    def is_closed(self) -> bool:
        return self.status is ChainStatus.CLOSED


__all__ = [
    "Chain",
    "ChainStatus",
    "Direction",
    "OptionKind",
    "StrategyKind",
    "TERMINAL_STATUSES",
    "Transaction",
    "TransactionStatus",
]

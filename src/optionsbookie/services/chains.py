"""
Roll-chain attribution.

Rolling a position closes one leg and opens another; the chain ties those legs
together. Reports count a closed chain as a single trade carrying the chain's
total P&L, landing in the month of its final close. Legs that were rolled but
whose chain is still running contribute nothing to realized figures.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..core.models import Chain, StrategyKind, Transaction, TransactionStatus
from .realization import ChainsArg, index_chains, lookup_chain
from .returns import HUNDRED
from .valuation import ZERO, calculate_collateral, classify_strategy, recorded_profit_loss

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttributionEntry:
    """One realized trade as seen by the reports: a single leg or a whole closed chain."""

    symbol: str
    profit_loss: Decimal
    collateral: Decimal
    fees: Decimal
    open_date: date
    close_date: Optional[date]
    legs: Tuple[Transaction, ...]
    chain_id: Optional[str] = None

    @property
    def is_chain(self) -> bool:
        return self.chain_id is not None

    @property
    def strategy(self) -> StrategyKind:
        return classify_strategy(self.legs[0])

    @property
    def ror(self) -> Decimal:
        if self.collateral == 0:
            return ZERO
        return self.profit_loss / self.collateral * HUNDRED

    @property
    def is_win(self) -> bool:
        return self.profit_loss > 0

    @property
    def is_loss(self) -> bool:
        return self.profit_loss < 0


def get_chain_legs(chain_id: str, transactions: Iterable[Transaction]) -> List[Transaction]:
    """Legs belonging to ``chain_id`` in snapshot order."""
    return [txn for txn in transactions if txn.chain_id == chain_id]


def calculate_chain_pnl(chain_id: str, transactions: Iterable[Transaction]) -> Decimal:
    """Total stored P&L across every leg of a chain; zero for an unknown chain."""
    return sum((recorded_profit_loss(txn) for txn in get_chain_legs(chain_id, transactions)), ZERO)


def _collateral_of_legs(legs: Sequence[Transaction]) -> Decimal:
    open_legs = [txn for txn in legs if txn.status is TransactionStatus.OPEN]
    if open_legs:
        return sum((calculate_collateral(txn) for txn in open_legs), ZERO)
    # Fully rolled out or closed: the largest single leg stands in for capital at risk.
    return max((calculate_collateral(txn) for txn in legs), default=ZERO)


def calculate_chain_collateral(chain_id: str, transactions: Iterable[Transaction]) -> Decimal:
    """
    Capital-at-risk of a chain.

    Only Open legs tie up collateral; once none remain the maximum single-leg
    collateral is used.
    """
    return _collateral_of_legs(get_chain_legs(chain_id, transactions))


def calculate_chain_ror(chain_id: str, transactions: Iterable[Transaction]) -> Decimal:
    """Chain P&L over chain collateral, in percent."""
    legs = get_chain_legs(chain_id, transactions)
    collateral = _collateral_of_legs(legs)
    if collateral == 0:
        return ZERO
    pnl = sum((recorded_profit_loss(txn) for txn in legs), ZERO)
    return pnl / collateral * HUNDRED


def _latest_close(legs: Iterable[Transaction]) -> Optional[date]:
    return max((txn.close_date for txn in legs if txn.close_date is not None), default=None)


def get_effective_close_date(
    txn: Transaction,
    transactions: Iterable[Transaction],
    chains: ChainsArg = None,
) -> Optional[date]:
    """Close date used for period bucketing: the chain's final close for closed-chain legs."""
    chain = lookup_chain(txn, index_chains(chains))
    if chain is not None and chain.is_closed:
        return _latest_close(get_chain_legs(chain.id, transactions))
    return txn.close_date


def _chain_entry(chain: Chain, legs: Sequence[Transaction]) -> AttributionEntry:
    return AttributionEntry(
        symbol=legs[0].symbol,
        profit_loss=sum((recorded_profit_loss(txn) for txn in legs), ZERO),
        collateral=sum((calculate_collateral(txn) for txn in legs), ZERO),
        fees=sum((txn.fees for txn in legs), ZERO),
        open_date=min(txn.open_date for txn in legs),
        close_date=_latest_close(legs),
        legs=tuple(legs),
        chain_id=chain.id,
    )


def _leg_entry(txn: Transaction) -> AttributionEntry:
    return AttributionEntry(
        symbol=txn.symbol,
        profit_loss=recorded_profit_loss(txn),
        collateral=calculate_collateral(txn),
        fees=txn.fees,
        open_date=txn.open_date,
        close_date=txn.close_date,
        legs=(txn,),
    )


def build_attribution_entries(
    transactions: Iterable[Transaction], chains: ChainsArg = None
) -> List[AttributionEntry]:
    """
    Collapse realized legs into report entries, visiting each closed chain once.

    The first leg of a closed chain yields an entry for the whole chain and its
    remaining legs are skipped. Rolled legs of running chains (or with no chain
    at all) and open legs yield nothing.
    """
    txns = list(transactions)
    chains_by_id: Mapping[str, Chain] = index_chains(chains)
    legs_by_chain: Dict[str, List[Transaction]] = defaultdict(list)
    for txn in txns:
        if txn.chain_id:
            legs_by_chain[txn.chain_id].append(txn)

    entries: List[AttributionEntry] = []
    visited = set()
    for txn in txns:
        chain = lookup_chain(txn, chains_by_id)
        if chain is not None and chain.is_closed:
            if chain.id in visited:
                continue
            visited.add(chain.id)
            entries.append(_chain_entry(chain, legs_by_chain[chain.id]))
        elif txn.is_terminal:
            entries.append(_leg_entry(txn))
        else:
            logger.debug("Skipping unrealized leg %s (%s)", txn.id, txn.status.value)
    return entries


__all__ = [
    "AttributionEntry",
    "build_attribution_entries",
    "calculate_chain_collateral",
    "calculate_chain_pnl",
    "calculate_chain_ror",
    "get_chain_legs",
    "get_effective_close_date",
]

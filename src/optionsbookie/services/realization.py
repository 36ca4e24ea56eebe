"""
Realized vs unrealized classification.

A leg is realized once its economic outcome is final: it reached a terminal
status, or it was rolled inside a chain that has since closed. Everything else
is an open mark.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Union

from ..core.dates import is_expired
from ..core.models import Chain, ChainStatus, Transaction, TransactionStatus
from .valuation import ZERO, recorded_profit_loss

ChainsArg = Union[Iterable[Chain], Mapping[str, Chain], None]

logger = logging.getLogger(__name__)


def index_chains(chains: ChainsArg) -> Dict[str, Chain]:
    """Return chains keyed by id; accepts a sequence, an existing mapping or ``None``."""
    if chains is None:
        return {}
    if isinstance(chains, Mapping):
        return dict(chains)
    return {chain.id: chain for chain in chains}


def lookup_chain(txn: Transaction, chains_by_id: Mapping[str, Chain]) -> Optional[Chain]:
    """Return the chain a leg belongs to, or ``None`` when it is not chained."""
    if not txn.chain_id:
        return None
    chain = chains_by_id.get(txn.chain_id)
    if chain is None:
        logger.debug("Transaction %s references unknown chain %s", txn.id, txn.chain_id)
    return chain


def is_realized(txn: Transaction, chains_by_id: Mapping[str, Chain]) -> bool:
    """Closed, Expired and Assigned legs are realized; Rolled legs only once their chain closes."""
    if txn.is_terminal:
        return True
    if txn.status is TransactionStatus.ROLLED:
        chain = lookup_chain(txn, chains_by_id)
        return chain is not None and chain.status is ChainStatus.CLOSED
    return False


def get_realized_transactions(
    transactions: Iterable[Transaction], chains: ChainsArg = None
) -> List[Transaction]:
    """Filter ``transactions`` down to realized legs, preserving order."""
    chains_by_id = index_chains(chains)
    return [txn for txn in transactions if is_realized(txn, chains_by_id)]


def calculate_total_realized_pnl(
    transactions: Iterable[Transaction], chains: ChainsArg = None
) -> Decimal:
    """Sum of stored P&L over realized legs."""
    realized = get_realized_transactions(transactions, chains)
    return sum((recorded_profit_loss(txn) for txn in realized), ZERO)


def is_unrealized(txn: Transaction, chains_by_id: Mapping[str, Chain]) -> bool:
    """
    Unchained Open/Rolled legs, plus every leg of an Active chain.

    Legs pointing at a chain that is not in the snapshot are left out.
    """
    if txn.chain_id:
        chain = lookup_chain(txn, chains_by_id)
        return chain is not None and chain.status is ChainStatus.ACTIVE
    return txn.status in (TransactionStatus.OPEN, TransactionStatus.ROLLED)


def calculate_unrealized_pnl(
    transactions: Iterable[Transaction], chains: ChainsArg = None
) -> Decimal:
    """Sum of marked P&L over positions that are still running."""
    chains_by_id = index_chains(chains)
    return sum(
        (recorded_profit_loss(txn) for txn in transactions if is_unrealized(txn, chains_by_id)),
        ZERO,
    )


def should_update_trade_status(txn: Transaction, *, now: Optional[datetime] = None) -> bool:
    """True when an Open leg has passed its expiration cutoff and needs a status update."""
    return txn.status is TransactionStatus.OPEN and is_expired(txn.expiry_date, now)


__all__ = [
    "ChainsArg",
    "calculate_total_realized_pnl",
    "calculate_unrealized_pnl",
    "get_realized_transactions",
    "index_chains",
    "is_realized",
    "is_unrealized",
    "lookup_chain",
    "should_update_trade_status",
]

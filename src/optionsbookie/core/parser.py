"""
Snapshot loading for options performance analysis.

A snapshot is the full set of transactions and chains a report is computed
from. Two formats are accepted:

* JSON: ``{"transactions": [...], "chains": [...]}`` (a bare list is read as
  transactions only);
* CSV: one transaction per row, with a header naming the fields. Chains can
  come from a second CSV file.

Field names may use either the snake_case model names or the camelCase export
names (``stockSymbol``, ``tradeOpenDate`` ...).
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .models import Chain, Transaction

PathLike = Union[str, Path]
ModelT = TypeVar("ModelT", bound=BaseModel)

logger = logging.getLogger(__name__)


class SnapshotLoadError(ValueError):
    """Raised when a snapshot file cannot be read or fails validation."""


@dataclass
class PortfolioSnapshot:
    """Transactions and chains loaded from one source."""

    transactions: List[Transaction]
    chains: List[Chain] = field(default_factory=list)

    @property
    def symbols(self) -> List[str]:
        return sorted({txn.symbol for txn in self.transactions})


def _format_validation_error(exc: ValidationError) -> str:
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        details.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(details)


def _validate_records(
    model: Type[ModelT], records: Iterable[Dict[str, Any]], *, label: str, first_index: int
) -> List[ModelT]:
    items: List[ModelT] = []
    for index, record in enumerate(records, start=first_index):
        if not isinstance(record, dict):
            raise SnapshotLoadError(
                f"{label} {index}: expected an object, got {type(record).__name__}"
            )
        try:
            items.append(model.model_validate(record))
        except ValidationError as exc:
            raise SnapshotLoadError(f"{label} {index}: {_format_validation_error(exc)}") from exc
    return items


def _row_is_blank(row: Dict[str, Optional[str]]) -> bool:
    return all(not (value or "").strip() for value in row.values() if isinstance(value, str))


def _clean_row(row: Dict[str, Optional[str]]) -> Dict[str, str]:
    """Drop empty cells so optional fields fall back to their defaults."""
    return {
        key.strip(): value.strip()
        for key, value in row.items()
        if key and isinstance(value, str) and value.strip()
    }


def _read_csv_rows(csv_file: Path) -> List[Dict[str, str]]:
    with open(csv_file, "r", encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        if reader.fieldnames is None:
            raise SnapshotLoadError(f"{csv_file}: CSV file is empty or missing a header row.")
        return [_clean_row(row) for row in reader if not _row_is_blank(row)]


def parse_snapshot_payload(payload: Any) -> PortfolioSnapshot:
    """Validate an already-decoded JSON document into a snapshot."""
    if isinstance(payload, list):
        payload = {"transactions": payload}
    if not isinstance(payload, dict):
        raise SnapshotLoadError("Snapshot must be a JSON object or a list of transactions.")
    transactions = _validate_records(
        Transaction, payload.get("transactions") or [], label="Transaction", first_index=1
    )
    chains = _validate_records(Chain, payload.get("chains") or [], label="Chain", first_index=1)
    return PortfolioSnapshot(transactions=transactions, chains=chains)


def load_snapshot(path: PathLike, *, chains_file: Optional[PathLike] = None) -> PortfolioSnapshot:
    """
    Load a snapshot from a JSON or CSV file.

    Parameters
    ----------
    path:
        ``.json`` snapshot, or ``.csv`` file of transactions.
    chains_file:
        Optional CSV of chains, used alongside a transactions CSV.

    Raises
    ------
    SnapshotLoadError
        When the file cannot be decoded or a record fails validation. CSV
        errors carry 1-based row numbers (the header is row 1).
    """
    source = Path(path)
    if source.suffix.lower() == ".json":
        try:
            payload = json.loads(source.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise SnapshotLoadError(
                f"{source}: invalid JSON ({exc.msg} at line {exc.lineno})"
            ) from exc
        snapshot = parse_snapshot_payload(payload)
    else:
        transactions = _validate_records(
            Transaction, _read_csv_rows(source), label="Row", first_index=2
        )
        snapshot = PortfolioSnapshot(transactions=transactions)

    if chains_file is not None:
        snapshot.chains.extend(
            _validate_records(Chain, _read_csv_rows(Path(chains_file)), label="Row", first_index=2)
        )

    logger.debug(
        "Loaded %d transactions and %d chains from %s",
        len(snapshot.transactions),
        len(snapshot.chains),
        source,
    )
    return snapshot


__all__ = [
    "PortfolioSnapshot",
    "SnapshotLoadError",
    "load_snapshot",
    "parse_snapshot_payload",
]

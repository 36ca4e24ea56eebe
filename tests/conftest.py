"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from optionsbookie.core.models import Chain, Transaction
from optionsbookie.settings import ANN_ROR_ENV_VAR
from optionsbookie.web import dependencies

FIXTURES_DIR = Path(__file__).parent / "fixtures"

_TRANSACTION_DEFAULTS = {
    "id": "txn-1",
    "symbol": "AAPL",
    "open_date": date(2025, 9, 25),
    "expiry_date": date(2025, 10, 17),
    "option_kind": "Put",
    "direction": "Sell",
    "strike": Decimal("150"),
    "premium": Decimal("4.25"),
    "contracts": 2,
    "fees": Decimal("1.32"),
    "status": "Open",
}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the annualization default independent of the developer's shell."""
    monkeypatch.delenv(ANN_ROR_ENV_VAR, raising=False)
    dependencies._get_cached_settings.cache_clear()
    yield
    dependencies._get_cached_settings.cache_clear()


@pytest.fixture
def make_transaction():
    """Factory for transactions; keyword overrides replace the defaults."""

    counter = {"next": 1}

    def _make(**overrides) -> Transaction:
        values = dict(_TRANSACTION_DEFAULTS)
        if "id" not in overrides:
            values["id"] = f"txn-{counter['next']}"
            counter["next"] += 1
        values.update(overrides)
        return Transaction(**values)

    return _make


@pytest.fixture
def make_chain():
    """Factory for roll chains."""

    def _make(**overrides) -> Chain:
        values = {"id": "chain-1", "symbol": "TTD", "status": "Active"}
        values.update(overrides)
        return Chain(**values)

    return _make


@pytest.fixture
def sample_snapshot_json():
    """Path to a snapshot with a closed roll chain, a running chain and plain trades."""
    return FIXTURES_DIR / "snapshot.json"


@pytest.fixture
def sample_transactions_csv():
    """Path to a CSV of transactions using the camelCase export headers."""
    return FIXTURES_DIR / "transactions.csv"


@pytest.fixture
def sample_chains_csv():
    """Path to a CSV of roll chains matching ``transactions.csv``."""
    return FIXTURES_DIR / "chains.csv"

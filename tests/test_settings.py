"""Tests for annualization settings."""

from __future__ import annotations

import logging

import pytest

from optionsbookie.settings import (
    ANN_ROR_ENV_VAR,
    AnnualizedRoRMethod,
    EngineSettings,
    load_settings,
    resolve_annualization_method,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("time-period", AnnualizedRoRMethod.TIME_PERIOD),
        ("trade-weighted", AnnualizedRoRMethod.TRADE_WEIGHTED),
        ("  TRADE-WEIGHTED ", AnnualizedRoRMethod.TRADE_WEIGHTED),
        (AnnualizedRoRMethod.TRADE_WEIGHTED, AnnualizedRoRMethod.TRADE_WEIGHTED),
        (None, AnnualizedRoRMethod.TIME_PERIOD),
        ("", AnnualizedRoRMethod.TIME_PERIOD),
    ],
)
def test_resolve_annualization_method(value, expected):
    assert resolve_annualization_method(value) is expected


def test_unknown_method_falls_back_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="optionsbookie.settings"):
        assert resolve_annualization_method("weekly") is AnnualizedRoRMethod.TIME_PERIOD
    assert "weekly" in caplog.text


def test_load_settings_defaults():
    assert load_settings({}) == EngineSettings()
    assert load_settings().annualization_method is AnnualizedRoRMethod.TIME_PERIOD


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv(ANN_ROR_ENV_VAR, "trade-weighted")
    assert load_settings().annualization_method is AnnualizedRoRMethod.TRADE_WEIGHTED


def test_load_settings_explicit_mapping():
    settings = load_settings({ANN_ROR_ENV_VAR: "Trade-Weighted"})
    assert settings.annualization_method is AnnualizedRoRMethod.TRADE_WEIGHTED

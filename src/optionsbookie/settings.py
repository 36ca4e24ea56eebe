"""Runtime configuration for optionsbookie.

The engine itself never reads the environment: every function that depends on
the annualization method takes it as an argument. The CLI and web layers call
:func:`load_settings` once and pass the resolved values down.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

ANN_ROR_ENV_VAR = "OPTIONSBOOKIE_ANN_ROR_TYPE"

logger = logging.getLogger(__name__)


class AnnualizedRoRMethod(str, Enum):
    """Portfolio-level annualization methodology."""

    TIME_PERIOD = "time-period"
    TRADE_WEIGHTED = "trade-weighted"

    def __str__(self) -> str:
        return self.value


DEFAULT_ANNUALIZATION_METHOD = AnnualizedRoRMethod.TIME_PERIOD


def resolve_annualization_method(value: Optional[str]) -> AnnualizedRoRMethod:
    """Map a configured label to a method; blank or unknown labels fall back to time-period."""
    if isinstance(value, AnnualizedRoRMethod):
        return value
    normalized = (value or "").strip().lower()
    if not normalized:
        return DEFAULT_ANNUALIZATION_METHOD
    for method in AnnualizedRoRMethod:
        if method.value == normalized:
            return method
    logger.warning(
        "Unknown annualization method %r; using %s", value, DEFAULT_ANNUALIZATION_METHOD.value
    )
    return DEFAULT_ANNUALIZATION_METHOD


@dataclass(frozen=True)
class EngineSettings:
    """Resolved configuration handed to the reporting surfaces."""

    annualization_method: AnnualizedRoRMethod = DEFAULT_ANNUALIZATION_METHOD


def load_settings(environ: Optional[Mapping[str, str]] = None) -> EngineSettings:
    """Build settings from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    return EngineSettings(
        annualization_method=resolve_annualization_method(env.get(ANN_ROR_ENV_VAR)),
    )


__all__ = [
    "ANN_ROR_ENV_VAR",
    "AnnualizedRoRMethod",
    "DEFAULT_ANNUALIZATION_METHOD",
    "EngineSettings",
    "load_settings",
    "resolve_annualization_method",
]

"""Common dependency providers for the web application."""

from __future__ import annotations

from functools import lru_cache

from ..settings import EngineSettings, load_settings


@lru_cache(maxsize=1)
def _get_cached_settings() -> EngineSettings:
    """Return settings resolved once per process."""
    return load_settings()


def get_settings() -> EngineSettings:
    """
    FastAPI dependency that yields engine settings.

    Tests can override this dependency to pin the annualization method.
    """
    return _get_cached_settings()

"""FastAPI application for optionsbookie analytics."""

from .app import create_app

__all__ = ["create_app"]

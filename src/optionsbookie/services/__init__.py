"""Calculation and reporting services."""

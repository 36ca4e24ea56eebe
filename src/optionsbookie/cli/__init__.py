"""Command-line interface for optionsbookie."""

"""Core domain models, date arithmetic and snapshot loading."""

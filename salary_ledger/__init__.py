"""Salary and expense ledger with pluggable identity backends."""

__version__ = "0.1.0"

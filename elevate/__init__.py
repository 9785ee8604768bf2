"""Elevate community billing: recurring maintenance billing and ledger reconciliation."""

__version__ = "0.1.0"

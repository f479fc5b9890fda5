"""Chore Coins backend: balance ledger, pending rewards and daily resets."""

__version__ = "1.0.0"

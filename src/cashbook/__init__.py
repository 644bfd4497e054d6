"""Cashbook - personal income and expense tracking."""

__version__ = "0.1.0"

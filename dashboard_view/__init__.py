"""Data retrieval and view state of the cashflow dashboard."""

__version__ = "0.3.0"

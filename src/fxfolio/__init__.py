"""Multi-currency valuation engine for portfolio tracking."""

__version__ = "0.1.0"

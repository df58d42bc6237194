"""Historical net-worth and cash-flow reporting for personal finance data."""

__version__ = "0.3.0"

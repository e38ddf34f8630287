"""Payout Calc - Vendor payout forecasting for claims dispatch."""

__version__ = "0.1.0"

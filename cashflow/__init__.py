"""Cashflow Dashboard — transaction normalization and dashboard aggregation."""
__version__ = "1.0.0"

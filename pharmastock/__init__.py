"""Pharmacy inventory stock and sales engine."""

__version__ = "1.0.0"

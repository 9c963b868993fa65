"""Turns short cooking videos into structured recipe records."""

__version__ = "0.1.0"

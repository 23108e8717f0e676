"""Periodic status checks for PIO residence permit applications."""

__version__ = "1.0.0"

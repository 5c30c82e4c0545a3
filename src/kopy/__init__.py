"""Kopy: self-destructing encrypted paste store."""

__version__ = "0.1.0"

"""Embedding-based pet and article recommendation service."""

__version__ = "1.0.0"

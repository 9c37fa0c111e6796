"""Maglev consistent hashing simulator: hash functions, nodes, lookup table and shell."""

__version__ = "0.1.0"
__all__ = ["__version__"]
"""Repo Condenser: pack repository files into size-bounded text containers."""

__version__ = "0.1.0"

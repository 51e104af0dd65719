"""Deterministic project versions derived from git repository state."""

__version__ = "0.1.0"

"""Core interfaces and abstractions for gitversioning."""

from gitversioning.core.interfaces import RepositoryFactsProvider

__all__ = ["RepositoryFactsProvider"]

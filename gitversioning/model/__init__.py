"""Pydantic models and resolved entities for gitversioning."""

from gitversioning.model.identifier import ProjectIdentifier
from gitversioning.model.configuration import (
    VersionFormatRule,
    VersioningConfiguration,
    translate_pattern,
)
from gitversioning.model.resolved import (
    NO_COMMIT,
    RefType,
    RepositoryFacts,
    DescribeFacts,
    ResolvedVersion,
)

__all__ = [
    "ProjectIdentifier",
    "VersionFormatRule",
    "VersioningConfiguration",
    "translate_pattern",
    "NO_COMMIT",
    "RefType",
    "RepositoryFacts",
    "DescribeFacts",
    "ResolvedVersion",
]

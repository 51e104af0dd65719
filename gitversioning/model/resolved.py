"""
Resolved entity classes for version resolution.

This module defines the facts read from a repository and the outcome of
resolving a project's version against them.

Design Principles:
- Immutable: Once created, neither facts nor results change
- Self-contained: A ResolvedVersion carries everything a host needs to
  re-version a project and export properties
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional

from .identifier import ProjectIdentifier

NO_COMMIT = "0" * 40


class RefType(str, Enum):
    """Kind of ref a version was derived from."""

    commit = "commit"
    branch = "branch"
    tag = "tag"


@dataclass(frozen=True)
class RepositoryFacts:
    """
    Raw repository state at resolution time.

    Attributes:
        commit: Full HEAD commit hash, 40 zeros when there are no commits
        branch: Current branch, None when HEAD is detached
        tags: Tag names pointing at HEAD
        last_tag: Most recent tag (by tagger date) across the repository
        describe: Describe string of HEAD relative to ``last_tag``
    """

    commit: str = NO_COMMIT
    branch: Optional[str] = None
    tags: FrozenSet[str] = field(default_factory=frozenset)
    last_tag: Optional[str] = None
    describe: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "commit": self.commit,
            "branch": self.branch,
            "tags": sorted(self.tags),
            "last_tag": self.last_tag,
            "describe": self.describe,
        }


@dataclass(frozen=True)
class DescribeFacts:
    """Distance of HEAD from an ancestor ref, parsed from a describe string."""

    ancestor_distance: int
    abbreviated_commit: str


@dataclass(frozen=True)
class ResolvedVersion:
    """
    Outcome of resolving one project identifier.

    Attributes:
        identifier: The project the version was resolved for
        version: The rendered and escaped version string
        commit: Full commit hash the version was derived from
        ref_type: Whether a branch, tag or commit rule applied
        ref_name: Matched ref name with the rule prefix stripped
        context: Placeholder values the version was rendered from
    """

    identifier: ProjectIdentifier
    version: str
    commit: str
    ref_type: RefType
    ref_name: str
    context: Dict[str, str] = field(default_factory=dict)

    def export_properties(self, include_context: bool = False) -> Dict[str, str]:
        """
        Project properties a host can publish alongside the new version.

        ``project.tag`` and ``project.branch`` are empty unless the version
        came from that kind of ref. With ``include_context`` every non-empty
        context value except ``version`` itself is exported as
        ``project.<key>``, with the ``version.*`` components describing the
        resolved version rather than the nominal one. ``context`` itself is
        left untouched.
        """
        properties = {
            "project.commit": self.commit,
            "project.tag": self.ref_name if self.ref_type == RefType.tag else "",
            "project.branch": self.ref_name if self.ref_type == RefType.branch else "",
        }
        if include_context:
            # Import here to avoid circular dependency
            from gitversioning.versioning.context import add_version_components
            from gitversioning.versioning.version import parse_version_components

            exported = dict(self.context)
            if self.version:
                add_version_components(
                    exported, "version", parse_version_components(self.version)
                )
            for key, value in exported.items():
                if key == "version" or not value:
                    continue
                properties[f"project.{key}"] = value
        return properties

    def to_dict(self) -> Dict[str, object]:
        """Flat dict for serialization / debugging."""
        return {
            "group": self.identifier.group,
            "artifact": self.identifier.artifact,
            "nominal_version": self.identifier.version,
            "version": self.version,
            "commit": self.commit,
            "ref_type": self.ref_type.value,
            "ref_name": self.ref_name,
            "context": dict(sorted(self.context.items())),
        }

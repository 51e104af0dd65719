"""
Versioning Module for gitversioning.

This module holds all the logic that turns repository state into a project
version. Nothing outside of it parses versions, matches refs or renders
version formats.

ARCHITECTURAL LAYERS:
====================

1. **Core Version Logic** (version.py):
   - VersionComponents: numeric components of a version string, with the
     ordering used to rank tags
   - parse_version_components(): tolerant parser, never raises

2. **Rule Matching** (rules.py):
   - Branch rules, then tag rules (highest version wins per rule), then the
     commit rule. First match wins.

3. **Context and Rendering** (context.py, template.py):
   - build_context(): placeholder values in a fixed, overwrite-ordered build
   - render_version(): ``${key}`` substitution followed by escaping

4. **Resolution** (resolver.py):
   - VersionResolver: the session-scoped entry point and its caches

5. **Git Integration** (git.py):
   - GitRepositoryFactsProvider: repository facts read with GitPython

6. **Exception Hierarchy** (exceptions.py):
   - Unified exception types for all versioning error scenarios

MAIN CLASSES:
============

VersionResolver:
    ``resolve(identifier, repo_root)`` returns a ResolvedVersion, computed at
    most once per identifier. ``apply()`` returns a re-versioned identifier
    and skips identifiers without a version.
"""

from .resolver import VersionResolver
from .git import GitRepositoryFactsProvider
from .exceptions import (
    VersioningError,
    MissingVersionError,
    MissingPlaceholderError,
    RepositoryAccessError,
    ConfigurationError,
)
from .version import VersionComponents, parse_version_components
from .rules import RefMatch, match_branch, match_tag, match_ref, strip_prefix
from .context import build_context, parse_describe
from .template import render, render_version, escape_version

__all__ = [
    # Main entry point
    "VersionResolver",
    "GitRepositoryFactsProvider",
    # Core version utilities
    "VersionComponents",
    "parse_version_components",
    # Rule matching
    "RefMatch",
    "match_branch",
    "match_tag",
    "match_ref",
    "strip_prefix",
    # Context and rendering
    "build_context",
    "parse_describe",
    "render",
    "render_version",
    "escape_version",
    # Centralized exception hierarchy
    "VersioningError",
    "MissingVersionError",
    "MissingPlaceholderError",
    "RepositoryAccessError",
    "ConfigurationError",
]

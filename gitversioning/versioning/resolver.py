"""
Version resolver: the single entry point for git-based project versions.

One VersionResolver instance corresponds to one build session. It owns the
session caches:

- repository facts, keyed by canonical repository root
- describe strings, keyed by (repository root, base ref)
- resolved versions, keyed by project identifier

Nothing is evicted; drop the instance (or call ``clear()``) to start over.

Access is expected to be sequential. Concurrent callers are serialized per
repository root and per identifier, never on a single global lock, so
unrelated components resolve independently.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Hashable, Optional, Set, Tuple, Union

from gitversioning.core.interfaces import RepositoryFactsProvider
from gitversioning.model import (
    ProjectIdentifier,
    RepositoryFacts,
    ResolvedVersion,
    VersioningConfiguration,
)

from .context import build_context
from .exceptions import MissingVersionError
from .git import GitRepositoryFactsProvider
from .rules import match_ref
from .template import render_version

logger = logging.getLogger(__name__)


class VersionResolver:
    """
    Resolves project versions from git repository state.

    This class provides:
    - Rule selection (branch, tag, commit) and version rendering
    - Session caches for repository facts and resolved versions
    - Per-key locking for callers running in a concurrent reactor
    - Log-once bookkeeping so repeated lookups stay quiet
    """

    def __init__(
        self,
        configuration: Optional[VersioningConfiguration] = None,
        provider: Optional[RepositoryFactsProvider] = None,
    ):
        """
        Initialize the resolver.

        Args:
            configuration: Rules and settings (defaults to the commit rule only)
            provider: Repository facts source (defaults to GitPython)
        """
        self.configuration = configuration or VersioningConfiguration()
        self.provider = provider or GitRepositoryFactsProvider()

        self._facts_cache: Dict[Path, RepositoryFacts] = {}
        self._describe_cache: Dict[Tuple[Path, str], Optional[str]] = {}
        self._version_cache: Dict[ProjectIdentifier, ResolvedVersion] = {}

        # One lock per repository root / identifier
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._locks_lock = threading.Lock()

        # for preventing repeated logging
        self._logged: Set[str] = set()

    def _get_lock(self, key: Hashable) -> threading.Lock:
        with self._locks_lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def _log_once(self, key: str, level: int, message: str) -> None:
        if key in self._logged:
            return
        self._logged.add(key)
        logger.log(level, message)

    def repository_facts(self, path: Union[str, Path]) -> RepositoryFacts:
        """
        Facts for the repository containing *path*, read once per session.

        Provided commit/branch/tag values from the configuration replace what
        the repository reports; an empty provided branch or tag means none.

        Raises:
            RepositoryAccessError: If the repository cannot be read
        """
        root = self.provider.repository_root(Path(path))
        return self._repository_facts(root)

    def _repository_facts(self, root: Path) -> RepositoryFacts:
        facts = self._facts_cache.get(root)
        if facts is not None:
            return facts

        with self._get_lock(("root", root)):
            facts = self._facts_cache.get(root)
            if facts is not None:
                return facts

            logger.debug(f"Reading git repository facts from {root}")
            configuration = self.configuration

            if not self.provider.working_tree_is_clean(root):
                logger.warning(f"Git working tree is not clean {root}")

            commit = self.provider.head_commit(root)
            if configuration.provided_commit:
                commit = configuration.provided_commit

            branch = self.provider.head_branch(root)
            if configuration.provided_branch is not None:
                branch = configuration.provided_branch or None

            if configuration.provided_tag is not None:
                tags = (
                    {configuration.provided_tag} if configuration.provided_tag else set()
                )
            else:
                tags = self.provider.tags_at(root, commit)

            last_tag = self.provider.most_recent_tag(root)
            describe = self._describe(root, last_tag) if last_tag else None

            facts = RepositoryFacts(
                commit=commit,
                branch=branch,
                tags=frozenset(tags),
                last_tag=last_tag,
                describe=describe,
            )
            self._facts_cache[root] = facts
            return facts

    def _describe(self, root: Path, base_ref: str) -> Optional[str]:
        key = (root, base_ref)
        if key not in self._describe_cache:
            self._describe_cache[key] = self.provider.describe(root, base_ref)
        return self._describe_cache[key]

    def resolve(
        self, identifier: ProjectIdentifier, repo_root: Union[str, Path]
    ) -> ResolvedVersion:
        """
        Resolve the git-based version of a project.

        Computed at most once per identifier per resolver; later calls return
        the cached object.

        Args:
            identifier: Project coordinates, must carry a nominal version
            repo_root: Any path inside the project's git repository

        Returns:
            The resolved version

        Raises:
            MissingVersionError: If the identifier has no version
            MissingPlaceholderError: If the selected format is misconfigured
            RepositoryAccessError: If the repository cannot be read
        """
        if not identifier.version:
            raise MissingVersionError(identifier)

        resolved = self._version_cache.get(identifier)
        if resolved is not None:
            logger.debug(f"Using cached version for {identifier}")
            return resolved

        with self._get_lock(("identifier", identifier)):
            resolved = self._version_cache.get(identifier)
            if resolved is not None:
                return resolved

            root = self.provider.repository_root(Path(repo_root))
            facts = self._repository_facts(root)
            ref_match = match_ref(facts, self.configuration)

            context = build_context(
                identifier,
                facts,
                ref_match,
                self.configuration,
                describe=lambda base_ref: self._describe(root, base_ref),
            )
            version = render_version(ref_match.rule.format, context)

            resolved = ResolvedVersion(
                identifier=identifier,
                version=version,
                commit=facts.commit,
                ref_type=ref_match.ref_type,
                ref_name=ref_match.stripped_name,
                context=context,
            )
            self._version_cache[identifier] = resolved

        self._log_once(
            str(identifier),
            logging.INFO,
            f"{identifier.artifact}:{identifier.version}"
            f" - {resolved.ref_type.value}: {resolved.ref_name}"
            f" -> version: {resolved.version}",
        )
        return resolved

    def apply(
        self, identifier: ProjectIdentifier, repo_root: Union[str, Path]
    ) -> ProjectIdentifier:
        """
        Return *identifier* carrying its git-based version.

        Identifiers without a version, and every identifier while versioning
        is disabled, are returned unchanged.
        """
        if self.configuration.disabled:
            self._log_once("DISABLED", logging.INFO, "git versioning disabled")
            return identifier

        try:
            resolved = self.resolve(identifier, repo_root)
        except MissingVersionError as e:
            self._log_once(str(identifier), logging.WARNING, f"skip - {e}")
            return identifier

        return identifier.with_version(resolved.version)

    def clear(self) -> None:
        """Discard all cached facts and versions."""
        self._facts_cache.clear()
        self._describe_cache.clear()
        self._version_cache.clear()
        self._logged.clear()

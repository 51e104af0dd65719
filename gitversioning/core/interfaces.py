"""Protocol interfaces for repository access.

Protocols that decouple version resolution from a concrete git library.
"""

from pathlib import Path
from typing import Optional, Protocol, Set


class RepositoryFactsProvider(Protocol):
    """Minimal interface for reading the facts versions are derived from."""

    def repository_root(self, path: Path) -> Path:
        """Canonical root of the repository containing *path*."""
        ...

    def head_commit(self, root: Path) -> str:
        """Full HEAD commit hash, 40 zeros when there are no commits."""
        ...

    def head_branch(self, root: Path) -> Optional[str]:
        """Current branch name, None when HEAD is detached."""
        ...

    def tags_at(self, root: Path, commit: str) -> Set[str]:
        """Names of tags (annotated ones peeled) pointing at *commit*."""
        ...

    def most_recent_tag(self, root: Path) -> Optional[str]:
        """Tag with the latest tagger date across the repository."""
        ...

    def describe(self, root: Path, base_ref: str) -> Optional[str]:
        """``<base_ref>-<distance>-g<abbrev>`` for HEAD, None if unavailable."""
        ...

    def working_tree_is_clean(self, root: Path) -> bool:
        """Whether the working tree has no uncommitted or untracked changes."""
        ...

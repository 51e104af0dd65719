"""
Git repository facts provider.

Reads the repository state versions are derived from (HEAD commit, branch,
tags, most recent tag, describe strings) using GitPython.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Set

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from gitversioning.model import NO_COMMIT

from .exceptions import RepositoryAccessError

logger = logging.getLogger(__name__)


class GitRepositoryFactsProvider:
    """
    RepositoryFactsProvider backed by GitPython.

    Opened repositories are kept for the lifetime of the provider, so a
    provider should not outlive the build session it serves.
    """

    def __init__(self):
        self._repos: Dict[Path, Repo] = {}

    def _open(self, path: Path) -> Repo:
        path = Path(path)
        repo = self._repos.get(path)
        if repo is not None:
            return repo
        try:
            repo = Repo(path, search_parent_directories=True)
        except NoSuchPathError:
            raise RepositoryAccessError(path, "path does not exist")
        except InvalidGitRepositoryError:
            raise RepositoryAccessError(path, "not a git repository")
        self._repos[path] = repo
        return repo

    def repository_root(self, path: Path) -> Path:
        """
        Canonical root of the repository containing *path*.

        Args:
            path: Any path inside the work tree (or the git dir of a bare repo)

        Returns:
            Resolved work tree directory

        Raises:
            RepositoryAccessError: If no repository contains *path*
        """
        repo = self._open(path)
        root = Path(repo.working_tree_dir or repo.git_dir).resolve()
        logger.debug(f"git directory {repo.git_dir}")
        self._repos.setdefault(root, repo)
        return root

    def head_commit(self, root: Path) -> str:
        repo = self._open(root)
        try:
            if not repo.head.is_valid():
                # no commits yet
                return NO_COMMIT
            return repo.head.commit.hexsha
        except (ValueError, GitCommandError) as e:
            raise RepositoryAccessError(root, f"cannot resolve HEAD: {e}")

    def head_branch(self, root: Path) -> Optional[str]:
        repo = self._open(root)
        try:
            if repo.head.is_detached:
                return None
            return repo.active_branch.name
        except (ValueError, GitCommandError) as e:
            raise RepositoryAccessError(root, f"cannot read current branch: {e}")

    def tags_at(self, root: Path, commit: str) -> Set[str]:
        """
        Names of the tags whose peeled target is *commit*.

        Tags pointing at a tree or blob are ignored; a tag ref that cannot be
        read at all is an error.
        """
        repo = self._open(root)
        tags = set()
        try:
            for tag in repo.tags:
                target = _peel(tag.object)
                if target.type != "commit":
                    continue
                if target.hexsha == commit:
                    tags.add(tag.name)
        except (ValueError, GitCommandError) as e:
            raise RepositoryAccessError(root, f"cannot read tags: {e}")
        return tags

    def most_recent_tag(self, root: Path) -> Optional[str]:
        """
        The tag with the latest tagger date in the whole repository.

        Lightweight tags carry no tagger, their commit date is used instead.
        Lightweight tags on a tree or blob have no date and rank last.
        """
        repo = self._open(root)

        def _tag_date(tag) -> int:
            target = tag.object
            if target.type == "tag":
                return target.tagged_date
            if target.type == "commit":
                return target.committed_date
            return 0

        try:
            tags = list(repo.tags)
            if not tags:
                return None
            latest = max(tags, key=lambda tag: (_tag_date(tag), tag.name))
        except (ValueError, GitCommandError) as e:
            raise RepositoryAccessError(root, f"cannot read tags: {e}")
        return latest.name

    def describe(self, root: Path, base_ref: str) -> Optional[str]:
        """
        Describe HEAD relative to the tag named *base_ref*.

        Returns:
            ``<base_ref>-<distance>-g<abbrev>``, or None when there is no such
            tag among the ancestors of HEAD
        """
        repo = self._open(root)
        try:
            return repo.git.describe("--tags", "--long", "--match", base_ref, "HEAD")
        except GitCommandError as e:
            logger.debug(f"git describe relative to {base_ref} failed: {e}")
            return None

    def working_tree_is_clean(self, root: Path) -> bool:
        repo = self._open(root)
        try:
            return not repo.is_dirty(untracked_files=True)
        except (ValueError, GitCommandError) as e:
            raise RepositoryAccessError(root, f"cannot read working tree status: {e}")


def _peel(obj):
    """Follow annotated tag objects down to what they finally point at."""
    while obj.type == "tag":
        obj = obj.object
    return obj

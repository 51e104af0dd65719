import io
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional

import pytest
from git import Actor, Repo

from gitversioning.model import NO_COMMIT


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("gitversioning")
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream  # Yield the stream to the test function

    # Cleanup after the test
    logger.removeHandler(handler)
    logger.setLevel(previous_level)
    log_stream.close()


class FakeRepositoryFactsProvider:
    """In-memory RepositoryFactsProvider recording how often it is queried."""

    def __init__(
        self,
        commit: str = "abcdef1234567890abcdef1234567890abcdef12",
        branch: Optional[str] = None,
        tags: Iterable[str] = (),
        last_tag: Optional[str] = None,
        describes: Optional[Dict[str, str]] = None,
        clean: bool = True,
        root: str = "/work/repo",
    ):
        self.commit = commit
        self.branch = branch
        self.tags = set(tags)
        self.last_tag = last_tag
        self.describes = describes or {}
        self.clean = clean
        self.root = Path(root)
        self.calls: Dict[str, int] = {}

    def _count(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    def repository_root(self, path: Path) -> Path:
        self._count("repository_root")
        return self.root

    def head_commit(self, root: Path) -> str:
        self._count("head_commit")
        return self.commit

    def head_branch(self, root: Path) -> Optional[str]:
        self._count("head_branch")
        return self.branch

    def tags_at(self, root: Path, commit: str):
        self._count("tags_at")
        return set(self.tags) if commit == self.commit else set()

    def most_recent_tag(self, root: Path) -> Optional[str]:
        self._count("most_recent_tag")
        return self.last_tag

    def describe(self, root: Path, base_ref: str) -> Optional[str]:
        self._count("describe")
        return self.describes.get(base_ref)

    def working_tree_is_clean(self, root: Path) -> bool:
        self._count("working_tree_is_clean")
        return self.clean


@pytest.fixture
def fake_provider():
    """A provider on a feature branch with no tags."""
    return FakeRepositoryFactsProvider(branch="feature/login")


# git fixtures

TEST_ACTOR = Actor("Test User", "test@example.com")


class GitRepoBuilder:
    """Helper building small real repositories for integration tests."""

    def __init__(self, path: Path):
        self.path = path
        self.repo = Repo.init(path)
        with self.repo.config_writer() as writer:
            writer.set_value("user", "name", TEST_ACTOR.name)
            writer.set_value("user", "email", TEST_ACTOR.email)
        self._counter = 0

    def commit(self, message: Optional[str] = None) -> str:
        self._counter += 1
        message = message or f"commit {self._counter}"
        changed = self.path / "changes.txt"
        changed.write_text(f"{message}\n")
        self.repo.index.add(["changes.txt"])
        commit = self.repo.index.commit(
            message, author=TEST_ACTOR, committer=TEST_ACTOR
        )
        if self._counter == 1:
            # independent of init.defaultBranch
            self.repo.git.checkout("-B", "main")
        return commit.hexsha

    def tag(self, name: str, annotated: bool = True, date: Optional[str] = None):
        args = ["-a", name, "-m", f"tag {name}"] if annotated else [name]
        env = {"GIT_COMMITTER_DATE": date} if date else None
        self.repo.git.tag(*args, env=env)

    def branch(self, name: str):
        self.repo.git.checkout("-B", name)

    def detach(self):
        self.repo.git.checkout("--detach")

    @property
    def head(self) -> str:
        if not self.repo.head.is_valid():
            return NO_COMMIT
        return self.repo.head.commit.hexsha


@pytest.fixture
def git_repo(tmp_path) -> GitRepoBuilder:
    """An empty git repository in a temporary directory."""
    return GitRepoBuilder(tmp_path / "repo")


@pytest.fixture
def provider_factory():
    """Build FakeRepositoryFactsProvider instances with custom facts."""
    return FakeRepositoryFactsProvider

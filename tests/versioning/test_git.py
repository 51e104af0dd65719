"""Tests for the GitPython-backed repository facts provider."""

from pathlib import Path
from unittest.mock import MagicMock, PropertyMock, patch

import pytest
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from gitversioning.model import (
    NO_COMMIT,
    ProjectIdentifier,
    RefType,
    VersionFormatRule,
    VersioningConfiguration,
)
from gitversioning.versioning import VersionResolver
from gitversioning.versioning.exceptions import RepositoryAccessError
from gitversioning.versioning.git import GitRepositoryFactsProvider

# Raw git date format, seconds since the epoch plus offset
JAN_2019 = "1546300800 +0000"
JAN_2020 = "1577836800 +0000"


@pytest.mark.short
class TestGitProviderMocked:
    @patch("gitversioning.versioning.git.Repo")
    def test_not_a_repository(self, mock_repo_class):
        mock_repo_class.side_effect = InvalidGitRepositoryError("/tmp/x")
        provider = GitRepositoryFactsProvider()

        with pytest.raises(RepositoryAccessError, match="not a git repository"):
            provider.repository_root(Path("/tmp/x"))

    @patch("gitversioning.versioning.git.Repo")
    def test_missing_path(self, mock_repo_class):
        mock_repo_class.side_effect = NoSuchPathError("/tmp/missing")
        provider = GitRepositoryFactsProvider()

        with pytest.raises(RepositoryAccessError, match="path does not exist"):
            provider.head_commit(Path("/tmp/missing"))

    @patch("gitversioning.versioning.git.Repo")
    def test_repository_opened_once(self, mock_repo_class):
        mock_repo = MagicMock()
        mock_repo.head.is_valid.return_value = True
        mock_repo.head.commit.hexsha = "a" * 40
        mock_repo.head.is_detached = False
        mock_repo.active_branch.name = "main"
        mock_repo_class.return_value = mock_repo
        provider = GitRepositoryFactsProvider()

        assert provider.head_commit(Path("/repo")) == "a" * 40
        assert provider.head_branch(Path("/repo")) == "main"
        mock_repo_class.assert_called_once_with(
            Path("/repo"), search_parent_directories=True
        )

    @patch("gitversioning.versioning.git.Repo")
    def test_describe_failure_returns_none(self, mock_repo_class):
        mock_repo = MagicMock()
        mock_repo.git.describe.side_effect = GitCommandError("describe", 128)
        mock_repo_class.return_value = mock_repo
        provider = GitRepositoryFactsProvider()

        assert provider.describe(Path("/repo"), "v1.0.0") is None
        mock_repo.git.describe.assert_called_once_with(
            "--tags", "--long", "--match", "v1.0.0", "HEAD"
        )

    @patch("gitversioning.versioning.git.Repo")
    def test_tags_at_skips_tags_without_commit(self, mock_repo_class):
        good = MagicMock()
        good.name = "v1.0.0"
        good.object.type = "commit"
        good.object.hexsha = "a" * 40
        annotated = MagicMock()
        annotated.name = "v1.0.0-annotated"
        annotated.object.type = "tag"
        annotated.object.object.type = "commit"
        annotated.object.object.hexsha = "a" * 40
        other = MagicMock()
        other.name = "v0.9.0"
        other.object.type = "commit"
        other.object.hexsha = "b" * 40
        tree_tag = MagicMock()
        tree_tag.name = "tree"
        tree_tag.object.type = "tree"
        mock_repo = MagicMock()
        mock_repo.tags = [good, annotated, other, tree_tag]
        mock_repo_class.return_value = mock_repo
        provider = GitRepositoryFactsProvider()

        assert provider.tags_at(Path("/repo"), "a" * 40) == {
            "v1.0.0",
            "v1.0.0-annotated",
        }

    @patch("gitversioning.versioning.git.Repo")
    def test_unreadable_tag_is_an_error(self, mock_repo_class):
        broken = MagicMock()
        broken.name = "v1.0.0"
        type(broken).object = PropertyMock(
            side_effect=ValueError("Failed to parse reference information")
        )
        mock_repo = MagicMock()
        mock_repo.tags = [broken]
        mock_repo_class.return_value = mock_repo
        provider = GitRepositoryFactsProvider()

        with pytest.raises(RepositoryAccessError, match="cannot read tags"):
            provider.tags_at(Path("/repo"), "a" * 40)
        with pytest.raises(RepositoryAccessError, match="cannot read tags"):
            provider.most_recent_tag(Path("/repo"))

    @patch("gitversioning.versioning.git.Repo")
    def test_head_failures_are_wrapped(self, mock_repo_class):
        mock_repo = MagicMock()
        mock_repo.head.is_valid.side_effect = ValueError("bad HEAD")
        type(mock_repo.head).is_detached = PropertyMock(
            side_effect=ValueError("bad HEAD")
        )
        mock_repo.is_dirty.side_effect = GitCommandError("diff", 128)
        mock_repo_class.return_value = mock_repo
        provider = GitRepositoryFactsProvider()

        with pytest.raises(RepositoryAccessError, match="cannot resolve HEAD"):
            provider.head_commit(Path("/repo"))
        with pytest.raises(RepositoryAccessError, match="current branch"):
            provider.head_branch(Path("/repo"))
        with pytest.raises(RepositoryAccessError, match="working tree status"):
            provider.working_tree_is_clean(Path("/repo"))


@pytest.mark.integration
class TestGitProvider:
    def test_empty_repository(self, git_repo):
        provider = GitRepositoryFactsProvider()

        assert provider.head_commit(git_repo.path) == NO_COMMIT
        assert provider.tags_at(git_repo.path, NO_COMMIT) == set()
        assert provider.most_recent_tag(git_repo.path) is None

    def test_repository_root_from_subdirectory(self, git_repo):
        git_repo.commit()
        subdir = git_repo.path / "module" / "src"
        subdir.mkdir(parents=True)
        provider = GitRepositoryFactsProvider()

        assert provider.repository_root(subdir) == git_repo.path.resolve()

    def test_missing_directory(self, tmp_path):
        provider = GitRepositoryFactsProvider()

        with pytest.raises(RepositoryAccessError):
            provider.repository_root(tmp_path / "missing")

    def test_head_commit_and_branch(self, git_repo):
        head = git_repo.commit()
        provider = GitRepositoryFactsProvider()

        assert provider.head_commit(git_repo.path) == head
        assert provider.head_branch(git_repo.path) == "main"

    def test_detached_head_has_no_branch(self, git_repo):
        git_repo.commit()
        git_repo.detach()
        provider = GitRepositoryFactsProvider()

        assert provider.head_branch(git_repo.path) is None

    def test_tags_at_head(self, git_repo):
        git_repo.commit()
        git_repo.tag("v0.1.0")
        head = git_repo.commit()
        git_repo.tag("v1.0.0")
        git_repo.tag("latest", annotated=False)
        provider = GitRepositoryFactsProvider()

        assert provider.tags_at(git_repo.path, head) == {"v1.0.0", "latest"}

    def test_most_recent_tag_by_tagger_date(self, git_repo):
        git_repo.commit()
        git_repo.tag("v1.0.0", date=JAN_2020)
        git_repo.commit()
        # created later, but dated earlier
        git_repo.tag("v0.9.0", date=JAN_2019)
        provider = GitRepositoryFactsProvider()

        assert provider.most_recent_tag(git_repo.path) == "v1.0.0"

    def test_describe(self, git_repo):
        git_repo.commit()
        git_repo.tag("v1.0.0")
        git_repo.commit()
        head = git_repo.commit()
        provider = GitRepositoryFactsProvider()

        described = provider.describe(git_repo.path, "v1.0.0")

        assert described.startswith("v1.0.0-2-g")
        assert head.startswith(described.rsplit("-g", 1)[1])
        assert provider.describe(git_repo.path, "1.0.0") is None

    def test_working_tree_is_clean(self, git_repo):
        git_repo.commit()
        provider = GitRepositoryFactsProvider()
        assert provider.working_tree_is_clean(git_repo.path) is True

        (git_repo.path / "untracked.txt").write_text("new\n")
        assert provider.working_tree_is_clean(git_repo.path) is False

    def test_tag_on_tree_is_ignored(self, git_repo):
        head = git_repo.commit()
        git_repo.repo.git.tag("tree-tag", "HEAD^{tree}")
        git_repo.tag("v1.0.0")
        provider = GitRepositoryFactsProvider()

        assert provider.tags_at(git_repo.path, head) == {"v1.0.0"}
        assert provider.most_recent_tag(git_repo.path) == "v1.0.0"

    def test_corrupt_tag_ref(self, git_repo):
        git_repo.commit()
        git_repo.tag("v1.0.0", annotated=False)
        (git_repo.path / ".git" / "refs" / "tags" / "v1.0.0").write_text("not-a-sha\n")
        provider = GitRepositoryFactsProvider()

        with pytest.raises(RepositoryAccessError, match="cannot read tags"):
            provider.tags_at(git_repo.path, git_repo.head)
        with pytest.raises(RepositoryAccessError, match="cannot read tags"):
            provider.most_recent_tag(git_repo.path)


@pytest.mark.integration
class TestResolveAgainstRepository:
    @pytest.fixture
    def configuration(self):
        return VersioningConfiguration(
            branch=[
                VersionFormatRule(
                    pattern=r"main", format="${version.release}-${commit.short}"
                ),
            ],
            tag=[
                VersionFormatRule(
                    pattern=r"v(?<major>\d+)\.\d+\.\d+", prefix="v", format="${tag}"
                ),
            ],
            commit=VersionFormatRule(format="${commit}"),
        )

    def test_branch(self, git_repo, configuration):
        head = git_repo.commit()
        identifier = ProjectIdentifier(group="g", artifact="a", version="1.0.0-SNAPSHOT")

        resolved = VersionResolver(configuration).resolve(identifier, git_repo.path)

        assert resolved.version == f"1.0.0-{head[:7]}"
        assert resolved.ref_type == RefType.branch
        assert resolved.ref_name == "main"

    def test_tag_on_detached_head(self, git_repo, configuration):
        git_repo.commit()
        git_repo.tag("v2.3.4")
        git_repo.detach()
        identifier = ProjectIdentifier(group="g", artifact="a", version="1.0.0-SNAPSHOT")

        resolved = VersionResolver(configuration).resolve(identifier, git_repo.path)

        assert resolved.version == "2.3.4"
        assert resolved.ref_type == RefType.tag
        assert resolved.context["major"] == "2"
        assert resolved.context["lastTag"] == "v2.3.4"
        assert resolved.context["lastTag.commitCount"] == "0"

    def test_commit_on_unmatched_branch(self, git_repo, configuration):
        git_repo.commit()
        git_repo.branch("feature/login")
        head = git_repo.commit()
        identifier = ProjectIdentifier(group="g", artifact="a", version="1.0.0")

        resolved = VersionResolver(configuration).resolve(identifier, git_repo.path)

        assert resolved.version == head
        assert resolved.ref_type == RefType.commit

    def test_commit_count_since_nominal_version(self, git_repo):
        git_repo.commit()
        git_repo.tag("1.0.0")
        head = git_repo.commit()
        configuration = VersioningConfiguration(
            commit=VersionFormatRule(format="${version.commitCount}-${version.gcommit}")
        )
        identifier = ProjectIdentifier(group="g", artifact="a", version="1.0.0")

        resolved = VersionResolver(configuration).resolve(identifier, git_repo.path)

        assert resolved.version.startswith("1-g")
        assert head.startswith(resolved.version[len("1-g") :])

    def test_corrupt_tag_ref(self, git_repo, configuration):
        git_repo.commit()
        git_repo.tag("v1.0.0", annotated=False)
        (git_repo.path / ".git" / "refs" / "tags" / "v1.0.0").write_text("not-a-sha\n")
        identifier = ProjectIdentifier(group="g", artifact="a", version="1.0.0")

        with pytest.raises(RepositoryAccessError):
            VersionResolver(configuration).resolve(identifier, git_repo.path)

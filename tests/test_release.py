"""Tests for hadar.release."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from conftest import FakeRepository, RecordingGenerator, StaticTemplateSource

from hadar.catalog import VersionTagCatalog
from hadar.config import HadarConfig
from hadar.errors import CollaboratorError, InvalidArgumentError, VersionNotFoundError
from hadar.release import (
    add_changelog_entries,
    bump_project_version,
    create_release_body,
    parse_bump_suggestion,
    publish_github_release,
    push_version_tag,
    suggest_version_bump,
    tag_version,
    version_log_diff,
)
from hadar.toml import get_project_version, load_pyproject


@pytest.fixture
def repo() -> FakeRepository:
    return FakeRepository(
        tags=["v1.0.0", "v1.1.0"],
        logs={"v1.0.0..v1.1.0": "commit aaa\n", "v1.1.0..HEAD": "commit bbb\n"},
    )


@pytest.fixture
def config(tmp_pyproject: Path) -> HadarConfig:
    return HadarConfig.load(tmp_pyproject.parent, env={})


class TestVersionLogDiff:
    def test_pending_changes(self, repo: FakeRepository) -> None:
        versions = VersionTagCatalog(repo).versions()
        assert version_log_diff(repo, versions) == "commit bbb\n"

    def test_released_version(self, repo: FakeRepository) -> None:
        versions = VersionTagCatalog(repo).versions()
        assert version_log_diff(repo, versions, to_version="1.1.0") == "commit aaa\n"

    def test_unknown_version(self, repo: FakeRepository) -> None:
        versions = VersionTagCatalog(repo).versions()
        with pytest.raises(VersionNotFoundError):
            version_log_diff(repo, versions, to_version="2.0.0")


class TestCreateReleaseBody:
    def test_uses_release_prompt(self, repo: FakeRepository, config: HadarConfig) -> None:
        generator = RecordingGenerator("- Released")

        body = create_release_body(
            config, repo, VersionTagCatalog(repo), generator, StaticTemplateSource()
        )

        assert body == "- Released"
        ((system, prompt),) = generator.calls
        assert "new releases" in system
        assert "new release of demo-package 1.1.0" in prompt
        assert "commit aaa" in prompt


class TestParseBumpSuggestion:
    @pytest.mark.parametrize(
        "response, expected",
        [
            ("New features were added.\nminor", "minor"),
            ("Breaking API change.\nmajor\n", "major"),
            ("Only fixes.\nbuild  ", "build"),
            ("I think minor is right, maybe.", None),
            ("", None),
        ],
    )
    def test_parse(self, response: str, expected: str | None) -> None:
        assert parse_bump_suggestion(response) == expected


class TestSuggestVersionBump:
    @patch("hadar.release.step")
    def test_suggestion(
        self, mock_step: MagicMock, repo: FakeRepository, config: HadarConfig
    ) -> None:
        generator = RecordingGenerator("Adds a feature.\nminor")

        response, suggestion = suggest_version_bump(
            config, repo, VersionTagCatalog(repo), generator, StaticTemplateSource()
        )

        assert response == "Adds a feature.\nminor"
        assert suggestion == "minor"
        assert "current version 1.1.0" in generator.calls[0][1]
        assert "commit bbb" in generator.calls[0][1]


class TestBumpProjectVersion:
    @patch("hadar.release.step")
    def test_writes_pyproject(self, mock_step: MagicMock, config: HadarConfig) -> None:
        bump = bump_project_version(config, "minor")

        assert (bump.old, bump.new) == ("1.1.0", "1.2.0")
        assert get_project_version(load_pyproject(config.pyproject_path)) == "1.2.0"


class TestTagVersion:
    @patch("hadar.release.step")
    def test_creates_tag(self, mock_step: MagicMock, config: HadarConfig) -> None:
        repo = MagicMock()

        assert tag_version(config, repo)

        repo.tag.assert_called_once_with("v1.1.0", "Version 1.1.0", force=False)

    @patch("hadar.release.step")
    def test_identical_tag_exists(self, mock_step: MagicMock, config: HadarConfig) -> None:
        repo = MagicMock()
        repo.tag.side_effect = CollaboratorError("tag exists")
        repo.diff.return_value = ""

        assert not tag_version(config, repo)
        repo.diff.assert_called_once_with("v1.1.0", "HEAD")

    @patch("hadar.release.step")
    def test_different_tag_exists(self, mock_step: MagicMock, config: HadarConfig) -> None:
        repo = MagicMock()
        repo.tag.side_effect = CollaboratorError("tag exists")
        repo.diff.return_value = "+changed"

        with pytest.raises(CollaboratorError, match="--force"):
            tag_version(config, repo)


class TestPushVersionTag:
    @patch("hadar.release.step")
    def test_configured_remotes(self, mock_step: MagicMock, config: HadarConfig) -> None:
        repo = MagicMock()

        assert push_version_tag(config, repo) == ["origin", "mirror"]

        repo.push.assert_any_call("origin", "v1.1.0")
        repo.push.assert_any_call("mirror", "v1.1.0")
        repo.remotes.assert_not_called()

    @patch("hadar.release.step")
    def test_all_remotes(self, mock_step: MagicMock, config: HadarConfig) -> None:
        config.git_remotes = []
        repo = MagicMock()
        repo.remotes.return_value = ["origin"]

        assert push_version_tag(config, repo) == ["origin"]


class TestPublishGithubRelease:
    @patch("hadar.release.run")
    @patch("hadar.release.step")
    def test_calls_gh(
        self, mock_step: MagicMock, mock_run: MagicMock, config: HadarConfig
    ) -> None:
        repo = MagicMock()
        repo.github_slug.return_value = ("flori", "demo")
        repo.commit_hash.return_value = "abc123def4567890"

        publish_github_release(config, repo, "- Notes")

        mock_run.assert_called_once_with(
            "gh", "release", "create", "v1.1.0",
            "--repo", "flori/demo",
            "--target", "abc123def4567890",
            "--title", "v1.1.0",
            "--notes", "- Notes",
        )

    @patch("hadar.release.run")
    @patch("hadar.release.step")
    def test_gh_failure(
        self, mock_step: MagicMock, mock_run: MagicMock, config: HadarConfig
    ) -> None:
        repo = MagicMock()
        repo.github_slug.return_value = ("flori", "demo")
        repo.commit_hash.return_value = "abc"
        mock_run.side_effect = subprocess.CalledProcessError(1, ["gh"])

        with pytest.raises(CollaboratorError, match="v1.1.0"):
            publish_github_release(config, repo, "- Notes")

    @patch("hadar.release.run")
    @patch("hadar.release.step")
    def test_no_github_remote(
        self, mock_step: MagicMock, mock_run: MagicMock, config: HadarConfig
    ) -> None:
        repo = MagicMock()
        repo.github_slug.return_value = None

        with pytest.raises(InvalidArgumentError):
            publish_github_release(config, repo, "- Notes")
        mock_run.assert_not_called()


class TestAddChangelogEntries:
    @patch("hadar.release.step")
    def test_commits_when_added(self, mock_step: MagicMock, config: HadarConfig) -> None:
        repo = MagicMock()
        generator = MagicMock()
        generator.add_to_file.return_value = 2

        assert add_changelog_entries(config, repo, generator, commit=True) == 2

        generator.add_to_file.assert_called_once_with(config.changelog_path)
        repo.commit_file.assert_called_once_with("CHANGELOG.md", "Update changelog")

    @patch("hadar.release.step")
    def test_nothing_to_commit(self, mock_step: MagicMock, config: HadarConfig) -> None:
        repo = MagicMock()
        generator = MagicMock()
        generator.add_to_file.return_value = 0

        assert add_changelog_entries(config, repo, generator, commit=True) == 0
        repo.commit_file.assert_not_called()

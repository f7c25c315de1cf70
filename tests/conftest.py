"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from hadar.catalog import VersionTagCatalog
from hadar.changelog import ChangelogGenerator


class FakeRepository:
    """In-memory stand-in for GitRepository that records every call."""

    def __init__(
        self,
        tags: list[str] | None = None,
        dates: dict[str, str] | None = None,
        logs: dict[str, str] | None = None,
    ) -> None:
        self.tags = list(tags or [])
        self.dates = dates or {}
        self.logs = logs or {}
        self.calls: list[tuple[str, ...]] = []

    def list_tags(self) -> list[str]:
        self.calls.append(("list_tags",))
        return list(self.tags)

    def commit_date(self, ref: str) -> str:
        self.calls.append(("commit_date", ref))
        return self.dates.get(ref, "2024-01-01")

    def patch_log(self, from_ref: str, to_ref: str = "HEAD") -> str:
        self.calls.append(("patch_log", from_ref, to_ref))
        return self.logs.get(f"{from_ref}..{to_ref}", "")

    def diff(self, from_ref: str, to_ref: str = "HEAD") -> str:
        self.calls.append(("diff", from_ref, to_ref))
        return f"diff {from_ref}..{to_ref}"

    def fetch_tags(self) -> None:
        self.calls.append(("fetch_tags",))

    @property
    def patch_log_calls(self) -> list[tuple[str, str]]:
        return [(c[1], c[2]) for c in self.calls if c[0] == "patch_log"]


class RecordingGenerator:
    """Text generator returning a canned response."""

    def __init__(self, response: str = "- Changed things") -> None:
        self.response = response
        self.calls: list[tuple[str, str]] = []

    def generate(self, system: str, prompt: str) -> str:
        self.calls.append((system, prompt))
        return self.response


class StaticTemplateSource:
    """Template source with optional overrides and no filesystem access."""

    def __init__(self, overrides: dict[str, str] | None = None) -> None:
        self.overrides = overrides or {}

    def load(self, name: str, default: str) -> str:
        return self.overrides.get(name, default)


@pytest.fixture
def text_generator() -> RecordingGenerator:
    return RecordingGenerator()


@pytest.fixture
def make_changelog_generator(text_generator: RecordingGenerator):
    """Build a ChangelogGenerator around a FakeRepository."""

    def _make(
        repo: FakeRepository, changelog_filename: Path | None = None
    ) -> ChangelogGenerator:
        return ChangelogGenerator(
            repo,
            VersionTagCatalog(repo),
            text_generator,
            StaticTemplateSource(),
            changelog_filename=changelog_filename,
            project_name="demo",
        )

    return _make


@pytest.fixture
def tmp_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml file."""
    content = """\
[project]
name = "Demo_Package"
# keep this comment
version = "1.1.0"
dependencies = ["click>=8.0"]

[tool.hadar]
git_remotes = ["origin", "mirror"]

[tool.hadar.changelog]
filename = "CHANGELOG.md"
commit_message = "Update changelog"
"""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


@pytest.fixture
def changelog_file(tmp_path: Path) -> Path:
    path = tmp_path / "CHANGES.md"
    path.write_text(
        "# Changes\n"
        "\n"
        "## 2024-02-01 v1.1.0\n"
        "\n"
        "- Added X\n"
        "\n"
        "## 2024-01-01 v1.0.0\n"
        "\n"
        "* Start\n"
    )
    return path

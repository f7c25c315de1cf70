"""Project configuration.

Settings are read from the project's pyproject.toml::

    [project]
    name = "my-lib"
    version = "1.2.3"

    [tool.hadar]
    git_remotes = ["origin"]

    [tool.hadar.changelog]
    filename = "CHANGES.md"
    commit_message = "Add to changes"

``GIT_REMOTE`` (whitespace separated) overrides ``git_remotes``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .errors import InvalidArgumentError
from .toml import get_project_name, get_project_version, get_tool_settings, load_pyproject


class ChangelogConfig(BaseModel):
    """Where the changelog lives and how changes to it are committed.

    Attributes:
        filename: Changelog path, relative to the project root.
        commit_message: Message used when committing new entries.
    """

    filename: str = "CHANGES.md"
    commit_message: str = "Add to changes"


class HadarConfig(BaseModel):
    """Settings for one project.

    Attributes:
        root: Project root directory.
        name: Canonical project name.
        version: Current project version.
        changelog: Changelog settings.
        git_remotes: Remotes to push tags to; empty means every remote.
    """

    root: Path
    name: str
    version: str = "0.0.0"
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    git_remotes: list[str] = Field(default_factory=list)

    @property
    def pyproject_path(self) -> Path:
        return self.root / "pyproject.toml"

    @property
    def changelog_path(self) -> Path:
        return self.root / self.changelog.filename

    @classmethod
    def load(cls, root: Path, env: Mapping[str, str] | None = None) -> HadarConfig:
        """Read configuration from ``root/pyproject.toml`` and the environment.

        Raises:
            InvalidArgumentError: If pyproject.toml is missing or [tool.hadar]
                holds invalid values.
        """
        env = os.environ if env is None else env
        pyproject = root / "pyproject.toml"
        if not pyproject.exists():
            raise InvalidArgumentError(f"No pyproject.toml found in {root}")

        doc = load_pyproject(pyproject)
        settings = {
            key: value
            for key, value in get_tool_settings(doc).items()
            if key in ("changelog", "git_remotes")
        }
        remotes = env.get("GIT_REMOTE", "").split()
        if remotes:
            settings["git_remotes"] = remotes

        try:
            return cls(
                root=root,
                name=get_project_name(doc, root.name),
                version=get_project_version(doc),
                **settings,
            )
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid [tool.hadar] settings: {exc}") from exc

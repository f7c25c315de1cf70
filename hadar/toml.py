"""pyproject.toml access for hadar.

hadar reads the project name, version and ``[tool.hadar]`` settings from
pyproject.toml and writes back only ``[project].version``. Documents are
handled with tomlkit so a bump leaves comments and layout alone.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from packaging.utils import canonicalize_name


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    return tomlkit.parse(path.read_text(encoding="utf-8"))


def save_pyproject(path: Path, doc: tomlkit.TOMLDocument) -> None:
    path.write_text(tomlkit.dumps(doc), encoding="utf-8")


def get_project_name(doc: tomlkit.TOMLDocument, fallback: str) -> str:
    """Return the name used in prompts and release titles.

    Falls back to ``fallback`` (the project directory name) when
    ``[project].name`` is unset; either way the result is canonicalized, so
    ``Demo_Package`` becomes ``demo-package``.
    """
    return canonicalize_name(doc.get("project", {}).get("name", fallback))


def get_project_version(doc: tomlkit.TOMLDocument) -> str:
    """Return ``[project].version`` as a string; unreleased projects get 0.0.0."""
    return str(doc.get("project", {}).get("version", "0.0.0"))


def get_tool_settings(doc: tomlkit.TOMLDocument) -> dict[str, Any]:
    """Return the [tool.hadar] table as plain Python values."""
    table = doc.get("tool", {}).get("hadar", {})
    return table.unwrap() if hasattr(table, "unwrap") else dict(table)


def write_project_version(path: Path, new_version: str) -> str:
    """Set [project].version in a pyproject.toml, returning the old value."""
    doc = load_pyproject(path)
    if "project" not in doc:
        doc["project"] = tomlkit.table()
    project = doc["project"]
    old = str(project.get("version", "0.0.0"))
    project["version"] = new_version
    save_pyproject(path, doc)
    return old

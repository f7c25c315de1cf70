"""Prompt templates and where to find user overrides for them.

Each prompt has a built-in default. A user can replace any of them by
dropping a file of the same name into ``$XDG_CONFIG_HOME/hadar/`` (or
``~/.config/hadar/``). Templates use ``str.format`` placeholders:
``{log_diff}`` everywhere, plus ``{name}`` and ``{version}`` where noted.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Protocol

from .errors import InvalidArgumentError

CHANGELOG_SYSTEM_PROMPT = """\
You are a Python programmer generating changelog entries in markdown format
for a release, so users can see what has changed. Remember you are not a
chatbot of any kind.
"""

CHANGELOG_PROMPT = """\
Summarize the following log messages and patches as a changelog entry.

**Strictly** follow these guidelines:

  - Use bullet points in markdown format (`-`) to list significant changes.
  - Exclude trivial updates such as version number increments, dependency
    version bumps (unless they resolve critical issues) and minor style
    adjustments.
  - Include only verified and substantial changes that impact
    functionality, performance, or user experience.
  - Do not add a heading, a version number or any comments.

These are the log messages including patches:

{log_diff}
"""

RELEASE_SYSTEM_PROMPT = """\
You are a Python programmer generating changelog messages in markdown
format for new releases, so users can see what has changed. Remember you
are not a chatbot of any kind.
"""

# {name}, {version}, {log_diff}
RELEASE_PROMPT = """\
Output the content of a changelog for the new release of {name} {version}

**Strictly** follow these guidelines:

  - Use bullet points in markdown format (`-`) to list significant changes.
  - Exclude trivial updates such as:
    * Version number increments
    * Dependency version bumps (unless they resolve critical issues)
    * Minor code style adjustments
    * Internal documentation tweaks
  - Include only verified and substantial changes that impact
    functionality, performance, or user experience.
  - If unsure about a change's significance, omit it from the output.
  - Avoid adding any comments or notes; keep the output purely factual.

These are the log messages including patches for the new release:

{log_diff}
"""

VERSION_BUMP_SYSTEM_PROMPT = """\
You are an expert at semantic versioning. Analyze the provided changes
and suggest whether to bump major, minor, or build version according to
Semantic Versioning. Provide a brief explanation of your reasoning,
followed by a single line containing only one word: 'major', 'minor', or
'build'.
"""

# {version}, {log_diff}
VERSION_BUMP_PROMPT = """\
Given the current version {version} and the following changes:

{log_diff}

Please explain your reasoning for suggesting a version bump and then end
with a single line containing only one word: 'major', 'minor', or
'build'.
"""

DEFAULTS: dict[str, str] = {
    "changelog_system_prompt.txt": CHANGELOG_SYSTEM_PROMPT,
    "changelog_prompt.txt": CHANGELOG_PROMPT,
    "release_system_prompt.txt": RELEASE_SYSTEM_PROMPT,
    "release_prompt.txt": RELEASE_PROMPT,
    "version_bump_system_prompt.txt": VERSION_BUMP_SYSTEM_PROMPT,
    "version_bump_prompt.txt": VERSION_BUMP_PROMPT,
}


class TemplateSource(Protocol):
    def load(self, name: str, default: str) -> str: ...


class XDGTemplateSource:
    """Load templates from the user's XDG config directory.

    Files are read once per instance; a missing file means the default.
    """

    def __init__(self, app_name: str = "hadar", env: dict[str, str] | None = None) -> None:
        self.app_name = app_name
        self.env = os.environ if env is None else env
        self._cache: dict[str, str] = {}

    def config_dir(self) -> Path:
        xdg = self.env.get("XDG_CONFIG_HOME", "").strip()
        base = Path(xdg) if xdg else Path(self.env.get("HOME", str(Path.home()))) / ".config"
        return base / self.app_name

    def load(self, name: str, default: str) -> str:
        if name not in self._cache:
            path = self.config_dir() / name
            self._cache[name] = path.read_text() if path.is_file() else default
        return self._cache[name]


def load_template(source: TemplateSource, name: str) -> str:
    """Load a named template, falling back to its built-in default."""
    return source.load(name, DEFAULTS[name])


def render_prompt(template: str, template_name: str, /, **values: Any) -> str:
    """Fill a template's placeholders.

    Raises:
        InvalidArgumentError: If the template uses a placeholder that is not
            supplied, or is malformed.
    """
    try:
        return template.format_map(values)
    except KeyError as exc:
        raise InvalidArgumentError(
            f"Template {template_name} uses unknown placeholder {exc.args[0]!r}"
        ) from exc
    except (ValueError, IndexError) as exc:
        raise InvalidArgumentError(f"Template {template_name} is malformed: {exc}") from exc

"""Changelog generation from git history.

For every pair of consecutive release tags the patch log between them is
summarized by a language model and rendered as one changelog entry::

    ## 2024-02-01 v1.1.0

    - Added X

Ranges without commits get a header-only entry and never reach the model.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol, TextIO

from .catalog import VersionTagCatalog
from .document import CHANGES_HEADER, contains_version, find_highest_version, inject_entries
from .errors import CollaboratorError, InvalidArgumentError, VersionNotFoundError
from .models import ChangelogEntry
from .prompts import TemplateSource, load_template, render_prompt
from .ranges import resolve_range
from .versions import HEAD, VersionSpec, version_spec


class HistorySource(Protocol):
    def commit_date(self, ref: str) -> str: ...

    def patch_log(self, from_ref: str, to_ref: str = "HEAD") -> str: ...


class Generator(Protocol):
    def generate(self, system: str, prompt: str) -> str: ...


class ChangelogGenerator:
    """Generate changelog entries and keep a changelog file up to date.

    Args:
        repo: Supplies commit dates and patch logs.
        catalog: The release tags to generate entries for.
        text_generator: Summarizes patch logs.
        templates: Supplies the changelog prompt templates.
        changelog_filename: The project's changelog file.
        project_name: Substituted for ``{name}`` in prompt templates.

    An instance is not meant to be shared between threads.
    """

    def __init__(
        self,
        repo: HistorySource,
        catalog: VersionTagCatalog,
        text_generator: Generator,
        templates: TemplateSource,
        changelog_filename: str | Path | None = None,
        project_name: str = "",
    ) -> None:
        self.repo = repo
        self.catalog = catalog
        self.text_generator = text_generator
        self.templates = templates
        self.changelog_filename = Path(changelog_filename) if changelog_filename else None
        self.project_name = project_name

    def _fresh_versions(self) -> list[VersionSpec]:
        self.catalog.refresh()
        return self.catalog.versions()

    def generate_entry(self, from_version: Any = None, to_version: Any = HEAD) -> ChangelogEntry:
        """Generate the entry for the changes between two versions.

        Without ``from_version`` the start is resolved from the tags: the
        newest tag for HEAD, otherwise the tag before ``to_version``.

        Raises:
            VersionNotFoundError: If the start cannot be resolved.
            CollaboratorError: If git or the model fails.
        """
        to_spec = version_spec(to_version or HEAD)
        if from_version is None or (isinstance(from_version, str) and not from_version.strip()):
            from_spec = resolve_range(self._fresh_versions(), to_spec).from_version
        else:
            from_spec = version_spec(from_version)

        date = self.repo.commit_date(to_spec.tag())
        log = self.repo.patch_log(from_spec.tag(), to_spec.tag())

        if not log.strip():
            return ChangelogEntry(date=date, version_tag=to_spec.untag())

        system = load_template(self.templates, "changelog_system_prompt.txt")
        prompt = render_prompt(
            load_template(self.templates, "changelog_prompt.txt"),
            "changelog_prompt.txt",
            name=self.project_name,
            version=to_spec.untag(),
            log_diff=log,
        )
        response = self.text_generator.generate(system, prompt)
        body = response.replace("\t", "  ").strip("\n")
        if not body.strip():
            raise CollaboratorError(
                f"Empty changelog generated for range {from_spec.tag()}..{to_spec.tag()}"
            )
        return ChangelogEntry(date=date, version_tag=to_spec.tag(), body=body)

    def generate(self, from_version: Any = None, to_version: Any = HEAD) -> str:
        """Generate one rendered changelog entry."""
        return self.generate_entry(from_version, to_version).render()

    def _generate_pairs(self, versions: Sequence[VersionSpec]) -> list[str]:
        # Consecutive pairs only, oldest first.
        return [
            self.generate(range_from, range_to)
            for range_from, range_to in zip(versions, versions[1:])
        ]

    def generate_range(self, output: TextIO, from_version: Any, to_version: Any = HEAD) -> list[str]:
        """Write entries for every release between two versions, oldest first.

        Both ends are inclusive. With HEAD as the end, every tag from
        ``from_version`` on is included and the pending changes since the
        newest tag come last.

        Returns:
            The rendered entries in the order they were written.
        """
        from_spec = version_spec(from_version)
        to_spec = version_spec(to_version or HEAD)

        versions = self._fresh_versions()
        if not versions:
            raise VersionNotFoundError("No version tags found in repository")

        selected = [
            v for v in versions
            if v >= from_spec and (to_spec.is_latest or v <= to_spec)
        ]
        if to_spec.is_latest:
            selected.append(to_spec)

        entries = self._generate_pairs(selected)
        output.write("".join(entries))
        return entries

    def generate_full(self, output: TextIO) -> str:
        """Write a complete changelog document, newest entry first.

        The oldest release gets a synthetic ``* Start`` entry.
        """
        versions = self._fresh_versions()
        if not versions:
            raise VersionNotFoundError("No version tags found in repository")

        first = versions[0]
        start = ChangelogEntry(
            date=self.repo.commit_date(first.tag()),
            version_tag=first.tag(),
            body="* Start",
        )
        entries = [start.render(), *self._generate_pairs(versions)]
        entries.reverse()

        changelog = CHANGES_HEADER + "\n" + "".join(entries)
        output.write(changelog)
        return changelog

    def _changelog_path(self, filename: str | Path | None = None) -> Path:
        path = Path(filename) if filename else self.changelog_filename
        if path is None:
            raise InvalidArgumentError("No changelog filename configured")
        return path

    def add_to_file(self, filename: str | Path | None = None) -> int:
        """Add entries for releases newer than the file's highest version.

        Returns:
            The number of entries written; 0 when there is nothing new, every
            generated entry is already in the file, or the file has no
            ``# Changes`` header to insert below.

        Raises:
            InvalidArgumentError: If the file does not exist or has no
                version entry to continue from.
        """
        path = self._changelog_path(filename)
        if not path.exists():
            raise InvalidArgumentError(f"Changelog {str(path)!r} doesn't exist!")

        highest = find_highest_version(path)
        if highest is None:
            raise InvalidArgumentError(f"Could not find highest version in {str(path)!r}")

        versions = [v for v in self._fresh_versions() if v >= highest]
        if len(versions) < 2:
            return 0

        entries = self._generate_pairs(versions)
        entries.reverse()
        return inject_entries(path, entries)

    def changelog_exists(self) -> bool:
        return self.changelog_filename is not None and self.changelog_filename.exists()

    def is_version_documented(self, version: Any) -> bool:
        """Check whether the changelog already mentions ``version``.

        Raises:
            InvalidArgumentError: If the changelog file does not exist.
        """
        path = self._changelog_path()
        if not path.exists():
            raise InvalidArgumentError(f"Changelog {str(path)!r} doesn't exist!")
        return contains_version(path, version_spec(version))

"""Release tasks: log diff → bump → tag → publish.

These tasks drive a release of the current project:
1. Show what changed since the last release (log diff, version diff)
2. Suggest and apply a version bump to pyproject.toml
3. Tag the release and push the tag
4. Publish release notes to GitHub Releases
5. Record new changelog entries and commit them

Progress is printed the same way for every task: a step header followed by
indented detail lines.
"""

from __future__ import annotations

import re
import subprocess
from typing import Any

from .catalog import VersionTagCatalog
from .changelog import ChangelogGenerator, Generator
from .config import HadarConfig
from .errors import CollaboratorError, InvalidArgumentError
from .git import GitRepository
from .models import VersionBump
from .prompts import TemplateSource, load_template, render_prompt
from .ranges import resolve_range
from .shell import run, step
from .toml import write_project_version
from .versions import HEAD, VersionSpec, bump_version, version_spec

BUMP_SUGGESTION_RE = re.compile(r"(major|minor|build)\s*\Z")


def version_log_diff(
    repo: GitRepository,
    versions: list[VersionSpec],
    to_version: Any = HEAD,
    from_version: Any = None,
) -> str:
    """Return the patch log for a range resolved against the tags.

    See :func:`hadar.ranges.resolve_range` for how a missing start is
    derived.
    """
    resolved = resolve_range(versions, to_version, from_version)
    return repo.patch_log(resolved.from_version.tag(), resolved.to_version.tag())


def create_release_body(
    config: HadarConfig,
    repo: GitRepository,
    catalog: VersionTagCatalog,
    text_generator: Generator,
    templates: TemplateSource,
) -> str:
    """Generate release notes for the project's current version."""
    log_diff = version_log_diff(repo, catalog.versions(), to_version=config.version)
    system = load_template(templates, "release_system_prompt.txt")
    prompt = render_prompt(
        load_template(templates, "release_prompt.txt"),
        "release_prompt.txt",
        name=config.name,
        version=config.version,
        log_diff=log_diff,
    )
    return text_generator.generate(system, prompt)


def parse_bump_suggestion(response: str) -> str | None:
    """Extract the bump type a model answer ends with, if it ends with one."""
    match = BUMP_SUGGESTION_RE.search(response)
    return match.group(1) if match else None


def suggest_version_bump(
    config: HadarConfig,
    repo: GitRepository,
    catalog: VersionTagCatalog,
    text_generator: Generator,
    templates: TemplateSource,
) -> tuple[str, str | None]:
    """Ask the model how to bump the version for the pending changes.

    Returns:
        Tuple of (full model answer, suggested part or None).
    """
    step("Suggesting version bump")
    log_diff = version_log_diff(repo, catalog.versions())
    system = load_template(templates, "version_bump_system_prompt.txt")
    prompt = render_prompt(
        load_template(templates, "version_bump_prompt.txt"),
        "version_bump_prompt.txt",
        version=config.version,
        log_diff=log_diff,
    )
    response = text_generator.generate(system, prompt)
    return response, parse_bump_suggestion(response)


def bump_project_version(config: HadarConfig, part: str) -> VersionBump:
    """Bump the project version in pyproject.toml.

    Args:
        config: Project configuration; its version is the starting point.
        part: One of "major", "minor" or "build".
    """
    step(f"Bumping {part} version")
    bump = VersionBump(old=config.version, new=bump_version(config.version, part))
    write_project_version(config.pyproject_path, bump.new)
    print(f"  {config.name}: {bump.old} → {bump.new}")
    return bump


def tag_version(config: HadarConfig, repo: GitRepository, *, force: bool = False) -> bool:
    """Create the annotated tag for the current version.

    Returns:
        True if a tag was created, False if an identical one already exists.

    Raises:
        CollaboratorError: If a tag pointing at different content exists and
            force is not set.
    """
    spec = version_spec(config.version)
    tag = spec.tag()
    step(f"Tagging version {spec.untag()}")
    try:
        repo.tag(tag, f"Version {spec.untag()}", force=force)
    except CollaboratorError:
        if repo.diff(tag, HEAD).strip():
            raise CollaboratorError(
                f"Different version tag {tag} already exists, use --force to overwrite"
            ) from None
        print(f"  Version {spec.untag()} is already tagged, but it's no different")
        return False
    print(f"  {tag}")
    return True


def push_version_tag(config: HadarConfig, repo: GitRepository) -> list[str]:
    """Push the current version's tag to every configured remote."""
    step("Pushing version tag")
    tag = version_spec(config.version).tag()
    remotes = config.git_remotes or repo.remotes()
    for remote in remotes:
        repo.push(remote, tag)
        print(f"  {remote}: {tag}")
    return remotes


def publish_github_release(config: HadarConfig, repo: GitRepository, body: str) -> None:
    """Create a GitHub release for the current version's tag with ``gh``.

    Raises:
        InvalidArgumentError: If no GitHub push remote is configured.
        CollaboratorError: If gh fails.
    """
    step("Creating GitHub release")
    slug = repo.github_slug()
    if slug is None:
        raise InvalidArgumentError("Could not derive github remote url from git remotes")
    owner, name = slug
    tag = version_spec(config.version).tag()
    target = repo.commit_hash(tag)
    print(f"  {owner}/{name} {tag} ({target[:12]})")
    try:
        run(
            "gh",
            "release",
            "create",
            tag,
            "--repo",
            f"{owner}/{name}",
            "--target",
            target,
            "--title",
            tag,
            "--notes",
            body,
        )
    except (subprocess.CalledProcessError, OSError) as exc:
        raise CollaboratorError(f"Failed to create GitHub release {tag}: {exc}") from exc


def add_changelog_entries(
    config: HadarConfig,
    repo: GitRepository,
    generator: ChangelogGenerator,
    *,
    commit: bool = False,
) -> int:
    """Add entries for new releases to the changelog, optionally committing."""
    step(f"Adding new releases to {config.changelog.filename}")
    added = generator.add_to_file(config.changelog_path)
    if not added:
        print("  No changes to add")
        return 0
    print(f"  Added {added} entries")
    if commit:
        repo.commit_file(config.changelog.filename, config.changelog.commit_message)
        print(f"  Committed: {config.changelog.commit_message}")
    return added

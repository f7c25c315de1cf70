"""CLI entry point for hadar."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from .catalog import VersionTagCatalog
from .changelog import ChangelogGenerator
from .config import HadarConfig
from .errors import HadarError
from .git import GitRepository
from .llm import OllamaSettings, TextGenerator
from .prompts import XDGTemplateSource
from .ranges import determine_version_range
from .release import (
    add_changelog_entries,
    bump_project_version,
    create_release_body,
    push_version_tag,
    publish_github_release,
    suggest_version_bump,
    tag_version,
    version_log_diff,
)
from .shell import step
from .versions import BUMP_PARTS, HEAD


class Project:
    """Collaborators for the project in ``root``, created on first use."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self._config: HadarConfig | None = None
        self._text_generator: TextGenerator | None = None
        self.repo = GitRepository(root)
        self.catalog = VersionTagCatalog(self.repo)
        self.templates = XDGTemplateSource()

    @property
    def config(self) -> HadarConfig:
        if self._config is None:
            self._config = HadarConfig.load(self.root)
        return self._config

    @property
    def text_generator(self) -> TextGenerator:
        if self._text_generator is None:
            self._text_generator = TextGenerator(OllamaSettings.from_env())
        return self._text_generator

    def changelog_generator(self) -> ChangelogGenerator:
        return ChangelogGenerator(
            self.repo,
            self.catalog,
            self.text_generator,
            self.templates,
            changelog_filename=self.config.changelog_path,
            project_name=self.config.name,
        )


class HadarGroup(click.Group):
    """Report hadar errors as ordinary CLI failures."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except HadarError as exc:
            raise click.ClickException(str(exc)) from exc


pass_project = click.make_pass_decorator(Project)


@click.group(cls=HadarGroup)
@click.version_option(package_name="hadar")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Version, changelog and release tasks for Python projects."""
    ctx.obj = Project(Path.cwd())


# changelog


@cli.group()
def changelog() -> None:
    """Generate changelog entries from the git history."""


@changelog.command("full")
@click.option("-o", "--output", type=click.File("w"), default="-", help="Where to write.")
@pass_project
def changelog_full(project: Project, output) -> None:
    """Write a complete changelog, newest release first."""
    project.changelog_generator().generate_full(output)


@changelog.command("range")
@click.argument("from_version")
@click.argument("to_version", default=HEAD)
@click.option("-o", "--output", type=click.File("w"), default="-", help="Where to write.")
@pass_project
def changelog_range(project: Project, from_version: str, to_version: str, output) -> None:
    """Write entries for every release from FROM_VERSION to TO_VERSION."""
    project.changelog_generator().generate_range(output, from_version, to_version)


@changelog.command("entry")
@click.option("--from", "from_version", default=None, help="Start version; derived if omitted.")
@click.option("--to", "to_version", default=HEAD, show_default=True, help="End version.")
@pass_project
def changelog_entry(project: Project, from_version: str | None, to_version: str) -> None:
    """Write a single entry, by default for the unreleased changes."""
    click.echo(project.changelog_generator().generate(from_version, to_version))


@changelog.command("add")
@click.option("--commit", is_flag=True, help="Commit the changelog afterwards.")
@pass_project
def changelog_add(project: Project, commit: bool) -> None:
    """Add entries for releases missing from the changelog file."""
    add_changelog_entries(
        project.config, project.repo, project.changelog_generator(), commit=commit
    )


@changelog.command("added")
@click.argument("version")
@pass_project
def changelog_added(project: Project, version: str) -> None:
    """Exit 0 if VERSION is mentioned in the changelog, 1 otherwise."""
    if project.changelog_generator().is_version_documented(version):
        click.echo(f"{version} is in {project.config.changelog.filename}")
    else:
        click.echo(f"{version} is not in {project.config.changelog.filename}")
        sys.exit(1)


# version


@cli.group()
def version() -> None:
    """Inspect, bump and tag the project version."""


@version.command("list")
@click.option("--fetch", is_flag=True, help="Fetch tags from the remote first.")
@pass_project
def version_list(project: Project, fetch: bool) -> None:
    """List all released versions in order."""
    if fetch:
        project.repo.fetch_tags()
    for v in project.catalog.versions():
        click.echo(v.untag())


@version.command("show")
@pass_project
def version_show(project: Project) -> None:
    """Show the current project version."""
    click.echo(f"{project.config.name} {project.config.version}")


@version.command("diff")
@click.argument("version", required=False)
@pass_project
def version_diff(project: Project, version: str | None) -> None:
    """Show the diff from VERSION (default: current) to the next version or HEAD."""
    start, end = determine_version_range(
        project.catalog.versions(), version or project.config.version
    )
    click.echo(f"Showing diff from version {start} to {end}:")
    click.echo(project.repo.diff(start, end))


@version.command("log-diff")
@click.option("--from", "from_version", default=None, help="Start version; derived if omitted.")
@click.option("--to", "to_version", default=HEAD, show_default=True, help="End version.")
@pass_project
def version_log_diff_cmd(project: Project, from_version: str | None, to_version: str) -> None:
    """Show log messages with patches for a version range."""
    click.echo(
        version_log_diff(project.repo, project.catalog.versions(), to_version, from_version)
    )


@version.command("bump")
@click.argument("part", type=click.Choice(BUMP_PARTS), required=False)
@pass_project
def version_bump(project: Project, part: str | None) -> None:
    """Bump PART of the version, or ask the model for a suggestion."""
    if part is None:
        response, suggestion = suggest_version_bump(
            project.config,
            project.repo,
            project.catalog,
            project.text_generator,
            project.templates,
        )
        click.echo(response)
        part = click.prompt(
            "Bump a major, minor, or build version?",
            type=click.Choice(BUMP_PARTS),
            default=suggestion,
        )
    bump_project_version(project.config, part)


@version.command("tag")
@click.option("--force", is_flag=True, help="Overwrite an existing tag.")
@click.option("--push", is_flag=True, help="Push the tag to the configured remotes.")
@pass_project
def version_tag(project: Project, force: bool, push: bool) -> None:
    """Tag the current commit with the project version."""
    tag_version(project.config, project.repo, force=force)
    if push:
        push_version_tag(project.config, project.repo)


# github


@cli.group()
def github() -> None:
    """GitHub release tasks."""


@github.command("release")
@click.option("--yes", is_flag=True, help="Publish without asking.")
@pass_project
def github_release(project: Project, yes: bool) -> None:
    """Create a GitHub release for the current version with generated notes."""
    if not yes and not click.confirm("Do you want to publish a release message on github?"):
        click.echo("Skipping publication of a github release message.")
        return
    step("Generating release notes")
    body = create_release_body(
        project.config,
        project.repo,
        project.catalog,
        project.text_generator,
        project.templates,
    )
    edited = click.edit(body, extension=".md")
    if edited is not None:
        body = edited
    if not body.strip():
        click.echo("Skipping creation of github release message.")
        return
    publish_github_release(project.config, project.repo, body)


def main() -> None:
    cli()

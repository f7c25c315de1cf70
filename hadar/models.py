"""Data models for hadar.

These Pydantic models carry results between the tag catalog, the range
resolver and the changelog generator.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .versions import VersionSpec


class ResolvedRange(BaseModel):
    """A concrete span of history to summarize.

    Attributes:
        from_version: Tagged starting point, always present in the catalog.
        to_version: Tagged end point, or the HEAD marker.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    from_version: VersionSpec
    to_version: VersionSpec

    @property
    def git_range(self) -> str:
        """The range in git revision syntax, e.g. ``v1.0.0..v1.1.0``."""
        return f"{self.from_version.tag()}..{self.to_version.tag()}"


class ChangelogEntry(BaseModel):
    """One section of a changelog document.

    Attributes:
        date: Commit date (YYYY-MM-DD) of the entry's end point.
        version_tag: Rendered tag of the end point, ``HEAD`` for pending
            changes, or the bare version for an entry without changes.
        body: Generated markdown; empty when the range had no commits.
    """

    model_config = ConfigDict(frozen=True)

    date: str
    version_tag: str
    body: str = ""

    @property
    def header(self) -> str:
        return f"## {self.date} {self.version_tag}"

    def render(self) -> str:
        """Render the entry as it appears in a changelog file."""
        if not self.body:
            return f"\n{self.header}\n"
        return f"\n{self.header}\n\n{self.body}\n"


class VersionBump(BaseModel):
    """Records a version change for the project.

    Attributes:
        old: The version before bumping.
        new: The version after bumping.
    """

    old: str
    new: str

"""The catalog of released versions, built from git tags."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from .versions import VERSION_TAG_RE, VersionSpec, version_spec


class TagSource(Protocol):
    def list_tags(self) -> list[str]: ...


def parse_version_tags(tags: Iterable[str]) -> list[VersionSpec]:
    """Turn raw tag names into ascending, deduplicated version specs.

    Only tags that are exactly ``[v]MAJOR.MINOR.PATCH`` survive; everything
    else (``bogus``, ``2.0``, ``v1.0.0-rc1``) is dropped. Specs are stored
    without the ``v`` prefix. If two tags name the same version (``v1.0.0``
    and ``1.0.0``) the first one wins.
    """
    seen: set[VersionSpec] = set()
    versions: list[VersionSpec] = []
    for tag in tags:
        tag = tag.strip()
        if not VERSION_TAG_RE.fullmatch(tag):
            continue
        spec = version_spec(tag, without_prefix=True)
        if spec in seen:
            continue
        seen.add(spec)
        versions.append(spec)
    return sorted(versions)


class VersionTagCatalog:
    """Ascending list of tagged versions, read once per top-level operation.

    The tag listing is cached on first use; call :meth:`refresh` (or build a
    new catalog) when the tag set may have changed.
    """

    def __init__(self, tag_source: TagSource) -> None:
        self.tag_source = tag_source
        self._versions: list[VersionSpec] | None = None

    def versions(self) -> list[VersionSpec]:
        """Return all tagged versions in ascending order.

        Errors from the tag source propagate unchanged.
        """
        if self._versions is None:
            self._versions = parse_version_tags(self.tag_source.list_tags())
        return list(self._versions)

    def refresh(self) -> None:
        """Forget the cached tag listing."""
        self._versions = None

    def __contains__(self, version: object) -> bool:
        return any(v == version for v in self.versions())

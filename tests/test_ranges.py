"""Tests for hadar.ranges."""

from __future__ import annotations

import pytest

from hadar.catalog import parse_version_tags
from hadar.errors import InvalidArgumentError, VersionNotFoundError
from hadar.ranges import determine_version_range, resolve_range
from hadar.versions import VersionSpec


@pytest.fixture
def versions() -> list[VersionSpec]:
    return parse_version_tags(["v1.0.0", "v1.1.0", "v1.2.0"])


class TestResolveRangeToHead:
    def test_defaults_to_newest_tag(self, versions: list[VersionSpec]) -> None:
        resolved = resolve_range(versions)

        assert resolved.from_version.tag() == "v1.2.0"
        assert resolved.to_version.is_latest
        assert resolved.git_range == "v1.2.0..HEAD"

    def test_blank_start_is_derived(self, versions: list[VersionSpec]) -> None:
        assert resolve_range(versions, "HEAD", "  ").from_version.tag() == "v1.2.0"

    def test_explicit_start(self, versions: list[VersionSpec]) -> None:
        resolved = resolve_range(versions, "HEAD", "v1.0.0")
        assert resolved.git_range == "v1.0.0..HEAD"

    def test_unknown_start(self, versions: list[VersionSpec]) -> None:
        with pytest.raises(VersionNotFoundError, match="0.9.0"):
            resolve_range(versions, "HEAD", "0.9.0")

    def test_empty_catalog(self) -> None:
        with pytest.raises(VersionNotFoundError, match="No version tags"):
            resolve_range([], "HEAD")


class TestResolveRangeToVersion:
    def test_defaults_to_predecessor(self, versions: list[VersionSpec]) -> None:
        resolved = resolve_range(versions, "1.2.0")
        assert resolved.git_range == "v1.1.0..v1.2.0"

    def test_accepts_prefixed_target(self, versions: list[VersionSpec]) -> None:
        assert resolve_range(versions, "v1.1.0").git_range == "v1.0.0..v1.1.0"

    def test_first_version_has_no_predecessor(self, versions: list[VersionSpec]) -> None:
        with pytest.raises(VersionNotFoundError, match="version before '1.0.0'"):
            resolve_range(versions, "1.0.0")

    def test_only_version_has_no_predecessor(self) -> None:
        with pytest.raises(VersionNotFoundError):
            resolve_range(parse_version_tags(["v1.0.0"]), "1.0.0")

    def test_unknown_target(self, versions: list[VersionSpec]) -> None:
        with pytest.raises(VersionNotFoundError, match="2.0.0"):
            resolve_range(versions, "2.0.0")

    def test_explicit_start(self, versions: list[VersionSpec]) -> None:
        resolved = resolve_range(versions, "1.2.0", "1.0.0")
        assert resolved.git_range == "v1.0.0..v1.2.0"

    def test_unknown_explicit_start(self, versions: list[VersionSpec]) -> None:
        with pytest.raises(VersionNotFoundError):
            resolve_range(versions, "1.2.0", "0.1.0")

    def test_start_must_precede_end(self, versions: list[VersionSpec]) -> None:
        with pytest.raises(InvalidArgumentError):
            resolve_range(versions, "1.1.0", "1.2.0")
        with pytest.raises(InvalidArgumentError):
            resolve_range(versions, "1.1.0", "1.1.0")

    def test_resolved_specs_come_from_catalog(self, versions: list[VersionSpec]) -> None:
        resolved = resolve_range(versions, "v1.2.0", "v1.1.0")
        assert resolved.from_version is versions[1]
        assert resolved.to_version is versions[2]


class TestDetermineVersionRange:
    def test_next_version(self, versions: list[VersionSpec]) -> None:
        assert determine_version_range(versions, "1.1.0") == ("v1.1.0", "v1.2.0")

    def test_newest_version_ends_at_head(self, versions: list[VersionSpec]) -> None:
        assert determine_version_range(versions, "1.2.0") == ("v1.2.0", "HEAD")

    def test_untagged_version(self, versions: list[VersionSpec]) -> None:
        with pytest.raises(VersionNotFoundError, match="v1.3.0"):
            determine_version_range(versions, "1.3.0")

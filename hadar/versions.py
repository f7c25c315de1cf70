"""Version specs, parsing and bumping.

A :class:`VersionSpec` wraps the string a user or git handed us (``"v1.2.3"``,
``"1.2.3"`` or the ``"HEAD"`` marker) together with its parsed semantic
version, if there is one. Specs are built through :func:`version_spec`, which
is safe to call on something that already is a spec.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import semver

from .errors import IncomparableVersionError, InvalidArgumentError

HEAD = "HEAD"

# Full-string match only: no pre-release or build suffixes.
VERSION_TAG_RE = re.compile(r"v?([0-9]+)\.([0-9]+)\.([0-9]+)")

BUMP_PARTS = ("major", "minor", "build")


@dataclass(frozen=True, eq=False)
class VersionSpec:
    """A version string plus its parsed semver triple.

    Exactly one of these holds: ``parsed`` is set, ``is_latest`` is true, or
    neither (an unparseable string). Equality compares parsed triples (or the
    latest marker), never the raw strings, so ``v1.2.3 == 1.2.3``.

    Attributes:
        raw: The stored string, after any prefix normalisation.
        parsed: The parsed version, or None if ``raw`` is not ``[v]X.Y.Z``.
    """

    raw: str
    parsed: semver.Version | None = None

    @property
    def is_latest(self) -> bool:
        """True if this spec stands for the latest commit rather than a tag."""
        return self.raw == HEAD

    def tag(self) -> str:
        """Return the git tag name: ``v`` prefixed, or ``HEAD`` unchanged."""
        if self.is_latest:
            return self.raw
        return self.raw if self.raw.startswith("v") else "v" + self.raw

    def untag(self) -> str:
        """Return the bare version string without the ``v`` prefix."""
        if self.is_latest:
            return self.raw
        return self.raw[1:] if self.raw.startswith("v") else self.raw

    def compare(self, other: VersionSpec) -> int:
        """Compare parsed triples, returning -1, 0 or 1.

        Raises:
            TypeError: If other is not a VersionSpec.
            IncomparableVersionError: If either side has no parsed version
                (this includes two ``HEAD`` specs).
        """
        if not isinstance(other, VersionSpec):
            raise TypeError(
                f"Cannot compare VersionSpec with {type(other).__name__}"
            )
        if self.parsed is None or other.parsed is None:
            raise IncomparableVersionError(
                f"Cannot order {self.raw!r} and {other.raw!r}"
            )
        return self.parsed.compare(other.parsed)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionSpec):
            return NotImplemented
        if self.is_latest and other.is_latest:
            return True
        return (
            self.parsed is not None
            and other.parsed is not None
            and self.parsed.to_tuple()[:3] == other.parsed.to_tuple()[:3]
        )

    def __hash__(self) -> int:
        if self.parsed is not None:
            return hash(self.parsed.to_tuple()[:3])
        return hash(self.raw) if self.is_latest else id(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionSpec):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, VersionSpec):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, VersionSpec):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, VersionSpec):
            return NotImplemented
        return self.compare(other) >= 0

    def __str__(self) -> str:
        return self.raw


def version_spec(
    spec: Any, *, with_prefix: bool = False, without_prefix: bool = False
) -> VersionSpec:
    """Build a VersionSpec from a string, a semver.Version, or a spec.

    Args:
        spec: The value to parse. A VersionSpec is returned unchanged. A
            ``semver.Version``, or an object whose ``version`` attribute is
            one (or is a version string), contributes its triple directly.
        with_prefix: Store the string with a leading ``v``.
        without_prefix: Store the string without a leading ``v``.

    Raises:
        InvalidArgumentError: If both prefix modes are requested.
    """
    if with_prefix and without_prefix:
        raise InvalidArgumentError("with_prefix and without_prefix are exclusive")
    if isinstance(spec, VersionSpec):
        return spec

    parsed: semver.Version | None = None
    if isinstance(spec, semver.Version):
        parsed = spec
    else:
        attr = getattr(spec, "version", None)
        if isinstance(attr, semver.Version):
            parsed, spec = attr, attr
        elif isinstance(attr, str) and VERSION_TAG_RE.fullmatch(attr):
            spec = attr

    raw = str(spec)
    if parsed is None:
        match = VERSION_TAG_RE.fullmatch(raw)
        if match:
            parsed = semver.Version(*(int(part) for part in match.groups()))

    if parsed is not None:
        if with_prefix and not raw.startswith("v"):
            raw = "v" + raw
        elif without_prefix and raw.startswith("v"):
            raw = raw[1:]

    return VersionSpec(raw=raw, parsed=parsed)


def parse_version(version_str: str) -> semver.Version:
    """Parse a project version string into a semver.Version object.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "v1.2.3" → "1.2.3"

    Only the first 3 components are used (major.minor.patch).
    Prerelease/build metadata is not supported.
    """
    parts = version_str.strip().removeprefix("v").split(".")
    while len(parts) < 3:
        parts.append("0")
    try:
        return semver.Version.parse(".".join(parts[:3]))
    except ValueError as exc:
        raise InvalidArgumentError(f"Invalid version {version_str!r}") from exc


def bump_version(version_str: str, part: str) -> str:
    """Increment one component of a version and return it as a string.

    Lower components are reset to zero; ``build`` is the patch component.

    Examples:
        ("1.2.3", "major") → "2.0.0"
        ("1.2.3", "minor") → "1.3.0"
        ("1.2", "build") → "1.2.1"
    """
    version = parse_version(version_str)
    if part == "major":
        return str(version.bump_major())
    if part == "minor":
        return str(version.bump_minor())
    if part == "build":
        return str(version.bump_patch())
    raise InvalidArgumentError(
        f"Unknown version part {part!r}, expected one of {', '.join(BUMP_PARTS)}"
    )

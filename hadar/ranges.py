"""Resolving version ranges against the tag catalog.

These functions are pure: they work on an already loaded, ascending list of
versions and never talk to git themselves.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .errors import InvalidArgumentError, VersionNotFoundError
from .models import ResolvedRange
from .versions import HEAD, VersionSpec, version_spec


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _find(versions: Sequence[VersionSpec], wanted: VersionSpec) -> VersionSpec:
    for v in versions:
        if v == wanted:
            return v
    raise VersionNotFoundError(f"Could not find {str(wanted)!r}.")


def resolve_range(
    versions: Sequence[VersionSpec],
    to_version: Any = HEAD,
    from_version: Any = None,
) -> ResolvedRange:
    """Determine the concrete range to diff.

    When ``to_version`` is HEAD and no start is given, the range starts at
    the newest tag. When ``to_version`` is a tag and no start is given, the
    range starts at the tag immediately before it; the very first tag has no
    predecessor and is an error rather than a diff from the beginning of
    history.

    Args:
        versions: Tagged versions in ascending order.
        to_version: End of the range, a version or ``HEAD``.
        from_version: Optional start of the range; blank means "derive it".

    Raises:
        VersionNotFoundError: If a named version is not tagged, the catalog
            is empty, or no predecessor exists.
        InvalidArgumentError: If an explicit start does not come before the
            end.
    """
    to_spec = version_spec(HEAD if _blank(to_version) else to_version)

    if to_spec.is_latest:
        if _blank(from_version):
            if not versions:
                raise VersionNotFoundError("No version tags found in repository")
            from_spec = versions[-1]
        else:
            from_spec = _find(versions, version_spec(from_version))
        return ResolvedRange(from_version=from_spec, to_version=to_spec)

    to_spec = _find(versions, to_spec)
    if _blank(from_version):
        from_spec = None
        for previous, current in zip(versions, versions[1:]):
            if current == to_spec:
                from_spec = previous
                break
        if from_spec is None:
            raise VersionNotFoundError(
                f"Could not find version before {str(to_spec)!r}."
            )
    else:
        from_spec = _find(versions, version_spec(from_version))
        if from_spec >= to_spec:
            raise InvalidArgumentError(
                f"Range {from_spec.tag()}..{to_spec.tag()} is empty: "
                "start must come before end"
            )
    return ResolvedRange(from_version=from_spec, to_version=to_spec)


def determine_version_range(
    versions: Sequence[VersionSpec], version: Any
) -> tuple[str, str]:
    """Find the tags bracketing the changes released as ``version``.

    Returns:
        ``(start_tag, end_tag)``: the tag of ``version`` and the next tag,
        or ``HEAD`` if ``version`` is the newest release.

    Raises:
        VersionNotFoundError: If ``version`` is not tagged.
    """
    wanted = version_spec(version)
    tags = [v.tag() for v in versions] + [HEAD]
    for index, v in enumerate(versions):
        if v == wanted:
            return tags[index], tags[index + 1]
    raise VersionNotFoundError(f"Cannot find version tag {wanted.tag()!r}")

"""Reading and editing changelog documents.

A changelog document has a single ``# Changes`` header followed by entries
headed ``## YYYY-MM-DD vX.Y.Z``, newest first.
"""

from __future__ import annotations

import os
import re
import shutil
import tempfile
from collections.abc import Iterable
from pathlib import Path

from .versions import VersionSpec, version_spec

CHANGES_HEADER = "# Changes"

ENTRY_HEADER_RE = re.compile(r"## [0-9]{4}-[0-9]{2}-[0-9]{2} v([0-9]+\.[0-9]+\.[0-9]+)")


def _entry_header(entry: str) -> str | None:
    for line in entry.splitlines():
        if line.startswith("## "):
            return line
    return None


def find_highest_version(path: Path) -> VersionSpec | None:
    """Return the highest version with an entry header in the file, if any."""
    specs: list[VersionSpec] = []
    with open(path, encoding="utf-8") as fh:
        for line in fh:
            match = ENTRY_HEADER_RE.fullmatch(line.rstrip("\r\n"))
            if match:
                specs.append(version_spec(match.group(1)))
    return max(specs) if specs else None


def contains_version(path: Path, version: VersionSpec) -> bool:
    """Check whether any line mentions the version's tag.

    This is a plain substring test: a tag quoted in prose counts too.
    """
    tag = version.tag()
    with open(path, encoding="utf-8") as fh:
        return any(tag in line for line in fh)


def inject_entries(path: Path, entries: Iterable[str]) -> int:
    """Insert entries below the ``# Changes`` header of a changelog file.

    Lines are copied until the header, then until the first blank line after
    it; the entries are written just before that blank line. Entries whose
    ``## ...`` header line is already in the file are skipped.

    The new content goes to a temporary file in the same directory which
    then replaces the original, so a failure leaves the file untouched.

    Returns:
        The number of entries written. 0 if every entry was already present
        or there is no header with a blank line after it; the file is then
        left as it was.
    """
    path = Path(path)
    lines = path.read_text(encoding="utf-8").splitlines(keepends=True)
    existing = {line.rstrip("\r\n") for line in lines}
    new_entries = [
        entry if entry.endswith("\n") else entry + "\n"
        for entry in entries
        if _entry_header(entry) not in existing
    ]

    output: list[str] = []
    state = "before"
    for line in lines:
        stripped = line.rstrip("\r\n")
        if state == "before" and stripped == CHANGES_HEADER:
            state = "header"
        elif state == "header" and stripped == "":
            output.extend(new_entries)
            state = "done"
        output.append(line)

    if state != "done" or not new_entries:
        return 0

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.writelines(output)
        shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return len(new_entries)

"""Subprocess helpers.

``git()`` backs :class:`hadar.git.GitRepository`; ``run()`` hands the
terminal to tools the user should watch, such as ``gh release create``.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

RULE = "─" * 60


def git(*args: str, cwd: Path | None = None) -> str:
    """Run git in ``cwd`` and return its stdout.

    Only trailing newlines are stripped: patch logs keep their indentation.

    Raises:
        subprocess.CalledProcessError: On a non-zero exit, with stderr
            captured for the error message.
    """
    result = subprocess.run(
        ["git", *args], capture_output=True, text=True, check=True, cwd=cwd
    )
    return result.stdout.rstrip("\n")


def run(*args: str) -> subprocess.CompletedProcess[bytes]:
    """Run a command with inherited stdio, raising CalledProcessError on failure."""
    return subprocess.run(args, check=True)


def step(msg: str) -> None:
    """Announce a release task between two rules."""
    print(f"\n{RULE}\n{msg}\n{RULE}")

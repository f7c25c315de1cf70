"""Git access for tags, commit metadata and patch logs."""

from __future__ import annotations

import subprocess
from pathlib import Path
from urllib.parse import urlparse

from .errors import CollaboratorError
from .shell import git


class GitRepository:
    """Read (and tag) a git working copy.

    Every failing git invocation is raised as a CollaboratorError that
    names what was being looked up.
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = root

    def _git(self, *args: str, what: str) -> str:
        try:
            return git(*args, cwd=self.root)
        except (subprocess.CalledProcessError, OSError) as exc:
            detail = getattr(exc, "stderr", None) or str(exc)
            raise CollaboratorError(f"Failed to get {what}: {detail}".rstrip()) from exc

    def list_tags(self) -> list[str]:
        """Return all tag names in the repository."""
        return self._git("tag", what="git tags").splitlines()

    def fetch_tags(self) -> None:
        self._git("fetch", "--tags", what="tags from remote")

    def commit_date(self, ref: str) -> str:
        """Return the commit date of ``ref`` as YYYY-MM-DD."""
        return self._git(
            "log", "-n1", "--pretty=format:%cd", "--date=short", ref,
            what=f"commit date of {ref}",
        ).strip()

    def commit_hash(self, ref: str) -> str:
        """Return the full hash of the commit ``ref`` points at."""
        return self._git(
            "show", "-s", "--format=%H", f"{ref}^{{commit}}",
            what=f"commit hash of {ref}",
        ).strip()

    def patch_log(self, from_ref: str, to_ref: str = "HEAD") -> str:
        """Return ``git log -p`` for the range; empty if it has no commits."""
        git_range = f"{from_ref}..{to_ref}"
        return self._git("log", "-p", git_range, what=f"git log for range {git_range}")

    def diff(self, from_ref: str, to_ref: str = "HEAD") -> str:
        git_range = f"{from_ref}..{to_ref}"
        return self._git("diff", git_range, what=f"git diff for range {git_range}")

    def remotes(self) -> list[str]:
        return self._git("remote", what="git remotes").split()

    def github_slug(self) -> tuple[str, str] | None:
        """Return ``(owner, repo)`` of the first GitHub push remote, if any."""
        output = self._git("remote", "-v", what="git remotes")
        for line in output.splitlines():
            parts = line.split()
            if len(parts) < 3 or parts[2] != "(push)":
                continue
            url = parts[1]
            if url.startswith("git@"):
                # git@github.com:owner/repo.git
                host, _, path = url[len("git@"):].partition(":")
            else:
                parsed = urlparse(url)
                host, path = parsed.hostname or "", parsed.path
            if host != "github.com":
                continue
            segments = [s for s in path.split("/") if s]
            if len(segments) >= 2:
                return segments[0], segments[1].removesuffix(".git")
        return None

    def tag(self, name: str, message: str, *, force: bool = False) -> None:
        """Create an annotated tag on HEAD."""
        args = ["tag", "-a", "-m", message]
        if force:
            args.append("-f")
        self._git(*args, name, what=f"tag {name}")

    def push(self, remote: str, *refs: str) -> None:
        self._git("push", remote, *refs, what=f"push to {remote}")

    def commit_file(self, path: str, message: str) -> None:
        self._git("add", path, what=f"staged {path}")
        self._git("commit", "-m", message, path, what=f"commit of {path}")

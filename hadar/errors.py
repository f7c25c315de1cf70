"""Exceptions raised by hadar.

Every error carries the offending version, tag or range in its message so
callers can report it without extra context.
"""

from __future__ import annotations


class HadarError(Exception):
    """Base class for all hadar errors."""


class VersionNotFoundError(HadarError, LookupError):
    """A referenced version is not tagged, or no prior version exists."""


class InvalidArgumentError(HadarError, ValueError):
    """Conflicting options, malformed input, or a missing changelog file."""


class IncomparableVersionError(HadarError, TypeError):
    """Ordering was requested for a version without a parsed triple."""


class CollaboratorError(HadarError, RuntimeError):
    """An external call (git, gh, the model server, the filesystem) failed."""

"""Error types raised by the resolution pipeline."""

from __future__ import annotations


class CpResolveError(Exception):
    """Base class for every failure surfaced to the command line."""


class InvalidCoordinateError(CpResolveError):
    """A coordinate string does not have 3 or 4 colon-separated parts."""

    def __init__(self, raw: str, reason: str | None = None) -> None:
        self.raw = raw
        message = f"Invalid coordinate '{raw}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RuntimeNotFoundError(CpResolveError):
    """No Scala executable could be found on the search path."""


class LibraryNotFoundError(CpResolveError):
    """The Scala installation has no readable runtime library."""


class DescriptorTemplateError(CpResolveError):
    """The POM template is missing or lacks the dependency marker."""


class UnresolvableDependenciesError(CpResolveError):
    """Maven failed or its output did not have the expected shape."""

    def __init__(self, message: str, *, descriptor: str = "", output: str = "") -> None:
        super().__init__(message)
        self.descriptor = descriptor
        self.output = output


class ResolverTimeoutError(UnresolvableDependenciesError):
    """Maven did not finish within the configured timeout."""


class CacheIOError(CpResolveError):
    """The shared cache could not be locked, read or written."""

"""Exception hierarchy for release lookup, installation, and version probing.

Every error raised by the library derives from :class:`PortalDataError` so
callers (and the CLI) can catch one base class.  Fetch errors carry the name
of the backend that failed; resolution errors carry the selector that was
being resolved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


class PortalDataError(Exception):
    """Base exception for all portal-data errors."""


class ReleaseFetchError(PortalDataError):
    """Raised when a release backend cannot produce a release listing.

    Args:
        source_name: Name of the failing backend (e.g. ``"github"``).
        message: Human-readable error description.
        status_code: Optional HTTP status code returned by the backend.
    """

    def __init__(self, source_name: str, message: str, status_code: int | None = None) -> None:
        self.source_name = source_name
        self.message = message
        self.status_code = status_code
        super().__init__(f"{source_name}: {message}")


class ConnectivityError(ReleaseFetchError):
    """Raised when the backend is unreachable or the request timed out."""


class RateLimitError(ReleaseFetchError):
    """Raised when the backend reports an exhausted request quota.

    Callers should back off until ``reset_at`` rather than retrying immediately.
    """

    def __init__(
        self,
        source_name: str,
        message: str,
        status_code: int | None = None,
        reset_at: datetime | None = None,
    ) -> None:
        super().__init__(source_name, message, status_code=status_code)
        self.reset_at = reset_at


class AuthError(ReleaseFetchError):
    """Raised when the backend rejects the supplied credential."""


class MalformedResponseError(ReleaseFetchError):
    """Raised when a response has an unexpected content type or shape."""


class InvalidVersionError(PortalDataError, ValueError):
    """Raised when a version string does not have the expected shape."""

    def __init__(self, value: str, message: str | None = None) -> None:
        self.value = value
        super().__init__(message or f"Invalid version number: {value!r}")


class VersionResolutionError(PortalDataError):
    """Raised when a selector cannot be resolved to exactly one release."""

    def __init__(self, selector: str, source_name: str, message: str) -> None:
        self.selector = selector
        self.source_name = source_name
        super().__init__(message)


class VersionNotFoundError(VersionResolutionError):
    """No release matches the selector."""


class AmbiguousVersionError(VersionResolutionError):
    """More than one release matches the selector."""


class InstallError(PortalDataError):
    """Raised when extracting or swapping the dataset directory fails.

    Args:
        message: Human-readable error description.
        version: Release tag being installed, when known.
        source_name: Backend the release was resolved from, when known.
    """

    def __init__(self, message: str, *, version: str | None = None, source_name: str | None = None) -> None:
        self.message = message
        self.version = version
        self.source_name = source_name
        if version is not None:
            message = f"Installing version {version} from {source_name or 'unknown source'}: {message}"
        super().__init__(message)


class ProbeError(PortalDataError):
    """Raised when the local version marker cannot be read or parsed."""

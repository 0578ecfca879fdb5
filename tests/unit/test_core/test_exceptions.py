"""Unit tests for the exception hierarchy."""

from datetime import UTC, datetime

from portal_data.core.exceptions import (
    AmbiguousVersionError,
    AuthError,
    ConnectivityError,
    InstallError,
    InvalidVersionError,
    MalformedResponseError,
    PortalDataError,
    ProbeError,
    RateLimitError,
    ReleaseFetchError,
    VersionNotFoundError,
    VersionResolutionError,
)


class TestHierarchy:
    """Every library error can be caught as PortalDataError."""

    def test_fetch_errors(self) -> None:
        for cls in (ConnectivityError, RateLimitError, AuthError, MalformedResponseError):
            assert issubclass(cls, ReleaseFetchError)
            assert issubclass(cls, PortalDataError)

    def test_resolution_errors(self) -> None:
        assert issubclass(VersionNotFoundError, VersionResolutionError)
        assert issubclass(AmbiguousVersionError, VersionResolutionError)

    def test_other_errors(self) -> None:
        for cls in (InvalidVersionError, InstallError, ProbeError):
            assert issubclass(cls, PortalDataError)


class TestContext:
    """Errors carry enough context to explain the failure."""

    def test_fetch_error_message_includes_source(self) -> None:
        err = AuthError("github", "Bad GitHub credentials", status_code=401)
        assert str(err) == "github: Bad GitHub credentials"
        assert err.source_name == "github"
        assert err.status_code == 401

    def test_rate_limit_reset(self) -> None:
        reset = datetime(2026, 1, 1, tzinfo=UTC)
        err = RateLimitError("github", "slow down", status_code=403, reset_at=reset)
        assert err.reset_at == reset

    def test_resolution_error_fields(self) -> None:
        err = VersionNotFoundError("1.50", "github", "no match")
        assert (err.selector, err.source_name, str(err)) == ("1.50", "github", "no match")

    def test_invalid_version_default_message(self) -> None:
        err = InvalidVersionError("v1")
        assert err.value == "v1"
        assert "'v1'" in str(err)

    def test_install_error_names_release(self) -> None:
        err = InstallError("disk full", version="1.50.0", source_name="github")
        assert (err.message, err.version, err.source_name) == ("disk full", "1.50.0", "github")
        assert str(err) == "Installing version 1.50.0 from github: disk full"

    def test_install_error_without_release(self) -> None:
        assert str(InstallError("Unable to use the specified path: /nope")) == "Unable to use the specified path: /nope"

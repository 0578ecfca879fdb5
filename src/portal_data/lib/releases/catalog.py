"""Release catalog: picks a backend and resolves version selectors.

The GitHub backend is the default and the only one that can enumerate
historical releases; Zenodo is consulted only for ``"latest"``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from loguru import logger

from portal_data.core.exceptions import (
    AmbiguousVersionError,
    InvalidVersionError,
    ReleaseFetchError,
    VersionNotFoundError,
)
from portal_data.lib.releases.github import GitHubReleases
from portal_data.lib.releases.types import ReleaseEntry, VersionCode
from portal_data.lib.releases.zenodo import ZenodoArchive

if TYPE_CHECKING:
    from portal_data.core.config import Settings
    from portal_data.lib.releases.base import BaseReleaseSource

LATEST = "latest"

_MAJOR_MINOR_RE = re.compile(r"\d+\.\d+", re.ASCII)


def normalize_selector(selector: str) -> VersionCode:
    """Turn a caller-supplied version selector into a VersionCode.

    ``"1.50"`` is treated as ``"1.50.0"``; anything other than two or three
    numeric components is rejected.

    Raises:
        InvalidVersionError: If the selector has any other shape.
    """
    text = selector.strip()
    if _MAJOR_MINOR_RE.fullmatch(text):
        text += ".0"
    try:
        return VersionCode.parse(text)
    except InvalidVersionError as e:
        raise InvalidVersionError(selector, f"Invalid version number; given, {selector!r}") from e


class ReleaseCatalog:
    """Lists and resolves dataset releases from the GitHub or Zenodo backend."""

    def __init__(self, repository: BaseReleaseSource, archive: BaseReleaseSource) -> None:
        self.repository = repository
        self.archive = archive

    @classmethod
    def from_settings(cls, settings: Settings) -> ReleaseCatalog:
        """Build a catalog with both backends configured from settings."""
        return cls(
            repository=GitHubReleases(
                releases_url=settings.releases_url,
                token=settings.github_pat,
                timeout=settings.http_timeout,
            ),
            archive=ZenodoArchive(record_url=settings.archive_url, timeout=settings.http_timeout),
        )

    def source_for(self, use_archive: bool) -> BaseReleaseSource:
        """Return the backend selected by ``use_archive``."""
        return self.archive if use_archive else self.repository

    def list_all(self, use_archive: bool = False, *, halt_on_error: bool = True) -> list[ReleaseEntry] | None:
        """List releases from the selected backend.

        Args:
            use_archive: Query Zenodo (latest only) instead of GitHub.
            halt_on_error: If False, return None instead of raising when the
                backend cannot be queried.

        Returns:
            Releases in backend order; an empty list means the backend answered
            with no releases. None is only returned when ``halt_on_error`` is
            False and the fetch failed.

        Raises:
            ReleaseFetchError: If the fetch fails and ``halt_on_error`` is True.
        """
        source = self.source_for(use_archive)
        try:
            return source.list_releases()
        except ReleaseFetchError as e:
            if halt_on_error:
                raise
            logger.warning("Unable to list releases from {}: {}", source.source_name, e)
            return None

    def resolve(self, selector: str = LATEST, use_archive: bool = False) -> ReleaseEntry:
        """Resolve a selector (``"latest"`` or a version string) to one release.

        Raises:
            InvalidVersionError: If the selector is not ``M.m`` or ``M.m.p``.
            VersionNotFoundError: If no release matches.
            AmbiguousVersionError: If several releases match.
            ReleaseFetchError: If the backend cannot be queried.
        """
        if selector != LATEST and use_archive:
            logger.debug("Zenodo only serves the latest release; using GitHub for {}", selector)
            use_archive = False

        # Validate before touching the network.
        wanted = None if selector == LATEST else normalize_selector(selector)

        source = self.source_for(use_archive)
        releases = self.list_all(use_archive)
        assert releases is not None

        if wanted is None:
            if not releases:
                raise VersionNotFoundError(selector, source.source_name, f"{source.source_name} lists no releases")
            return releases[0]

        matches = [entry for entry in releases if entry.version == wanted]
        if not matches:
            raise VersionNotFoundError(
                selector,
                source.source_name,
                f"Did not find a version of the data matching, {wanted} (searched {source.source_name})",
            )
        if len(matches) > 1:
            tags = ", ".join(entry.tag for entry in matches)
            raise AmbiguousVersionError(
                selector,
                source.source_name,
                f"Found {len(matches)} releases matching {wanted} on {source.source_name}: {tags}",
            )
        return matches[0]

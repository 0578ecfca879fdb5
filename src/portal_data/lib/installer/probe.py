"""Compare the installed dataset version with the latest GitHub release."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from portal_data.core.exceptions import InvalidVersionError, ProbeError
from portal_data.lib.installer.installer import DATASET_DIRNAME, MARKER_FILENAME, full_path
from portal_data.lib.releases.types import VersionCode

if TYPE_CHECKING:
    from portal_data.lib.releases.catalog import ReleaseCatalog


def read_local_version(dataset_path: str | os.PathLike[str]) -> VersionCode | None:
    """Read the version recorded in an installed dataset's ``version.txt``.

    Args:
        dataset_path: The ``PortalData`` directory.

    Returns:
        The installed version, or None if the directory or marker file is missing.

    Raises:
        ProbeError: If the marker exists but cannot be read or parsed.
    """
    marker = Path(dataset_path) / MARKER_FILENAME
    if not marker.is_file():
        return None

    try:
        text = marker.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Unable to read {marker}: {e}"
        raise ProbeError(msg) from e

    tokens = text.split()
    if not tokens:
        msg = f"{marker} is empty"
        raise ProbeError(msg)

    try:
        return VersionCode.parse(tokens[0])
    except InvalidVersionError as e:
        msg = f"{marker} does not contain a valid version: {tokens[0]!r}"
        raise ProbeError(msg) from e


class LocalVersionProbe:
    """Decides whether a newer PortalData release than the installed one exists."""

    def __init__(self, catalog: ReleaseCatalog) -> None:
        self._catalog = catalog

    def is_update_available(self, dataset_path: str | os.PathLike[str]) -> bool:
        """Check whether GitHub has a release newer than the installed one.

        A missing dataset directory or marker file counts as "update available",
        since older installs never wrote a marker.  Failing to reach GitHub is
        reported as "no update known" rather than an error.

        Raises:
            ProbeError: If the local marker exists but is unreadable or invalid.
        """
        local = read_local_version(dataset_path)
        if local is None:
            logger.info("No version marker found in {}", dataset_path)
            return True

        releases = self._catalog.list_all(use_archive=False, halt_on_error=False)
        if not releases:
            logger.warning("No remote release information available; assuming no update")
            return False

        latest = releases[0]
        if latest.version is None:
            logger.warning("Latest release tag {!r} is not a version number; assuming no update", latest.tag)
            return False

        logger.debug("Local version {}, latest release {}", local, latest.version)
        return latest.version > local


def check_for_newer_data(base_folder: str | os.PathLike[str], catalog: ReleaseCatalog) -> bool:
    """Check whether ``<base_folder>/PortalData`` is behind the latest release.

    Raises:
        ProbeError: If ``base_folder`` does not exist or the marker is invalid.
    """
    base = full_path(base_folder)
    if not base.is_dir():
        msg = f"Unable to use the specified path: {base_folder}"
        raise ProbeError(msg)
    return LocalVersionProbe(catalog).is_update_available(base / DATASET_DIRNAME)

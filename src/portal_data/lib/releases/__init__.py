"""Releases library: discover published versions of the PortalData dataset.

Public API:
    - VersionCode: Ordered ``major.minor.patch`` version value
    - ReleaseEntry: A release tag and its zip artifact URL
    - BaseReleaseSource: Abstract backend interface
    - GitHubReleases: Paginated GitHub releases backend
    - ZenodoArchive: Zenodo landing-page backend (latest only)
    - ReleaseCatalog: Backend selection and selector resolution
    - normalize_selector: Parse a caller-supplied version selector
"""

from portal_data.lib.releases.base import BaseReleaseSource
from portal_data.lib.releases.catalog import LATEST, ReleaseCatalog, normalize_selector
from portal_data.lib.releases.github import GITHUB_RELEASES_URL, GitHubReleases
from portal_data.lib.releases.types import ReleaseEntry, VersionCode
from portal_data.lib.releases.zenodo import ZENODO_RECORD_URL, ZenodoArchive

__all__ = [
    "GITHUB_RELEASES_URL",
    "LATEST",
    "ZENODO_RECORD_URL",
    "BaseReleaseSource",
    "GitHubReleases",
    "ReleaseCatalog",
    "ReleaseEntry",
    "VersionCode",
    "ZenodoArchive",
    "normalize_selector",
]

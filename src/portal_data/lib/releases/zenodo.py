"""Zenodo archive backend.

The Zenodo record for PortalData only exposes the most recent release, so
the artifact link and its version are scraped from the record's landing page.
"""

import re

from loguru import logger

from portal_data.core.exceptions import MalformedResponseError, ReleaseFetchError
from portal_data.lib.releases.base import DEFAULT_TIMEOUT, BaseReleaseSource, media_type
from portal_data.lib.releases.types import ReleaseEntry

ZENODO_RECORD_URL = "https://zenodo.org/record/1215988"

_ARTIFACT_URL_RE = re.compile(r"https://zenodo\.org/api/files/[0-9a-f\-]+/weecology/[0-9a-zA-Z.\-]+zip")
_VERSION_RE = re.compile(r"(\d+\.\d+\.\d+)\.zip", re.ASCII)


class ZenodoArchive(BaseReleaseSource):
    """Archive backend returning the single latest release from Zenodo."""

    def __init__(self, record_url: str = ZENODO_RECORD_URL, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__(timeout=timeout)
        self._record_url = record_url

    @property
    def source_name(self) -> str:
        return "zenodo"

    @property
    def lists_history(self) -> bool:
        return False

    def list_releases(self) -> list[ReleaseEntry]:
        """Scrape the latest release from the Zenodo landing page.

        Returns:
            A single-element list with the latest release.

        Raises:
            ConnectivityError: If Zenodo is unreachable.
            MalformedResponseError: If the page is not HTML or the link/version
                cannot be located exactly once.
            ReleaseFetchError: On a non-success HTTP status.
        """
        logger.info("Fetching Zenodo record {}", self._record_url)
        response = self._get(self._record_url)

        if not response.is_success:
            raise ReleaseFetchError(
                self.source_name, f"Zenodo returned HTTP {response.status_code}", status_code=response.status_code
            )
        if media_type(response) != "text/html":
            raise MalformedResponseError(
                self.source_name, "Zenodo response was not in text format", status_code=response.status_code
            )

        entry = self._parse_page(response.text)
        logger.info("Latest Zenodo release is {}", entry.tag)
        return [entry]

    def _parse_page(self, html: str) -> ReleaseEntry:
        """Extract the artifact URL and version from the landing page HTML."""
        # The same link typically appears several times on the page.
        urls = list(dict.fromkeys(_ARTIFACT_URL_RE.findall(html)))
        if len(urls) != 1:
            raise MalformedResponseError(
                self.source_name,
                f"Wasn't able to parse Zenodo for the download link (found {len(urls)} candidates)",
            )
        url = urls[0]

        versions = _VERSION_RE.findall(url)
        if len(versions) != 1:
            raise MalformedResponseError(self.source_name, "Wasn't able to parse Zenodo for the version")

        return ReleaseEntry(tag=versions[0], zipball_url=url)

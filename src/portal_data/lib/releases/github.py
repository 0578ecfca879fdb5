"""GitHub releases backend.

Walks the paginated releases listing of the PortalData repository
(https://docs.github.com/en/rest/releases/releases#list-releases) and
returns every published release, newest first.
"""

from datetime import UTC, datetime
from typing import Any

import httpx
from loguru import logger

from portal_data.core.exceptions import (
    AuthError,
    MalformedResponseError,
    RateLimitError,
    ReleaseFetchError,
)
from portal_data.lib.releases.base import DEFAULT_TIMEOUT, BaseReleaseSource, media_type
from portal_data.lib.releases.types import ReleaseEntry

GITHUB_RELEASES_URL = "https://api.github.com/repos/weecology/PortalData/releases"

# Link relations that mean at least one more page follows.
_CONTINUATION_RELS = ("next", "last")


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


class GitHubReleases(BaseReleaseSource):
    """Repository backend listing every release via the GitHub REST API."""

    def __init__(
        self,
        releases_url: str = GITHUB_RELEASES_URL,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(timeout=timeout)
        self._releases_url = releases_url
        self._token = token or None

    @property
    def source_name(self) -> str:
        return "github"

    @property
    def is_authenticated(self) -> bool:
        """Whether requests carry a personal access token."""
        return self._token is not None

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def list_releases(self) -> list[ReleaseEntry]:
        """Fetch all releases, following the ``Link`` header page by page.

        Returns:
            Releases in API order (newest first), pages concatenated in order.

        Raises:
            ConnectivityError: If GitHub is unreachable.
            RateLimitError: If the API quota is exhausted.
            AuthError: If the token is rejected.
            MalformedResponseError: If a page is not a JSON array of releases.
            ReleaseFetchError: On any other non-success status.
        """
        releases: list[ReleaseEntry] = []
        page: int | None = 1

        while page is not None:
            logger.info("Fetching GitHub releases page {}", page)
            response = self._get(self._releases_url, params={"page": page}, headers=self._headers())
            self._check_response(response)
            releases.extend(self._parse_page(self._json(response), page))
            page = page + 1 if self._has_more_pages(response) else None

        logger.info("Found {} releases on GitHub", len(releases))
        return releases

    def _check_response(self, response: httpx.Response) -> None:
        """Classify a page response, raising on anything other than a JSON success."""
        status = response.status_code

        if status == 403:
            remaining = _parse_int(response.headers.get("x-ratelimit-remaining"))
            if remaining is not None and remaining <= 0:
                reset = _parse_int(response.headers.get("x-ratelimit-reset"))
                reset_at = datetime.fromtimestamp(reset, tz=UTC) if reset is not None else None
                when = f" until {reset_at.isoformat()}" if reset_at else ""
                raise RateLimitError(
                    self.source_name,
                    f"Exceeded GitHub rate limit; try again later{when} or set GITHUB_PAT "
                    "(see https://docs.github.com/en/rest/using-the-rest-api/rate-limits-for-the-rest-api)",
                    status_code=status,
                    reset_at=reset_at,
                )

        if status == 401:
            raise AuthError(self.source_name, "Bad GitHub credentials", status_code=status)

        if media_type(response) != "application/json":
            raise MalformedResponseError(
                self.source_name,
                f"GitHub response was not in JSON format (got {media_type(response) or 'no content type'!r})",
                status_code=status,
            )

        if not response.is_success:
            raise ReleaseFetchError(
                self.source_name, f"GitHub returned HTTP {status}", status_code=status
            )

    @staticmethod
    def _has_more_pages(response: httpx.Response) -> bool:
        links = response.links
        return any(rel in links for rel in _CONTINUATION_RELS)

    def _parse_page(self, data: Any, page: int) -> list[ReleaseEntry]:
        """Convert one page of JSON into release entries.

        Raises:
            MalformedResponseError: If the page is not a list of release objects.
        """
        if not isinstance(data, list):
            raise MalformedResponseError(
                self.source_name, f"Releases page {page} is not a JSON array"
            )

        entries: list[ReleaseEntry] = []
        for i, raw in enumerate(data):
            tag = raw.get("tag_name") if isinstance(raw, dict) else None
            url = raw.get("zipball_url") if isinstance(raw, dict) else None
            if not isinstance(tag, str) or not isinstance(url, str) or not tag or not url:
                raise MalformedResponseError(
                    self.source_name,
                    f"Invalid release at index {i} of page {page}: missing tag_name or zipball_url",
                )
            entry = ReleaseEntry(tag=tag, zipball_url=url)
            if entry.version is None:
                logger.debug("Release tag {!r} is not a version number", tag)
            entries.append(entry)
        return entries

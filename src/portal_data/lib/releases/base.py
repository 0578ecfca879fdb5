"""Abstract release source interface shared by the GitHub and Zenodo backends."""

from abc import ABC, abstractmethod
from typing import Any

import httpx
from loguru import logger

from portal_data.core.exceptions import ConnectivityError, MalformedResponseError
from portal_data.lib.releases.types import ReleaseEntry

DEFAULT_TIMEOUT = 60.0


def media_type(response: httpx.Response) -> str:
    """Return the response's content type without parameters, lowercased."""
    return response.headers.get("content-type", "").split(";")[0].strip().lower()


class BaseReleaseSource(ABC):
    """Abstract release source. All backends must implement this."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Unique name identifying this backend."""

    @property
    def lists_history(self) -> bool:
        """Whether this backend can enumerate releases other than the latest."""
        return True

    @abstractmethod
    def list_releases(self) -> list[ReleaseEntry]:
        """Fetch the release listing from the backend.

        Returns:
            Releases in backend order; for backends that list history, index 0
            is the most recent release.

        Raises:
            ReleaseFetchError: On any transport, quota, credential, or format failure.
        """

    def _get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Issue one blocking GET request, classifying transport failures.

        Raises:
            ConnectivityError: If the request could not be completed.
        """
        try:
            with httpx.Client(timeout=self._timeout, follow_redirects=True) as client:
                return client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning("{} request timed out: {}", self.source_name, url)
            raise ConnectivityError(self.source_name, f"Request to {url} timed out") from e
        except httpx.RequestError as e:
            logger.warning("{} connection error: {}", self.source_name, e)
            raise ConnectivityError(self.source_name, f"Connection to {url} failed: {e}") from e

    def _json(self, response: httpx.Response) -> Any:
        """Decode a JSON body, raising MalformedResponseError on bad input."""
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                self.source_name, f"Response from {response.request.url} is not valid JSON"
            ) from e

"""Streaming download of release artifacts.

Downloads a release zip with a tqdm progress bar into a ``.part`` file that
is renamed on success, so no partial artifact is ever left at ``dest``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from loguru import logger
from tqdm import tqdm

if TYPE_CHECKING:
    from pathlib import Path

from portal_data.core.exceptions import ConnectivityError, ReleaseFetchError

DOWNLOAD_TIMEOUT = httpx.Timeout(60.0, read=300.0)
_CHUNK_SIZE = 65536


def _content_length(response: httpx.Response) -> int | None:
    """Return the declared body size, or None when absent or unparsable."""
    try:
        return int(response.headers.get("content-length", "")) or None
    except ValueError:
        return None


def download_artifact(
    url: str,
    dest: Path,
    *,
    source_name: str = "artifact",
    timeout: httpx.Timeout | float = DOWNLOAD_TIMEOUT,
    show_progress: bool = True,
) -> Path:
    """Download a release artifact to ``dest``.

    Args:
        url: Artifact URL (redirects are followed).
        dest: Local file path to write.
        source_name: Backend name used in error messages.
        timeout: httpx timeout configuration.
        show_progress: Whether to render a tqdm progress bar.

    Returns:
        ``dest`` once the download is complete.

    Raises:
        ConnectivityError: If the server is unreachable or the transfer stalls.
        ReleaseFetchError: If the server answers with a non-success status.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    part_path = dest.with_suffix(dest.suffix + ".part")

    try:
        with (
            httpx.Client(timeout=timeout, follow_redirects=True) as client,
            client.stream("GET", url) as response,
        ):
            response.raise_for_status()
            total = _content_length(response)

            with (
                part_path.open("wb") as f,
                tqdm(
                    total=total,
                    unit="B",
                    unit_scale=True,
                    desc=dest.name,
                    leave=False,
                    disable=not show_progress,
                ) as pbar,
            ):
                for chunk in response.iter_bytes(chunk_size=_CHUNK_SIZE):
                    f.write(chunk)
                    pbar.update(len(chunk))

        part_path.rename(dest)

    except httpx.HTTPStatusError as exc:
        part_path.unlink(missing_ok=True)
        status = exc.response.status_code
        logger.error("Download failed for {}: HTTP {}", url, status)
        raise ReleaseFetchError(source_name, f"Download of {url} returned HTTP {status}", status_code=status) from exc

    except httpx.RequestError as exc:
        part_path.unlink(missing_ok=True)
        logger.error("Download failed for {}: {}", url, exc)
        raise ConnectivityError(source_name, f"Download of {url} failed: {exc}") from exc

    except OSError:
        part_path.unlink(missing_ok=True)
        raise

    logger.info("Downloaded {} ({} bytes)", dest.name, dest.stat().st_size)
    return dest

"""Shared test fixtures for settings, release catalogs, and release archives."""

import io
import zipfile
from collections.abc import Callable

import pytest

from portal_data.core.config import Settings
from portal_data.lib.releases import GITHUB_RELEASES_URL, ZENODO_RECORD_URL, GitHubReleases, ReleaseCatalog, ZenodoArchive


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    """Keep ambient configuration from leaking into tests."""
    for name in ("GITHUB_PAT", "RELEASES_URL", "ARCHIVE_URL", "DATA_DIR", "LOG_DIR", "LOG_LEVEL", "HTTP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def catalog() -> ReleaseCatalog:
    """A catalog pointed at the default GitHub and Zenodo endpoints."""
    return ReleaseCatalog(
        repository=GitHubReleases(releases_url=GITHUB_RELEASES_URL),
        archive=ZenodoArchive(record_url=ZENODO_RECORD_URL),
    )


@pytest.fixture
def make_zipball() -> Callable[..., bytes]:
    """Build an in-memory zip shaped like a GitHub zipball.

    Call with a mapping of relative file paths to contents; every file is
    placed under a single top-level directory.
    """

    def _make(files: dict[str, str], top: str = "weecology-PortalData-1a2b3c4") -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            zf.writestr(f"{top}/", "")
            for name, content in files.items():
                zf.writestr(f"{top}/{name}", content)
        return buf.getvalue()

    return _make

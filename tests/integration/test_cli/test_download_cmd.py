"""Integration tests for the `portal-data download` CLI command.

All HTTP requests are mocked; these tests verify the CLI wiring from
options and settings through to the installed directory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from typer.testing import CliRunner

from portal_data.cli.app import app
from portal_data.lib.releases import GITHUB_RELEASES_URL

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

runner = CliRunner()

ZIPBALL_URL = "https://api.github.com/repos/weecology/PortalData/zipball/{}"


def _releases(*tags: str) -> list[dict[str, str]]:
    return [{"tag_name": tag, "zipball_url": ZIPBALL_URL.format(tag)} for tag in tags]


class TestDownloadCommand:
    """Tests for the download command."""

    def test_download_latest(self, tmp_path: Path, make_zipball: Callable[..., bytes], httpx_mock) -> None:  # type: ignore[no-untyped-def]
        httpx_mock.add_response(url=f"{GITHUB_RELEASES_URL}?page=1", json=_releases("1.51.0", "1.50.0"))
        httpx_mock.add_response(url=ZIPBALL_URL.format("1.51.0"), content=make_zipball({"version.txt": "1.51.0"}))

        result = runner.invoke(app, ["download", "--path", str(tmp_path), "--no-progress"])

        assert result.exit_code == 0, result.output
        assert "Installed PortalData to" in result.output
        assert (tmp_path / "PortalData" / "version.txt").read_text() == "1.51.0"

    def test_download_specific_version(
        self, tmp_path: Path, make_zipball: Callable[..., bytes], httpx_mock  # type: ignore[no-untyped-def]
    ) -> None:
        httpx_mock.add_response(url=f"{GITHUB_RELEASES_URL}?page=1", json=_releases("1.51.0", "1.50.0"))
        httpx_mock.add_response(url=ZIPBALL_URL.format("1.50.0"), content=make_zipball({"version.txt": "1.50.0"}))

        result = runner.invoke(app, ["download", "--path", str(tmp_path), "--version", "1.50", "--no-progress"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "PortalData" / "version.txt").read_text() == "1.50.0"

    def test_data_dir_from_env(
        self, tmp_path: Path, make_zipball: Callable[..., bytes], httpx_mock, monkeypatch  # type: ignore[no-untyped-def]
    ) -> None:
        monkeypatch.setenv("DATA_DIR", str(tmp_path))
        httpx_mock.add_response(url=f"{GITHUB_RELEASES_URL}?page=1", json=_releases("1.51.0"))
        httpx_mock.add_response(url=ZIPBALL_URL.format("1.51.0"), content=make_zipball({"version.txt": "1.51.0"}))

        result = runner.invoke(app, ["download", "--no-progress"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "PortalData").is_dir()

    def test_token_from_env(self, tmp_path: Path, make_zipball: Callable[..., bytes], httpx_mock, monkeypatch) -> None:  # type: ignore[no-untyped-def]
        monkeypatch.setenv("GITHUB_PAT", "ghp_from_env")
        httpx_mock.add_response(url=f"{GITHUB_RELEASES_URL}?page=1", json=_releases("1.51.0"))
        httpx_mock.add_response(url=ZIPBALL_URL.format("1.51.0"), content=make_zipball({"version.txt": "1.51.0"}))

        result = runner.invoke(app, ["download", "--path", str(tmp_path), "--no-progress"])

        assert result.exit_code == 0, result.output
        assert httpx_mock.get_requests()[0].headers["Authorization"] == "Bearer ghp_from_env"

    def test_invalid_version(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["download", "--path", str(tmp_path), "--version", "v1.50"])

        assert result.exit_code == 1
        assert "Invalid version number" in result.output

    def test_unreachable_github(self, tmp_path: Path, httpx_mock) -> None:  # type: ignore[no-untyped-def]
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"), url=f"{GITHUB_RELEASES_URL}?page=1")

        result = runner.invoke(app, ["download", "--path", str(tmp_path)])

        assert result.exit_code == 1
        assert "Connection refused" in result.output
        assert not (tmp_path / "PortalData").exists()

    def test_redirect_loop_exits_cleanly(self, tmp_path: Path, httpx_mock) -> None:  # type: ignore[no-untyped-def]
        httpx_mock.add_exception(
            httpx.TooManyRedirects("Exceeded maximum allowed redirects."), url=f"{GITHUB_RELEASES_URL}?page=1"
        )

        result = runner.invoke(app, ["download", "--path", str(tmp_path)])

        assert result.exit_code == 1
        assert "Exceeded maximum allowed redirects" in result.output
        assert not isinstance(result.exception, httpx.HTTPError)

    def test_missing_path(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["download", "--path", str(tmp_path / "nope")])

        assert result.exit_code == 1
        assert "Unable to use the specified path" in result.output

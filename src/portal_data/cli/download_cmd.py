"""CLI command for downloading and installing a PortalData release.

``portal-data download`` resolves the requested version, downloads its zip
artifact, and replaces ``<path>/PortalData`` with the new contents.
"""

from __future__ import annotations

import typer

from portal_data.core.exceptions import PortalDataError


def download(
    path: str | None = typer.Option(
        None,
        "--path",
        help="Folder into which the data will be downloaded (default: DATA_DIR or ~)",
    ),
    version: str = typer.Option(
        "latest",
        "--version",
        help='Version of the data to download, e.g. "1.50.0" or "1.50" (default: latest)',
    ),
    from_zenodo: bool = typer.Option(
        False,
        "--from-zenodo",
        help="Download the latest release from Zenodo instead of GitHub (ignored unless --version is latest)",
    ),
    no_progress: bool = typer.Option(
        False,
        "--no-progress",
        help="Hide the download progress bar",
    ),
) -> None:
    """Download a release of PortalData, replacing any existing copy."""
    from portal_data.core.config import get_settings
    from portal_data.lib.installer import DatasetInstaller
    from portal_data.lib.releases import ReleaseCatalog

    settings = get_settings()
    base_folder = path or settings.data_dir
    installer = DatasetInstaller(ReleaseCatalog.from_settings(settings), show_progress=not no_progress)

    try:
        final_dir = installer.install(base_folder, version=version, use_archive=from_zenodo)
    except PortalDataError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"Installed PortalData to {final_dir}")

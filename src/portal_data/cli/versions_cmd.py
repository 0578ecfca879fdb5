"""CLI commands for listing releases and checking the installed version."""

from __future__ import annotations

import typer

from portal_data.core.exceptions import PortalDataError


def versions(
    from_zenodo: bool = typer.Option(
        False,
        "--from-zenodo",
        help="Query Zenodo (latest release only) instead of GitHub",
    ),
) -> None:
    """List available releases, newest first, as ``version<TAB>url`` rows."""
    from portal_data.core.config import get_settings
    from portal_data.lib.releases import ReleaseCatalog

    catalog = ReleaseCatalog.from_settings(get_settings())
    try:
        releases = catalog.list_all(use_archive=from_zenodo)
    except PortalDataError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    assert releases is not None
    if not releases:
        typer.echo("No releases found.")
        return
    for entry in releases:
        typer.echo(f"{entry.tag}\t{entry.zipball_url}")


def check(
    path: str | None = typer.Option(
        None,
        "--path",
        help="Folder containing the PortalData directory (default: DATA_DIR or ~)",
    ),
) -> None:
    """Report whether a newer release than the installed data exists."""
    from portal_data.core.config import get_settings
    from portal_data.lib.installer import DATASET_DIRNAME, check_for_newer_data, full_path, read_local_version
    from portal_data.lib.releases import ReleaseCatalog

    settings = get_settings()
    base_folder = path or settings.data_dir
    catalog = ReleaseCatalog.from_settings(settings)

    try:
        newer = check_for_newer_data(base_folder, catalog)
        local = read_local_version(full_path(DATASET_DIRNAME, base_folder))
    except PortalDataError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"Installed version: {local or 'unknown'}")
    if newer:
        typer.echo("A newer version of the data is available; run `portal-data download`.")
    else:
        typer.echo("No newer version of the data is known.")

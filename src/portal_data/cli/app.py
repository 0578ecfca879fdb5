"""Typer CLI root application."""

import typer

from portal_data.core.config import get_settings
from portal_data.core.logging import setup_logging

app = typer.Typer(name="portal-data", help="Download and version-check the Portal Project dataset")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


def _register_subcommands() -> None:
    """Register all CLI commands."""
    from portal_data.cli.download_cmd import download
    from portal_data.cli.versions_cmd import check, versions

    app.command("download")(download)
    app.command("versions")(versions)
    app.command("check")(check)


_register_subcommands()

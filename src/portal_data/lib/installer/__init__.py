"""Installer library: download, install, and version-check the local dataset.

Public API for replacing ``<base>/PortalData`` with a chosen release and
for comparing the installed ``version.txt`` against the latest release.
"""

from portal_data.lib.installer.downloader import download_artifact
from portal_data.lib.installer.installer import (
    DATASET_DIRNAME,
    MARKER_FILENAME,
    DatasetInstaller,
    clear_directory,
    full_path,
    top_level_directory,
)
from portal_data.lib.installer.probe import LocalVersionProbe, check_for_newer_data, read_local_version

__all__ = [
    "DATASET_DIRNAME",
    "MARKER_FILENAME",
    "DatasetInstaller",
    "LocalVersionProbe",
    "check_for_newer_data",
    "clear_directory",
    "download_artifact",
    "full_path",
    "read_local_version",
    "top_level_directory",
]

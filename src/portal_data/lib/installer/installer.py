"""Download a PortalData release and install it as ``<base>/PortalData``.

The release archive is fully downloaded, inspected, and extracted into a
staging directory next to the destination before anything already on disk
is touched.  Only then is the previous installation cleared, file by file,
and the staged tree renamed into place.

Concurrent installs into the same base folder are not supported: there is
no locking, and interleaved deletes and renames can corrupt the directory.
A crash after the old tree has been cleared but before the rename leaves
the dataset absent.
"""

from __future__ import annotations

import os
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from portal_data.core.exceptions import InstallError
from portal_data.lib.installer.downloader import download_artifact
from portal_data.lib.releases.catalog import LATEST

if TYPE_CHECKING:
    from portal_data.lib.releases.catalog import ReleaseCatalog

DATASET_DIRNAME = "PortalData"
MARKER_FILENAME = "version.txt"


def full_path(reference_path: str | os.PathLike[str], base_path: str | os.PathLike[str] | None = None) -> Path:
    """Return ``reference_path`` joined onto ``base_path`` as an absolute path.

    ``~`` is expanded in both arguments; ``base_path`` defaults to the
    current working directory.
    """
    base = Path(base_path).expanduser() if base_path is not None else Path.cwd()
    return Path(os.path.abspath(base / Path(reference_path).expanduser()))


def top_level_directory(zip_path: Path) -> str:
    """Return the name of the single top-level directory in a zip archive.

    GitHub zipballs wrap the repository in a directory named after the
    commit (e.g. ``weecology-PortalData-1a2b3c4``).

    Raises:
        InstallError: If the archive is unreadable or does not contain exactly
            one top-level directory.
    """
    try:
        with zipfile.ZipFile(zip_path) as zf:
            names = zf.namelist()
    except zipfile.BadZipFile as e:
        msg = f"{zip_path.name} is not a valid zip archive"
        raise InstallError(msg) from e

    tops = {name.split("/", 1)[0] for name in names if name}
    if len(tops) != 1:
        msg = f"Expected exactly one top-level directory in {zip_path.name}, found {len(tops)}"
        raise InstallError(msg)

    top = tops.pop()
    if not any(name.startswith(f"{top}/") for name in names):
        msg = f"Top-level entry {top!r} in {zip_path.name} is not a directory"
        raise InstallError(msg)
    return top


def clear_directory(path: Path) -> None:
    """Remove an installed dataset tree without a blind recursive delete.

    Every non-directory entry is enumerated first (symlinks are never
    followed), then each is unlinked individually.  If any unlink fails the
    operation stops with an error listing every failure.  Finally the
    now-empty directories are removed bottom-up with ``rmdir``, which fails
    loudly if anything unexpected remains.

    Raises:
        InstallError: If ``path`` is not a real directory or any entry cannot be removed.
    """
    if path.is_symlink() or not path.is_dir():
        msg = f"Refusing to clear {path}: not a directory"
        raise InstallError(msg)

    files: list[Path] = []
    dirs: list[Path] = []
    for root, dirnames, filenames in os.walk(path, topdown=True, followlinks=False):
        root_path = Path(root)
        for name in list(dirnames):
            entry = root_path / name
            if entry.is_symlink():
                # Symlinked directories are removed as links, never descended.
                files.append(entry)
                dirnames.remove(name)
            else:
                dirs.append(entry)
        files.extend(root_path / name for name in filenames)

    logger.debug("Removing {} files from {}", len(files), path)
    failures: list[str] = []
    for file in files:
        try:
            file.unlink()
        except OSError as e:
            failures.append(f"{file}: {e.strerror or e}")
    if failures:
        msg = f"Failed to remove {len(failures)} file(s) from {path}: " + "; ".join(failures)
        raise InstallError(msg)

    try:
        for directory in sorted(dirs, key=lambda d: len(d.parts), reverse=True):
            directory.rmdir()
        path.rmdir()
    except OSError as e:
        msg = f"Failed to remove directory tree {path}: {e}"
        raise InstallError(msg) from e


class DatasetInstaller:
    """Installs a chosen release of PortalData into a base folder."""

    def __init__(self, catalog: ReleaseCatalog, *, show_progress: bool = True) -> None:
        self._catalog = catalog
        self._show_progress = show_progress

    def install(
        self,
        base_folder: str | os.PathLike[str] = "~",
        version: str = LATEST,
        use_archive: bool = False,
    ) -> Path:
        """Download a release and install it as ``<base_folder>/PortalData``.

        Args:
            base_folder: Folder that will contain the ``PortalData`` directory.
            version: ``"latest"`` or a ``M.m``/``M.m.p`` version string.
            use_archive: Download from Zenodo; only honored for ``"latest"``.

        Returns:
            Path of the installed dataset directory.

        Raises:
            InvalidVersionError: If ``version`` is malformed.
            VersionResolutionError: If ``version`` matches zero or several releases.
            ReleaseFetchError: If the backend or artifact download fails.
            InstallError: If extraction or replacing the directory fails.
        """
        base = full_path(base_folder)
        if not base.is_dir():
            msg = f"Unable to use the specified path: {base_folder}"
            raise InstallError(msg)

        entry = self._catalog.resolve(version, use_archive=use_archive)
        source_name = self._catalog.source_for(use_archive and version == LATEST).source_name
        logger.info("Downloading version {} of the data...", entry.tag)

        final_dir = base / DATASET_DIRNAME
        with tempfile.TemporaryDirectory(prefix="portal-data-") as tmp:
            try:
                zip_path = download_artifact(
                    entry.zipball_url,
                    Path(tmp) / f"{DATASET_DIRNAME}.zip",
                    source_name=source_name,
                    show_progress=self._show_progress,
                )
                staged = self._stage(zip_path, base)
                self._replace(staged, final_dir)
            except OSError as e:
                logger.error("Could not save version {} from {}: {}", entry.tag, source_name, e)
                msg = f"Failed to save the downloaded archive: {e}"
                raise InstallError(msg, version=entry.tag, source_name=source_name) from e
            except InstallError as e:
                logger.error("Install of version {} from {} failed: {}", entry.tag, source_name, e.message)
                raise InstallError(e.message, version=entry.tag, source_name=source_name) from e

        logger.info("Installed version {} at {}", entry.tag, final_dir)
        return final_dir

    def _stage(self, zip_path: Path, base: Path) -> Path:
        """Extract the archive into a private directory inside ``base``.

        Returns:
            Path of the extracted top-level directory.

        Raises:
            InstallError: If the archive is invalid or extraction fails.
        """
        top = top_level_directory(zip_path)
        try:
            staging = Path(tempfile.mkdtemp(prefix=f".{DATASET_DIRNAME}-staging-", dir=base))
        except OSError as e:
            msg = f"Failed to create a staging directory in {base}: {e}"
            raise InstallError(msg) from e
        try:
            with zipfile.ZipFile(zip_path) as zf:
                zf.extractall(staging)
            staged = staging / top
            if not staged.is_dir():
                msg = f"Extraction of {zip_path.name} did not produce {top!r}"
                raise InstallError(msg)
        except (OSError, zipfile.BadZipFile) as e:
            shutil.rmtree(staging, ignore_errors=True)
            msg = f"Failed to extract {zip_path.name}: {e}"
            raise InstallError(msg) from e
        except InstallError:
            shutil.rmtree(staging, ignore_errors=True)
            raise
        logger.debug("Staged {} at {}", top, staged)
        return staged

    def _replace(self, staged: Path, final_dir: Path) -> None:
        """Swap the staged tree in for ``final_dir`` and drop the staging parent."""
        try:
            if final_dir.exists() or final_dir.is_symlink():
                logger.info("Removing previous installation at {}", final_dir)
                clear_directory(final_dir)
            staged.rename(final_dir)
        except OSError as e:
            msg = f"Failed to move {staged.name} into {final_dir}: {e}"
            raise InstallError(msg) from e
        finally:
            shutil.rmtree(staged.parent, ignore_errors=True)

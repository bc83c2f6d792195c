"""Archive extraction, dispatched on filename suffix."""

from __future__ import annotations

import logging
import os
import stat
import tarfile
import zipfile
from pathlib import Path

from ghidra_app.errors import GhidraAppError
from ghidra_app.models.artifacts import ArchiveFormat

logger = logging.getLogger(__name__)


class UnsupportedArchiveError(GhidraAppError):
    """Raised for archives that are neither ``.tar.gz`` nor ``.zip``."""


def decompress(archive: Path, dest: Path) -> None:
    """Extract ``archive`` into ``dest``, creating ``dest`` if needed."""
    archive = Path(archive)
    fmt = ArchiveFormat.from_filename(archive.name)
    if fmt is None:
        raise UnsupportedArchiveError(f"Unsupported file '{archive}'")

    dest = Path(dest)
    dest.mkdir(parents=True, exist_ok=True)
    logger.debug("Extracting '%s' into '%s'", archive, dest)

    if fmt is ArchiveFormat.TAR_GZ:
        _extract_tar_gz(archive, dest)
    else:
        _extract_zip(archive, dest)


def _extract_tar_gz(archive: Path, dest: Path) -> None:
    with tarfile.open(archive, "r:gz") as tar:
        tar.extractall(dest, filter="data")


def _extract_zip(archive: Path, dest: Path) -> None:
    # zipfile drops Unix modes; ghidraRun and gradle must stay executable.
    with zipfile.ZipFile(archive) as zf:
        for info in zf.infolist():
            extracted = zf.extract(info, dest)
            mode = (info.external_attr >> 16) & 0o777
            if mode and not info.is_dir() and not stat.S_ISLNK(info.external_attr >> 16):
                os.chmod(extracted, mode)

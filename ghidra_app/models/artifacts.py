"""Artifact descriptor models: one downloadable, checksummed archive each."""

from __future__ import annotations

from enum import Enum
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict

from ghidra_app.models.architecture import Architecture


class ArtifactKind(str, Enum):
    """The three kinds of artifact a build may need."""

    JDK = "jdk"
    GHIDRA = "ghidra"
    GRADLE = "gradle"


class ArchiveFormat(str, Enum):
    """Archive formats we know how to unpack, keyed by filename suffix."""

    TAR_GZ = "tar.gz"
    ZIP = "zip"

    @classmethod
    def from_filename(cls, filename: str) -> ArchiveFormat | None:
        """Return the format implied by ``filename``'s suffix, if any."""
        for fmt in cls:
            if filename.endswith(f".{fmt.value}"):
                return fmt
        return None


class ArtifactDescriptor(BaseModel):
    """An externally sourced archive pinned by URL and SHA-256.

    ``architecture`` is None for artifacts that are the same on every
    architecture. ``home`` is the path of interest inside the unpacked
    archive: the JDK home for runtimes, the top-level directory for
    Gradle, and empty for Ghidra (whose directory is derived from its
    filename instead).
    """

    model_config = ConfigDict(frozen=True)

    kind: ArtifactKind
    url: str
    sha256: str
    architecture: Architecture | None = None
    home: str = ""

    @property
    def filename(self) -> str:
        """Cache filename: the final path segment of the source URL."""
        return urlsplit(self.url).path.rsplit("/", 1)[-1]

    @property
    def archive_format(self) -> ArchiveFormat | None:
        return ArchiveFormat.from_filename(self.filename)

    @property
    def label(self) -> str:
        """Short human-readable name used in log messages."""
        if self.architecture is None:
            return self.kind.value
        return f"{self.kind.value} ({self.architecture.value})"

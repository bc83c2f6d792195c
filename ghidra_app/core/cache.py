"""Flat download cache for pinned artifacts.

Layout: ``{cache}/{filename}`` where ``filename`` is the final segment of the
artifact's URL, plus the unpacked Gradle tree. Files are fetched at most
once per cache lifetime and verified against their pinned SHA-256 before
every use.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import requests

from ghidra_app.core.decompress import decompress
from ghidra_app.core.hasher import normalize_digest, sha256_file
from ghidra_app.errors import GhidraAppError
from ghidra_app.models.artifacts import ArtifactDescriptor

logger = logging.getLogger(__name__)

_DOWNLOAD_CHUNK = 1024 * 256


class DownloadError(GhidraAppError):
    """Raised when an artifact cannot be transferred."""


class ChecksumMismatchError(GhidraAppError):
    """Raised when a cached artifact's SHA-256 differs from its pin.

    Corruption and tampering look the same from here, so this is never
    retried or ignored.
    """


class ArtifactCache:
    """Fetch-once, verify-always artifact cache.

    Parameters
    ----------
    base_path:
        Cache directory; created on first use.
    session:
        ``requests`` session used for downloads. A fresh one by default.
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_path: Path,
        *,
        session: requests.Session | None = None,
        timeout: float = 60.0,
    ) -> None:
        self._base = Path(base_path)
        self._session = session or requests.Session()
        self._timeout = timeout
        # (path, digest) pairs already hashed during this run
        self._verified: set[tuple[Path, str]] = set()

    @property
    def base_path(self) -> Path:
        return self._base

    def path_for(self, descriptor: ArtifactDescriptor) -> Path:
        """Local path an artifact is cached under."""
        return self._base / descriptor.filename

    # ------------------------------------------------------------------
    # Fetch and verify
    # ------------------------------------------------------------------

    def ensure(self, descriptor: ArtifactDescriptor) -> Path:
        """Return the path of a verified local copy of ``descriptor``.

        Downloads only when the file is absent. Raises
        ``ChecksumMismatchError`` if the local copy does not match.
        """
        path = self.path_for(descriptor)
        if path.is_file():
            logger.info("Using the cached %s from '%s'", descriptor.label, path)
        else:
            logger.info("Downloading the %s to '%s'", descriptor.label, path)
            self._download(descriptor.url, path)
        self.verify(descriptor, path)
        return path

    def verify(self, descriptor: ArtifactDescriptor, path: Path) -> None:
        """Check ``path`` against the descriptor's pinned SHA-256."""
        expected = normalize_digest(descriptor.sha256)
        key = (path.resolve(), expected)
        if key in self._verified:
            logger.debug("Already verified '%s' in this run", path)
            return

        actual = sha256_file(path)
        if actual != expected:
            raise ChecksumMismatchError(
                f"Checksum mismatch for {descriptor.label} '{path}': "
                f"expected {expected}, got {actual}"
            )
        logger.debug("Verified %s sha256:%s", path.name, actual)
        self._verified.add(key)

    def is_verified(self, descriptor: ArtifactDescriptor) -> bool:
        """Whether ``descriptor`` has been verified during this run."""
        path = self.path_for(descriptor)
        return (path.resolve(), normalize_digest(descriptor.sha256)) in self._verified

    def _download(self, url: str, dest: Path) -> None:
        """Stream ``url`` into ``dest``; the file appears only when complete."""
        dest.parent.mkdir(parents=True, exist_ok=True)
        partial = dest.with_name(dest.name + ".part")
        try:
            with self._session.get(url, stream=True, timeout=self._timeout) as resp:
                resp.raise_for_status()
                with partial.open("wb") as fh:
                    for chunk in resp.iter_content(chunk_size=_DOWNLOAD_CHUNK):
                        if chunk:
                            fh.write(chunk)
        except requests.exceptions.RequestException as exc:
            partial.unlink(missing_ok=True)
            raise DownloadError(f"Failed to download '{url}': {exc}") from exc
        os.replace(partial, dest)

    # ------------------------------------------------------------------
    # Unpacked tools
    # ------------------------------------------------------------------

    def unpack(self, descriptor: ArtifactDescriptor) -> Path:
        """Ensure the artifact and unpack it inside the cache, once.

        Returns ``{cache}/{descriptor.home}``. Only build tools are
        unpacked here; bundle contents are unpacked into the bundle.
        """
        archive = self.ensure(descriptor)
        home = self._base / descriptor.home
        if descriptor.home and home.is_dir():
            logger.info("Using the unpacked %s in '%s'", descriptor.label, home)
            return home
        logger.info("Unpacking the %s into '%s'", descriptor.label, self._base)
        decompress(archive, self._base)
        return home

"""Versioned table of pinned artifacts, keyed by (kind, architecture).

The table is data, not state: ``replace()`` returns a new table, so a run
that opts into the latest upstream release never mutates the pins.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ghidra_app.errors import GhidraAppError
from ghidra_app.models.architecture import Architecture
from ghidra_app.models.artifacts import ArtifactDescriptor, ArtifactKind


class ArtifactNotFoundError(GhidraAppError):
    """Raised when the table has no entry for a (kind, architecture) pair."""


class ArtifactTable(BaseModel):
    """An immutable collection of artifact descriptors."""

    model_config = ConfigDict(frozen=True)

    version: str
    entries: tuple[ArtifactDescriptor, ...]

    def lookup(
        self, kind: ArtifactKind, arch: Architecture | None = None
    ) -> ArtifactDescriptor:
        """Return the entry for ``kind`` on ``arch``.

        An exact architecture match wins; otherwise the
        architecture-independent entry for ``kind`` is used.
        """
        fallback: ArtifactDescriptor | None = None
        for entry in self.entries:
            if entry.kind != kind:
                continue
            if entry.architecture is not None and entry.architecture == arch:
                return entry
            if entry.architecture is None:
                fallback = entry
        if fallback is None:
            where = f" for {arch.value}" if arch is not None else ""
            raise ArtifactNotFoundError(f"No {kind.value} artifact{where}")
        return fallback

    def replace(self, descriptor: ArtifactDescriptor) -> ArtifactTable:
        """Return a copy with the entry of the same kind and arch swapped."""
        kept = tuple(
            e
            for e in self.entries
            if (e.kind, e.architecture) != (descriptor.kind, descriptor.architecture)
        )
        return self.model_copy(update={"entries": kept + (descriptor,)})


PINNED_TABLE = ArtifactTable(
    version="ghidra-10.2.2+jdk-17.0.5",
    entries=(
        ArtifactDescriptor(
            kind=ArtifactKind.JDK,
            architecture=Architecture.X86_64,
            url=(
                "https://github.com/adoptium/temurin17-binaries/releases/download/"
                "jdk-17.0.5%2B8/OpenJDK17U-jdk_x64_mac_hotspot_17.0.5_8.tar.gz"
            ),
            sha256="94fe50982b09a179e603a096e83fd8e59fd12c0ae4bcb37ae35f00ef30a75d64",
            home="jdk-17.0.5+8/Contents/Home",
        ),
        ArtifactDescriptor(
            kind=ArtifactKind.JDK,
            architecture=Architecture.ARM64,
            url=(
                "https://github.com/bell-sw/Liberica/releases/download/"
                "17.0.5%2B8/bellsoft-jdk17.0.5+8-macos-aarch64.tar.gz"
            ),
            sha256="cbe9168d3dfa2e397c5dd72c1f422fc8b2dd059bb52b57862bca62733923a962",
            home="jdk-17.0.5.jdk",
        ),
        ArtifactDescriptor(
            kind=ArtifactKind.GHIDRA,
            url=(
                "https://github.com/NationalSecurityAgency/ghidra/releases/download/"
                "Ghidra_10.2.2_build/ghidra_10.2.2_PUBLIC_20221115.zip"
            ),
            sha256="feb8a795696b406ad075e2c554c80c7ee7dd55f0952458f694ea1a918aa20ee3",
        ),
        ArtifactDescriptor(
            kind=ArtifactKind.GRADLE,
            url="https://services.gradle.org/distributions/gradle-7.6-bin.zip",
            sha256="7ba68c54029790ab444b39d7e293d3236b2632631fb5f2e012bb28b4ff669e4b",
            home="gradle-7.6",
        ),
    ),
)

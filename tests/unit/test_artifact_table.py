"""Tests for ArtifactTable and ArtifactDescriptor."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ghidra_app.core.artifact_table import (
    PINNED_TABLE,
    ArtifactNotFoundError,
    ArtifactTable,
)
from ghidra_app.models.architecture import Architecture
from ghidra_app.models.artifacts import ArchiveFormat, ArtifactDescriptor, ArtifactKind


class TestArtifactDescriptor:
    def test_filename_is_last_url_segment(self):
        jdk = PINNED_TABLE.lookup(ArtifactKind.JDK, Architecture.X86_64)
        assert jdk.filename == "OpenJDK17U-jdk_x64_mac_hotspot_17.0.5_8.tar.gz"

    def test_archive_formats(self):
        assert PINNED_TABLE.lookup(ArtifactKind.JDK, Architecture.ARM64).archive_format is ArchiveFormat.TAR_GZ
        assert PINNED_TABLE.lookup(ArtifactKind.GHIDRA).archive_format is ArchiveFormat.ZIP
        other = ArtifactDescriptor(kind=ArtifactKind.GHIDRA, url="https://x/y.dmg", sha256="00")
        assert other.archive_format is None

    def test_frozen(self):
        ghidra = PINNED_TABLE.lookup(ArtifactKind.GHIDRA)
        with pytest.raises(ValidationError):
            ghidra.url = "https://example.invalid/"  # type: ignore[misc]

    def test_label(self):
        assert PINNED_TABLE.lookup(ArtifactKind.GHIDRA).label == "ghidra"
        assert PINNED_TABLE.lookup(ArtifactKind.JDK, Architecture.ARM64).label == "jdk (arm64)"


class TestArtifactTable:
    def test_exact_architecture_wins(self):
        x64 = PINNED_TABLE.lookup(ArtifactKind.JDK, Architecture.X86_64)
        arm = PINNED_TABLE.lookup(ArtifactKind.JDK, Architecture.ARM64)
        assert x64.architecture is Architecture.X86_64
        assert arm.architecture is Architecture.ARM64
        assert x64.home == "jdk-17.0.5+8/Contents/Home"
        assert arm.home == "jdk-17.0.5.jdk"

    def test_architecture_independent_fallback(self):
        for arch in Architecture:
            ghidra = PINNED_TABLE.lookup(ArtifactKind.GHIDRA, arch)
            assert ghidra.filename == "ghidra_10.2.2_PUBLIC_20221115.zip"
            assert PINNED_TABLE.lookup(ArtifactKind.GRADLE, arch).home == "gradle-7.6"

    def test_missing_entry(self):
        table = ArtifactTable(version="empty", entries=())
        with pytest.raises(ArtifactNotFoundError, match="No jdk artifact for arm64"):
            table.lookup(ArtifactKind.JDK, Architecture.ARM64)

    def test_jdk_has_no_fallback(self):
        table = ArtifactTable(
            version="x64-only",
            entries=(PINNED_TABLE.lookup(ArtifactKind.JDK, Architecture.X86_64),),
        )
        with pytest.raises(ArtifactNotFoundError):
            table.lookup(ArtifactKind.JDK, Architecture.ARM64)

    def test_replace_returns_new_table(self):
        newer = ArtifactDescriptor(
            kind=ArtifactKind.GHIDRA,
            url="https://example.invalid/ghidra_11.0_PUBLIC_20231222.zip",
            sha256="ab" * 32,
        )
        table = PINNED_TABLE.replace(newer)
        assert table.lookup(ArtifactKind.GHIDRA) == newer
        assert PINNED_TABLE.lookup(ArtifactKind.GHIDRA) != newer
        assert len(table.entries) == len(PINNED_TABLE.entries)

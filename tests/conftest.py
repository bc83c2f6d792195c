"""Shared test fixtures for ghidra_app.

Network and Gradle are replaced with fakes; archives are generated on the
fly so tests never touch the real multi-hundred-megabyte artifacts.
"""

from __future__ import annotations

import io
import subprocess
import tarfile
import zipfile
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
import requests

from ghidra_app.core.artifact_table import PINNED_TABLE, ArtifactTable
from ghidra_app.core.cache import ArtifactCache
from ghidra_app.core.hasher import sha256_hex
from ghidra_app.models.architecture import Architecture
from ghidra_app.models.artifacts import ArtifactKind

# name -> bytes, or name -> (bytes, mode)
ArchiveMembers = Mapping[str, bytes | tuple[bytes, int]]


# ---------------------------------------------------------------------------
# Archive factories
# ---------------------------------------------------------------------------


def _member(value: bytes | tuple[bytes, int]) -> tuple[bytes, int]:
    if isinstance(value, tuple):
        return value
    return value, 0o644


@pytest.fixture
def make_tar_gz() -> Callable[[ArchiveMembers], bytes]:
    """Factory fixture: build a .tar.gz archive in memory."""

    def _factory(members: ArchiveMembers) -> bytes:
        buf = io.BytesIO()
        with tarfile.open(fileobj=buf, mode="w:gz") as tar:
            for name, value in members.items():
                data, mode = _member(value)
                info = tarfile.TarInfo(name)
                info.size = len(data)
                info.mode = mode
                tar.addfile(info, io.BytesIO(data))
        return buf.getvalue()

    return _factory


@pytest.fixture
def make_zip() -> Callable[[ArchiveMembers], bytes]:
    """Factory fixture: build a .zip archive in memory, with Unix modes."""

    def _factory(members: ArchiveMembers) -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            for name, value in members.items():
                data, mode = _member(value)
                info = zipfile.ZipInfo(name)
                info.external_attr = (0o100000 | mode) << 16
                zf.writestr(info, data)
        return buf.getvalue()

    return _factory


# ---------------------------------------------------------------------------
# Fake network
# ---------------------------------------------------------------------------


class FakeResponse:
    """Just enough of ``requests.Response`` for the cache and API client."""

    def __init__(self, url: str, body: bytes | None = None, payload: Any = None) -> None:
        self.url = url
        self._body = body
        self._payload = payload

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def raise_for_status(self) -> None:
        if self._body is None and self._payload is None:
            raise requests.HTTPError(f"404 Client Error: Not Found for url: {self.url}")

    def iter_content(self, chunk_size: int = 1):
        data = self._body or b""
        for i in range(0, len(data), chunk_size):
            yield data[i : i + chunk_size]

    def json(self) -> Any:
        return self._payload


@dataclass
class FakeSession:
    """Serves canned bodies by URL and records every request."""

    bodies: dict[str, bytes] = field(default_factory=dict)
    payloads: dict[str, Any] = field(default_factory=dict)
    requests: list[str] = field(default_factory=list)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append(url)
        return FakeResponse(url, self.bodies.get(url), self.payloads.get(url))


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


# ---------------------------------------------------------------------------
# Fake Gradle
# ---------------------------------------------------------------------------


@dataclass
class FakeRunner:
    """Stands in for ``subprocess.run``; optionally fails every call."""

    returncode: int = 0
    calls: list[dict[str, Any]] = field(default_factory=list)

    def __call__(self, cmd, *, cwd=None, env=None, check=False, **kwargs):
        java_home = Path(env["JAVA_HOME"]) if env else None
        self.calls.append({
            "cmd": list(cmd),
            "cwd": Path(cwd) if cwd is not None else None,
            "env": dict(env or {}),
            "java_present": bool(java_home and (java_home / "bin" / "java").is_file()),
        })
        if check and self.returncode != 0:
            raise subprocess.CalledProcessError(self.returncode, cmd)
        return subprocess.CompletedProcess(cmd, self.returncode)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


# ---------------------------------------------------------------------------
# Fake upstream artifacts
# ---------------------------------------------------------------------------


@dataclass
class FakeUpstream:
    """A pinned table whose checksums match generated archives."""

    table: ArtifactTable
    session: FakeSession
    blobs: dict[str, bytes]


@pytest.fixture
def upstream(make_tar_gz, make_zip, fake_session: FakeSession) -> FakeUpstream:
    """Serve small look-alike JDK, Ghidra and Gradle archives."""
    ghidra_dir = "ghidra_10.2.2_PUBLIC"
    archives: dict[tuple[ArtifactKind, Architecture | None], bytes] = {
        (ArtifactKind.JDK, Architecture.X86_64): make_tar_gz({
            "jdk-17.0.5+8/Contents/Home/bin/java": (b"#!x86_64 java\n", 0o755),
            "jdk-17.0.5+8/Contents/Home/release": b"JAVA_VERSION=17.0.5\n",
        }),
        (ArtifactKind.JDK, Architecture.ARM64): make_tar_gz({
            "jdk-17.0.5.jdk/bin/java": (b"#!arm64 java\n", 0o755),
            "jdk-17.0.5.jdk/release": b"JAVA_VERSION=17.0.5\n",
        }),
        (ArtifactKind.GHIDRA, None): make_zip({
            f"{ghidra_dir}/ghidraRun": (b"#!/bin/bash\n", 0o755),
            f"{ghidra_dir}/Ghidra/Features/Decompiler/build.gradle": b"",
            f"{ghidra_dir}/Ghidra/Features/GnuDemangler/build.gradle": b"",
        }),
        (ArtifactKind.GRADLE, None): make_zip({
            "gradle-7.6/bin/gradle": (b"#!/bin/sh\n", 0o755),
        }),
    }

    entries = []
    blobs: dict[str, bytes] = {}
    for entry in PINNED_TABLE.entries:
        data = archives[(entry.kind, entry.architecture)]
        entries.append(entry.model_copy(update={"sha256": sha256_hex(data)}))
        blobs[entry.url] = data

    fake_session.bodies.update(blobs)
    table = ArtifactTable(version="test", entries=tuple(entries))
    return FakeUpstream(table=table, session=fake_session, blobs=blobs)


@pytest.fixture
def cache(tmp_path: Path, fake_session: FakeSession) -> ArtifactCache:
    """An ArtifactCache in a temp directory, wired to the fake session."""
    return ArtifactCache(tmp_path / "cache", session=fake_session)

"""Native helper binaries: when to build them and how.

Upstream ships prebuilt natives (decompiler, demangler) for x86-64 only.
For other targets they are compiled with Gradle from inside the unpacked
distribution. Gradle needs a JDK that runs on the *host*, which is not the
JDK embedded in the bundle when packaging arm64 on an x86-64 machine.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from ghidra_app.core.artifact_table import ArtifactTable
from ghidra_app.errors import GhidraAppError
from ghidra_app.models.architecture import Architecture
from ghidra_app.models.artifacts import ArtifactDescriptor, ArtifactKind

logger = logging.getLogger(__name__)

# Subprojects of the distribution that carry native code, relative to its root
NATIVE_SUBPROJECTS: tuple[str, ...] = (
    "Ghidra/Features/Decompiler",
    "Ghidra/Features/GnuDemangler",
)

Runner = Callable[..., subprocess.CompletedProcess]


class NativeBuildError(GhidraAppError):
    """Raised when Gradle fails; the bundle is left without natives."""


def should_build_natives(arch: Architecture, build_natives: bool | None = None) -> bool:
    """Explicit choice wins; otherwise build only when nothing is prebuilt."""
    if build_natives is not None:
        return build_natives
    return not arch.has_prebuilt_natives


def build_runtime_for(
    host: Architecture, target: Architecture, table: ArtifactTable
) -> ArtifactDescriptor:
    """JDK that drives Gradle: always the host's, whatever the target."""
    runtime = table.lookup(ArtifactKind.JDK, host)
    if host != target:
        logger.info(
            "Cross-building %s natives on %s; Gradle runs on the %s JDK",
            target.value,
            host.value,
            host.value,
        )
    return runtime


def emulation_warning(arch: Architecture) -> str:
    return (
        f"Not building native binaries for {arch.value}; the prebuilt x86-64 "
        "binaries will run under Rosetta emulation"
    )


class NativeBuilder:
    """Runs ``gradle buildNatives_<target>`` in each native subproject.

    Parameters
    ----------
    gradle_home:
        Unpacked Gradle distribution (contains ``bin/gradle``).
    runner:
        ``subprocess.run``-compatible callable.
    """

    def __init__(self, gradle_home: Path, *, runner: Runner = subprocess.run) -> None:
        self._gradle = Path(gradle_home).resolve() / "bin" / "gradle"
        self._runner = runner

    @staticmethod
    def task_for(target: Architecture) -> str:
        return f"buildNatives_{target.native_target}"

    @staticmethod
    def build_env(
        runtime_home: Path, base: Mapping[str, str] | None = None
    ) -> dict[str, str]:
        """Environment with the build-time JDK first on ``PATH``.

        Paths are made absolute: Gradle runs from inside each subproject.
        """
        runtime_home = Path(runtime_home).resolve()
        env = dict(os.environ if base is None else base)
        env["JAVA_HOME"] = str(runtime_home)
        env["PATH"] = os.pathsep.join(
            p for p in (str(runtime_home / "bin"), env.get("PATH", "")) if p
        )
        return env

    def command(self, target: Architecture) -> Sequence[str]:
        return [str(self._gradle), self.task_for(target)]

    def build(self, ghidra_root: Path, target: Architecture, runtime_home: Path) -> None:
        """Build natives for ``target`` in every native subproject."""
        env = self.build_env(runtime_home)
        cmd = self.command(target)
        for subproject in NATIVE_SUBPROJECTS:
            cwd = Path(ghidra_root) / subproject
            logger.info("Building %s natives in '%s'", target.value, cwd)
            try:
                self._runner(list(cmd), cwd=cwd, env=env, check=True)
            except subprocess.CalledProcessError as exc:
                raise NativeBuildError(
                    f"Gradle failed in '{cwd}' with exit code {exc.returncode}; "
                    "the bundle has no native binaries"
                ) from exc
            except OSError as exc:
                raise NativeBuildError(f"Cannot run Gradle in '{cwd}': {exc}") from exc

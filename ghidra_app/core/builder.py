"""Run orchestrator: resolves a ``BuildPlan`` and assembles the bundle.

Ordering matters and is enforced here:

    precondition -> parse distribution name -> fetch + verify everything
        -> delete old bundle (force only) -> assemble -> natives

so a checksum failure or an upstream naming change never costs the user
an existing bundle.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path

from ghidra_app.core import bundle
from ghidra_app.core.artifact_table import PINNED_TABLE, ArtifactTable
from ghidra_app.core.cache import ArtifactCache
from ghidra_app.core.decompress import decompress
from ghidra_app.core.natives import (
    NativeBuilder,
    Runner,
    build_runtime_for,
    emulation_warning,
    should_build_natives,
)
from ghidra_app.core.release_name import parse_distribution_name
from ghidra_app.errors import GhidraAppError
from ghidra_app.models.architecture import Architecture
from ghidra_app.models.artifacts import ArtifactDescriptor, ArtifactKind
from ghidra_app.models.config import BuildPlan, BuildResult

logger = logging.getLogger(__name__)


class BundleExistsError(GhidraAppError):
    """Raised when the output exists and overwriting was not requested."""


class MissingIconError(GhidraAppError):
    """Raised when a custom icon path is not an existing file."""


def make_plan(
    *,
    arch: Architecture | str | None = None,
    host_arch: Architecture | None = None,
    output: Path = Path("Ghidra.app"),
    force: bool = False,
    build_natives: bool | None = None,
    table: ArtifactTable = PINNED_TABLE,
    ghidra: ArtifactDescriptor | None = None,
    icon: Path | None = None,
) -> BuildPlan:
    """Resolve architectures, artifacts and the native policy for one run.

    ``arch`` defaults to the host, which is only detected when needed.
    ``ghidra`` overrides the table's distribution (used for the latest
    upstream release).
    """
    host = host_arch
    if arch is None:
        host = target = host or Architecture.host()
    elif isinstance(arch, Architecture):
        target = arch
    else:
        target = Architecture.parse(arch)

    if ghidra is not None:
        table = table.replace(ghidra)

    building = should_build_natives(target, build_natives)
    if building and host is None:
        host = Architecture.host()

    return BuildPlan(
        output=Path(output),
        arch=target,
        host_arch=host,
        force=force,
        build_natives=building,
        bundle_jdk=table.lookup(ArtifactKind.JDK, target),
        ghidra=table.lookup(ArtifactKind.GHIDRA, target),
        gradle=table.lookup(ArtifactKind.GRADLE, host) if building else None,
        build_jdk=build_runtime_for(host, target, table) if building else None,
        icon=icon,
    )


class BundleBuilder:
    """Builds a bundle from a plan, using a shared artifact cache.

    Parameters
    ----------
    cache:
        The download cache.
    runner:
        ``subprocess.run``-compatible callable used to invoke Gradle.
    """

    def __init__(self, cache: ArtifactCache, *, runner: Runner = subprocess.run) -> None:
        self.cache = cache
        self._runner = runner

    def build(self, plan: BuildPlan) -> BuildResult:
        app = plan.output

        # 1. Preconditions: no clobbering without force, icon present
        if app.exists() and not plan.force:
            raise BundleExistsError(
                f"'{app}' already exists; use --force to build it anyway"
            )
        if plan.icon is not None and not plan.icon.is_file():
            raise MissingIconError(
                f"Icon '{plan.icon}' does not exist or is not a file"
            )

        # 2. Upstream naming contract, before anything is written
        distribution = parse_distribution_name(plan.ghidra.filename)

        # 3. Fetch and verify every artifact up front
        for artifact in plan.required_artifacts():
            self.cache.ensure(artifact)

        # 4. Only now is it safe to discard the old bundle
        if app.exists():
            logger.info("Removing the existing '%s'", app)
            shutil.rmtree(app)

        logger.info("Building the Ghidra wrapper '%s' for %s", app, plan.arch.value)
        bundle.create_skeleton(app)
        bundle.write_info_plist(app, distribution.version)
        bundle.write_launcher(app, plan.bundle_jdk.home, distribution.directory)
        bundle.copy_icon(app, plan.icon)

        resources = bundle.resources_dir(app)
        logger.info("Unpacking the %s", plan.bundle_jdk.label)
        decompress(self.cache.path_for(plan.bundle_jdk), resources)
        logger.info("Unpacking %s", plan.ghidra.filename)
        decompress(self.cache.path_for(plan.ghidra), resources)

        warnings: list[str] = []
        if plan.build_natives:
            self._build_natives(plan, resources / distribution.directory)
        elif not plan.arch.has_prebuilt_natives:
            message = emulation_warning(plan.arch)
            logger.warning(message)
            warnings.append(message)

        return BuildResult(
            app=app,
            arch=plan.arch,
            distribution=distribution,
            natives_built=plan.build_natives,
            warnings=warnings,
        )

    def _build_natives(self, plan: BuildPlan, ghidra_root: Path) -> None:
        if plan.gradle is None or plan.build_jdk is None:
            raise GhidraAppError("Native build requested without Gradle and a build JDK")
        gradle_home = self.cache.unpack(plan.gradle)
        builder = NativeBuilder(gradle_home, runner=self._runner)

        if not plan.cross_build:
            runtime_home = bundle.resources_dir(plan.output) / plan.bundle_jdk.home
            builder.build(ghidra_root, plan.arch, runtime_home)
            return

        # The host JDK is only needed to drive Gradle; keep it out of the bundle.
        with tempfile.TemporaryDirectory(prefix="ghidra-app-jdk-") as tmp:
            logger.info("Unpacking the build-time %s", plan.build_jdk.label)
            decompress(self.cache.path_for(plan.build_jdk), Path(tmp))
            builder.build(ghidra_root, plan.arch, Path(tmp) / plan.build_jdk.home)

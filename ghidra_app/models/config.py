"""Per-run build plan: resolved once, never mutated."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from ghidra_app.models.architecture import Architecture
from ghidra_app.models.artifacts import ArtifactDescriptor
from ghidra_app.models.release import DistributionName


class BuildPlan(BaseModel):
    """Everything one run needs to know, decided up front.

    ``gradle`` and ``build_jdk`` are only set when ``build_natives`` is
    True. ``host_arch`` is None when neither the target nor a native
    build needed it. ``build_jdk`` matches the *host* architecture, which differs
    from ``bundle_jdk`` when cross-packaging.
    """

    model_config = ConfigDict(frozen=True)

    output: Path = Path("Ghidra.app")
    arch: Architecture
    host_arch: Architecture | None = None
    force: bool = False
    build_natives: bool
    bundle_jdk: ArtifactDescriptor
    ghidra: ArtifactDescriptor
    gradle: ArtifactDescriptor | None = None
    build_jdk: ArtifactDescriptor | None = None
    icon: Path | None = None

    @property
    def cross_build(self) -> bool:
        """True when natives are compiled for a different architecture."""
        return self.build_natives and self.host_arch != self.arch

    def required_artifacts(self) -> list[ArtifactDescriptor]:
        """Artifacts to fetch and verify before anything is written."""
        artifacts = [self.bundle_jdk, self.ghidra]
        if self.build_natives:
            for extra in (self.gradle, self.build_jdk):
                if extra is not None and extra not in artifacts:
                    artifacts.append(extra)
        return artifacts


class BuildResult(BaseModel):
    """Outcome of a completed run."""

    model_config = ConfigDict(frozen=True)

    app: Path
    arch: Architecture
    distribution: DistributionName
    natives_built: bool
    warnings: list[str] = Field(default_factory=list)

"""ghidra_app data models: all Pydantic v2, all frozen (immutable)."""

from ghidra_app.models.architecture import Architecture, UnsupportedArchitectureError
from ghidra_app.models.artifacts import ArchiveFormat, ArtifactDescriptor, ArtifactKind
from ghidra_app.models.config import BuildPlan, BuildResult
from ghidra_app.models.release import DistributionName

__all__ = [
    # architecture
    "Architecture",
    "UnsupportedArchitectureError",
    # artifacts
    "ArchiveFormat",
    "ArtifactDescriptor",
    "ArtifactKind",
    # release
    "DistributionName",
    # config
    "BuildPlan",
    "BuildResult",
]

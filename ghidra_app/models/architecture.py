"""Target CPU architectures and the per-architecture native build policy."""

from __future__ import annotations

import platform
from enum import Enum

from ghidra_app.errors import GhidraAppError


class UnsupportedArchitectureError(GhidraAppError):
    """Raised when an architecture name is not one we can package for."""


_ALIASES: dict[str, str] = {
    "x86_64": "x86_64",
    "x86-64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "arm64",
    "aarch64": "arm64",
}


class Architecture(str, Enum):
    """CPU architectures a bundle can be built for."""

    X86_64 = "x86_64"
    ARM64 = "arm64"

    @classmethod
    def parse(cls, name: str) -> Architecture:
        """Resolve an architecture name or one of its common aliases."""
        canonical = _ALIASES.get(name.strip().lower())
        if canonical is None:
            raise UnsupportedArchitectureError(f"Unsupported architecture '{name}'")
        return cls(canonical)

    @classmethod
    def host(cls) -> Architecture:
        """Detect the architecture of the machine we are running on."""
        return cls.parse(platform.machine())

    @property
    def native_target(self) -> str:
        """Gradle native platform name, as in ``buildNatives_<target>``."""
        return _NATIVE_TARGETS[self]

    @property
    def has_prebuilt_natives(self) -> bool:
        """Whether the upstream distribution ships native binaries for us."""
        return self in _PREBUILT_NATIVES


_NATIVE_TARGETS: dict[Architecture, str] = {
    Architecture.X86_64: "mac_x86_64",
    Architecture.ARM64: "mac_arm_64",
}

# Upstream releases only carry x86-64 natives; arm64 runs them under Rosetta.
_PREBUILT_NATIVES: frozenset[Architecture] = frozenset({Architecture.X86_64})

"""ghidra_app: build a double-clickable macOS Ghidra.app.

Downloads a pinned Ghidra release and a matching JDK, verifies their
SHA-256 checksums, unpacks them into an application bundle and, where
upstream ships no native binaries for the target, compiles them with
Gradle.
"""

__version__ = "1.0.0"
__description__ = "Build a macOS application bundle for Ghidra"

from ghidra_app.core.builder import BundleBuilder, make_plan
from ghidra_app.cli.app import app as cli

__all__ = ["BundleBuilder", "make_plan", "cli", "__version__"]

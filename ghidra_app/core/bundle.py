"""macOS ``.app`` bundle pieces: skeleton, Info.plist, launcher and icon.

Bundle layout::

    Ghidra.app/
        Contents/
            Info.plist                  (binary property list)
            MacOS/ghidra                (launcher script)
            Resources/ghidra.icns
            Resources/<jdk>/            (unpacked runtime)
            Resources/ghidra_<v>_<c>/   (unpacked distribution)
"""

from __future__ import annotations

import logging
import plistlib
import shutil
from importlib import resources
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

BUNDLE_IDENTIFIER = "net.checkoway.ghidra_app"
BUNDLE_NAME = "Ghidra"
EXECUTABLE_NAME = "ghidra"
ICON_NAME = "ghidra"
MINIMUM_SYSTEM_VERSION = "10.10"


def contents_dir(app: Path) -> Path:
    return Path(app) / "Contents"


def macos_dir(app: Path) -> Path:
    return contents_dir(app) / "MacOS"


def resources_dir(app: Path) -> Path:
    return contents_dir(app) / "Resources"


def create_skeleton(app: Path) -> None:
    """Create ``Contents``, ``Contents/MacOS`` and ``Contents/Resources``."""
    macos_dir(app).mkdir(parents=True)
    resources_dir(app).mkdir(parents=True)


def display_name(app: Path) -> str:
    """Name shown by Finder: the bundle directory without ``.app``."""
    name = Path(app).name
    return name.removesuffix(".app")


def info_plist(display: str, version: str) -> dict[str, Any]:
    """Return the Info.plist record for a bundle."""
    return {
        "CFBundleDisplayName": display,
        "CFBundleDevelopmentRegion": "English",
        "CFBundleExecutable": EXECUTABLE_NAME,
        "CFBundleIconFile": ICON_NAME,
        "CFBundleIdentifier": BUNDLE_IDENTIFIER,
        "CFBundleInfoDictionaryVersion": "6.0",
        "CFBundleName": BUNDLE_NAME,
        "CFBundlePackageType": "APPL",
        "CFBundleShortVersionString": version,
        "CFBundleVersion": version,
        "LSMinimumSystemVersion": MINIMUM_SYSTEM_VERSION,
    }


def write_info_plist(app: Path, version: str) -> Path:
    """Write ``Contents/Info.plist`` in the binary plist format."""
    path = contents_dir(app) / "Info.plist"
    with path.open("wb") as fh:
        plistlib.dump(info_plist(display_name(app), version), fh, fmt=plistlib.FMT_BINARY)
    return path


_LAUNCHER_TEMPLATE = """\
#!/bin/bash
contents="${{0%/MacOS/*}}"
export JAVA_HOME="${{contents}}/Resources/{jdk_home}"
export PATH="${{JAVA_HOME}}/bin:${{PATH}}"
exec "${{contents}}/Resources/{ghidra_dir}/ghidraRun" "$@"
"""


def launcher_script(jdk_home: str, ghidra_dir: str) -> str:
    """Bash launcher that runs ghidraRun with the bundled JDK.

    The bundle location is derived from ``$0`` at run time, so the app
    keeps working after it is moved.
    """
    return _LAUNCHER_TEMPLATE.format(jdk_home=jdk_home, ghidra_dir=ghidra_dir)


def write_launcher(app: Path, jdk_home: str, ghidra_dir: str) -> Path:
    path = macos_dir(app) / EXECUTABLE_NAME
    path.write_text(launcher_script(jdk_home, ghidra_dir), encoding="utf-8")
    path.chmod(0o755)
    return path


def default_icon() -> Path:
    """The ``ghidra.icns`` shipped with this package."""
    return Path(str(resources.files("ghidra_app.resources") / f"{ICON_NAME}.icns"))


def copy_icon(app: Path, icon: Path | None = None) -> Path:
    """Copy the icon into ``Contents/Resources/ghidra.icns``."""
    source = Path(icon) if icon is not None else default_icon()
    dest = resources_dir(app) / f"{ICON_NAME}.icns"
    shutil.copyfile(source, dest)
    logger.debug("Copied icon '%s'", source)
    return dest

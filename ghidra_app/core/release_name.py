"""Parse upstream Ghidra distribution filenames.

Upstream names its release archives ``ghidra_10.2.2_PUBLIC_20221115.zip``.
The bundle's version string and the directory the archive unpacks into are
both derived from that name, so a silent upstream rename must fail loudly
here rather than produce a broken launcher.
"""

from __future__ import annotations

import re

from ghidra_app.errors import GhidraAppError
from ghidra_app.models.release import DistributionName

_DISTRIBUTION_RE = re.compile(
    r"^(?P<name>[a-z]+)_(?P<version>[0-9]+(?:\.[0-9]+)*)"
    r"_(?P<channel>[^_]+)_(?P<date>[0-9]{8})\.zip$"
)


class DistributionNameError(GhidraAppError):
    """Raised when a distribution filename does not follow the convention."""


def parse_distribution_name(filename: str) -> DistributionName:
    """Split ``<name>_<version>_<channel>_<date>.zip`` into its parts."""
    match = _DISTRIBUTION_RE.match(filename)
    if match is None:
        raise DistributionNameError(
            f"Distribution '{filename}' does not match "
            "'<name>_<version>_<channel>_<date>.zip'; has the upstream naming changed?"
        )
    return DistributionName(**match.groupdict())

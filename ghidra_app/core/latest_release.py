"""Resolve the latest upstream Ghidra release through the GitHub API.

Opt-in only: the pinned table is the default. The checksum comes from the
release itself, either the asset's ``digest`` field or a ``SHA-256:`` line
in the release notes. A release without one is refused.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import requests

from ghidra_app.core.release_name import DistributionNameError, parse_distribution_name
from ghidra_app.errors import GhidraAppError
from ghidra_app.models.artifacts import ArtifactDescriptor, ArtifactKind

logger = logging.getLogger(__name__)

_NOTES_SHA256_RE = re.compile(r"SHA-?256:?\s*`?([0-9a-fA-F]{64})`?")


class LatestReleaseError(GhidraAppError):
    """Raised when the latest release cannot be resolved to a verified zip."""


def _pick_asset(release: dict[str, Any]) -> dict[str, Any]:
    """Return the first ``.zip`` asset whose name is a distribution name."""
    for asset in release.get("assets", []):
        name = asset.get("name", "")
        if not name.endswith(".zip"):
            continue
        try:
            parse_distribution_name(name)
        except DistributionNameError:
            continue
        return asset
    raise LatestReleaseError(
        f"Release {release.get('tag_name', '?')} has no distribution zip"
    )


def _asset_checksum(release: dict[str, Any], asset: dict[str, Any]) -> str:
    digest = asset.get("digest") or ""
    if digest.startswith("sha256:"):
        return digest.removeprefix("sha256:").lower()

    match = _NOTES_SHA256_RE.search(release.get("body") or "")
    if match:
        return match.group(1).lower()

    raise LatestReleaseError(
        f"Release {release.get('tag_name', '?')} publishes no SHA-256 for "
        f"'{asset.get('name')}'; refusing to use an unverified download"
    )


def resolve_latest_ghidra(
    *,
    api_url: str = "https://api.github.com",
    repo: str = "NationalSecurityAgency/ghidra",
    session: requests.Session | None = None,
    timeout: float = 60.0,
) -> ArtifactDescriptor:
    """Return a Ghidra descriptor for the newest upstream release."""
    session = session or requests.Session()
    endpoint = f"{api_url.rstrip('/')}/repos/{repo}/releases/latest"
    try:
        response = session.get(
            endpoint,
            headers={"Accept": "application/vnd.github+json"},
            timeout=timeout,
        )
        response.raise_for_status()
        release = response.json()
    except requests.exceptions.RequestException as exc:
        raise LatestReleaseError(f"Cannot query '{endpoint}': {exc}") from exc

    asset = _pick_asset(release)
    checksum = _asset_checksum(release, asset)
    logger.info(
        "Latest Ghidra release is %s (%s)", release.get("tag_name", "?"), asset["name"]
    )
    return ArtifactDescriptor(
        kind=ArtifactKind.GHIDRA,
        url=asset["browser_download_url"],
        sha256=checksum,
    )

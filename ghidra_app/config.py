"""Environment-driven settings for the bundle builder.

Every setting can be overridden with a ``GHIDRA_APP_BUILD_*`` environment
variable or a ``.env`` file in the working directory.

Examples
--------
Point the download cache somewhere persistent::

    export GHIDRA_APP_BUILD_CACHE=$HOME/.cache/ghidra_app
    export GHIDRA_APP_BUILD_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class BuildSettings(BaseSettings):
    """Settings shared by every run; per-run choices live in ``BuildPlan``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GHIDRA_APP_BUILD_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Download cache, reused across runs
    cache: Path = Path("cache")

    log_level: str = "INFO"

    # Network
    http_timeout: float = 60.0
    github_api: str = "https://api.github.com"
    ghidra_repo: str = "NationalSecurityAgency/ghidra"

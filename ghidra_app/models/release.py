"""Parsed form of an upstream Ghidra distribution filename."""

from pydantic import BaseModel, ConfigDict


class DistributionName(BaseModel):
    """``<name>_<version>_<channel>_<date>.zip`` split into its parts."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    channel: str
    date: str

    @property
    def directory(self) -> str:
        """Top-level directory the distribution unpacks into."""
        return f"{self.name}_{self.version}_{self.channel}"

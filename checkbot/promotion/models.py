"""Pydantic models for release feeds and promotion candidates."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

NO_STABLE_VERSION = "0.0.0"


class ReleaseInfo(BaseModel):
    """One adapter entry of the latest or stable repository feed."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    version: str = Field(..., description="Released version")
    version_date: datetime = Field(
        ..., alias="versionDate", description="Release timestamp (ISO 8601)"
    )
    meta: str | None = Field(
        None, description="URL of the adapter's io-package.json on GitHub"
    )

    @property
    def owner(self) -> str | None:
        """Repository owner taken from the meta URL."""
        # https://raw.githubusercontent.com/<owner>/ioBroker.<adapter>/...
        if not self.meta:
            return None
        parts = self.meta.split("/")
        return parts[3] if len(parts) > 3 else None


class UsageStatistics(BaseModel):
    """Install counts per adapter and per adapter version."""

    model_config = ConfigDict(extra="ignore")

    adapters: dict[str, int] = Field(
        default_factory=dict, description="Total installs per adapter"
    )
    versions: dict[str, dict[str, int]] = Field(
        default_factory=dict, description="Installs per adapter version"
    )

    def has(self, adapter: str) -> bool:
        return adapter in self.versions

    def installs(self, adapter: str, version: str | None = None) -> int:
        if version is None:
            return self.adapters.get(adapter, 0)
        return self.versions.get(adapter, {}).get(version, 0)

    def share(self, adapter: str, version: str) -> float:
        """Percentage of the adapter's installs on ``version``, two decimals."""
        total = self.adapters.get(adapter, 0)
        if not total:
            return 0.0
        return round(self.installs(adapter, version) / total * 100, 2)


class PromotionDirection(str, Enum):
    """Kind of promotion request."""

    ADD = "add"
    UPDATE = "update"


class PromotionCandidate(BaseModel):
    """Adapter version that should be proposed for the stable channel now."""

    adapter: str = Field(..., description="Adapter name without 'ioBroker.'")
    owner: str = Field(..., description="Repository owner")
    direction: PromotionDirection = Field(..., description="Add or update request")
    latest_version: str = Field(..., description="Version in the latest channel")
    stable_version: str = Field(
        NO_STABLE_VERSION, description="Version in the stable channel"
    )
    latest_age_days: int = Field(..., description="Days since the latest release")
    stable_age_days: int = Field(0, description="Days since the stable release")
    release_gap_days: int | None = Field(
        None, description="Days between stable and latest release"
    )
    latest_installs: int = Field(0, description="Installs of the latest version")
    stable_installs: int = Field(0, description="Installs of the stable version")
    install_share: float = Field(0.0, description="Percent of installs on latest")
    stable_share: float = Field(0.0, description="Percent of installs on stable")
    total_installs: int = Field(0, description="Installs of all versions")

    @property
    def repo(self) -> str:
        return f"ioBroker.{self.adapter}"

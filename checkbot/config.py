"""Configuration loaded from the environment."""

import os

from pydantic import BaseModel, Field

from .errors import CheckbotConfigError

LATEST_REPO_URL = "http://repo.iobroker.live/sources-dist-latest.json"
STABLE_REPO_URL = "http://repo.iobroker.live/sources-dist.json"
STATISTICS_URL = "https://www.iobroker.net/data/statistics.json"
STABLE_SOURCE_URL = (
    "https://raw.githubusercontent.com/ioBroker/ioBroker.repositories/master/"
    "sources-dist-stable.json"
)


class CheckbotSettings(BaseModel):
    """Settings shared by all commands; CLI flags override them."""

    github_token: str | None = Field(None, description="Token used for issue access")
    checker_url: str | None = Field(
        None, description="Repository checker endpoint, called with ?url=<repo>"
    )
    latest_url: str = Field(LATEST_REPO_URL, description="Latest channel feed")
    stable_url: str = Field(STABLE_REPO_URL, description="Stable channel feed")
    statistics_url: str = Field(STATISTICS_URL, description="Usage statistics feed")
    stable_source_url: str = Field(
        STABLE_SOURCE_URL, description="Raw stable repository source file"
    )
    mention: str | None = Field(
        None, description="Maintainer mentioned for evidence in issue text"
    )
    request_timeout: float = Field(30.0, gt=0, description="HTTP timeout in seconds")

    @classmethod
    def from_env(cls) -> "CheckbotSettings":
        """Build settings from CHECKBOT_* environment variables."""
        values: dict[str, str] = {}
        token = os.getenv("CHECKBOT_GITHUB_TOKEN") or os.getenv("GITHUB_TOKEN")
        if token:
            values["github_token"] = token

        env_names = {
            "checker_url": "CHECKBOT_CHECKER_URL",
            "latest_url": "CHECKBOT_LATEST_URL",
            "stable_url": "CHECKBOT_STABLE_URL",
            "statistics_url": "CHECKBOT_STATISTICS_URL",
            "stable_source_url": "CHECKBOT_STABLE_SOURCE_URL",
            "mention": "CHECKBOT_MENTION",
            "request_timeout": "CHECKBOT_REQUEST_TIMEOUT",
        }
        for field_name, env_name in env_names.items():
            value = os.getenv(env_name)
            if value:
                values[field_name] = value

        return cls.model_validate(values)

    def require_token(self) -> str:
        """Return the GitHub token or raise if it is missing."""
        if not self.github_token:
            raise CheckbotConfigError(
                "GitHub token is required. Set CHECKBOT_GITHUB_TOKEN or "
                "GITHUB_TOKEN environment variable, or pass --token."
            )
        return self.github_token

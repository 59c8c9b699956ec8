"""Release and usage feeds, cached per run."""

import logging
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from ..config import CheckbotSettings
from ..errors import TransientFetchError
from .models import ReleaseInfo, UsageStatistics

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "Expires": "0",
    "User-Agent": "checkbot",
}


class MetricsFeed(Protocol):
    """Periodic JSON snapshots keyed by adapter name."""

    async def latest_versions(self) -> dict[str, Any]: ...

    async def stable_versions(self) -> dict[str, Any]: ...

    async def usage_statistics(self) -> dict[str, Any]: ...

    async def stable_source(self) -> str: ...


class HttpMetricsFeed:
    """Downloads feeds over HTTP, bypassing caches."""

    def __init__(
        self, settings: CheckbotSettings, client: httpx.AsyncClient | None = None
    ):
        self.settings = settings
        self._client = client

    async def _get(self, url: str) -> httpx.Response:
        logger.info("retrieving %s", url)
        try:
            if self._client is not None:
                response = await self._client.get(
                    url, headers=NO_CACHE_HEADERS, timeout=self.settings.request_timeout
                )
            else:
                async with httpx.AsyncClient(headers=NO_CACHE_HEADERS) as client:
                    response = await client.get(
                        url, timeout=self.settings.request_timeout
                    )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransientFetchError(url, str(e)) from e
        return response

    async def _get_json(self, url: str) -> dict[str, Any]:
        response = await self._get(url)
        try:
            data = response.json()
        except ValueError as e:
            raise TransientFetchError(url, f"invalid JSON: {e}") from e
        if not isinstance(data, dict) or not data:
            raise TransientFetchError(url, "empty or unexpected response")
        return data

    async def latest_versions(self) -> dict[str, Any]:
        return await self._get_json(self.settings.latest_url)

    async def stable_versions(self) -> dict[str, Any]:
        return await self._get_json(self.settings.stable_url)

    async def usage_statistics(self) -> dict[str, Any]:
        return await self._get_json(self.settings.statistics_url)

    async def stable_source(self) -> str:
        response = await self._get(self.settings.stable_source_url)
        return response.text


def parse_releases(raw: dict[str, Any], feed_name: str) -> dict[str, ReleaseInfo]:
    """Parse a repository feed, dropping metadata keys and broken entries."""
    releases: dict[str, ReleaseInfo] = {}
    for adapter, entry in raw.items():
        if adapter.startswith("_"):
            continue
        try:
            releases[adapter] = ReleaseInfo.model_validate(entry)
        except ValidationError as e:
            logger.warning(
                "ignoring %s entry of %s feed: %s",
                adapter,
                feed_name,
                e.errors()[0]["msg"],
            )
    return releases


class FeedContext:
    """Snapshot cache for one run.

    Each feed is downloaded at most once per context. Create a new context for
    every run; tests inject a feed returning fixed snapshots.
    """

    def __init__(self, feed: MetricsFeed):
        self.feed = feed
        self._latest: dict[str, ReleaseInfo] | None = None
        self._stable: dict[str, ReleaseInfo] | None = None
        self._statistics: UsageStatistics | None = None
        self._stable_source: str | None = None

    async def latest(self) -> dict[str, ReleaseInfo]:
        if self._latest is None:
            self._latest = parse_releases(await self.feed.latest_versions(), "latest")
        return self._latest

    async def stable(self) -> dict[str, ReleaseInfo]:
        if self._stable is None:
            self._stable = parse_releases(await self.feed.stable_versions(), "stable")
        return self._stable

    async def statistics(self) -> UsageStatistics:
        if self._statistics is None:
            raw = await self.feed.usage_statistics()
            try:
                self._statistics = UsageStatistics.model_validate(raw)
            except ValidationError as e:
                raise TransientFetchError("usage statistics", str(e)) from e
        return self._statistics

    async def stable_source(self) -> str:
        if self._stable_source is None:
            self._stable_source = await self.feed.stable_source()
        return self._stable_source

"""Tests for release and usage feeds."""

import httpx
import pytest

from checkbot.config import CheckbotSettings
from checkbot.errors import TransientFetchError
from checkbot.promotion.feeds import FeedContext, HttpMetricsFeed, parse_releases

LATEST = {
    "_repoInfo": {"stableTime": "2024-05-01T00:00:00.000Z"},
    "admin": {
        "version": "7.0.0",
        "versionDate": "2024-04-01T10:00:00.000Z",
        "meta": "https://raw.githubusercontent.com/ioBroker/ioBroker.admin/master/io-package.json",
    },
    "broken": {"version": "1.0.0"},
}


def make_feed(handler) -> HttpMetricsFeed:
    settings = CheckbotSettings(
        latest_url="https://feeds.test/latest.json",
        stable_url="https://feeds.test/stable.json",
        statistics_url="https://feeds.test/statistics.json",
        stable_source_url="https://feeds.test/sources-dist-stable.json",
    )
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpMetricsFeed(settings, client=client)


def test_parse_releases_skips_metadata_and_broken_entries() -> None:
    releases = parse_releases(LATEST, "latest")
    assert list(releases) == ["admin"]
    assert releases["admin"].owner == "ioBroker"


@pytest.mark.asyncio
async def test_http_feed_sends_no_cache_headers() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=LATEST)

    data = await make_feed(handler).latest_versions()

    assert data["admin"]["version"] == "7.0.0"
    assert seen[0].headers["Cache-Control"] == "no-cache"
    assert str(seen[0].url) == "https://feeds.test/latest.json"


@pytest.mark.asyncio
async def test_http_error_is_transient() -> None:
    feed = make_feed(lambda request: httpx.Response(503))
    with pytest.raises(TransientFetchError, match="latest.json"):
        await feed.latest_versions()


@pytest.mark.asyncio
async def test_empty_response_is_transient() -> None:
    feed = make_feed(lambda request: httpx.Response(200, json={}))
    with pytest.raises(TransientFetchError, match="empty"):
        await feed.stable_versions()


@pytest.mark.asyncio
async def test_stable_source_is_text() -> None:
    feed = make_feed(lambda request: httpx.Response(200, text='{\n  "admin": {\n'))
    assert (await feed.stable_source()).startswith("{")


@pytest.mark.asyncio
async def test_context_fetches_each_feed_once() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        if request.url.path == "/statistics.json":
            return httpx.Response(
                200, json={"adapters": {"admin": 10}, "versions": {"admin": {"7.0.0": 5}}}
            )
        return httpx.Response(200, json=LATEST)

    context = FeedContext(make_feed(handler))
    first = await context.latest()
    second = await context.latest()
    stats = await context.statistics()
    await context.statistics()

    assert first is second
    assert stats.share("admin", "7.0.0") == 50.0
    assert calls == ["/latest.json", "/statistics.json"]

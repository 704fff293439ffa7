import asyncio
import json

import httpx
import pytest

from cog_browser.domain.models import BrowserConfig
from cog_browser.services.index_fetcher import IndexFetcher, IndexUnavailable


def _fetcher(handler, attempts: int = 3) -> IndexFetcher:
    config = BrowserConfig(index_url="https://index.example/index/", fetch_attempts=attempts)
    return IndexFetcher(config, transport=httpx.MockTransport(handler), retry_delay=0)


def test_fetch_decodes_index() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"https://github.com/example/cogs": {"name": "Example"}})

    data = asyncio.run(_fetcher(handler).fetch())
    assert data == {"https://github.com/example/cogs": {"name": "Example"}}
    assert seen == ["https://index.example/index/1-min.json"]


def test_fetch_retries_transient_failures() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] < 3:
            return httpx.Response(503)
        return httpx.Response(200, content=json.dumps({}).encode())

    assert asyncio.run(_fetcher(handler).fetch()) == {}
    assert calls["count"] == 3


def test_fetch_gives_up_after_configured_attempts() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(IndexUnavailable):
        asyncio.run(_fetcher(handler, attempts=2).fetch())
    assert calls["count"] == 2


@pytest.mark.parametrize("body", [b"{not json", b"[1, 2, 3]", b"null"])
def test_fetch_rejects_malformed_index(body) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body)

    with pytest.raises(IndexUnavailable):
        asyncio.run(_fetcher(handler).fetch())


def test_fetch_rejects_deeply_nested_index() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"[" * 200_000)

    with pytest.raises(IndexUnavailable):
        asyncio.run(_fetcher(handler).fetch())


def test_fetch_reports_invalid_index_url() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(200, json={})

    config = BrowserConfig(index_url="https://index.example/\x01index")
    fetcher = IndexFetcher(config, transport=httpx.MockTransport(handler), retry_delay=0)

    with pytest.raises(IndexUnavailable):
        asyncio.run(fetcher.fetch())
    assert calls["count"] == 0

from texts_crawler.config import Settings
from texts_crawler.crawl.base import FetchError
from texts_crawler.crawl.fetcher import HTMLFetcher, RetryPolicy, get_with_backoff

from typing import List
import logging

import httpx
import pytest


def scripted_transport(statuses: List[int], body: str = "ok", seen: List[str] = None) -> httpx.MockTransport:
    queue = list(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(str(request.url))
        return httpx.Response(queue.pop(0), text=body)

    return httpx.MockTransport(handler)


def test_custom_policy_increments_and_caps():
    sleeps: List[float] = []
    policy = RetryPolicy(initial=1.0, increment=2.0, maximum=4.0)
    with httpx.Client(transport=scripted_transport([429, 429, 429, 429, 200])) as client:
        get_with_backoff(client, "http://test/x", policy=policy, sleep=sleeps.append)
    assert sleeps == [1.0, 3.0, 4.0, 4.0]


def test_backoff_logs_each_sleep(caplog):
    with caplog.at_level(logging.WARNING, logger="texts_crawler.crawl.fetcher"):
        with httpx.Client(transport=scripted_transport([429, 200])) as client:
            get_with_backoff(client, "http://test/text_info?id=9", sleep=lambda s: None)
    assert "Rate limited on http://test/text_info?id=9" in caplog.text


def test_backoff_sleeps_then_returns_body():
    sleeps: List[float] = []
    with httpx.Client(transport=scripted_transport([429, 429, 200], body="<html>ok</html>")) as client:
        resp = get_with_backoff(client, "http://test/text_info?id=1", sleep=sleeps.append)
    assert resp.status_code == 200
    assert resp.text == "<html>ok</html>"
    assert sleeps == [5.0, 10.0]


def test_backoff_saturates_then_fails_on_server_error():
    sleeps: List[float] = []
    statuses = [429] * 8 + [500]
    with httpx.Client(transport=scripted_transport(statuses)) as client:
        with pytest.raises(FetchError) as excinfo:
            get_with_backoff(client, "http://test/text_info?id=1", sleep=sleeps.append)
    assert excinfo.value.status_code == 500
    assert sleeps == [5.0, 10.0, 15.0, 20.0, 25.0, 30.0, 30.0, 30.0]
    assert max(sleeps) <= 30.0


def test_non_429_error_is_not_retried():
    sleeps: List[float] = []
    with httpx.Client(transport=scripted_transport([404, 200])) as client:
        with pytest.raises(FetchError):
            get_with_backoff(client, "http://test/x", sleep=sleeps.append)
    assert sleeps == []


def test_transport_error_propagates_without_retry():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    sleeps: List[float] = []
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(httpx.TransportError):
            get_with_backoff(client, "http://test/x", sleep=sleeps.append)
    assert len(calls) == 1
    assert sleeps == []


def test_fetcher_detail_uses_template_and_retries():
    seen: List[str] = []
    sleeps: List[float] = []
    settings = Settings(listing_url="http://test/texts", detail_url="http://test/pit/text_info?id={id}")
    fetcher = HTMLFetcher(
        settings=settings,
        sleep=sleeps.append,
        transport=scripted_transport([429, 200], body="detail", seen=seen),
    )
    assert fetcher.fetch_detail(42) == "detail"
    assert seen == ["http://test/pit/text_info?id=42"] * 2
    assert sleeps == [5.0]


def test_fetcher_listing_does_not_retry():
    sleeps: List[float] = []
    settings = Settings(listing_url="http://test/texts")
    fetcher = HTMLFetcher(settings=settings, sleep=sleeps.append, transport=scripted_transport([429]))
    with pytest.raises(FetchError) as excinfo:
        fetcher.fetch_listing()
    assert excinfo.value.status_code == 429
    assert sleeps == []

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import httpx
from tenacity import RetryCallState, Retrying, retry_if_result, wait_incrementing

from texts_crawler.config import Settings, get_settings

from .base import FetchError

logger = logging.getLogger(__name__)

Sleep = Callable[[float], None]


@dataclass(frozen=True)
class RetryPolicy:
    """Linear backoff for 429 responses, in seconds.

    There is no attempt limit: a server that keeps answering 429 keeps the
    loop going.
    """

    initial: float = 5.0
    increment: float = 5.0
    maximum: float = 30.0

    def retrying(self, sleep: Sleep = time.sleep) -> Retrying:
        return Retrying(
            retry=retry_if_result(_is_rate_limited),
            wait=wait_incrementing(start=self.initial, increment=self.increment, max=self.maximum),
            before_sleep=_log_rate_limited,
            sleep=sleep,
        )


def _is_rate_limited(resp: httpx.Response) -> bool:
    return resp.status_code == 429


def _log_rate_limited(retry_state: RetryCallState) -> None:
    resp = retry_state.outcome.result()
    logger.warning(
        "Rate limited on %s (attempt %d), sleeping %.1fs",
        resp.request.url,
        retry_state.attempt_number,
        retry_state.next_action.sleep,
    )


def get_with_backoff(
    client: httpx.Client,
    url: str,
    *,
    policy: RetryPolicy = RetryPolicy(),
    sleep: Sleep = time.sleep,
) -> httpx.Response:
    """GET url, sleeping and retrying while the server answers 429.

    Transport errors propagate untouched. Any status other than 200 or 429
    raises FetchError without retrying.
    """
    resp = policy.retrying(sleep)(client.get, url)
    if resp.status_code != 200:
        raise FetchError(resp.status_code, url)
    return resp


class HTMLFetcher:
    """Fetch the listing and text_info pages as text."""

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        policy: Optional[RetryPolicy] = None,
        sleep: Sleep = time.sleep,
        transport: Optional[httpx.BaseTransport] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.policy = policy or RetryPolicy()
        self.sleep = sleep
        self.transport = transport
        self.headers = headers or {"User-Agent": self.settings.user_agent}

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.settings.timeout,
            headers=self.headers,
            follow_redirects=True,
            transport=self.transport,
        )

    def detail_url(self, text_id: int) -> str:
        return self.settings.detail_url.format(id=text_id)

    def fetch_listing(self) -> str:
        url = self.settings.listing_url
        with self._client() as client:
            resp = client.get(url)
            if resp.status_code != 200:
                raise FetchError(resp.status_code, url)
            return resp.text

    def fetch_detail(self, text_id: int) -> str:
        url = self.detail_url(text_id)
        with self._client() as client:
            resp = get_with_backoff(client, url, policy=self.policy, sleep=self.sleep)
            return resp.text

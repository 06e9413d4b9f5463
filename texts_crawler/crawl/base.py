from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List


class CrawlError(RuntimeError):
    """Base class for failures raised while fetching or parsing a page."""


class FetchError(CrawlError):
    """The server answered with a status the crawler does not handle."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"unexpected status code {status_code} for {url}")
        self.status_code = status_code
        self.url = url


class NoMatchError(CrawlError):
    """The extraction pattern found nothing in the given HTML."""


@dataclass
class TextRecord:
    id: int
    text: str
    type: str
    author: str
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Spider:
    """Minimal spider contract.

    Subclasses implement fetch_ids() to discover identifiers and
    fetch_record() to turn one identifier into a TextRecord.
    """

    name: str = "base"

    def fetch_ids(self) -> List[int]:
        raise NotImplementedError

    def fetch_record(self, text_id: int) -> TextRecord:
        raise NotImplementedError

from __future__ import annotations

import html
import re
from typing import Dict, List, Optional, Tuple

from ..base import NoMatchError, Spider, TextRecord
from ..fetcher import HTMLFetcher

_ID_RE = re.compile(r"/text\?id=([0-9]+)")

# Head of a text_info page: the single-line full text block.
_FULL_TEXT_RE = re.compile(r'fullTextStr">(.*?)</div>')

_INT64_MAX = 2**63 - 1


def _parse_id(raw: str) -> Optional[int]:
    try:
        value = int(raw)
    except ValueError:
        return None
    if value > _INT64_MAX:
        return None
    return value


def extract_ids(listing_html: str) -> List[int]:
    """Return every /text?id=N identifier in order of appearance.

    Duplicates are kept. Captures that do not fit a 64-bit integer are skipped.
    """
    ids: List[int] = []
    for match in _ID_RE.finditer(listing_html):
        text_id = _parse_id(match.group(1))
        if text_id is not None:
            ids.append(text_id)
    return ids


def extract_id_from_line(line: str) -> int:
    match = _ID_RE.search(line)
    if match is None:
        raise NoMatchError("no match found on line")
    text_id = _parse_id(match.group(1))
    if text_id is None:
        raise NoMatchError(f"failed to parse id from string: {match.group(1)}")
    return text_id


def _tail_spans(page: str) -> Optional[Tuple[int, Tuple[int, int], Tuple[int, int], Tuple[int, int]]]:
    """Locate the source, type and author spans after the full text block.

    Equivalent to the greedy, newline-spanning tail
    ``.*>(.*)</a>.*/>\\((.*)\\).*by (.*?)\\n``: each greedy step takes the
    last occurrence that still leaves room for the steps after it, so the
    markers are found right to left with one rfind each.

    Returns (earliest allowed tail start, source, type, author spans) or None.
    """
    last_nl = page.rfind("\n")
    by_at = page.rfind("by ", 0, last_nl) if last_nl >= 0 else -1
    close_at = page.rfind(")", 0, by_at) if by_at >= 0 else -1
    open_at = page.rfind("/>(", 0, close_at) if close_at >= 0 else -1
    anchor_end = page.rfind("</a>", 0, open_at) if open_at >= 0 else -1
    tag_end = page.rfind(">", 0, anchor_end) if anchor_end >= 0 else -1
    if tag_end < 0:
        return None
    author_start = by_at + 3
    author_end = page.find("\n", author_start)
    return (
        tag_end,
        (tag_end + 1, anchor_end),
        (open_at + 3, close_at),
        (author_start, author_end),
    )


def extract_fields(detail_html: str) -> Dict[str, str]:
    """Pull text, source, type and author out of a text_info page.

    Values are HTML-unescaped. Raises NoMatchError if the page does not have
    the expected structure. Runs in linear time on any input.
    """
    tail = _tail_spans(detail_html)
    if tail is not None:
        tail_limit, source, type_, author = tail
        for head in _FULL_TEXT_RE.finditer(detail_html):
            if head.end() > tail_limit:
                break
            return {
                "text": html.unescape(head.group(1)),
                "source": html.unescape(detail_html[source[0]:source[1]]),
                "type": html.unescape(detail_html[type_[0]:type_[1]]),
                "author": html.unescape(detail_html[author[0]:author[1]]),
            }
    raise NoMatchError("failed to match text info")


class TypeRacerTextsSpider(Spider):
    name = "typeracer_texts"

    def __init__(self, *, fetcher: Optional[HTMLFetcher] = None) -> None:
        self.fetcher = fetcher or HTMLFetcher()

    def fetch_ids(self) -> List[int]:
        return extract_ids(self.fetcher.fetch_listing())

    def fetch_record(self, text_id: int) -> TextRecord:
        fields = extract_fields(self.fetcher.fetch_detail(text_id))
        return TextRecord(id=text_id, **fields)

"""Crawling subsystem.

Structure:
- base.py: record type, spider contract and crawl errors
- fetcher.py: httpx-based HTML fetcher with 429 backoff
- spiders/: regex extraction for the TypeRacer listing and text_info pages
- runner.py: sequential driver and CLI entrypoint

Everything runs on a single thread; the only blocking calls are HTTP requests
and the backoff sleep.
"""

__all__ = [
    "base",
    "fetcher",
    "runner",
    "spiders",
]

from __future__ import annotations

import argparse
import logging
import sys
from typing import Dict, Optional

import httpx

from texts_crawler.config import get_settings
from texts_crawler.db.sqlite_store import DatabaseExistsError, StorageError, TextsDB

from .base import CrawlError, Spider
from .fetcher import HTMLFetcher
from .spiders.typeracer_spider import TypeRacerTextsSpider

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def run(db: TextsDB, spider: Spider) -> Dict[str, int]:
    """Crawl every listed text into db, one id at a time.

    A failing listing fetch propagates. Failures for a single id are logged
    and the loop moves on. Returns summary counts.
    """
    ids = spider.fetch_ids()
    logger.info("Found %d text ids", len(ids))

    inserted = 0
    failed = 0
    for text_id in ids:
        try:
            record = spider.fetch_record(text_id)
            db.insert(record)
        except (httpx.HTTPError, CrawlError, StorageError) as exc:
            failed += 1
            logger.error("text %d: error: %s", text_id, exc)
            continue
        inserted += 1
        logger.info("text %d: done", text_id)

    return {"found": len(ids), "inserted": inserted, "failed": failed}


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Scrape TypeRacer texts into a new SQLite database")
    parser.add_argument("-db", "--db", default="texts.db", help="Path of the database file to create (must not exist)")
    parser.add_argument("--log-level", default=None, help="Logging level (default from LOG_LEVEL, else INFO)")
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except RuntimeError as exc:
        _setup_logging(args.log_level or "INFO")
        logger.error("invalid configuration: %s", exc)
        return 1
    _setup_logging(args.log_level or settings.log_level)

    try:
        db = TextsDB(args.db)
    except (DatabaseExistsError, StorageError) as exc:
        logger.error("%s", exc)
        return 1

    with db:
        try:
            db.create_schema()
        except StorageError as exc:
            logger.error("%s", exc)
            return 1

        spider = TypeRacerTextsSpider(fetcher=HTMLFetcher(settings=settings))
        try:
            summary = run(db, spider)
        except (httpx.HTTPError, CrawlError) as exc:
            logger.error("failed to fetch texts html: %s", exc)
            return 1

    logger.info(
        "Crawl finished: %d found, %d inserted, %d failed",
        summary["found"],
        summary["inserted"],
        summary["failed"],
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from typing import Optional

from .config import Config, load_config
from .errors import CrawlAborted, CrawlerError
from .fetcher import Fetcher
from .log import configure
from .storage import Storage
from .worker import Crawler, CrawlReport

logger = logging.getLogger(__name__)


def _storage(cfg: Config) -> Storage:
    return Storage(cfg.mongo_url, cfg.mongo_db, cfg.mongo_collection)


async def init_db_cmd(cfg: Config) -> None:
    storage = _storage(cfg)
    try:
        await storage.init()
        print(f"Collection {cfg.mongo_db}.{cfg.mongo_collection} ready (key: url)")
    finally:
        await storage.close()


async def crawl_cmd(cfg: Config, root_url: str) -> CrawlReport:
    storage = _storage(cfg)
    try:
        await storage.init()
        async with Fetcher(
            cfg.user_agent, cfg.request_timeout_seconds, limit=cfg.concurrency
        ) as fetcher:
            crawler = Crawler(
                fetcher,
                storage,
                cfg.docs_url_base,
                concurrency=cfg.concurrency,
                fail_fast=cfg.fail_fast,
                strict_fragments=cfg.strict_fragments,
            )
            return await crawler.crawl(root_url)
    finally:
        await storage.close()


async def stats_cmd(cfg: Config) -> None:
    storage = _storage(cfg)
    try:
        print(f"Records: {await storage.count_records()}")
    finally:
        await storage.close()


async def show_cmd(cfg: Config, url: str) -> bool:
    storage = _storage(cfg)
    try:
        doc = await storage.get_record(url)
    finally:
        await storage.close()
    if doc is None:
        print(f"No record for {url}")
        return False
    print(json.dumps(doc, indent=2))
    return True


def _print_report(report: CrawlReport) -> None:
    print(
        f"Crawl of {report.root_url} complete: discovered={report.discovered}, "
        f"stored={len(report.stored)}, failed={len(report.failed)}, "
        f"duplicates={report.skipped}, took {report.duration_seconds:.2f}s"
    )
    for o in report.failed:
        print(f"  FAILED {o.url}: {o.error}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Documentation site crawler")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("init-db", help="Create the record collection and its url index")

    p_crawl = sub.add_parser("crawl", help="Crawl the root page and store fingerprints")
    p_crawl.add_argument("--root", default=None, help="Root URL (defaults to DOCS_ROOT_URL)")
    p_crawl.add_argument("--concurrency", type=int, default=None, help="Worker count (defaults to CONCURRENCY)")
    p_crawl.add_argument("--keep-going", action="store_true", help="Record per-link failures instead of aborting")

    sub.add_parser("stats", help="Show the number of stored records")

    p_show = sub.add_parser("show", help="Print the stored record for a URL")
    p_show.add_argument("url")

    args = parser.parse_args(argv)

    try:
        cfg = load_config()
    except CrawlerError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    configure(cfg.log_level)

    try:
        if args.cmd == "init-db":
            asyncio.run(init_db_cmd(cfg))
        elif args.cmd == "crawl":
            if args.concurrency is not None:
                cfg = replace(cfg, concurrency=max(1, args.concurrency))
            if args.keep_going:
                cfg = replace(cfg, fail_fast=False)
            report = asyncio.run(crawl_cmd(cfg, args.root or cfg.docs_root_url))
            _print_report(report)
        elif args.cmd == "stats":
            asyncio.run(stats_cmd(cfg))
        elif args.cmd == "show":
            return 0 if asyncio.run(show_cmd(cfg, args.url)) else 1
    except CrawlAborted as exc:
        logger.error("%s", exc)
        _print_report(exc.report)
        return 1
    except CrawlerError as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        print("\nShutting down...")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Protocol

from .config import validate_url
from .dupe import VisitedSet
from .errors import CrawlAborted, FetchError, PersistError
from .fingerprint import fingerprint
from .parser import discover_links

logger = logging.getLogger(__name__)

STORED = "stored"
FAILED = "failed"


class PageFetcher(Protocol):
    async def fetch_text(self, url: str) -> str:
        ...


class RecordStore(Protocol):
    async def put_record(self, url: str, url_hash: str, content_hash: str) -> None:
        ...


@dataclass
class LinkOutcome:
    url: str
    status: str
    content_hash: Optional[str] = None
    error: Optional[str] = None


@dataclass
class CrawlReport:
    """Per-link outcomes of one crawl, in completion order."""

    root_url: str
    discovered: int = 0
    skipped: int = 0
    outcomes: list[LinkOutcome] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def stored(self) -> list[LinkOutcome]:
        return [o for o in self.outcomes if o.status == STORED]

    @property
    def failed(self) -> list[LinkOutcome]:
        return [o for o in self.outcomes if o.status == FAILED]

    @property
    def ok(self) -> bool:
        return not self.failed


class Crawler:
    """Visits each in-scope link on the root page once; visited pages are not followed."""

    def __init__(
        self,
        fetcher: PageFetcher,
        store: RecordStore,
        base_url: str,
        *,
        concurrency: int = 1,
        fail_fast: bool = True,
        strict_fragments: bool = False,
    ) -> None:
        self.fetcher = fetcher
        self.store = store
        self.base_url = validate_url("base URL", base_url)
        self.concurrency = max(1, concurrency)
        self.fail_fast = fail_fast
        self.strict_fragments = strict_fragments

    async def crawl(self, root_url: str) -> CrawlReport:
        validate_url("root URL", root_url)
        logger.info("Crawling %s", root_url)
        start = time.monotonic()
        report = CrawlReport(root_url=root_url)
        visited = VisitedSet()

        # Root failures always propagate
        html = await self.fetcher.fetch_text(root_url)
        links = discover_links(html, self.base_url, self.strict_fragments)
        report.discovered = len(links)
        logger.info("Discovered %d links on %s", len(links), root_url)

        try:
            if self.concurrency == 1:
                for link in links:
                    await self._visit(link, visited, report)
            else:
                await self._run_pool(links, visited, report)
        finally:
            report.duration_seconds = time.monotonic() - start
            logger.info(
                "Crawl finished: visited=%d stored=%d failed=%d skipped=%d in %.2fs",
                visited.count(),
                len(report.stored),
                len(report.failed),
                report.skipped,
                report.duration_seconds,
            )
        return report

    async def _run_pool(self, links: list[str], visited: VisitedSet, report: CrawlReport) -> None:
        queue: asyncio.Queue[str] = asyncio.Queue()
        for link in links:
            queue.put_nowait(link)

        async def drain() -> None:
            while True:
                try:
                    link = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                await self._visit(link, visited, report)

        workers = min(self.concurrency, max(1, len(links)))
        tasks = [asyncio.create_task(drain()) for _ in range(workers)]
        try:
            await asyncio.gather(*tasks)
        finally:
            for t in tasks:
                t.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _visit(self, url: str, visited: VisitedSet, report: CrawlReport) -> None:
        if not visited.claim(url):
            report.skipped += 1
            logger.debug("Already visited %s", url)
            return

        try:
            html = await self.fetcher.fetch_text(url)
            content_hash = fingerprint(html)
            await self.store.put_record(url, fingerprint(url), content_hash)
        except (FetchError, PersistError) as exc:
            report.outcomes.append(LinkOutcome(url=url, status=FAILED, error=str(exc)))
            if self.fail_fast:
                logger.error("Aborting crawl: %s", exc)
                raise CrawlAborted(url, exc, report) from exc
            logger.warning("Failed %s: %s", url, exc)
            return

        report.outcomes.append(LinkOutcome(url=url, status=STORED, content_hash=content_hash))
        logger.debug("Stored %s (%s)", url, content_hash)

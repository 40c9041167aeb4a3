from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .worker import CrawlReport


class CrawlerError(Exception):
    """Base class for every failure the crawler reports."""


class ConfigError(CrawlerError):
    """Raised when a configured URL or value is unusable."""


class FetchError(CrawlerError):
    """Raised when a page cannot be fetched as text."""

    def __init__(self, url: str, message: str, status: Optional[int] = None):
        self.url = url
        self.status = status
        super().__init__(f"{url}: {message}")


class FragmentDecodeError(CrawlerError):
    """Raised when an encoded HTML fragment is not valid percent-encoded UTF-8."""

    def __init__(self, value: str, reason: str):
        self.value = value
        super().__init__(f"cannot decode fragment ({reason}): {value[:80]!r}")


class PersistError(CrawlerError):
    """Raised when a crawl record cannot be written."""

    def __init__(self, target: str, message: str):
        self.target = target
        super().__init__(f"{target}: {message}")


class CrawlAborted(CrawlerError):
    """Raised in fail-fast mode when a link fails; carries what was done so far."""

    def __init__(self, url: str, cause: BaseException, report: "CrawlReport"):
        self.url = url
        self.cause = cause
        self.report = report
        super().__init__(f"crawl aborted at {url}: {cause}")

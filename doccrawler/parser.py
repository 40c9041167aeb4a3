from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple, Union
from urllib.parse import quote, unquote, urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup

from .errors import ConfigError, FragmentDecodeError

logger = logging.getLogger(__name__)

# Existing %XX escapes are kept as they are
_PATH_SAFE = "/%:@!$&'()*+,;=~"


@dataclass(frozen=True)
class SelectorSource:
    """Links read from `attribute` of every element matching `selector`."""

    selector: str
    attribute: str = "href"


@dataclass(frozen=True)
class DecodedFragmentSource:
    """Percent-encoded markup in `attribute`, searched with `inner` sources."""

    selector: str
    attribute: str
    inner: Tuple["LinkSource", ...]


LinkSource = Union[SelectorSource, DecodedFragmentSource]

# Search/filter widgets on the docs site serialize their link lists into
# <input value="..."> as encoded <list-card-item href="..."> markup.
DEFAULT_SOURCES: Tuple[LinkSource, ...] = (
    SelectorSource("a", "href"),
    DecodedFragmentSource(
        "input", "value", (SelectorSource("a, list-card-item", "href"),)
    ),
)


def normalize_url(base_url: str, href: str) -> str:
    try:
        base = urlparse(base_url)
    except ValueError as exc:
        raise ConfigError(f"invalid base URL: {base_url!r}") from exc
    if not base.scheme or not base.netloc:
        raise ConfigError(f"invalid base URL: {base_url!r}")
    # Fragment first, then query, both cut from the raw link
    link = href.strip().split("#", 1)[0].split("?", 1)[0]
    p = urlparse(urljoin(base_url, link))
    netloc = p.netloc.lower()
    if netloc.endswith(":80") and p.scheme == "http":
        netloc = netloc[:-3]
    if netloc.endswith(":443") and p.scheme == "https":
        netloc = netloc[:-4]
    path = quote(p.path or "/", safe=_PATH_SAFE)
    return urlunparse((p.scheme, netloc, path, p.params, p.query, p.fragment))


def is_in_scope(url: str, prefix: str) -> bool:
    return url.startswith(prefix)


def decode_fragment(value: str) -> str:
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError as exc:
        raise FragmentDecodeError(value, exc.reason) from exc


def _attr(element, attribute: str) -> str:
    value = element.get(attribute)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return value


def select_links(
    soup: BeautifulSoup, selector: str, attribute: str, base_url: str
) -> list[str]:
    out: list[str] = []
    for el in soup.select(selector):
        raw = _attr(el, attribute)
        if not raw.strip():
            continue
        try:
            url = normalize_url(base_url, raw)
        except ValueError as exc:
            logger.debug("Dropping link %r: %s", raw, exc)
            continue
        if is_in_scope(url, base_url):
            out.append(url)
    return out


def extract_links(
    soup: BeautifulSoup,
    base_url: str,
    sources: Sequence[LinkSource] = DEFAULT_SOURCES,
    strict_fragments: bool = False,
) -> list[str]:
    """In-scope links from `soup`, source by source, duplicates kept."""
    out: list[str] = []
    for source in sources:
        if isinstance(source, SelectorSource):
            out.extend(select_links(soup, source.selector, source.attribute, base_url))
            continue
        for el in soup.select(source.selector):
            value = _attr(el, source.attribute)
            if not value:
                continue
            try:
                fragment = decode_fragment(value)
            except FragmentDecodeError as exc:
                if strict_fragments:
                    raise
                logger.warning("Skipping <%s>: %s", el.name, exc)
                continue
            sub = BeautifulSoup(fragment, "html.parser")
            out.extend(extract_links(sub, base_url, source.inner, strict_fragments))
    return out


def discover_links(html: str, base_url: str, strict_fragments: bool = False) -> list[str]:
    soup = BeautifulSoup(html, "html.parser")
    return extract_links(soup, base_url, DEFAULT_SOURCES, strict_fragments)

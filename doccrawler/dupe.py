from __future__ import annotations


class VisitedSet:
    """URLs already scheduled during one crawl; never persisted."""

    def __init__(self) -> None:
        self._urls: set[str] = set()

    def is_visited(self, url: str) -> bool:
        return url in self._urls

    def mark_visited(self, url: str) -> None:
        self._urls.add(url)

    def claim(self, url: str) -> bool:
        if url in self._urls:
            return False
        self._urls.add(url)
        return True

    def count(self) -> int:
        return len(self._urls)

    def __contains__(self, url: str) -> bool:
        return url in self._urls

"""Link extraction and per-scan frontier state."""

from collections import deque
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup

from .errors import LinkParseError

SKIPPED_PREFIXES = ("javascript:", "mailto:", "#")


def origin_of(url: str) -> tuple[str, str]:
    parsed = urlparse(url)
    return parsed.scheme.lower(), parsed.netloc.lower()


def same_origin(url: str, origin: tuple[str, str]) -> bool:
    """True if url has the same scheme and host (including port) as origin."""
    try:
        return origin_of(url) == origin
    except ValueError:
        return False


def normalize_url(url: str) -> str:
    """Drop the fragment and give a bare host the root path."""
    url, _ = urldefrag(url)
    parsed = urlparse(url)
    if not parsed.path:
        url = parsed._replace(path="/").geturl()
    return url


def resolve_link(base_url: str, href: str) -> str:
    """Resolve href against base_url, dropping any fragment."""
    try:
        absolute = normalize_url(urljoin(base_url, href))
        parsed = urlparse(absolute)
        # Accessing port validates it.
        parsed.port
    except ValueError as e:
        raise LinkParseError(f"Cannot resolve {href!r}: {e}") from e
    if not parsed.scheme or not parsed.netloc:
        raise LinkParseError(f"Cannot resolve {href!r} to an absolute URL")
    return absolute


def extract_links(page_url: str, html: str, origin: tuple[str, str]) -> list[str]:
    """Extract same-origin anchor targets from html, in document order."""
    soup = BeautifulSoup(html, "lxml")
    links = []
    seen = set()

    for el in soup.find_all("a", href=True):
        href = el.get("href", "").strip()
        if not href or href.lower().startswith(SKIPPED_PREFIXES):
            continue
        try:
            full_url = resolve_link(page_url, href)
        except LinkParseError:
            continue
        if not same_origin(full_url, origin) or full_url in seen:
            continue
        seen.add(full_url)
        links.append(full_url)

    return links


class CrawlState:
    """Visited set and FIFO frontier owned by one scan."""

    def __init__(self):
        self.visited: list[str] = []
        self._visited_set: set[str] = set()
        self._frontier: deque[str] = deque()
        self._queued: set[str] = set()

    def __len__(self) -> int:
        return len(self._frontier)

    @property
    def frontier(self) -> list[str]:
        return list(self._frontier)

    def enqueue(self, url: str) -> bool:
        """Queue url unless it was already visited or is already queued."""
        if url in self._visited_set or url in self._queued:
            return False
        self._frontier.append(url)
        self._queued.add(url)
        return True

    def next_url(self) -> str:
        url = self._frontier.popleft()
        self._queued.discard(url)
        return url

    def is_visited(self, url: str) -> bool:
        return url in self._visited_set

    def mark_visited(self, url: str) -> None:
        if url not in self._visited_set:
            self._visited_set.add(url)
            self.visited.append(url)

"""Shared fixtures: in-memory pages and a fake fetcher standing in for the network."""

from __future__ import annotations

import pytest
from requests.structures import CaseInsensitiveDict

from appguard.errors import FetchError
from appguard.fetcher import PageResponse

SECURE_HEADERS = {
    "Content-Security-Policy": "default-src 'self'",
    "X-XSS-Protection": "1; mode=block",
    "Strict-Transport-Security": "max-age=31536000",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


def build_page(
    url: str = "https://example.com/",
    body: str = "",
    headers: dict | None = None,
    set_cookies: list[str] | None = None,
    status_code: int = 200,
    http_version: str | None = "HTTP/1.1",
) -> PageResponse:
    return PageResponse(
        url=url,
        status_code=status_code,
        headers=CaseInsensitiveDict(SECURE_HEADERS if headers is None else headers),
        body=body,
        set_cookies=set_cookies or [],
        http_version=http_version,
        final_url=url,
    )


class FakeSite:
    """Callable fetcher serving pages from a dict; missing URLs fail like a dead host."""

    def __init__(self, pages: dict[str, PageResponse]):
        self.pages = pages
        self.calls: list[str] = []

    def __call__(self, url: str) -> PageResponse:
        self.calls.append(url)
        page = self.pages.get(url)
        if page is None:
            raise FetchError(url, "Connection refused")
        return page


@pytest.fixture
def make_page():
    return build_page


@pytest.fixture
def fake_site():
    return FakeSite

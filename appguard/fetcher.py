"""Single bounded HTTP GET producing a normalized page response."""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import requests
from requests.structures import CaseInsensitiveDict
from urllib3.exceptions import LocationValueError

from .errors import FetchError

logger = logging.getLogger(__name__)

USER_AGENT = "AppGuard Security Scanner"
DEFAULT_TIMEOUT = 15
MAX_REDIRECTS = 5

_HTTP_VERSIONS = {9: "HTTP/0.9", 10: "HTTP/1.0", 11: "HTTP/1.1", 20: "HTTP/2"}


@dataclass
class PageResponse:
    """Normalized view of a fetched page."""
    url: str
    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: str = ""
    set_cookies: list[str] = field(default_factory=list)
    http_version: Optional[str] = None
    final_url: Optional[str] = None


def build_session(config: dict[str, Any] | None = None) -> requests.Session:
    scanner_cfg = (config or {}).get("scanner", {})
    session = requests.Session()
    session.headers["User-Agent"] = scanner_cfg.get("user_agent", USER_AGENT)
    session.max_redirects = scanner_cfg.get("max_redirects", MAX_REDIRECTS)
    return session


def _set_cookie_values(resp: requests.Response) -> list[str]:
    # requests folds repeated Set-Cookie headers into one value; the raw
    # urllib3 headers keep them apart.
    raw_headers = getattr(getattr(resp, "raw", None), "headers", None)
    getter = getattr(raw_headers, "getlist", None)
    if getter is not None:
        values = getter("Set-Cookie")
        if isinstance(values, list) and values:
            return values
    header = resp.headers.get("Set-Cookie")
    return [header] if header else []


def _http_version(resp: requests.Response) -> Optional[str]:
    version = getattr(getattr(resp, "raw", None), "version", None)
    if isinstance(version, int):
        return _HTTP_VERSIONS.get(version)
    return None


def fetch_page(
    url: str,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> PageResponse:
    """GET url. Any status below 500 is a valid page; everything else raises FetchError."""
    session = session or build_session()
    try:
        resp = session.get(url, timeout=timeout, allow_redirects=True)
    except (requests.RequestException, LocationValueError) as e:
        # urllib3 raises LocationValueError unwrapped for hosts such as "example..com"
        raise FetchError(url, str(e) or e.__class__.__name__) from e

    if resp.status_code >= 500:
        raise FetchError(url, f"Request failed with status code {resp.status_code}")

    logger.debug("Fetched %s -> %s (%d chars)", url, resp.status_code, len(resp.text))
    return PageResponse(
        url=url,
        status_code=resp.status_code,
        headers=CaseInsensitiveDict(resp.headers),
        body=resp.text,
        set_cookies=_set_cookie_values(resp),
        http_version=_http_version(resp),
        final_url=resp.url or url,
    )

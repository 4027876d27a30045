"""Main scan engine: breadth-first crawl driving fetch, detection and link extraction."""

import logging
import time
from functools import partial
from typing import Any, Callable
from urllib.parse import urlparse

import requests

from .checks import run_checks
from .config import default_config
from .crawler import CrawlState, extract_links, normalize_url, origin_of
from .custom_rules import CustomRuleEvaluator
from .errors import FetchError, InvalidTarget
from .fetcher import PageResponse, build_session, fetch_page
from .models import CrawlRequest, Finding, ScanLevel, ScanResult, Severity
from .summary import summarize

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], PageResponse]


def validate_target(url: str) -> tuple[str, str]:
    """Return the (scheme, host) origin of url or raise InvalidTarget."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidTarget(url)
    try:
        parsed = urlparse(url.strip())
        host = parsed.hostname
    except ValueError as e:
        raise InvalidTarget(url) from e
    if not parsed.scheme or not host:
        raise InvalidTarget(url)
    return origin_of(url.strip())


def access_error(url: str, error: FetchError) -> Finding:
    return Finding(
        name="URL Access Error",
        description=f"Could not access {url}: {error.message}",
        url=url,
        severity=Severity.LOW,
        category="Accessibility",
        details={"error": error.message},
    )


def detect(
    url: str,
    page: PageResponse,
    custom_rules: CustomRuleEvaluator | None = None,
    enabled_checks=None,
) -> list[Finding]:
    """Run built-in checks and, if given, custom rules against one page."""
    findings = run_checks(url, page, enabled_checks)
    if custom_rules is not None:
        findings.extend(custom_rules.evaluate(url, page.body))
    return findings


class Scanner:
    """Runs one scan. Owns its crawl state; never shared between scans."""

    def __init__(
        self,
        request: CrawlRequest,
        *,
        config: dict[str, Any] | None = None,
        fetcher: Fetcher | None = None,
        session: requests.Session | None = None,
    ):
        self.request = request
        self.config = config or default_config()
        self.origin = validate_target(request.url)
        self.seed = normalize_url(request.url.strip())
        self.max_pages = request.page_budget

        scanner_cfg = self.config.get("scanner", {})
        if fetcher is None:
            session = session or build_session(self.config)
            fetcher = partial(fetch_page, session=session, timeout=scanner_cfg.get("timeout", 15))
        self.fetcher = fetcher
        self.delay = scanner_cfg.get("delay_between_requests", 0) or 0

        checks_cfg = self.config.get("checks", {})
        self.enabled_checks = [name for name, on in checks_cfg.items() if on] if checks_cfg else None

        self.custom_rules = None
        if request.include_custom_rules and request.custom_rules:
            self.custom_rules = CustomRuleEvaluator(request.custom_rules)

        self.state = CrawlState()
        self.state.enqueue(self.seed)

    def run(self) -> ScanResult:
        request = self.request
        state = self.state
        findings: list[Finding] = []

        if request.use_authentication:
            logger.debug("Authenticated scanning is not supported; fetching anonymously")
        logger.info(
            "Starting scan for %s with scan level: %s, crawl limit: %d",
            self.seed, request.scan_level.value, self.max_pages,
        )

        while len(state) and len(state.visited) < self.max_pages:
            url = state.next_url()
            if state.is_visited(url):
                continue

            logger.info("Scanning URL: %s (%d/%d)", url, len(state.visited) + 1, self.max_pages)
            state.mark_visited(url)

            try:
                page = self.fetcher(url)
            except FetchError as e:
                logger.warning("Error scanning %s: %s", url, e.message)
                findings.append(access_error(url, e))
                continue

            try:
                detected = detect(url, page, self.custom_rules, self.enabled_checks)
                links = extract_links(url, page.body, self.origin) if request.scan_level != ScanLevel.QUICK else []
            except Exception:
                logger.exception("Error analyzing %s", url)
                continue

            if detected:
                logger.debug("Found %d issues on %s", len(detected), url)
                findings.extend(detected)
            for link in links:
                state.enqueue(link)

            if self.delay and len(state):
                time.sleep(self.delay)

        summary = summarize(findings)
        logger.info(
            "Scan completed. Visited %d URLs. Found %d vulnerabilities. High: %d, Medium: %d, Low: %d",
            len(state.visited), len(findings),
            summary.high_severity, summary.medium_severity, summary.low_severity,
        )
        return ScanResult(
            target=self.seed,
            scan_level=request.scan_level,
            scanned_urls=list(state.visited),
            findings=findings,
            summary=summary,
        )


def run_scan(request: CrawlRequest, **kwargs) -> ScanResult:
    """Validate, crawl and summarize. Raises InvalidTarget for an unusable seed URL."""
    return Scanner(request, **kwargs).run()

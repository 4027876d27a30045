"""Outdated technology signals: plain HTTP, old protocol versions and server banners."""

import re
from urllib.parse import urlparse

from ..fetcher import PageResponse
from ..models import Finding, Severity

CATEGORY = "Outdated Technology"

BANNER_HEADERS = ("Server", "X-Powered-By", "X-AspNet-Version")

# Oldest release line still considered supported
COMPONENT_BASELINES: dict[str, tuple[int, ...]] = {
    "apache": (2, 4, 0),
    "nginx": (1, 20, 0),
    "php": (8, 1, 0),
    "microsoft-iis": (10, 0),
    "openssl": (3, 0, 0),
}

COMPONENT_PATTERN = re.compile(r"([A-Za-z][\w.-]*?)/(\d+(?:\.\d+)+)")


def parse_version(text: str) -> tuple[int, ...]:
    return tuple(int(part) for part in re.findall(r"\d+", text))


def find_components(banner: str) -> list[tuple[str, str]]:
    """Return (product, version) pairs from a banner such as 'Apache/2.2.15 (Unix) PHP/5.6'."""
    return [(name.lower(), version) for name, version in COMPONENT_PATTERN.findall(banner)]


def check_outdated(url: str, page: PageResponse) -> list[Finding]:
    findings = []

    if urlparse(url).scheme == "http":
        findings.append(Finding(
            name="Unencrypted HTTP Connection",
            description="The page is served over plain HTTP without TLS.",
            url=url,
            severity=Severity.HIGH,
            category=CATEGORY,
            details={"protocol": "http"},
        ))

    if page.http_version in ("HTTP/0.9", "HTTP/1.0"):
        findings.append(Finding(
            name="Outdated HTTP Protocol Version",
            description=f"The server responded with {page.http_version}.",
            url=url,
            severity=Severity.LOW,
            category=CATEGORY,
            details={"http_version": page.http_version},
        ))

    for header in BANNER_HEADERS:
        banner = page.headers.get(header)
        if not banner:
            continue
        components = find_components(banner)
        if components or header != "Server":
            findings.append(Finding(
                name=f"{header} Version Disclosure",
                description=f"The {header} header exposes technology details: {banner}",
                url=url,
                severity=Severity.LOW,
                category=CATEGORY,
                details={"header": header, "value": banner},
            ))
        for product, version in components:
            baseline = COMPONENT_BASELINES.get(product)
            if baseline and parse_version(version) < baseline:
                findings.append(Finding(
                    name=f"Outdated {product.title()} Version",
                    description=f"{product} {version} is older than the supported {'.'.join(map(str, baseline))} line.",
                    url=url,
                    severity=Severity.MEDIUM,
                    category=CATEGORY,
                    details={"component": product, "version": version, "header": header},
                ))

    return findings

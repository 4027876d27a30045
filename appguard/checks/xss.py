"""Reflected and DOM-based XSS heuristics (passive, no payloads sent)."""

import re
from urllib.parse import parse_qsl, unquote, urlparse

from bs4 import BeautifulSoup

from ..fetcher import PageResponse
from ..models import Finding, Severity

CATEGORY = "Cross-Site Scripting"

MARKUP_CHARS = set("<>\"'")

URL_SCRIPT_PATTERNS = [
    re.compile(r"<\s*script", re.I),
    re.compile(r"javascript:", re.I),
    re.compile(r"\bon(error|load|mouseover|focus)\s*=", re.I),
    re.compile(r"<\s*(img|svg|iframe)[^>]*>", re.I),
]

DOM_SOURCES = re.compile(
    r"(location\.(hash|search|href)|document\.(URL|documentURI|referrer|cookie)|window\.name)"
)
DOM_SINKS = re.compile(
    r"(document\.write(ln)?\s*\(|\.innerHTML\s*=|\.outerHTML\s*=|insertAdjacentHTML\s*\(|\beval\s*\(|setTimeout\s*\(\s*[^\"'\s])"
)


def check_xss(url: str, page: PageResponse) -> list[Finding]:
    """Look for unescaped reflection of query values, script in the URL and DOM sinks."""
    findings = []
    parsed = urlparse(url)

    for param, value in parse_qsl(parsed.query, keep_blank_values=True):
        if len(value) < 3 or not (MARKUP_CHARS & set(value)):
            continue
        if value in page.body:
            findings.append(Finding(
                name="Reflected Cross-Site Scripting",
                description=f"Parameter '{param}' is reflected in the response without HTML encoding.",
                url=url,
                severity=Severity.HIGH,
                category=CATEGORY,
                details={"parameter": param, "evidence": value[:100], "type": "reflected"},
            ))

    decoded = unquote(url)
    for pattern in URL_SCRIPT_PATTERNS:
        match = pattern.search(decoded)
        if match:
            findings.append(Finding(
                name="Script Content in URL",
                description="The URL contains script-like content that may be used for XSS.",
                url=url,
                severity=Severity.MEDIUM,
                category=CATEGORY,
                details={"evidence": match.group(0), "type": "url"},
            ))
            break

    soup = BeautifulSoup(page.body, "lxml")
    for script in soup.find_all("script"):
        code = script.string or ""
        source = DOM_SOURCES.search(code)
        sink = DOM_SINKS.search(code)
        if source and sink:
            findings.append(Finding(
                name="Potential DOM-based Cross-Site Scripting",
                description="Inline script passes user-controllable data to a dangerous sink.",
                url=url,
                severity=Severity.MEDIUM,
                category=CATEGORY,
                details={"source": source.group(0), "sink": sink.group(0).strip(), "type": "dom"},
            ))
            break  # One finding per page

    return findings

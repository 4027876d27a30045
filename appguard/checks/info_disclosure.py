"""Information disclosure checks."""

import re

from ..fetcher import PageResponse
from ..models import Finding, Severity

CATEGORY = "Information Disclosure"

# Patterns that may indicate sensitive info in responses
DISCLOSURE_PATTERNS = [
    (re.compile(r"Traceback \(most recent call last\)"), "Python stack trace"),
    (re.compile(r"at \w+\.(\w+) \(([^:]+):(\d+):\d+\)", re.I), "JavaScript stack trace"),
    (re.compile(r"Exception in thread.*\n.*at .*\.(\w+)\(.*\.java:\d+\)", re.I), "Java stack trace"),
    (re.compile(r"Fatal error:.*in ([^\s]+) on line (\d+)", re.I), "PHP error disclosure"),
    (re.compile(r"/var/www/[^\s\"'<>]+", re.I), "Web path disclosure"),
    (re.compile(r"<title>[^<]*(phpinfo\(\)|Index of /)[^<]*</title>", re.I), "Debug or directory listing page"),
]


def check_info_disclosure(url: str, page: PageResponse) -> list[Finding]:
    """Check response body for stack traces and debug output."""
    text = page.body[:50000]  # Limit scan size

    for pattern, desc in DISCLOSURE_PATTERNS:
        match = pattern.search(text)
        if match:
            return [Finding(
                name=desc,
                description=f"Response may contain sensitive information: {desc}",
                url=url,
                severity=Severity.LOW,
                category=CATEGORY,
                details={"evidence": match.group(0)[:200]},
            )]

    return []

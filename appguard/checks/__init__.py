"""Built-in detection checks.

Each check is a pure function ``check_x(url, page) -> list[Finding]``.
"""

from collections.abc import Iterable

from ..fetcher import PageResponse
from ..models import Finding
from .cookies import check_cookies
from .cors import check_cors
from .credentials import check_credentials
from .csrf import check_csrf
from .info_disclosure import check_info_disclosure
from .outdated import check_outdated
from .security_headers import check_security_headers
from .sqli import check_sqli
from .xss import check_xss

CHECKS = {
    "security_headers": check_security_headers,
    "cookies": check_cookies,
    "xss": check_xss,
    "csrf": check_csrf,
    "sqli": check_sqli,
    "outdated": check_outdated,
    "credentials": check_credentials,
    "cors": check_cors,
    "info_disclosure": check_info_disclosure,
}


def run_checks(url: str, page: PageResponse, enabled: Iterable[str] | None = None) -> list[Finding]:
    """Run every enabled check against one page and concatenate the findings."""
    if enabled is None:
        names = list(CHECKS)
    else:
        enabled = set(enabled)
        names = [n for n in CHECKS if n in enabled]
    findings = []
    for name in names:
        findings.extend(CHECKS[name](url, page))
    return findings


__all__ = [
    "CHECKS",
    "run_checks",
    "check_cookies",
    "check_cors",
    "check_credentials",
    "check_csrf",
    "check_info_disclosure",
    "check_outdated",
    "check_security_headers",
    "check_sqli",
    "check_xss",
]

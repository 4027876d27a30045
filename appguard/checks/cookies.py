"""Cookie attribute checks on Set-Cookie headers."""

import logging
from http.cookies import CookieError, SimpleCookie

from ..fetcher import PageResponse
from ..models import Finding, Severity

logger = logging.getLogger(__name__)

CATEGORY = "Cookie Security"


def parse_set_cookies(headers: list[str]) -> list[dict]:
    """Parse raw Set-Cookie values into name/attribute dicts."""
    parsed = []
    for header in headers:
        cookie = SimpleCookie()
        try:
            cookie.load(header)
        except CookieError:
            logger.debug("Could not parse Set-Cookie header: %s", header)
            continue
        for morsel in cookie.values():
            parsed.append({
                "name": morsel.key,
                "secure": bool(morsel["secure"]),
                "httponly": bool(morsel["httponly"]),
                "samesite": (morsel["samesite"] or "").strip().lower() or None,
            })
    return parsed


def check_cookies(url: str, page: PageResponse) -> list[Finding]:
    """Report cookies set without Secure, HttpOnly or SameSite."""
    findings = []

    for cookie in parse_set_cookies(page.set_cookies):
        name = cookie["name"]
        if not cookie["secure"]:
            findings.append(Finding(
                name="Cookie Without Secure Flag",
                description=f"Cookie '{name}' can be sent over unencrypted connections.",
                url=url,
                severity=Severity.MEDIUM,
                category=CATEGORY,
                details={"cookie": name, "attribute": "Secure"},
            ))
        if not cookie["httponly"]:
            findings.append(Finding(
                name="Cookie Without HttpOnly Flag",
                description=f"Cookie '{name}' is readable from JavaScript.",
                url=url,
                severity=Severity.MEDIUM,
                category=CATEGORY,
                details={"cookie": name, "attribute": "HttpOnly"},
            ))
        samesite = cookie["samesite"]
        if samesite is None:
            findings.append(Finding(
                name="Cookie Without SameSite Attribute",
                description=f"Cookie '{name}' has no SameSite attribute and may be sent on cross-site requests.",
                url=url,
                severity=Severity.LOW,
                category=CATEGORY,
                details={"cookie": name, "attribute": "SameSite"},
            ))
        elif samesite == "none" and not cookie["secure"]:
            findings.append(Finding(
                name="Cookie With SameSite=None Without Secure",
                description=f"Cookie '{name}' uses SameSite=None but is not marked Secure.",
                url=url,
                severity=Severity.MEDIUM,
                category=CATEGORY,
                details={"cookie": name, "attribute": "SameSite", "value": samesite},
            ))

    return findings

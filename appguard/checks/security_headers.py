"""Missing security headers check."""

from ..fetcher import PageResponse
from ..models import Finding, Severity

CATEGORY = "Security Headers"

RECOMMENDED_HEADERS = {
    "Content-Security-Policy": {
        "description": "Content-Security-Policy not set. Injected scripts run unrestricted.",
        "recommendation": "Define a restrictive CSP.",
        "severity": Severity.MEDIUM,
    },
    "X-XSS-Protection": {
        "description": "X-XSS-Protection not set (legacy; CSP is preferred).",
        "recommendation": "Set X-XSS-Protection: 1; mode=block or rely on CSP",
        "severity": Severity.LOW,
    },
    "Strict-Transport-Security": {
        "description": "HSTS not set. Browsers may be downgraded to plain HTTP.",
        "recommendation": "Set Strict-Transport-Security: max-age=31536000; includeSubDomains",
        "severity": Severity.MEDIUM,
    },
    "X-Content-Type-Options": {
        "description": "X-Content-Type-Options not set. Risk of MIME sniffing.",
        "recommendation": "Set X-Content-Type-Options: nosniff",
        "severity": Severity.LOW,
    },
    "X-Frame-Options": {
        "description": "X-Frame-Options not set. Risk of clickjacking.",
        "recommendation": "Set X-Frame-Options: DENY or SAMEORIGIN",
        "severity": Severity.MEDIUM,
    },
    "Referrer-Policy": {
        "description": "Referrer-Policy not set. May leak URLs in Referer.",
        "recommendation": "Set Referrer-Policy: strict-origin-when-cross-origin",
        "severity": Severity.LOW,
    },
}


def check_security_headers(url: str, page: PageResponse) -> list[Finding]:
    """Report each recommended header the response does not carry."""
    findings = []
    present = {k.lower() for k in page.headers.keys()}

    for header, info in RECOMMENDED_HEADERS.items():
        if header.lower() not in present:
            findings.append(Finding(
                name=f"Missing {header} Header",
                description=info["description"],
                url=url,
                severity=info["severity"],
                category=CATEGORY,
                details={"header": header, "recommendation": info["recommendation"]},
            ))

    return findings

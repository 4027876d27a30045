"""Hard-coded credentials and secrets in page content."""

import re

from ..fetcher import PageResponse
from ..models import Finding, Severity

CATEGORY = "Sensitive Data Exposure"

# Patterns for secrets in response body
SECRET_PATTERNS = [
    (re.compile(r"(?i)(aws_access_key_id|aws_secret_access_key)\s*[=:]\s*['\"]?([A-Za-z0-9/+=]{20,})"), "AWS credentials", Severity.HIGH),
    (re.compile(r"\bAKIA[0-9A-Z]{16}\b"), "AWS access key ID", Severity.HIGH),
    (re.compile(r"(?i)(api[_-]?key|apikey|access[_-]?token)\s*[=:]\s*['\"]([a-zA-Z0-9_\-]{20,})['\"]"), "API key", Severity.HIGH),
    (re.compile(r"(?i)\b(password|passwd|pwd|secret)\s*[=:]\s*['\"]([^'\"\s]{4,})['\"]"), "Hard-coded password", Severity.HIGH),
    (re.compile(r"-----BEGIN (RSA |DSA |EC |OPENSSH )?PRIVATE KEY-----"), "Private key", Severity.HIGH),
    (re.compile(r"(?i)\b(mongodb(\+srv)?|postgres(ql)?|mysql|redis)://[^\s:@/'\"]+:[^\s@/'\"]+@[^\s'\"<]+"), "DB connection string", Severity.HIGH),
]


def _redact(value: str) -> str:
    if len(value) <= 4:
        return "*" * len(value)
    return value[:2] + "*" * (len(value) - 4) + value[-2:]


def check_credentials(url: str, page: PageResponse) -> list[Finding]:
    """Report each kind of secret pattern found in the body once."""
    findings = []

    for pattern, label, severity in SECRET_PATTERNS:
        match = pattern.search(page.body)
        if not match:
            continue
        findings.append(Finding(
            name=f"Hard-coded Credentials: {label}",
            description=f"Response may contain {label.lower()}. Verify manually.",
            url=url,
            severity=severity,
            category=CATEGORY,
            details={"type": label, "evidence": _redact(match.group(0)[:120])},
        ))

    return findings

"""Reduce findings to severity counts and a security score."""

from collections.abc import Iterable

from .models import Finding, ScanSummary, Severity

WEIGHTS = {Severity.HIGH: 10, Severity.MEDIUM: 5, Severity.LOW: 2}


def security_score(high: int, medium: int, low: int) -> int:
    """100 minus weighted severity counts, clamped to [0, 100]."""
    score = 100 - (high * WEIGHTS[Severity.HIGH] + medium * WEIGHTS[Severity.MEDIUM] + low * WEIGHTS[Severity.LOW])
    return max(0, min(100, score))


def summarize(findings: Iterable[Finding]) -> ScanSummary:
    findings = list(findings)
    high = sum(1 for f in findings if f.severity == Severity.HIGH)
    medium = sum(1 for f in findings if f.severity == Severity.MEDIUM)
    low = sum(1 for f in findings if f.severity == Severity.LOW)
    return ScanSummary(
        total_vulnerabilities=len(findings),
        high_severity=high,
        medium_severity=medium,
        low_severity=low,
        security_score=security_score(high, medium, low),
    )

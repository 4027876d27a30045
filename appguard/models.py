"""Data models for scan requests, findings and results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Severity(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    SAFE = "safe"


class ScanLevel(Enum):
    QUICK = "quick"
    STANDARD = "standard"
    DETAILED = "detailed"


@dataclass(frozen=True)
class CustomRule:
    """A user-defined regex rule. Read-only for the engine."""
    id: Any
    name: str
    description: str
    category: str
    pattern: str
    severity: Severity
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "CustomRule":
        return cls(
            id=data.get("id"),
            name=data["name"],
            description=data.get("description", ""),
            category=data.get("category", "Custom"),
            pattern=data["pattern"],
            severity=Severity(str(data.get("severity", "medium")).lower()),
            enabled=bool(data.get("enabled", True)),
        )


@dataclass(frozen=True)
class CrawlRequest:
    """Input to a single scan."""
    url: str
    scan_level: ScanLevel = ScanLevel.STANDARD
    crawl_limit: int = 10
    use_authentication: bool = False
    include_custom_rules: bool = False
    custom_rules: tuple[CustomRule, ...] = ()

    @property
    def page_budget(self) -> int:
        return max(1, self.crawl_limit)

    @classmethod
    def from_dict(cls, data: dict) -> "CrawlRequest":
        """Build a request from caller field names (camelCase)."""
        rules = data.get("customRules") or []
        return cls(
            url=data["url"],
            scan_level=ScanLevel(data.get("scanLevel", "standard")),
            crawl_limit=int(data.get("crawlLimit", 10)),
            use_authentication=bool(data.get("useAuthentication", False)),
            include_custom_rules=bool(data.get("includeCustomRules", False)),
            custom_rules=tuple(
                r if isinstance(r, CustomRule) else CustomRule.from_dict(r) for r in rules
            ),
        )


@dataclass
class Finding:
    """One rule match against one page (a vulnerability record)."""
    name: str
    description: str
    url: str
    severity: Severity
    category: str
    details: dict[str, Any] = field(default_factory=dict)
    status: str = "pending"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "severity": self.severity.value,
            "category": self.category,
            "details": self.details,
            "status": self.status,
        }


@dataclass
class ScanSummary:
    total_vulnerabilities: int = 0
    high_severity: int = 0
    medium_severity: int = 0
    low_severity: int = 0
    security_score: int = 100

    def to_dict(self) -> dict:
        return {
            "totalVulnerabilities": self.total_vulnerabilities,
            "highSeverity": self.high_severity,
            "mediumSeverity": self.medium_severity,
            "lowSeverity": self.low_severity,
            "securityScore": self.security_score,
        }


@dataclass
class ScanResult:
    """Aggregated result of a completed crawl."""
    target: str
    scan_level: ScanLevel
    scanned_urls: list[str] = field(default_factory=list)
    findings: list[Finding] = field(default_factory=list)
    summary: Optional[ScanSummary] = None

    @property
    def high_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.HIGH)

    @property
    def medium_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.MEDIUM)

    @property
    def low_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.LOW)

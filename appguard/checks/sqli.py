"""Passive SQL injection heuristics on errors, query parameters and forms."""

import re
from urllib.parse import parse_qsl, urlparse

from bs4 import BeautifulSoup

from ..fetcher import PageResponse
from ..models import Finding, Severity

CATEGORY = "SQL Injection"

# Patterns that may indicate SQL errors (information disclosure / injection point)
SQL_ERROR_PATTERNS = [
    re.compile(r"SQL syntax.*MySQL", re.I),
    re.compile(r"Warning.*mysql_", re.I),
    re.compile(r"PostgreSQL.*ERROR", re.I),
    re.compile(r"ORA-\d{5}", re.I),
    re.compile(r"SQLite.*error", re.I),
    re.compile(r"SQL Server.*Driver", re.I),
    re.compile(r"Unclosed quotation mark", re.I),
    re.compile(r"quoted string not properly terminated", re.I),
    re.compile(r"SQLSTATE\[", re.I),
]

SQL_VALUE_PATTERN = re.compile(
    r"('|\"|--|;|/\*|\b(union\s+select|or\s+\d+\s*=\s*\d+|or\s+'[^']*'\s*=\s*'|drop\s+table|sleep\s*\())",
    re.I,
)

IDENTIFIER_PARAM = re.compile(r"^(id|.*_id|uid|user|username|cat|category|item|pid|product|order|page_id|q|search|query)$", re.I)


def check_sqli(url: str, page: PageResponse) -> list[Finding]:
    """Report SQL error output, SQL syntax in parameters and likely injection points."""
    findings = []
    text = page.body[:100000]

    for pattern in SQL_ERROR_PATTERNS:
        match = pattern.search(text)
        if match:
            findings.append(Finding(
                name="SQL Error Message Disclosure",
                description="The response contains a database error, indicating unsanitized input may reach SQL queries.",
                url=url,
                severity=Severity.HIGH,
                category=CATEGORY,
                details={"evidence": match.group(0)[:200], "pattern": pattern.pattern},
            ))
            break

    params = parse_qsl(urlparse(url).query, keep_blank_values=True)
    for param, value in params:
        if SQL_VALUE_PATTERN.search(value):
            findings.append(Finding(
                name="SQL Syntax in URL Parameter",
                description=f"Parameter '{param}' contains SQL metacharacters or keywords.",
                url=url,
                severity=Severity.MEDIUM,
                category=CATEGORY,
                details={"parameter": param, "value": value[:100], "source": "query"},
            ))
        elif IDENTIFIER_PARAM.match(param):
            findings.append(Finding(
                name="Potential SQL Injection Point",
                description=f"Parameter '{param}' looks like a database lookup key. Verify it is parameterized.",
                url=url,
                severity=Severity.LOW,
                category=CATEGORY,
                details={"parameter": param, "source": "query"},
            ))

    soup = BeautifulSoup(page.body, "lxml")
    for form in soup.find_all("form"):
        if (form.get("method") or "get").strip().lower() != "get":
            continue
        names = sorted({
            field.get("name") for field in form.find_all(["input", "select", "textarea"])
            if field.get("name") and IDENTIFIER_PARAM.match(field.get("name"))
            and (field.get("type") or "text").lower() not in {"hidden", "submit", "button"}
        })
        if names:
            findings.append(Finding(
                name="Potential SQL Injection Point in Form",
                description="Form inputs look like database lookup keys. Verify server-side queries are parameterized.",
                url=url,
                severity=Severity.LOW,
                category=CATEGORY,
                details={"inputs": names, "action": form.get("action") or "", "source": "form"},
            ))

    return findings

"""CSRF protection heuristics on HTML forms."""

from bs4 import BeautifulSoup

from ..fetcher import PageResponse
from ..models import Finding, Severity

CATEGORY = "CSRF"

CSRF_FIELD_HINTS = ("csrf", "xsrf", "token", "authenticity", "nonce", "verification")


def _looks_like_csrf_field(tag) -> bool:
    candidates = [(tag.get("name") or "").lower(), (tag.get("id") or "").lower()]
    return any(hint in candidate for candidate in candidates for hint in CSRF_FIELD_HINTS)


def form_has_csrf_token(form) -> bool:
    for field in form.find_all("input"):
        if (field.get("type") or "").lower() in {"submit", "button", "image", "reset"}:
            continue
        if _looks_like_csrf_field(field):
            return True
    return False


def check_csrf(url: str, page: PageResponse) -> list[Finding]:
    """Report state-changing forms with no anti-CSRF token field."""
    findings = []
    soup = BeautifulSoup(page.body, "lxml")
    meta_token = soup.find("meta", attrs={"name": lambda n: n and "csrf" in n.lower()})

    for index, form in enumerate(soup.find_all("form")):
        method = (form.get("method") or "get").lower()
        if method != "post" or meta_token or form_has_csrf_token(form):
            continue
        findings.append(Finding(
            name="Form Without CSRF Protection",
            description="A POST form does not include an anti-CSRF token.",
            url=url,
            severity=Severity.MEDIUM,
            category=CATEGORY,
            details={
                "form_index": index,
                "action": form.get("action") or "",
                "method": method.upper(),
            },
        ))

    return findings

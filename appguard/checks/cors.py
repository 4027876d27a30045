"""CORS misconfiguration checks."""

from ..fetcher import PageResponse
from ..models import Finding, Severity

CATEGORY = "CORS"


def check_cors(url: str, page: PageResponse) -> list[Finding]:
    acao = page.headers.get("Access-Control-Allow-Origin")
    acac = (page.headers.get("Access-Control-Allow-Credentials") or "").lower() == "true"

    if acao != "*":
        return []

    if acac:
        return [Finding(
            name="CORS: Allow-Origin * With Credentials",
            description="Access-Control-Allow-Origin is * while Allow-Credentials is true.",
            url=url,
            severity=Severity.HIGH,
            category=CATEGORY,
            details={"allow_origin": acao, "allow_credentials": True},
        )]
    return [Finding(
        name="CORS: Allow-Origin *",
        description="Server allows any origin to read responses.",
        url=url,
        severity=Severity.LOW,
        category=CATEGORY,
        details={"allow_origin": acao, "allow_credentials": False},
    )]

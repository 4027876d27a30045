"""AppGuard: passive web application crawler and security checks."""

import logging

from .engine import Scanner, run_scan
from .errors import FetchError, InvalidTarget
from .models import CrawlRequest, CustomRule, Finding, ScanLevel, ScanResult, ScanSummary, Severity

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"

__all__ = [
    "CrawlRequest",
    "CustomRule",
    "FetchError",
    "Finding",
    "InvalidTarget",
    "ScanLevel",
    "ScanResult",
    "ScanSummary",
    "Scanner",
    "Severity",
    "run_scan",
]

"""Detached scan execution with status transitions for callers that persist progress."""

import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

from .engine import Scanner
from .models import CrawlRequest, ScanResult

logger = logging.getLogger(__name__)


class ScanStatus(Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ScanJob:
    """One scan run in the background.

    ``on_update`` is called with the job after every status change; callers
    use it to persist the scan record. The job never raises from ``run``.
    """

    def __init__(
        self,
        request: CrawlRequest,
        *,
        on_update: Optional[Callable[["ScanJob"], None]] = None,
        config: dict[str, Any] | None = None,
        **scanner_kwargs,
    ):
        cap = ((config or {}).get("crawl") or {}).get("max_pages_cap")
        if cap:
            request = replace(request, crawl_limit=min(request.crawl_limit, int(cap)))
        self.request = request
        self.config = config
        self.on_update = on_update
        self.scanner_kwargs = scanner_kwargs
        self.status = ScanStatus.PENDING
        self.started_at: Optional[datetime] = None
        self.completed_at: Optional[datetime] = None
        self.result: Optional[ScanResult] = None
        self.report: Optional[dict] = None
        self.error: Optional[str] = None

    def _transition(self, status: ScanStatus) -> None:
        self.status = status
        if self.on_update is not None:
            self.on_update(self)

    @property
    def duration(self) -> float:
        if not self.started_at:
            return 0.0
        end = self.completed_at or datetime.now(timezone.utc)
        return (end - self.started_at).total_seconds()

    def run(self) -> None:
        self.started_at = datetime.now(timezone.utc)
        self._transition(ScanStatus.RUNNING)
        logger.info("Starting scan job for %s", self.request.url)
        try:
            self.result = Scanner(self.request, config=self.config, **self.scanner_kwargs).run()
        except Exception as e:
            logger.exception("Scan job for %s failed", self.request.url)
            self.error = str(e) or e.__class__.__name__
            self.completed_at = datetime.now(timezone.utc)
            self._transition(ScanStatus.FAILED)
            return

        self.completed_at = datetime.now(timezone.utc)
        self.report = {
            "summary": self.result.summary.to_dict(),
            "scannedUrls": self.result.scanned_urls,
            "scanLevel": self.request.scan_level.value,
            "scanDuration": self.duration,
            "totalPages": len(self.result.scanned_urls),
            "vulnerabilitiesCount": len(self.result.findings),
            "timestamp": self.completed_at.isoformat(),
        }
        self._transition(ScanStatus.COMPLETED)

    def start(self) -> threading.Thread:
        """Run the job in a daemon thread and return immediately."""
        thread = threading.Thread(target=self.run, name=f"scan-{self.request.url}", daemon=True)
        thread.start()
        return thread

"""Exception types raised or captured by the scan engine."""


class ScanError(Exception):
    """Base class for scanner errors."""


class InvalidTarget(ScanError, ValueError):
    """The seed URL has no scheme or host. Aborts the scan."""

    def __init__(self, url: str):
        super().__init__(f"Invalid target URL: {url!r}")
        self.url = url


class FetchError(ScanError):
    """A single page could not be fetched."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url
        self.message = message


class LinkParseError(ScanError):
    """An href could not be resolved to an absolute URL."""


class RulePatternError(ScanError):
    """A custom rule pattern failed to compile."""

    def __init__(self, rule_id, message: str):
        super().__init__(f"Rule {rule_id}: {message}")
        self.rule_id = rule_id
        self.message = message

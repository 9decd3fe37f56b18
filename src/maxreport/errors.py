from __future__ import annotations


class MaxReportError(Exception):
    """Base error for maxreport failures."""


class ConfigError(MaxReportError):
    """Raised when a configuration file exists but cannot be decoded."""


class APIError(MaxReportError):
    """Raised when a MaxCDN API call fails or returns an unusable payload."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

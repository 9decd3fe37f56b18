from __future__ import annotations

import json
import logging
import re
import sys
from typing import Any


class RedactingFilter(logging.Filter):
    """Strips credentials from log records."""

    PATTERNS = [
        (re.compile(r'(oauth_signature=)"?[^",&\s]+"?'), r"\1[REDACTED]"),
        (re.compile(r"(Authorization:?\s*OAuth\s)[^\n]+", re.IGNORECASE), r"\1[REDACTED]"),
    ]

    def __init__(self, secrets: list[str] | None = None):
        super().__init__()
        self._secrets: list[str] = []
        self.set_secrets(secrets or [])

    def set_secrets(self, secrets: list[str]) -> None:
        self._secrets = [s for s in secrets if s and len(s) > 2]

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        for pattern, replacement in self.PATTERNS:
            msg = pattern.sub(replacement, msg)
        for secret in self._secrets:
            msg = msg.replace(secret, "[REDACTED]")
        record.msg = msg
        record.args = ()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            exc = record.exc_info[1]
            payload["error_type"] = type(exc).__name__
            status_code = getattr(exc, "status_code", None)
            if status_code is not None:
                payload["status_code"] = status_code
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


_redacting_filter = RedactingFilter()


def configure_logging(verbose: bool = False) -> None:
    """Send JSON log lines to stderr; tables own stdout."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(_redacting_filter)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.addHandler(handler)

    # httpx and httpcore are chatty at DEBUG; only let them through on --verbose.
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)


def set_redaction_secrets(secrets: list[str]) -> None:
    """Mask these credential values in every log line."""
    _redacting_filter.set_secrets(secrets)

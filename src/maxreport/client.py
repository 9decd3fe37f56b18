"""HTTP client for the MaxCDN REST API."""
from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import secrets
import time
from typing import Any
from urllib.parse import quote

import httpx

from maxreport.config import Config
from maxreport.errors import APIError

logger = logging.getLogger(__name__)

USER_AGENT = "maxreport (python httpx)"

STATS_ENDPOINT = "/reports/stats.json"
POPULAR_FILES_ENDPOINT = "/reports/popularfiles.json"


def _escape(value: str) -> str:
    return quote(value, safe="~-._")


def oauth_header(
    method: str,
    url: str,
    params: dict[str, str],
    consumer_key: str,
    consumer_secret: str,
    *,
    nonce: str | None = None,
    timestamp: str | None = None,
) -> str:
    """Build a two-legged OAuth 1.0a HMAC-SHA1 Authorization header."""
    oauth = {
        "oauth_consumer_key": consumer_key,
        "oauth_nonce": nonce or secrets.token_hex(16),
        "oauth_signature_method": "HMAC-SHA1",
        "oauth_timestamp": timestamp or str(int(time.time())),
        "oauth_version": "1.0",
    }
    pairs = sorted((_escape(k), _escape(v)) for k, v in {**params, **oauth}.items())
    normalized = "&".join(f"{k}={v}" for k, v in pairs)
    base_string = "&".join([method.upper(), _escape(url), _escape(normalized)])
    key = f"{_escape(consumer_secret)}&".encode()
    digest = hmac.new(key, base_string.encode(), hashlib.sha1).digest()
    oauth["oauth_signature"] = base64.b64encode(digest).decode()
    return "OAuth " + ", ".join(f'{k}="{_escape(v)}"' for k, v in sorted(oauth.items()))


class MaxCDNClient:
    """Thin wrapper around the MaxCDN account API."""

    def __init__(
        self,
        config: Config,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._base_url = f"{config.api_host}/{config.alias}"
        self._token = config.token
        self._secret = config.secret
        self._verbose = config.verbose
        self._timeout = timeout
        self._transport = transport

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _log_request(self, request: httpx.Request) -> None:
        logger.debug("request %s %s", request.method, request.url)

    def _log_response(self, response: httpx.Response) -> None:
        logger.debug("response %s %s -> %s", response.request.method, response.request.url, response.status_code)

    def get(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET ``path`` and return the decoded JSON body."""
        params = params or {}
        url = self._url(path)
        headers = {
            "Authorization": oauth_header("GET", url, params, self._token, self._secret),
            "User-Agent": USER_AGENT,
        }
        event_hooks: dict[str, list] = {}
        if self._verbose:
            event_hooks = {"request": [self._log_request], "response": [self._log_response]}

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport, event_hooks=event_hooks) as client:
                resp = client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise APIError(f"Request to {url} failed: {exc}") from exc

        try:
            body = resp.json()
        except ValueError as exc:
            if resp.is_error:
                raise APIError(f"HTTP {resp.status_code} from {url}", status_code=resp.status_code) from exc
            raise APIError(f"Invalid JSON from {url}: {exc}", status_code=resp.status_code) from exc

        if resp.is_error and not (isinstance(body, dict) and "error" in body):
            raise APIError(f"HTTP {resp.status_code} from {url}", status_code=resp.status_code)
        return body

    # -- Reports --------------------------------------------------------------

    def stats(self, params: dict[str, str] | None = None) -> Any:
        return self.get(STATS_ENDPOINT, params)

    def stats_breakdown(self, granularity: str, params: dict[str, str] | None = None) -> Any:
        return self.get(f"{STATS_ENDPOINT}/{granularity}", params)

    def popular_files(self, params: dict[str, str] | None = None) -> Any:
        return self.get(POPULAR_FILES_ENDPOINT, params)

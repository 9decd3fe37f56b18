"""Tests for the MaxCDN HTTP client and response decoding."""
from __future__ import annotations

import httpx
import pytest

from maxreport.client import MaxCDNClient, oauth_header
from maxreport.config import Config
from maxreport.errors import APIError
from maxreport.models import MultiStats, PopularFiles, SummaryStats, parse_response


CONFIG = Config(alias="myalias", token="consumer-token", secret="consumer-secret")


def _client(handler, config: Config = CONFIG) -> MaxCDNClient:
    return MaxCDNClient(config, transport=httpx.MockTransport(handler))


# ---------------------------------------------------------------------------
# OAuth signing
# ---------------------------------------------------------------------------

def test_oauth_header_is_deterministic_for_fixed_nonce():
    kwargs = {"nonce": "abc", "timestamp": "1700000000"}
    a = oauth_header("GET", "https://rws.maxcdn.com/x/reports/stats.json", {"date_from": "2024-01-01"}, "k", "s", **kwargs)
    b = oauth_header("GET", "https://rws.maxcdn.com/x/reports/stats.json", {"date_from": "2024-01-01"}, "k", "s", **kwargs)
    assert a == b
    assert a.startswith("OAuth ")
    assert 'oauth_consumer_key="k"' in a
    assert 'oauth_signature_method="HMAC-SHA1"' in a
    assert 'oauth_nonce="abc"' in a


def test_oauth_signature_depends_on_secret_and_params():
    kwargs = {"nonce": "abc", "timestamp": "1700000000"}
    url = "https://rws.maxcdn.com/x/reports/stats.json"
    base = oauth_header("GET", url, {}, "k", "s", **kwargs)
    assert oauth_header("GET", url, {}, "k", "other", **kwargs) != base
    assert oauth_header("GET", url, {"date_to": "2024-02-01"}, "k", "s", **kwargs) != base


def test_oauth_signature_known_answer():
    header = oauth_header(
        "GET",
        "https://rws.maxcdn.com/x/reports/stats.json",
        {"date_from": "2024-01-01", "q": "a b+c/~"},
        "k",
        "s sec&",
        nonce="abc",
        timestamp="1700000000",
    )
    assert 'oauth_signature="uiP1pdxLRfQbtbYvnLEO15%2FFOuU%3D"' in header


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

def test_stats_breakdown_request_shape():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, json={"code": 200, "data": {"stats": []}})

    _client(handler).stats_breakdown("daily", {"date_from": "2024-01-01", "date_to": "2024-01-31"})

    req = seen["request"]
    assert req.method == "GET"
    assert req.url.host == "rws.maxcdn.com"
    assert req.url.path == "/myalias/reports/stats.json/daily"
    assert dict(req.url.params) == {"date_from": "2024-01-01", "date_to": "2024-01-31"}
    assert req.headers["Authorization"].startswith("OAuth ")
    assert 'oauth_consumer_key="consumer-token"' in req.headers["Authorization"]
    assert "maxreport" in req.headers["User-Agent"]


def test_host_override_is_used():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        return httpx.Response(200, json={"code": 200, "data": {"popularfiles": []}})

    config = Config(alias="myalias", token="t", secret="s", host="http://localhost:9000")
    _client(handler, config).popular_files()

    assert seen["url"].host == "localhost"
    assert seen["url"].port == 9000
    assert seen["url"].path == "/myalias/reports/popularfiles.json"
    assert not seen["url"].params


def test_connection_error_becomes_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(APIError, match="connection refused"):
        _client(handler).stats()


def test_http_error_without_json():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    with pytest.raises(APIError) as exc_info:
        _client(handler).stats()
    assert exc_info.value.status_code == 502


def test_error_envelope_is_returned_for_decoding():
    body = {"code": 401, "error": {"type": "unauthorized", "message": "Invalid consumer key"}}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json=body)

    assert _client(handler).stats() == body
    with pytest.raises(APIError, match="Invalid consumer key") as exc_info:
        parse_response(body, SummaryStats)
    assert exc_info.value.status_code == 401


def test_invalid_json_on_success():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    with pytest.raises(APIError, match="Invalid JSON"):
        _client(handler).stats()


# ---------------------------------------------------------------------------
# Response mapping
# ---------------------------------------------------------------------------

def test_parse_summary_stats_coerces_numbers():
    payload = {"code": 200, "data": {"stats": {"hit": 10, "cache_hit": "8", "noncache_hit": 2, "size": "1024"}}}
    summary = parse_response(payload, SummaryStats)
    assert summary.stats.hit == "10"
    assert summary.stats.cache_hit == "8"
    assert summary.stats.size == "1024"


def test_parse_multi_stats_preserves_order():
    payload = {"code": 200, "data": {"page": 1, "stats": [
        {"timestamp": "2024-01-02", "hit": "2"},
        {"timestamp": "2024-01-01", "hit": "1"},
    ]}}
    multi = parse_response(payload, MultiStats)
    assert [s.timestamp for s in multi.stats] == ["2024-01-02", "2024-01-01"]


def test_parse_popular_files():
    payload = {"code": 200, "data": {"popularfiles": [{"hit": "5", "uri": "/a.js", "vhost": "cdn"}]}}
    files = parse_response(payload, PopularFiles)
    assert files.popularfiles[0].uri == "/a.js"


def test_parse_missing_data():
    with pytest.raises(APIError, match="no data"):
        parse_response({"code": 200}, SummaryStats)


def test_parse_wrong_shape():
    with pytest.raises(APIError):
        parse_response({"code": 200, "data": {"stats": "nope"}}, SummaryStats)


def test_parse_non_object():
    with pytest.raises(APIError):
        parse_response(["not", "an", "envelope"], SummaryStats)

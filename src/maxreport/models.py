"""Typed views of MaxCDN report payloads."""
from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from maxreport.errors import APIError


class _Record(BaseModel):
    # The API reports counters as strings on some endpoints and numbers on others.
    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")


class Stats(_Record):
    hit: str = ""
    cache_hit: str = ""
    noncache_hit: str = ""
    size: str = ""


class TimedStats(Stats):
    timestamp: str = ""


class PopularFile(_Record):
    hit: str = ""
    uri: str = ""


class SummaryStats(_Record):
    stats: Stats


class MultiStats(_Record):
    stats: list[TimedStats] = Field(default_factory=list)


class PopularFiles(_Record):
    popularfiles: list[PopularFile] = Field(default_factory=list)


M = TypeVar("M", bound=_Record)


class ApiErrorBody(BaseModel):
    type: str = ""
    message: str = ""


class Envelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: int = 0
    data: dict[str, Any] | None = None
    error: ApiErrorBody | None = None


def parse_response(payload: Any, model: type[M]) -> M:
    """Decode a raw API response body into ``model``.

    Raises APIError for an error envelope or a payload of the wrong shape.
    """
    try:
        envelope = Envelope.model_validate(payload)
    except ValidationError as exc:
        raise APIError(f"Unexpected response envelope: {exc}") from exc

    if envelope.error is not None:
        message = envelope.error.message or envelope.error.type or "unknown error"
        raise APIError(f"API error {envelope.code}: {message}", status_code=envelope.code or None)
    if envelope.data is None:
        raise APIError("Response has no data", status_code=envelope.code or None)

    try:
        return model.model_validate(envelope.data)
    except ValidationError as exc:
        raise APIError(f"Unexpected {model.__name__} payload: {exc}") from exc

"""Report selection and dispatch."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from maxreport.client import MaxCDNClient
from maxreport.models import MultiStats, PopularFiles, SummaryStats, parse_response
from maxreport.render import breakdown_table, popular_table, summary_table

logger = logging.getLogger(__name__)

GRANULARITIES: tuple[str, ...] = ("hourly", "daily", "monthly")


@dataclass(frozen=True)
class StatsSummary:
    date_from: str = ""
    date_to: str = ""


@dataclass(frozen=True)
class StatsBreakdown:
    granularity: str
    date_from: str = ""
    date_to: str = ""


@dataclass(frozen=True)
class PopularFilesReport:
    date_from: str = ""
    date_to: str = ""
    top: int = 0


Report = Union[StatsSummary, StatsBreakdown, PopularFilesReport]


def select_report(
    report: str | None,
    report_type: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    top: int = 0,
) -> Report:
    """Pick the report variant; anything other than "popular" runs stats."""
    date_from = date_from or ""
    date_to = date_to or ""
    if report == "popular":
        return PopularFilesReport(date_from=date_from, date_to=date_to, top=top or 0)
    if report_type:
        return StatsBreakdown(granularity=report_type, date_from=date_from, date_to=date_to)
    return StatsSummary(date_from=date_from, date_to=date_to)


def _range_params(report: Report) -> dict[str, str]:
    params: dict[str, str] = {}
    if report.date_from:
        params["date_from"] = report.date_from
    if report.date_to:
        params["date_to"] = report.date_to
    return params


def run_report(client: MaxCDNClient, report: Report) -> str:
    """Issue the single API call for ``report`` and return the rendered output."""
    params = _range_params(report)

    if isinstance(report, PopularFilesReport):
        logger.debug("popular files report params=%s top=%d", params, report.top)
        data = parse_response(client.popular_files(params), PopularFiles)
        return "Running popular files report.\n\n" + popular_table(data, report.top)

    if isinstance(report, StatsBreakdown):
        logger.debug("%s stats report params=%s", report.granularity, params)
        multi = parse_response(client.stats_breakdown(report.granularity, params), MultiStats)
        return f"Running {report.granularity} stats report.\n\n" + breakdown_table(multi)

    logger.debug("summary stats report params=%s", params)
    summary = parse_response(client.stats(params), SummaryStats)
    return "Running summary stats report.\n\n" + summary_table(summary)

"""Fixed-width table formatting for report records."""
from __future__ import annotations

from maxreport.models import MultiStats, PopularFiles, SummaryStats


def _row(values: list[str], widths: list[int]) -> str:
    return " | ".join(str(v).rjust(w) for v, w in zip(values, widths))


def summary_table(summary: SummaryStats) -> str:
    widths = [15, 15, 15, 15]
    s = summary.stats
    lines = [
        _row(["total hits", "cache hits", "non-cache hits", "size"], widths),
        "-" * 80,
        _row([s.hit, s.cache_hit, s.noncache_hit, s.size], widths),
    ]
    return "\n".join(lines) + "\n"


def breakdown_table(multi: MultiStats) -> str:
    widths = [25, 10, 10, 10, 10]
    lines = [
        _row(["timestamp", "total", "cached", "non-cached", "size"], widths),
        " " + "-" * 79,
    ]
    for s in multi.stats:
        lines.append(_row([s.timestamp, s.hit, s.cache_hit, s.noncache_hit, s.size], widths))
    return "\n".join(lines) + "\n"


def popular_table(popular: PopularFiles, top: int = 0) -> str:
    """Render hits/uri rows; ``top`` > 0 keeps only the first ``top`` entries."""
    files = popular.popularfiles
    if top > 0:
        files = files[:top]
    lines = [f"{'hits':>10} | file", "   " + "-" * 17]
    for f in files:
        lines.append(f"{f.hit:>10} | {f.uri}")
    return "\n".join(lines) + "\n"

"""Helpers shared by the deepself tool definitions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from urllib.parse import quote

STAT_COUNTERS = ("epsilons", "betas", "deltas", "alphas")


def path_segment(value: str) -> str:
    """Percent-encode one caller-supplied path segment."""
    return quote(str(value), safe="")


def iso_timestamp(epoch_seconds: Any) -> str:
    """Format epoch seconds as a UTC ISO-8601 string, or 'unknown'."""
    if isinstance(epoch_seconds, bool) or not isinstance(epoch_seconds, (int, float)):
        return "unknown"
    moment = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_date(epoch_seconds: Any) -> str:
    return iso_timestamp(epoch_seconds).split("T")[0]


def as_mapping(body: Any) -> Mapping[str, Any]:
    return body if isinstance(body, Mapping) else {}


def stat_count(stats: Optional[Mapping[str, Any]], counter: str) -> Any:
    if not isinstance(stats, Mapping):
        return 0
    return stats.get(f"{counter}_processed") or 0


def format_processed(stats: Optional[Mapping[str, Any]]) -> str:
    """Render processing counters as 'Processed: N epsilons, N betas, ...'."""
    parts = [f"{stat_count(stats, counter)} {counter}" for counter in STAT_COUNTERS]
    return "Processed: " + ", ".join(parts)

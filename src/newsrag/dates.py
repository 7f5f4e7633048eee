"""Datetime helpers for article publish dates.

Publish dates travel through the system as strings. Parsing is lenient and
delegated to dateutil: ISO-8601, RFC 2822 feed dates and free-form dates such
as ``"October 17, 2026"`` or ``"2026/10/17"`` are accepted; naive values are
assumed to be UTC. Anything else parses to ``None`` and callers degrade
gracefully.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from dateutil.parser import parse as parse_date

# Feed timezone abbreviations dateutil does not resolve on its own
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
}


def parse_datetime(value: str | None) -> datetime | None:
    """Return an aware datetime for *value*, or None if it cannot be parsed."""
    if not value or not value.strip():
        return None
    try:
        parsed = parse_date(value.strip(), tzinfos=TZINFOS)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_date(value: str) -> str:
    """Format a publish date as ``"Oct 17, 2026"``; unparsable input is returned unchanged."""
    parsed = parse_datetime(value)
    if parsed is None:
        return value
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """Serialise *moment* as an ISO-8601 string with millisecond precision and ``Z`` suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

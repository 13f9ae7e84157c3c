from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional


DATE_FORMAT = "%Y-%m-%d"

# FRED emits e.g. "2013-07-31 09:26:16-05"; accept "-05:00" and "-0500" too.
_TIMESTAMP_RE = re.compile(
    r"^(?P<ts>\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}:\d{2})"
    r"(?P<sign>[+-])(?P<hh>\d{2})(?::?(?P<mm>\d{2}))?$"
)


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def parse_date(s: str) -> date:
    return datetime.strptime(s.strip(), DATE_FORMAT).date()


def parse_optional_date(s: Optional[str]) -> Optional[date]:
    """Empty or missing values mean "not provided", not an error."""
    if s is None or not s.strip():
        return None
    return parse_date(s)


def as_utc(dt: datetime) -> datetime:
    # Naive datetimes come back from SQLite already normalized to UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_fred_timestamp(s: str) -> datetime:
    m = _TIMESTAMP_RE.match(s.strip())
    if not m:
        raise ValueError(f"Invalid FRED timestamp: {s!r}")
    naive = datetime.strptime(m.group("ts").replace("T", " "), "%Y-%m-%d %H:%M:%S")
    offset = timedelta(hours=int(m.group("hh")), minutes=int(m.group("mm") or 0))
    if m.group("sign") == "-":
        offset = -offset
    return naive.replace(tzinfo=timezone(offset)).astimezone(timezone.utc)


def format_fred_timestamp(dt: datetime) -> str:
    return as_utc(dt).strftime("%Y-%m-%d %H:%M:%S") + "+00"

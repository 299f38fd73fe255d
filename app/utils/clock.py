"""Time helpers. Timestamps are stored as naive UTC datetimes."""

from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def resolve_timezone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def local_date(ts: datetime, tz: tzinfo) -> date:
    """Calendar date of a naive-UTC (or aware) timestamp in the given zone."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(tz).date()

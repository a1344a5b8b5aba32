from __future__ import annotations

import math
from datetime import date, datetime, timezone, tzinfo
from typing import Mapping, Optional
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/Toronto"


def resolve_zone(name: Optional[str] = None) -> tzinfo:
    return ZoneInfo(name or DEFAULT_TIMEZONE)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        dt = datetime.fromisoformat(value)
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt
    except ValueError:
        return None


def parse_period_date(value: object, tz: tzinfo) -> Optional[date]:
    """Resolve a ccusage period identifier to a civil date.

    Plain ``YYYY-MM-DD`` identifiers are already calendar dates and are taken
    as-is. Identifiers carrying a time of day are converted into ``tz`` first.
    """

    if not isinstance(value, str):
        return None
    key = value.strip()
    if not key:
        return None
    try:
        return date.fromisoformat(key)
    except ValueError:
        pass
    dt = parse_timestamp(key)
    if dt is None:
        return None
    return dt.astimezone(tz).date()


def display_date(value: object, tz: tzinfo) -> Optional[date]:
    """Calendar date a period identifier shows as in ``tz``.

    ccusage writes plain ``YYYY-MM-DD`` keys; those are read as UTC midnight
    and converted, so west of UTC a key renders as the previous day.
    """

    if not isinstance(value, str):
        return None
    key = value.strip()
    if not key:
        return None
    try:
        day = date.fromisoformat(key)
    except ValueError:
        dt = parse_timestamp(key)
    else:
        dt = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    if dt is None:
        return None
    return dt.astimezone(tz).date()


def today_in(tz: tzinfo, now: Optional[datetime] = None) -> date:
    now = now or datetime.now(tz)
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(tz).date()


def safe_float(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace("$", "").replace(",", "")
    elif not isinstance(value, (int, float)):
        return 0.0
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def safe_int(entry: Mapping[str, object], *keys: str) -> int:
    for key in keys:
        if key in entry and entry[key] is not None:
            value = entry[key]
            if isinstance(value, bool):
                continue
            if isinstance(value, int):
                return value
            if isinstance(value, str):
                value = value.strip().replace(",", "")
            elif not isinstance(value, float):
                continue
            try:
                number = float(value)
            except (ValueError, OverflowError):
                continue
            if not math.isfinite(number):
                continue
            return int(number)
    return 0


def optional_float(value: object) -> Optional[float]:
    if value is None:
        return None
    return safe_float(value)


def optional_int(entry: Mapping[str, object], key: str) -> Optional[int]:
    if entry.get(key) is None:
        return None
    return safe_int(entry, key)


def format_tokens(tokens: int) -> str:
    if tokens >= 1_000_000_000:
        return f"{tokens / 1_000_000_000:.2f}B"
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.2f}M"
    if tokens >= 1000:
        return f"{tokens / 1000:.1f}k"
    return str(tokens)


def format_currency(value: Optional[float]) -> str:
    if value is None:
        return "$0.00"
    return f"${value:.2f}"


__all__ = [
    "DEFAULT_TIMEZONE",
    "display_date",
    "format_currency",
    "format_tokens",
    "optional_float",
    "optional_int",
    "parse_period_date",
    "parse_timestamp",
    "resolve_zone",
    "safe_float",
    "safe_int",
    "today_in",
]

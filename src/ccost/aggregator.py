from __future__ import annotations

import json
import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import DataError, ParseError
from .models import Granularity, ModelBreakdown, ModelFamily, UsageEntry
from .utils import (
    optional_float,
    optional_int,
    parse_period_date,
    resolve_zone,
    safe_float,
    safe_int,
    today_in,
)

logger = logging.getLogger("ccost")

DAILY_WINDOW_DAYS = 7
WEEKLY_WINDOW_WEEKS = 12

# Evaluated in order; the first keyword found in the model name wins.
FAMILY_RULES: Tuple[Tuple[str, ModelFamily], ...] = (
    ("sonnet", ModelFamily.SONNET),
    ("haiku", ModelFamily.HAIKU),
    ("opus", ModelFamily.OPUS),
)

Record = Dict[str, object]


def classify_model(name: str) -> ModelFamily:
    for keyword, family in FAMILY_RULES:
        if keyword in name:
            return family
    return ModelFamily.OTHER


def parse_payload(raw: str, granularity: Granularity) -> List[Record]:
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ParseError(str(exc)) from exc
    records = data.get(granularity.payload_key) if isinstance(data, dict) else None
    if not isinstance(records, list) or not records:
        raise DataError()
    return records


def compute_cutoff(
    granularity: Granularity,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
    daily_days: int = DAILY_WINDOW_DAYS,
    weekly_weeks: int = WEEKLY_WINDOW_WEEKS,
) -> date:
    today = today_in(tz or resolve_zone(), now)
    if granularity is Granularity.DAILY:
        return today - timedelta(days=daily_days - 1)
    return today - timedelta(weeks=weekly_weeks)


def select_window(
    records: Sequence[object],
    granularity: Granularity,
    cutoff: date,
    tz: Optional[tzinfo] = None,
    limit: Optional[int] = None,
) -> List[Record]:
    """Keep records on or after ``cutoff``, newest first, at most ``limit``.

    Records whose period cannot be read are dropped. Equal periods keep their
    original relative order.
    """

    tz = tz or resolve_zone()
    dated: List[Tuple[date, Record]] = []
    for record in records:
        if not isinstance(record, dict):
            logger.debug("skipping non-object %s record", granularity.value)
            continue
        period_date = parse_period_date(record.get(granularity.period_field), tz)
        if period_date is None:
            logger.debug(
                "skipping %s record without usable %r",
                granularity.value,
                granularity.period_field,
            )
            continue
        if period_date >= cutoff:
            dated.append((period_date, record))
    dated.sort(key=lambda item: item[0], reverse=True)
    if limit is not None:
        dated = dated[:limit]
    return [record for _, record in dated]


def normalize_breakdown(raw: object) -> ModelBreakdown:
    if not isinstance(raw, dict):
        raise ParseError(f"model breakdown must be an object, got {type(raw).__name__}")
    name = raw.get("modelName")
    if not isinstance(name, str) or not name:
        name = "unknown"
    input_tokens = safe_int(raw, "inputTokens")
    output_tokens = safe_int(raw, "outputTokens")
    cache_creation = safe_int(raw, "cacheCreationTokens")
    cache_read = safe_int(raw, "cacheReadTokens")
    if raw.get("totalTokens") is not None:
        total_tokens = safe_int(raw, "totalTokens")
    else:
        total_tokens = input_tokens + output_tokens + cache_creation + cache_read
    return ModelBreakdown(
        name=name,
        family=classify_model(name),
        cost=safe_float(raw.get("cost")),
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cache_creation_tokens=cache_creation,
        cache_read_tokens=cache_read,
        total_tokens=total_tokens,
    )


def normalize_entry(raw: Record, granularity: Granularity) -> UsageEntry:
    period = raw.get(granularity.period_field)
    if not isinstance(period, str) or not period.strip():
        raise ParseError(f"{granularity.value} record is missing {granularity.period_field!r}")
    breakdowns = raw.get("modelBreakdowns")
    if not isinstance(breakdowns, list):
        breakdowns = []
    return UsageEntry(
        period=period.strip(),
        total_cost=optional_float(raw.get("totalCost")),
        input_tokens=optional_int(raw, "inputTokens"),
        output_tokens=optional_int(raw, "outputTokens"),
        total_tokens=optional_int(raw, "totalTokens"),
        models=tuple(normalize_breakdown(item) for item in breakdowns),
    )


def aggregate(
    raw: str,
    granularity: Granularity,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
    daily_days: int = DAILY_WINDOW_DAYS,
    weekly_weeks: int = WEEKLY_WINDOW_WEEKS,
) -> Tuple[UsageEntry, ...]:
    """Turn raw ``ccusage <granularity> --json`` output into normalized entries."""

    tz = tz or resolve_zone()
    records = parse_payload(raw, granularity)
    cutoff = compute_cutoff(granularity, now, tz, daily_days, weekly_weeks)
    limit = daily_days if granularity is Granularity.DAILY else None
    recent = select_window(records, granularity, cutoff, tz, limit)
    logger.debug(
        "%s window from %s keeps %s of %s records",
        granularity.value,
        cutoff.isoformat(),
        len(recent),
        len(records),
    )
    return tuple(normalize_entry(record, granularity) for record in recent)


__all__ = [
    "DAILY_WINDOW_DAYS",
    "FAMILY_RULES",
    "WEEKLY_WINDOW_WEEKS",
    "aggregate",
    "classify_model",
    "compute_cutoff",
    "normalize_breakdown",
    "normalize_entry",
    "parse_payload",
    "select_window",
]

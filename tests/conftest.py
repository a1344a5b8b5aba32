import json
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

TORONTO = ZoneInfo("America/Toronto")


@pytest.fixture
def tz():
    return TORONTO


@pytest.fixture
def now():
    """Mid-afternoon in Toronto on 2025-10-18."""
    return datetime(2025, 10, 18, 15, 0, tzinfo=TORONTO)


def make_breakdown(name, cost=0.0, **tokens):
    payload = {"modelName": name, "cost": cost}
    payload.update(tokens)
    return payload


def make_record(period, field="date", cost=1.0, models=None, **tokens):
    record = {field: period, "totalCost": cost, "modelBreakdowns": models or []}
    record.update(tokens)
    return record


def daily_payload(end, days, **record_kwargs):
    """``days`` consecutive daily records ending at ``end``, oldest first."""
    records = [
        make_record((end - timedelta(days=offset)).isoformat(), **record_kwargs)
        for offset in reversed(range(days))
    ]
    return json.dumps({"daily": records})


@pytest.fixture
def ten_day_payload():
    return daily_payload(date(2025, 10, 18), 10)

"""
Tests for menu labels and tooltips.
"""
from zoneinfo import ZoneInfo

from ccost.formatting import (
    family_dot,
    format_entry_title,
    format_model_count,
    format_period_label,
    format_summary_title,
    format_tooltip,
    format_window_total_title,
    window_title,
)
from ccost.models import (
    Granularity,
    ModelBreakdown,
    ModelFamily,
    ModelSummary,
    UsageEntry,
    WindowTotals,
)


def _entry():
    return UsageEntry(
        period="2025-10-18",
        total_cost=3.5,
        input_tokens=1500,
        output_tokens=200,
        total_tokens=1700,
        models=(
            ModelBreakdown(
                name="claude-sonnet-4-20250514",
                family=ModelFamily.SONNET,
                cost=2.0,
                input_tokens=100,
                output_tokens=50,
                cache_creation_tokens=10,
                cache_read_tokens=5,
                total_tokens=165,
            ),
            ModelBreakdown(name="gpt-4o", family=ModelFamily.OTHER, cost=1.5),
        ),
    )


class TestPeriodLabel:
    def test_date_only_is_read_as_utc_midnight(self, tz):
        # midnight UTC is the previous evening in Toronto
        assert format_period_label("2025-10-18", tz) == "Oct 17"
        assert format_period_label("2025-01-05", tz) == "Jan 4"
        assert format_period_label("2025-03-01", tz) == "Feb 28"

    def test_date_only_in_utc_or_east_keeps_day(self):
        assert format_period_label("2025-10-18", ZoneInfo("UTC")) == "Oct 18"
        assert format_period_label("2025-10-18", ZoneInfo("Pacific/Kiritimati")) == "Oct 18"

    def test_timestamp_is_converted_to_display_zone(self, tz):
        assert format_period_label("2025-10-18T02:00:00Z", tz) == "Oct 17"
        assert format_period_label("2025-10-18T02:00:00Z", ZoneInfo("UTC")) == "Oct 18"

    def test_unreadable_period_is_returned(self, tz):
        assert format_period_label("week 42", tz) == "week 42"


class TestTooltip:
    def test_header_and_model_lines(self, tz):
        assert format_tooltip(_entry(), tz) == (
            "Oct 17 — $3.50 | 1700 tokens\n"
            "\n"
            "🔵 $2.00 | Input: 100 | Output: 50 | Tokens: 165 - claude-sonnet-4-20250514\n"
            "⚫ $1.50 | Input: 0 | Output: 0 | Tokens: 0 - gpt-4o"
        )

    def test_header_only_without_models(self, tz):
        entry = UsageEntry(period="2025-10-13")
        assert format_tooltip(entry, tz) == "Oct 12 — $0.00 | 0 tokens"

    def test_family_dots(self):
        assert family_dot(ModelFamily.OPUS) == "🟢"
        assert family_dot(ModelFamily.SONNET) == "🔵"
        assert family_dot(ModelFamily.HAIKU) == "🟣"
        assert family_dot(ModelFamily.OTHER) == "⚫"


class TestTitles:
    def test_model_count(self):
        assert format_model_count(0) == "0 models"
        assert format_model_count(1) == "1 model"
        assert format_model_count(3) == "3 models"

    def test_entry_title(self, tz):
        fallback, segments = format_entry_title(_entry(), tz)
        assert fallback == "Oct 17 — 2 models — In: 1.5k • Out: 200 • Tokens: 1.7k • $3.50"
        assert segments[0] == ("Oct 17  ", "label", True)
        assert segments[-1] == ("$3.50", "cost", False)

    def test_summary_title(self):
        summary = ModelSummary(
            family=ModelFamily.OPUS,
            cost=12.0,
            input_tokens=2_000_000,
            output_tokens=500,
            total_tokens=2_500_000,
        )
        fallback, _ = format_summary_title(summary)
        assert fallback == "🟢 Opus: $12.00 • 2.50M tokens (In: 2.00M, Out: 500)"

    def test_window_total_title(self):
        totals = WindowTotals(cost=4.25, input_tokens=10, output_tokens=20, total_tokens=30)
        fallback, _ = format_window_total_title(totals, Granularity.WEEKLY)
        assert fallback == "💲 12-Week Total: $4.25 — In: 10 • Out: 20 • Tokens: 30"
        fallback, _ = format_window_total_title(totals, Granularity.DAILY)
        assert fallback.startswith("💲 7-Day Total: $4.25")

    def test_window_title(self):
        assert window_title(Granularity.WEEKLY) == "Claude Cost (12 Weeks)"
        assert window_title(Granularity.DAILY) == "Claude Cost (7 Days)"
        assert window_title(Granularity.DAILY, daily_days=1) == "Claude Cost (1 Day)"

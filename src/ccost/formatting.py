"""Strings shown in the menu: labels, tooltips and row titles.

Row builders return ``(fallback, segments)`` pairs. ``segments`` is a list of
``(text, color_key, bold)`` tuples the app turns into an attributed title when
AppKit is around; ``fallback`` is the same text as one plain string.
"""
from __future__ import annotations

from datetime import tzinfo
from typing import List, Optional, Tuple

from .models import Granularity, ModelFamily, ModelSummary, UsageEntry, WindowTotals
from .utils import display_date, format_currency, format_tokens, resolve_zone

# Independent of the host locale.
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

FAMILY_DOTS = {
    ModelFamily.OPUS: "🟢",
    ModelFamily.SONNET: "🔵",
    ModelFamily.HAIKU: "🟣",
    ModelFamily.OTHER: "⚫",
}

COLOR_LABEL = "label"
COLOR_SECONDARY = "secondary"
COLOR_TOKEN = "token"
COLOR_COST = "cost"

Segment = Tuple[str, Optional[str], bool]
StyledText = Tuple[str, List[Segment]]


def family_dot(family: ModelFamily) -> str:
    return FAMILY_DOTS.get(family, FAMILY_DOTS[ModelFamily.OTHER])


def format_period_label(period: str, tz: Optional[tzinfo] = None) -> str:
    """``"2025-10-18"`` -> ``"Oct 17"`` in Toronto; unreadable identifiers come back unchanged."""

    day = display_date(period, tz or resolve_zone())
    if day is None:
        return period
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.day}"


def format_model_count(count: int) -> str:
    return f"{count} model" if count == 1 else f"{count} models"


def format_tooltip(entry: UsageEntry, tz: Optional[tzinfo] = None) -> str:
    header = (
        f"{format_period_label(entry.period, tz)} — "
        f"{format_currency(entry.total_cost)} | {entry.total_tokens or 0} tokens"
    )
    if not entry.models:
        return header

    lines = [header, ""]
    for model in entry.models:
        lines.append(
            f"{family_dot(model.family)} {format_currency(model.cost)}"
            f" | Input: {model.input_tokens}"
            f" | Output: {model.output_tokens}"
            f" | Tokens: {model.total_tokens}"
            f" - {model.name}"
        )
    return "\n".join(lines)


def format_entry_title(entry: UsageEntry, tz: Optional[tzinfo] = None) -> StyledText:
    label = format_period_label(entry.period, tz)
    models = format_model_count(len(entry.models))
    inputs = f"In: {format_tokens(entry.input_tokens or 0)}"
    outputs = f"Out: {format_tokens(entry.output_tokens or 0)}"
    tokens = f"Tokens: {format_tokens(entry.total_tokens or 0)}"
    cost = format_currency(entry.total_cost)
    segments: List[Segment] = [
        (f"{label}  ", COLOR_LABEL, True),
        (f"{models}  ", COLOR_SECONDARY, False),
        (f"{inputs} • {outputs} • ", COLOR_SECONDARY, False),
        (f"{tokens} • ", COLOR_TOKEN, False),
        (cost, COLOR_COST, False),
    ]
    fallback = f"{label} — {models} — {inputs} • {outputs} • {tokens} • {cost}"
    return fallback, segments


def format_summary_title(summary: ModelSummary) -> StyledText:
    dot = family_dot(summary.family)
    tokens = f"{format_tokens(summary.total_tokens)} tokens"
    detail = (
        f" (In: {format_tokens(summary.input_tokens)}"
        f", Out: {format_tokens(summary.output_tokens)})"
    )
    cost = format_currency(summary.cost)
    segments: List[Segment] = [
        (f"{dot} {summary.name}: ", COLOR_LABEL, True),
        (cost, COLOR_COST, False),
        (" • ", None, False),
        (tokens, COLOR_TOKEN, False),
        (detail, COLOR_SECONDARY, False),
    ]
    return f"{dot} {summary.name}: {cost} • {tokens}{detail}", segments


def window_span(granularity: Granularity, daily_days: int = 7, weekly_weeks: int = 12) -> str:
    if granularity is Granularity.DAILY:
        return f"{daily_days} Day" if daily_days == 1 else f"{daily_days} Days"
    return f"{weekly_weeks} Week" if weekly_weeks == 1 else f"{weekly_weeks} Weeks"


def window_title(granularity: Granularity, daily_days: int = 7, weekly_weeks: int = 12) -> str:
    return f"Claude Cost ({window_span(granularity, daily_days, weekly_weeks)})"


def format_window_total_title(
    totals: WindowTotals,
    granularity: Granularity,
    daily_days: int = 7,
    weekly_weeks: int = 12,
) -> StyledText:
    count = daily_days if granularity is Granularity.DAILY else weekly_weeks
    unit = "Day" if granularity is Granularity.DAILY else "Week"
    label = f"{count}-{unit} Total: "
    cost = format_currency(totals.cost)
    metrics = (
        f"In: {format_tokens(totals.input_tokens)}"
        f" • Out: {format_tokens(totals.output_tokens)}"
    )
    tokens = f"Tokens: {format_tokens(totals.total_tokens)}"
    segments: List[Segment] = [
        (f"💲 {label}", COLOR_LABEL, True),
        (cost, COLOR_COST, False),
        (f"  {metrics} • ", COLOR_SECONDARY, False),
        (tokens, COLOR_TOKEN, False),
    ]
    return f"💲 {label}{cost} — {metrics} • {tokens}", segments


__all__ = [
    "FAMILY_DOTS",
    "MONTH_ABBREVIATIONS",
    "family_dot",
    "format_entry_title",
    "format_model_count",
    "format_period_label",
    "format_summary_title",
    "format_tooltip",
    "format_window_total_title",
    "window_span",
    "window_title",
]

from __future__ import annotations

from typing import Dict, Iterable, Tuple

from .aggregator import classify_model
from .models import ModelFamily, ModelSummary, UsageEntry, WindowTotals

SUMMARY_ORDER: Tuple[ModelFamily, ...] = (
    ModelFamily.OPUS,
    ModelFamily.SONNET,
    ModelFamily.HAIKU,
    ModelFamily.OTHER,
)


def summarize_models(entries: Iterable[UsageEntry]) -> Tuple[ModelSummary, ...]:
    """Roll every model breakdown into one row per family.

    Families are re-derived from the model names. Rows without tokens are
    left out; the rest keep the opus, sonnet, haiku, other order.
    """

    buckets: Dict[ModelFamily, ModelSummary] = {
        family: ModelSummary(family=family) for family in SUMMARY_ORDER
    }
    for entry in entries:
        for model in entry.models:
            buckets[classify_model(model.name)].add(model)
    return tuple(
        buckets[family] for family in SUMMARY_ORDER if buckets[family].total_tokens > 0
    )


def window_totals(entries: Iterable[UsageEntry]) -> WindowTotals:
    totals = WindowTotals()
    for entry in entries:
        totals.cost += entry.total_cost or 0.0
        totals.input_tokens += entry.input_tokens or 0
        totals.output_tokens += entry.output_tokens or 0
        totals.total_tokens += entry.total_tokens or 0
    return totals


__all__ = ["SUMMARY_ORDER", "summarize_models", "window_totals"]

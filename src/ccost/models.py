from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class Granularity(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"

    @property
    def payload_key(self) -> str:
        return self.value

    @property
    def period_field(self) -> str:
        return "date" if self is Granularity.DAILY else "week"


class ModelFamily(str, Enum):
    OPUS = "opus"
    SONNET = "sonnet"
    HAIKU = "haiku"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class ModelBreakdown:
    name: str
    family: ModelFamily = ModelFamily.OTHER
    cost: float = 0.0
    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class UsageEntry:
    period: str
    total_cost: Optional[float] = None
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    models: Tuple[ModelBreakdown, ...] = ()


@dataclass
class ModelSummary:
    family: ModelFamily
    cost: float = 0.0
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    @property
    def name(self) -> str:
        return self.family.display_name

    def add(self, breakdown: ModelBreakdown) -> None:
        self.cost += breakdown.cost
        self.input_tokens += breakdown.input_tokens
        self.output_tokens += breakdown.output_tokens
        self.total_tokens += breakdown.total_tokens


@dataclass
class WindowTotals:
    cost: float = 0.0
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class UsageSnapshot:
    granularity: Granularity
    entries: Tuple[UsageEntry, ...]
    model_summaries: Tuple[ModelSummary, ...]
    totals: WindowTotals
    refreshed_at: datetime = field(compare=False, default_factory=datetime.now)


__all__ = [
    "Granularity",
    "ModelBreakdown",
    "ModelFamily",
    "ModelSummary",
    "UsageEntry",
    "UsageSnapshot",
    "WindowTotals",
]

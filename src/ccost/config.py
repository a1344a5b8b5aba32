from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .models import Granularity
from .utils import DEFAULT_TIMEZONE

CONFIG_PATH = Path(
    os.getenv(
        "CCOST_CONFIG",
        Path.home() / ".config" / "ccost" / "config.json",
    )
)

DEFAULT_CONFIG = {
    "ccusage_command": "npx ccusage@latest",
    "granularity": Granularity.WEEKLY.value,
    "refresh_interval": 300.0,
    "display_timezone": DEFAULT_TIMEZONE,
    "daily_window_days": 7,
    "weekly_window_weeks": 12,
    "show_model_summary": True,
}


@dataclass
class CcostConfig:
    ccusage_command: str = DEFAULT_CONFIG["ccusage_command"]
    granularity: Granularity = Granularity.WEEKLY
    refresh_interval: float = DEFAULT_CONFIG["refresh_interval"]
    display_timezone: str = DEFAULT_CONFIG["display_timezone"]
    daily_window_days: int = DEFAULT_CONFIG["daily_window_days"]
    weekly_window_weeks: int = DEFAULT_CONFIG["weekly_window_weeks"]
    show_model_summary: bool = DEFAULT_CONFIG["show_model_summary"]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CcostConfig":
        command = data.get("ccusage_command")
        if not isinstance(command, str) or not command.strip():
            command = DEFAULT_CONFIG["ccusage_command"]
        refresh_interval = float(
            data.get("refresh_interval", DEFAULT_CONFIG["refresh_interval"])
        )
        display_timezone = data.get("display_timezone")
        if not isinstance(display_timezone, str) or not _is_known_timezone(display_timezone):
            display_timezone = DEFAULT_CONFIG["display_timezone"]
        daily_window_days = int(
            data.get("daily_window_days", DEFAULT_CONFIG["daily_window_days"])
        )
        weekly_window_weeks = int(
            data.get("weekly_window_weeks", DEFAULT_CONFIG["weekly_window_weeks"])
        )
        show_model_summary = bool(
            data.get("show_model_summary", DEFAULT_CONFIG["show_model_summary"])
        )

        return cls(
            ccusage_command=command.strip(),
            granularity=_parse_granularity(data.get("granularity")),
            refresh_interval=max(refresh_interval, 10.0),
            display_timezone=display_timezone,
            daily_window_days=max(daily_window_days, 1),
            weekly_window_weeks=max(weekly_window_weeks, 1),
            show_model_summary=show_model_summary,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ccusage_command": self.ccusage_command,
            "granularity": self.granularity.value,
            "refresh_interval": self.refresh_interval,
            "display_timezone": self.display_timezone,
            "daily_window_days": self.daily_window_days,
            "weekly_window_weeks": self.weekly_window_weeks,
            "show_model_summary": self.show_model_summary,
        }


def ensure_config_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def load_config(path: Path = CONFIG_PATH) -> CcostConfig:
    if path.exists():
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError):
            data = {}
    else:
        data = {}
    if not isinstance(data, dict):
        data = {}
    try:
        return CcostConfig.from_dict(data)
    except (TypeError, ValueError):
        return CcostConfig()


def save_config(config: CcostConfig, path: Path = CONFIG_PATH) -> None:
    payload = config.to_dict()
    ensure_config_dir(path)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=True)


def _parse_granularity(value: object) -> Granularity:
    try:
        return Granularity(value)
    except ValueError:
        return Granularity(DEFAULT_CONFIG["granularity"])


def _is_known_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


__all__ = ["CcostConfig", "load_config", "save_config", "CONFIG_PATH", "DEFAULT_CONFIG"]

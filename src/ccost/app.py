from __future__ import annotations

import subprocess
import time
from typing import Dict, List, Optional

import rumps

try:
    import AppKit
    from Foundation import NSBundle
except ImportError:  # pragma: no cover - macOS only integration
    AppKit = None
    NSBundle = None

if __package__ in (None, ""):
    # Handle execution as a top-level script inside the py2app bundle.
    from ccost.config import CONFIG_PATH, CcostConfig, load_config, save_config
    from ccost.formatting import (
        format_entry_title,
        format_summary_title,
        format_tooltip,
        format_window_total_title,
        window_title,
    )
    from ccost.models import Granularity, UsageEntry, UsageSnapshot
    from ccost.usage_tracker import UsageTracker
    from ccost.utils import format_currency
else:
    from .config import CONFIG_PATH, CcostConfig, load_config, save_config
    from .formatting import (
        format_entry_title,
        format_summary_title,
        format_tooltip,
        format_window_total_title,
        window_title,
    )
    from .models import Granularity, UsageEntry, UsageSnapshot
    from .usage_tracker import UsageTracker
    from .utils import format_currency

APP_NAME = "Claude Cost"
IDLE_TITLE = "💲"
POLL_INTERVAL = 0.25
MIN_LOADING_DISPLAY_SECONDS = 0.8

if AppKit is not None:  # pragma: no branch - macOS only styling
    def _nscolor(name: str, default):
        attr = getattr(AppKit.NSColor, name, None)
        return attr() if attr else default


    _MENU_FONT = AppKit.NSFont.menuFontOfSize_(0) or AppKit.NSFont.systemFontOfSize_(13)
    _MENU_BOLD_FONT = AppKit.NSFont.boldSystemFontOfSize_(_MENU_FONT.pointSize())
    _LABEL = _nscolor("labelColor", AppKit.NSColor.blackColor())
    COLORS = {
        "label": _LABEL,
        "secondary": _nscolor("secondaryLabelColor", AppKit.NSColor.grayColor()),
        "token": _nscolor("systemBlueColor", _LABEL),
        "cost": _nscolor("systemGreenColor", _LABEL),
    }
else:  # pragma: no cover - non-mac fallback
    _MENU_FONT = None
    _MENU_BOLD_FONT = None
    COLORS = {}


class CcostApp(rumps.App):
    def __init__(self, config: Optional[CcostConfig] = None):
        self.config = config or load_config()
        self.tracker = UsageTracker(self.config)

        super().__init__(APP_NAME, title=IDLE_TITLE, quit_button=None)

        self.header_item = rumps.MenuItem(self._window_title(), callback=None)
        self.status_item = rumps.MenuItem("Loading usage…", callback=None)
        self.summary_header_item = rumps.MenuItem("Summary", callback=None)
        self.daily_item = rumps.MenuItem("Daily", callback=self.show_daily)
        self.weekly_item = rumps.MenuItem("Weekly", callback=self.show_weekly)
        self.refresh_item = rumps.MenuItem("Refresh Now", callback=self.refresh_now)
        self.open_config_item = rumps.MenuItem("Open Config Folder…", callback=self.open_config)
        self.quit_item = rumps.MenuItem("Quit", callback=rumps.quit_application)

        self.entry_lookup: Dict[str, UsageEntry] = {}
        self._loading_frames = ["⏳", "⌛"]
        self._loading_frame_index = 0
        self._loading_started_at = time.monotonic()
        self._pending_error: Optional[BaseException] = None
        self._result_ready = False
        self._refresh_queued = False

        self._render(None)

        self.refresh_timer = rumps.Timer(self.refresh_timer_tick, self.config.refresh_interval)
        self.refresh_timer.start()
        self._initial_timer = rumps.Timer(self._initial_refresh, 0.1)
        self._initial_timer.start()
        self._poll_timer = rumps.Timer(self._poll_refresh, POLL_INTERVAL)
        self._poll_timer.start()

    # ------------------------------------------------------------------
    # Refresh cycle
    # ------------------------------------------------------------------
    def refresh_timer_tick(self, _):
        self._start_refresh()

    def _initial_refresh(self, timer: rumps.Timer) -> None:
        timer.stop()
        self._start_refresh()

    def _start_refresh(self) -> None:
        if not self.tracker.refresh_async(self._on_refresh_done):
            return
        self._loading_started_at = time.monotonic()
        self._loading_frame_index = 0
        self.title = self._loading_frames[0]
        if self.tracker.snapshot is None:
            self._render(None)

    def _on_refresh_done(
        self, snapshot: Optional[UsageSnapshot], error: Optional[BaseException]
    ) -> None:
        # Runs on the worker thread; the poll timer does the rendering.
        self._pending_error = error
        self._result_ready = True

    def _poll_refresh(self, _):
        if self.tracker.is_loading():
            self._loading_frame_index = (self._loading_frame_index + 1) % len(self._loading_frames)
            self.title = self._loading_frames[self._loading_frame_index]
            return
        if not self._result_ready:
            return
        if time.monotonic() - self._loading_started_at < MIN_LOADING_DISPLAY_SECONDS:
            return
        error, self._pending_error = self._pending_error, None
        self._result_ready = False
        if error is not None:
            rumps.notification(APP_NAME, "Error", str(error))
        self._render(self.tracker.snapshot)
        if self._refresh_queued:
            self._refresh_queued = False
            self._start_refresh()

    # ------------------------------------------------------------------
    # Menu rendering
    # ------------------------------------------------------------------
    def _window_title(self) -> str:
        return window_title(
            self.config.granularity,
            self.config.daily_window_days,
            self.config.weekly_window_weeks,
        )

    def _render(self, snapshot: Optional[UsageSnapshot]) -> None:
        self.menu.clear()
        self.entry_lookup.clear()
        self.header_item.title = self._window_title()
        self.menu.add(self.header_item)

        if snapshot is None:
            if self.tracker.is_loading():
                self.status_item.title = "Loading usage…"
            else:
                error = self.tracker.last_error
                self.status_item.title = f"⚠️ {error}" if error else "No usage loaded"
            self.menu.add(self.status_item)
            self.title = self._loading_frames[0] if self.tracker.is_loading() else IDLE_TITLE
        else:
            self._populate_entries(snapshot)
            self.title = f"{IDLE_TITLE} {format_currency(snapshot.totals.cost)}"

        self.menu.add(rumps.separator)
        self.daily_item.state = int(self.config.granularity is Granularity.DAILY)
        self.weekly_item.state = int(self.config.granularity is Granularity.WEEKLY)
        self.menu.add(self.daily_item)
        self.menu.add(self.weekly_item)
        self.menu.add(rumps.separator)
        self.menu.add(self.refresh_item)
        self.menu.add(self.open_config_item)
        self.menu.add(self.quit_item)

    def _populate_entries(self, snapshot: UsageSnapshot) -> None:
        tz = self.tracker.timezone
        if not snapshot.entries:
            self.menu.add(rumps.MenuItem("No usage in this window", callback=None))
            return
        for entry in snapshot.entries:
            fallback, segments = format_entry_title(entry, tz)
            item = rumps.MenuItem(fallback, callback=self._on_entry_clicked)
            item._period = entry.period  # type: ignore[attr-defined]
            _apply_menu_style(item, fallback, segments)
            _apply_tooltip(item, format_tooltip(entry, tz))
            self.entry_lookup[entry.period] = entry
            self.menu.add(item)

        self.menu.add(rumps.separator)
        self.menu.add(self.summary_header_item)
        if self.config.show_model_summary:
            for summary in snapshot.model_summaries:
                fallback, segments = format_summary_title(summary)
                item = rumps.MenuItem(fallback, callback=None)
                _apply_menu_style(item, fallback, segments)
                self.menu.add(item)
        fallback, segments = format_window_total_title(
            snapshot.totals,
            snapshot.granularity,
            self.config.daily_window_days,
            self.config.weekly_window_weeks,
        )
        total_item = rumps.MenuItem(fallback, callback=None)
        _apply_menu_style(total_item, fallback, segments)
        self.menu.add(total_item)

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------
    def refresh_now(self, _):
        self._start_refresh()

    def show_daily(self, _):
        self._switch_granularity(Granularity.DAILY)

    def show_weekly(self, _):
        self._switch_granularity(Granularity.WEEKLY)

    def _switch_granularity(self, granularity: Granularity) -> None:
        if granularity is self.config.granularity:
            return
        self.tracker.set_granularity(granularity)
        save_config(self.config)
        self._render(None)
        if self.tracker.is_loading():
            # The in-flight result belongs to the old window.
            self._refresh_queued = True
            return
        self._start_refresh()

    def open_config(self, _):
        save_config(self.config)
        subprocess.run([
            "open",
            str(CONFIG_PATH.parent),
        ], check=False)

    def _on_entry_clicked(self, sender: rumps.MenuItem):
        period = getattr(sender, "_period", None)
        entry = self.entry_lookup.get(period)
        if not entry:
            return
        rumps.alert(title=APP_NAME, message=format_tooltip(entry, self.tracker.timezone))


def _apply_menu_style(menu_item: rumps.MenuItem, fallback: str, segments: List[tuple]) -> None:
    menu_item.title = fallback
    if AppKit is None or not hasattr(menu_item, "_menuitem") or _MENU_FONT is None:
        return
    try:
        attributed = AppKit.NSMutableAttributedString.alloc().initWithString_("")
        for text, color_key, bold in segments:
            attrs = {
                AppKit.NSFontAttributeName: _MENU_BOLD_FONT if bold else _MENU_FONT
            }
            color = COLORS.get(color_key) if color_key else None
            if color is not None:
                attrs[AppKit.NSForegroundColorAttributeName] = color
            fragment = AppKit.NSAttributedString.alloc().initWithString_attributes_(
                text,
                attrs,
            )
            attributed.appendAttributedString_(fragment)
        menu_item._menuitem.setAttributedTitle_(attributed)
    except Exception:
        menu_item.title = fallback


def _apply_tooltip(menu_item: rumps.MenuItem, tooltip: str) -> None:
    if AppKit is None or not hasattr(menu_item, "_menuitem"):
        return
    menu_item._menuitem.setToolTip_(tooltip)


def main() -> None:
    if AppKit is not None and NSBundle is not None:
        info = NSBundle.mainBundle().infoDictionary()
        if info is not None:
            info["LSUIElement"] = "1"
        ns_app = AppKit.NSApplication.sharedApplication()
        ns_app.setActivationPolicy_(AppKit.NSApplicationActivationPolicyAccessory)

    app = CcostApp()
    app.run()


__all__ = ["main", "CcostApp"]


if __name__ == "__main__":
    main()

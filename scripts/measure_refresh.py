import time

from ccost.config import load_config
from ccost.usage_tracker import UsageTracker


def main() -> None:
    config = load_config()
    tracker = UsageTracker(config)

    t0 = time.perf_counter()
    snapshot = tracker.refresh()
    elapsed = time.perf_counter() - t0

    print(
        f"{snapshot.granularity.value} refresh: {elapsed:.3f}s, "
        f"entries={len(snapshot.entries)}, families={len(snapshot.model_summaries)}"
    )
    print(
        f"totals → cost=${snapshot.totals.cost:.2f}, tokens={snapshot.totals.total_tokens}"
    )


if __name__ == "__main__":
    main()

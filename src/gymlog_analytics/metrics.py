"""In-memory refresh metrics.

Counters live in plain dicts; refreshes run on a single event loop.
"""

import time

_start_time = time.monotonic()

_REFRESH_OUTCOMES = ("completed", "discarded", "failed")

_refreshes: dict[str, int] = dict.fromkeys(_REFRESH_OUTCOMES, 0)
_views: dict[str, dict] = {}


def _new_view_stats() -> dict:
    return {"runs": 0, "failures": 0, "total_ms": 0.0, "max_ms": 0.0}


def record_view_run(view: str, duration_ms: float, success: bool) -> None:
    """Record one view computation and how long it took."""
    stats = _views.setdefault(view, _new_view_stats())
    stats["runs"] += 1
    stats["total_ms"] += duration_ms
    stats["max_ms"] = max(stats["max_ms"], duration_ms)
    if not success:
        stats["failures"] += 1


def record_refresh(outcome: str) -> None:
    if outcome not in _refreshes:
        raise ValueError(f"Unknown refresh outcome {outcome!r}")
    _refreshes[outcome] += 1


def get_metrics() -> dict:
    """Snapshot of the counters, with mean view duration."""
    views = {}
    for name, stats in _views.items():
        views[name] = {
            **stats,
            "mean_ms": stats["total_ms"] / stats["runs"] if stats["runs"] else 0.0,
        }
    return {
        "uptime_seconds": round(time.monotonic() - _start_time, 1),
        "refreshes": dict(_refreshes),
        "views": views,
    }


def reset_metrics() -> None:
    for outcome in _REFRESH_OUTCOMES:
        _refreshes[outcome] = 0
    _views.clear()

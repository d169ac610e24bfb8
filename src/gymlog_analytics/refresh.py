"""Fetch-then-aggregate dashboard refresh.

Each refresh takes one snapshot of the session log and runs every registered
view over it: period-scoped views see the window subset, log-scoped views
the full log. Views are recomputed from scratch on every request.

Refreshes can overlap (view entry, pull-to-refresh and a period switch all
trigger one). Every request gets a sequence number; a request that finishes
fetching after a newer one has started is discarded, so the last request
always wins.
"""

import logging
import time
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timezone
from typing import Any

from . import handlers  # noqa: F401
from .config import Config
from .handlers.exercise_history import exercise_stats
from .metrics import record_refresh, record_view_run
from .models import WorkoutSession
from .period import filter_by_period, window_duration
from .registry import ViewContext, ViewFn, get_view_handlers
from .store import SessionStore, SessionStoreError
from .taxonomy import DEFAULT_TAXONOMY, MuscleGroupTaxonomy, load_taxonomy
from .views import DashboardSnapshot

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _run_views(
    views: list[tuple[str, ViewFn]],
    sessions: Sequence[WorkoutSession],
    ctx: ViewContext,
) -> dict[str, Any]:
    results: dict[str, Any] = {}
    for name, handler in views:
        t0 = time.monotonic()
        try:
            results[name] = handler(sessions, ctx)
        except Exception:
            duration_ms = (time.monotonic() - t0) * 1000
            record_view_run(name, duration_ms, success=False)
            logger.exception("View handler %s failed for view=%s", handler.__name__, name)
            raise
        duration_ms = (time.monotonic() - t0) * 1000
        record_view_run(name, duration_ms, success=True)
    return results


def compute_snapshot(
    sessions: Iterable[WorkoutSession],
    ctx: ViewContext,
    *,
    exercises: Sequence[str] | None = None,
    request_id: int = 0,
) -> DashboardSnapshot:
    """Compute every view over one immutable snapshot of the log.

    ``exercises`` selects the per-exercise stats to build; by default every
    exercise logged within the window, in first-seen order.
    """
    window_duration(ctx.window)
    log = tuple(sessions)
    subset = tuple(filter_by_period(log, ctx.now, ctx.window))

    period_views = _run_views(get_view_handlers("period"), subset, ctx)
    log_views = _run_views(get_view_handlers("log"), log, ctx)

    names: tuple[str, ...] = period_views["exercise_names"]
    selected = names if exercises is None else tuple(dict.fromkeys(exercises))
    stats = tuple(exercise_stats(subset, name, ctx.now) for name in selected)

    return DashboardSnapshot(
        request_id=request_id,
        generated_at=ctx.now,
        window=ctx.window,
        total_sessions_in_log=len(log),
        summary=period_views["summary"],
        distribution=period_views["distribution"],
        exercise_names=names,
        exercise_stats=stats,
        muscle_groups=period_views["muscle_groups"],
        personal_records=log_views["personal_records"],
        weekly_progress=log_views["weekly_progress"],
    )


class DashboardRefresher:
    """Runs refresh requests against a store, keeping only the newest result."""

    def __init__(
        self,
        store: SessionStore,
        *,
        taxonomy: MuscleGroupTaxonomy = DEFAULT_TAXONOMY,
        nominal_session_minutes: float = 60.0,
        weekly_target: int = 5,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.taxonomy = taxonomy
        self.nominal_session_minutes = nominal_session_minutes
        self.weekly_target = weekly_target
        self._clock = clock
        self._sequence = 0
        self._latest: DashboardSnapshot | None = None

    @classmethod
    def from_config(cls, config: Config, store: SessionStore) -> "DashboardRefresher":
        return cls(
            store,
            taxonomy=load_taxonomy(config.taxonomy_path),
            nominal_session_minutes=config.session_minutes,
            weekly_target=config.weekly_target,
        )

    @property
    def latest(self) -> DashboardSnapshot | None:
        """Most recent snapshot that was not superseded."""
        return self._latest

    @property
    def sequence(self) -> int:
        return self._sequence

    async def refresh(
        self,
        window: str,
        *,
        exercises: Sequence[str] | None = None,
        now: datetime | None = None,
    ) -> DashboardSnapshot | None:
        """Fetch the log and recompute every view.

        Returns None when a newer refresh started while this one was
        fetching. Store failures raise SessionStoreError unless the request
        has already been superseded.
        """
        window_duration(window)
        self._sequence += 1
        request_id = self._sequence
        log_extra = {"gymlog_request_id": request_id, "gymlog_window": window}

        try:
            fetched = await self.store.list()
        except SessionStoreError:
            if request_id != self._sequence:
                record_refresh("discarded")
                logger.warning(
                    "Stale refresh %d failed after being superseded by %d",
                    request_id,
                    self._sequence,
                    extra=log_extra,
                )
                return None
            record_refresh("failed")
            logger.exception("Refresh %d failed to fetch sessions", request_id, extra=log_extra)
            raise

        if request_id != self._sequence:
            record_refresh("discarded")
            logger.info(
                "Discarding stale refresh %d (latest=%d)",
                request_id,
                self._sequence,
                extra=log_extra,
            )
            return None

        t0 = time.monotonic()
        ctx = ViewContext(
            now=now or self._clock(),
            window=window,
            taxonomy=self.taxonomy,
            nominal_session_minutes=self.nominal_session_minutes,
            weekly_target=self.weekly_target,
        )
        snapshot = compute_snapshot(
            tuple(fetched), ctx, exercises=exercises, request_id=request_id
        )
        self._latest = snapshot
        record_refresh("completed")
        logger.info(
            "Refresh %d completed (window=%s, sessions=%d, in_window=%d, duration_ms=%.1f)",
            request_id,
            window,
            snapshot.total_sessions_in_log,
            snapshot.summary.total_sessions,
            (time.monotonic() - t0) * 1000,
            extra=log_extra,
        )
        return snapshot

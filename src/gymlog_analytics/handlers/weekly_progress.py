"""Weekly goal progress and the most recent session.

The week starts on Sunday at 00:00 UTC and is a calendar week, unlike the
trailing windows used by the period views.
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from ..models import WorkoutSession
from ..registry import ViewContext, view_handler
from ..utils import start_of_week
from ..views import LastSessionSummary, WeeklyProgressView

logger = logging.getLogger(__name__)


def _last_session(sessions: Sequence[WorkoutSession]) -> LastSessionSummary | None:
    if not sessions:
        return None
    # max() keeps the first of equal timestamps
    latest = max(sessions, key=lambda s: s.timestamp)
    return LastSessionSummary(
        id=latest.id,
        timestamp=latest.timestamp,
        type_label=latest.type_label,
        exercises=tuple((entry.name, len(entry.sets)) for entry in latest.exercises),
    )


def weekly_progress(
    sessions: Sequence[WorkoutSession], now: datetime, target: int
) -> WeeklyProgressView:
    week_start = start_of_week(now)
    completed = sum(1 for s in sessions if s.timestamp >= week_start)
    ratio = min(completed / target, 1.0) if target > 0 else 0.0
    return WeeklyProgressView(
        week_start=week_start,
        completed=completed,
        target=target,
        ratio=ratio,
        last_session=_last_session(sessions),
    )


@view_handler("weekly_progress", scope="log", view_meta={
    "description": "Sessions logged this calendar week against the weekly target",
    "output_schema": {
        "week_start": "ISO 8601 datetime — Sunday 00:00 UTC",
        "completed": "integer",
        "target": "integer",
        "ratio": "number — completed / target, capped at 1",
        "last_session": {
            "id": "string",
            "timestamp": "ISO 8601 datetime",
            "type_label": "string",
            "exercises": [{"name": "string", "sets": "integer"}],
        },
    },
})
def build_weekly_progress(
    sessions: Sequence[WorkoutSession], ctx: ViewContext
) -> WeeklyProgressView:
    view = weekly_progress(sessions, ctx.now, ctx.weekly_target)
    logger.debug("Computed weekly progress (%d/%d)", view.completed, view.target)
    return view

"""Per-exercise time series and statistics.

Sessions are sorted by timestamp before the scan (the store gives no order
guarantee), so "first encountered" means earliest logged. Each session that
contains the exercise contributes one history point: its heaviest counted
set. The personal best is picked from individual sets, not from the
per-session points.
"""

import logging
from collections.abc import Sequence
from datetime import date, datetime, timedelta

from ..models import WorkoutSession
from ..registry import ViewContext, view_handler
from ..utils import as_utc, utc_day
from ..views import ExerciseStatsView, HistoryPoint, PersonalBest

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30


def exercise_names(sessions: Sequence[WorkoutSession]) -> list[str]:
    """Distinct exercise names across sessions, in first-seen order."""
    names: dict[str, None] = {}
    for session in sessions:
        for name in session.exercise_names():
            names.setdefault(name, None)
    return list(names)


def _frequency_per_month(days: set[date], first_seen: datetime, now: datetime) -> float:
    elapsed_days = (as_utc(now) - first_seen) / timedelta(days=1)
    # A first occurrence today (or in the future) counts as one elapsed day.
    elapsed_days = max(elapsed_days, 1.0)
    return round(len(days) / elapsed_days * DAYS_PER_MONTH, 1)


def _progress_percent(history: list[HistoryPoint]) -> float | None:
    if len(history) < 2:
        return None
    first = history[0].weight
    if first <= 0:
        return None
    return round((history[-1].weight - first) / first * 100, 1)


def exercise_stats(
    sessions: Sequence[WorkoutSession], exercise: str, now: datetime
) -> ExerciseStatsView:
    ordered = sorted(sessions, key=lambda s: s.timestamp)

    history: list[HistoryPoint] = []
    best: PersonalBest | None = None
    reps_total = 0
    reps_count = 0
    total_volume = 0.0
    days: set[date] = set()
    first_seen: datetime | None = None

    for session in ordered:
        entries = session.entries_for(exercise)
        if not entries:
            continue
        if first_seen is None:
            first_seen = session.timestamp
        days.add(utc_day(session.timestamp))

        session_weight = 0.0
        for entry in entries:
            for set_entry in entry.sets:
                weight = set_entry.counted_weight
                reps = set_entry.counted_reps
                if weight is not None:
                    session_weight = max(session_weight, weight)
                    if weight > (best.weight if best is not None else 0.0):
                        best = PersonalBest(
                            weight=weight, reps=reps or 0, date=session.timestamp
                        )
                if reps is not None:
                    reps_total += reps
                    reps_count += 1
                total_volume += set_entry.volume
        history.append(HistoryPoint(date=session.timestamp, weight=session_weight))

    if first_seen is None:
        return ExerciseStatsView(exercise=exercise)

    return ExerciseStatsView(
        exercise=exercise,
        history=tuple(history),
        max_weight=max(point.weight for point in history),
        last_weight=history[-1].weight,
        personal_best=best,
        average_reps=round(reps_total / reps_count, 1) if reps_count else 0.0,
        total_volume=total_volume,
        frequency_per_month=_frequency_per_month(days, first_seen, now),
        progress_percent=_progress_percent(history),
    )


@view_handler("exercise_names", scope="period", view_meta={
    "description": "Exercises logged in the window, in first-seen order",
    "output_schema": ["string"],
})
def build_exercise_names(
    sessions: Sequence[WorkoutSession], ctx: ViewContext
) -> tuple[str, ...]:
    return tuple(exercise_names(sessions))

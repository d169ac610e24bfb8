"""Period summary: session count, favourite and heaviest exercise, volume.

Ties between equally frequent (or equally heavy) exercises go to the one met
first while scanning sessions left to right in the order given.
"""

import logging
from collections.abc import Sequence

from ..models import WorkoutSession
from ..registry import ViewContext, view_handler
from ..utils import round_half_up
from ..views import NOT_AVAILABLE, SummaryView

logger = logging.getLogger(__name__)

DEFAULT_SESSION_MINUTES = 60.0


def _first_max(values: dict[str, float]) -> str | None:
    best_name: str | None = None
    best_value: float | None = None
    for name, value in values.items():
        if best_value is None or value > best_value:
            best_name = name
            best_value = value
    return best_name


def summarize(
    sessions: Sequence[WorkoutSession],
    nominal_session_minutes: float = DEFAULT_SESSION_MINUTES,
) -> SummaryView:
    if not sessions:
        return SummaryView()

    frequency: dict[str, int] = {}
    heaviest_by_exercise: dict[str, float] = {}
    total_volume = 0.0

    for session in sessions:
        for name in session.exercise_names():
            frequency[name] = frequency.get(name, 0) + 1
        for entry in session.exercises:
            for set_entry in entry.sets:
                total_volume += set_entry.volume
            weight = entry.max_counted_weight
            # bodyweight sets logged as 0 kg never make an exercise "heaviest"
            if weight is None or weight <= 0:
                continue
            current = heaviest_by_exercise.get(entry.name)
            if current is None or weight > current:
                heaviest_by_exercise[entry.name] = weight

    most_frequent = _first_max(frequency)
    heaviest = _first_max(heaviest_by_exercise)
    # Duration is not recorded per session; every session counts as nominal.
    total_minutes = nominal_session_minutes * len(sessions)

    return SummaryView(
        total_sessions=len(sessions),
        exercise_frequency=tuple(frequency.items()),
        most_frequent_exercise=NOT_AVAILABLE if most_frequent is None else most_frequent,
        heaviest_exercise=NOT_AVAILABLE if heaviest is None else heaviest,
        heaviest_weight_kg=0.0 if heaviest is None else heaviest_by_exercise[heaviest],
        average_duration_minutes=total_minutes / len(sessions),
        total_volume_kg=round_half_up(total_volume),
    )


@view_handler("summary", scope="period", view_meta={
    "description": "Counts and extremes over the selected window",
    "output_schema": {
        "total_sessions": "integer",
        "exercise_frequency": {"<exercise>": "integer — sessions containing it"},
        "most_frequent_exercise": "string — 'N/A' when empty",
        "heaviest_exercise": "string — 'N/A' when no weights logged",
        "heaviest_weight_kg": "number",
        "average_duration_minutes": "number — nominal per-session duration",
        "total_volume_kg": "integer — sum(weight_kg * reps), rounded",
    },
})
def build_summary(sessions: Sequence[WorkoutSession], ctx: ViewContext) -> SummaryView:
    view = summarize(sessions, ctx.nominal_session_minutes)
    logger.debug(
        "Computed summary (sessions=%d, most_frequent=%s, heaviest=%s)",
        view.total_sessions,
        view.most_frequent_exercise,
        view.heaviest_exercise,
    )
    return view

"""Muscle-group rollup of training volume.

Exercises the taxonomy does not know are reported once per call at debug
level and left out of the rollup. Groups that end up with no volume are
omitted rather than zero-filled.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..models import WorkoutSession
from ..registry import ViewContext, view_handler
from ..taxonomy import UNCLASSIFIED, MuscleGroupTaxonomy
from ..utils import round_half_up
from ..views import MuscleGroupView

logger = logging.getLogger(__name__)


@dataclass
class _GroupTotals:
    volume: float = 0.0
    frequency: int = 0
    exercise_names: dict[str, None] = field(default_factory=dict)


def muscle_group_rollup(
    sessions: Sequence[WorkoutSession], taxonomy: MuscleGroupTaxonomy
) -> list[MuscleGroupView]:
    totals: dict[str, _GroupTotals] = {}
    unclassified: dict[str, None] = {}

    for session in sessions:
        for entry in session.exercises:
            group = taxonomy.classify(entry.name)
            if group == UNCLASSIFIED:
                unclassified.setdefault(entry.name, None)
                continue
            bucket = totals.setdefault(group, _GroupTotals())
            bucket.frequency += 1
            bucket.exercise_names.setdefault(entry.name, None)
            for set_entry in entry.sets:
                bucket.volume += set_entry.volume

    if unclassified:
        logger.debug(
            "Excluded %d unclassified exercise(s) from muscle group rollup: %s",
            len(unclassified),
            list(unclassified),
        )

    grand_total = sum(bucket.volume for bucket in totals.values())
    if grand_total <= 0:
        return []

    views = [
        MuscleGroupView(
            group=group,
            volume=bucket.volume,
            frequency=bucket.frequency,
            exercise_names=tuple(bucket.exercise_names),
            percentage_of_total_volume=round_half_up(100.0 * bucket.volume / grand_total),
        )
        for group, bucket in totals.items()
        if bucket.volume > 0
    ]
    views.sort(key=lambda view: view.volume, reverse=True)
    return views


@view_handler("muscle_groups", scope="period", view_meta={
    "description": "Training volume per muscle group over the selected window",
    "output_schema": [{
        "group": "string — taxonomy group",
        "volume": "number — sum(weight_kg * reps)",
        "frequency": "integer — exercise occurrences",
        "exercise_names": ["string"],
        "exercise_count": "integer — distinct exercises",
        "percentage_of_total_volume": "integer",
    }],
})
def build_muscle_groups(
    sessions: Sequence[WorkoutSession], ctx: ViewContext
) -> tuple[MuscleGroupView, ...]:
    return tuple(muscle_group_rollup(sessions, ctx.taxonomy))

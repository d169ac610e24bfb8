"""All-time personal records per exercise.

Always computed over the complete log, never a period subset. Maxima only
move on a strictly greater value, so the first session to reach a record
keeps its date when a later session merely equals it.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from ..models import WorkoutSession
from ..registry import ViewContext, view_handler
from ..views import ExerciseRecord, PersonalRecordView, RecordSample

logger = logging.getLogger(__name__)


@dataclass
class _RunningRecord:
    max_weight: float = 0.0
    max_weight_date: datetime | None = None
    max_reps: int = 0
    max_reps_date: datetime | None = None
    max_volume: float = 0.0
    max_volume_date: datetime | None = None
    samples: list[RecordSample] = field(default_factory=list)


def personal_records(sessions: Sequence[WorkoutSession]) -> PersonalRecordView:
    ordered = sorted(sessions, key=lambda s: s.timestamp)
    running: dict[str, _RunningRecord] = {}

    for session in ordered:
        ts = session.timestamp
        for entry in session.exercises:
            record = running.setdefault(entry.name, _RunningRecord())
            for set_entry in entry.sets:
                weight = set_entry.counted_weight
                reps = set_entry.counted_reps
                volume = set_entry.volume

                if weight is not None:
                    record.samples.append(RecordSample(date=ts, weight=weight, volume=volume))
                    if weight > record.max_weight:
                        record.max_weight = weight
                        record.max_weight_date = ts
                if reps is not None and reps > record.max_reps:
                    record.max_reps = reps
                    record.max_reps_date = ts
                if volume > record.max_volume:
                    record.max_volume = volume
                    record.max_volume_date = ts

    return PersonalRecordView(
        records=tuple(
            ExerciseRecord(
                exercise=name,
                max_weight=record.max_weight,
                max_weight_date=record.max_weight_date,
                max_reps=record.max_reps,
                max_reps_date=record.max_reps_date,
                max_volume=record.max_volume,
                max_volume_date=record.max_volume_date,
                samples=tuple(record.samples),
            )
            for name, record in running.items()
        )
    )


@view_handler("personal_records", scope="log", view_meta={
    "description": "All-time maxima per exercise with the date each was first reached",
    "output_schema": {
        "<exercise>": {
            "max_weight": "number",
            "max_weight_date": "ISO 8601 datetime | null",
            "max_reps": "integer",
            "max_reps_date": "ISO 8601 datetime | null",
            "max_volume": "number — best single set weight_kg * reps",
            "max_volume_date": "ISO 8601 datetime | null",
            "samples": [{"date": "ISO 8601 datetime", "weight": "number", "volume": "number"}],
        },
    },
})
def build_personal_records(
    sessions: Sequence[WorkoutSession], ctx: ViewContext
) -> PersonalRecordView:
    view = personal_records(sessions)
    logger.debug("Computed personal records (exercises=%d)", len(view.records))
    return view

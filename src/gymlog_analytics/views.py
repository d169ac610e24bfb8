"""Derived read-only views.

Views are recomputed from a session snapshot on every request and never
mutated. ``to_dict()`` returns JSON-safe data for transport to a UI process.
"""

from dataclasses import dataclass, fields, is_dataclass
from datetime import datetime
from typing import Any

NOT_AVAILABLE = "N/A"


def to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    return value


@dataclass(frozen=True)
class SummaryView:
    total_sessions: int = 0
    # (exercise, sessions containing it) in first-encounter order
    exercise_frequency: tuple[tuple[str, int], ...] = ()
    most_frequent_exercise: str = NOT_AVAILABLE
    heaviest_exercise: str = NOT_AVAILABLE
    heaviest_weight_kg: float = 0.0
    average_duration_minutes: float = 0.0
    total_volume_kg: int = 0

    def frequency_of(self, exercise: str) -> int:
        return dict(self.exercise_frequency).get(exercise, 0)

    def to_dict(self) -> dict[str, Any]:
        data = to_jsonable(self)
        data["exercise_frequency"] = dict(self.exercise_frequency)
        return data


@dataclass(frozen=True)
class DistributionSlice:
    label: str
    count: int
    percentage: int
    start_angle: float
    sweep_angle: float
    color: str

    def to_dict(self) -> dict[str, Any]:
        return to_jsonable(self)


@dataclass(frozen=True)
class HistoryPoint:
    date: datetime
    weight: float


@dataclass(frozen=True)
class PersonalBest:
    weight: float
    reps: int
    date: datetime


@dataclass(frozen=True)
class ExerciseStatsView:
    exercise: str
    history: tuple[HistoryPoint, ...] = ()
    max_weight: float = 0.0
    last_weight: float = 0.0
    personal_best: PersonalBest | None = None
    average_reps: float = 0.0
    total_volume: float = 0.0
    frequency_per_month: float = 0.0
    progress_percent: float | None = None

    @property
    def trend_available(self) -> bool:
        """Trend charts need at least two sessions; consumers skip them otherwise."""
        return len(self.history) >= 2

    def to_dict(self) -> dict[str, Any]:
        data = to_jsonable(self)
        data["trend_available"] = self.trend_available
        return data


@dataclass(frozen=True)
class MuscleGroupView:
    group: str
    volume: float
    frequency: int
    exercise_names: tuple[str, ...]
    percentage_of_total_volume: int

    @property
    def exercise_count(self) -> int:
        return len(self.exercise_names)

    def to_dict(self) -> dict[str, Any]:
        data = to_jsonable(self)
        data["exercise_count"] = self.exercise_count
        return data


@dataclass(frozen=True)
class RecordSample:
    date: datetime
    weight: float
    volume: float


@dataclass(frozen=True)
class ExerciseRecord:
    exercise: str
    max_weight: float = 0.0
    max_weight_date: datetime | None = None
    max_reps: int = 0
    max_reps_date: datetime | None = None
    max_volume: float = 0.0
    max_volume_date: datetime | None = None
    samples: tuple[RecordSample, ...] = ()


@dataclass(frozen=True)
class PersonalRecordView:
    records: tuple[ExerciseRecord, ...] = ()

    def get(self, exercise: str) -> ExerciseRecord | None:
        for record in self.records:
            if record.exercise == exercise:
                return record
        return None

    def to_dict(self) -> dict[str, Any]:
        return {record.exercise: to_jsonable(record) for record in self.records}


@dataclass(frozen=True)
class LastSessionSummary:
    id: str
    timestamp: datetime
    type_label: str
    # (exercise, number of sets logged)
    exercises: tuple[tuple[str, int], ...]


@dataclass(frozen=True)
class WeeklyProgressView:
    week_start: datetime
    completed: int
    target: int
    ratio: float
    last_session: LastSessionSummary | None = None

    def to_dict(self) -> dict[str, Any]:
        data = to_jsonable(self)
        if self.last_session is not None:
            data["last_session"]["exercises"] = [
                {"name": name, "sets": count}
                for name, count in self.last_session.exercises
            ]
        return data


@dataclass(frozen=True)
class DashboardSnapshot:
    request_id: int
    generated_at: datetime
    window: str
    total_sessions_in_log: int
    summary: SummaryView
    distribution: tuple[DistributionSlice, ...]
    exercise_names: tuple[str, ...]
    exercise_stats: tuple[ExerciseStatsView, ...]
    muscle_groups: tuple[MuscleGroupView, ...]
    personal_records: PersonalRecordView
    weekly_progress: WeeklyProgressView

    def to_dict(self) -> dict[str, Any]:
        return {
            "request_id": self.request_id,
            "generated_at": self.generated_at.isoformat(),
            "window": self.window,
            "total_sessions_in_log": self.total_sessions_in_log,
            "summary": self.summary.to_dict(),
            "distribution": [item.to_dict() for item in self.distribution],
            "exercise_names": list(self.exercise_names),
            "exercise_stats": [item.to_dict() for item in self.exercise_stats],
            "muscle_groups": [item.to_dict() for item in self.muscle_groups],
            "personal_records": self.personal_records.to_dict(),
            "weekly_progress": self.weekly_progress.to_dict(),
        }

"""Workout session records as logged by the mobile client.

Records arrive loosely typed: weights and reps were typed into free-text
inputs, so they may be numbers, numeric strings, blanks or junk. Parsing is
lenient for set fields (anything unusable becomes ``None``) and strict only
for the session timestamp, without which a record cannot be placed in time.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .utils import as_optional_float, as_optional_int, parse_timestamp

_FALSE_TOKENS: frozenset[str] = frozenset({"false", "0", "no", "off"})


def _as_sequence(value: Any) -> tuple[Any, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return ()


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class SetEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    weight_kg: float | None = Field(
        default=None,
        validation_alias=AliasChoices("weight_kg", "weightKg", "weight"),
    )
    reps: int | None = None
    completed: bool = True

    @field_validator("weight_kg", mode="before")
    @classmethod
    def coerce_weight(cls, value: Any) -> float | None:
        return as_optional_float(value)

    @field_validator("reps", mode="before")
    @classmethod
    def coerce_reps(cls, value: Any) -> int | None:
        return as_optional_int(value)

    @field_validator("completed", mode="before")
    @classmethod
    def coerce_completed(cls, value: Any) -> bool:
        # Records written before the flag existed count as completed.
        if value is None:
            return True
        if isinstance(value, str):
            return value.strip().lower() not in _FALSE_TOKENS
        return bool(value)

    @property
    def counted_weight(self) -> float | None:
        """Weight that may enter aggregates; None for incomplete sets."""
        return self.weight_kg if self.completed else None

    @property
    def counted_reps(self) -> int | None:
        return self.reps if self.completed else None

    @property
    def volume(self) -> float:
        weight = self.counted_weight
        reps = self.counted_reps
        if weight is None or reps is None:
            return 0.0
        return weight * reps


class ExerciseEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    sets: tuple[SetEntry, ...] = ()
    notes: str = ""

    @field_validator("name", "notes", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("sets", mode="before")
    @classmethod
    def keep_set_objects(cls, value: Any) -> tuple[Any, ...]:
        return tuple(
            item for item in _as_sequence(value) if isinstance(item, (dict, SetEntry))
        )

    @property
    def max_counted_weight(self) -> float | None:
        weights = [s.counted_weight for s in self.sets if s.counted_weight is not None]
        return max(weights) if weights else None


class WorkoutSession(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    timestamp: datetime = Field(validation_alias=AliasChoices("timestamp", "date"))
    type_label: str = Field(
        default="",
        validation_alias=AliasChoices("type_label", "typeLabel", "type"),
    )
    exercises: tuple[ExerciseEntry, ...] = ()

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> str:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("id must not be empty")
        return str(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def coerce_timestamp(cls, value: Any) -> datetime:
        parsed = parse_timestamp(value)
        if parsed is None:
            raise ValueError(f"unparseable timestamp: {value!r}")
        return parsed

    @field_validator("type_label", mode="before")
    @classmethod
    def coerce_type_label(cls, value: Any) -> str:
        return _as_text(value).strip()

    @field_validator("exercises", mode="before")
    @classmethod
    def keep_exercise_objects(cls, value: Any) -> tuple[Any, ...]:
        return tuple(
            item
            for item in _as_sequence(value)
            if isinstance(item, ExerciseEntry)
            or (isinstance(item, dict) and item.get("name") is not None)
        )

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> WorkoutSession:
        """Parse a stored record; raises pydantic.ValidationError if unusable."""
        return cls.model_validate(record)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def entries_for(self, exercise: str) -> list[ExerciseEntry]:
        return [entry for entry in self.exercises if entry.name == exercise]

    def exercise_names(self) -> list[str]:
        """Distinct exercise names in the order they were logged."""
        return list(dict.fromkeys(entry.name for entry in self.exercises))

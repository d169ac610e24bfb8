"""Static muscle-group taxonomy.

Groups are declared as an ordered tuple and flattened once into a
name -> group map, so classification never depends on dict iteration order.
Each group lists English names and the Spanish names the mobile app logs.
Names match exactly as logged (no case folding).
"""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class MuscleGroup:
    name: str
    exercises: tuple[str, ...]


DEFAULT_GROUPS: tuple[MuscleGroup, ...] = (
    MuscleGroup(
        name="Chest",
        exercises=(
            "Bench Press",
            "Incline Press",
            "Decline Press",
            "Chest Fly",
            "Dumbbell Fly",
            "Dumbbell Press",
            "Push-Up",
            "Smith Press",
            # names as stored by the mobile app
            "Press de Banca",
            "Press Inclinado",
            "Press Declinado",
            "Aperturas",
            "Crucifijo",
            "Press con Mancuernas",
            "Flexiones",
            "Press Smith",
        ),
    ),
    MuscleGroup(
        name="Back",
        exercises=(
            "Pull-Up",
            "Barbell Row",
            "Lat Pulldown",
            "Behind-the-Neck Pulldown",
            "Pronated Pulldown",
            "Supinated Pulldown",
            "Single-Arm Pulldown",
            "Close-Grip Pulldown",
            "Wide-Grip Pulldown",
            "Dumbbell Row",
            "Machine Row",
            "Superman",
            "Romanian Deadlift",
            "Pullover",
            "Dominadas",
            "Remo con Barra",
            "Jalón al Pecho",
            "Jalón Tras Nuca",
            "Jalón Prono",
            "Jalón Supino",
            "Jalón Unilateral",
            "Jalón Cerrado",
            "Jalón Abierto",
            "Remo con Mancuernas",
            "Remo en Máquina",
            "Peso Muerto Rumano",
        ),
    ),
    MuscleGroup(
        name="Shoulders",
        exercises=(
            "Military Press",
            "Lateral Raise",
            "Front Raise",
            "Rear Delt Fly",
            "Arnold Press",
            "Face Pull",
            "External Rotation",
            "Shrug",
            "Press Militar",
            "Elevaciones Laterales",
            "Elevaciones Frontales",
            "Pájaros",
            "Press Arnold",
            "Rotaciones Externas",
            "Shrugs",
        ),
    ),
    MuscleGroup(
        name="Biceps",
        exercises=(
            "Biceps Curl",
            "Dumbbell Curl",
            "Hammer Curl",
            "Preacher Curl",
            "Cable Curl",
            "Zottman Curl",
            "Concentration Curl",
            "Spider Curl",
            "Curl de Bíceps",
            "Curl con Mancuernas",
            "Curl Martillo",
            "Curl en Banco Scott",
            "Curl en Polea",
            "Curl Zottman",
            "Curl Concentrado",
            "Curl Spider",
        ),
    ),
    MuscleGroup(
        name="Triceps",
        exercises=(
            "Triceps Extension",
            "Parallel Bar Dip",
            "Skull Crusher",
            "Triceps Pushdown",
            "Dumbbell Triceps Extension",
            "Bench Triceps Extension",
            "Overhead Triceps Extension",
            "Machine Triceps Extension",
            "Extensiones de Tríceps",
            "Fondos en Paralelas",
            "Press Francés",
            "Extensiones en Polea",
            "Extensiones con Mancuernas",
            "Extensiones en Banco",
            "Extensiones Overhead",
            "Extensiones en Máquina",
        ),
    ),
    MuscleGroup(
        name="Legs",
        exercises=(
            "Squat",
            "Deadlift",
            "Leg Press",
            "Leg Extension",
            "Leg Curl",
            "Lunge",
            "Calf Raise",
            "Bulgarian Split Squat",
            "Sentadilla",
            "Peso Muerto",
            "Prensa",
            "Extensiones",
            "Curl Femoral",
            "Zancadas",
            "Elevación de Gemelos",
            "Sentadilla Búlgara",
        ),
    ),
    MuscleGroup(
        name="Core",
        exercises=(
            "Plank",
            "Crunch",
            "Russian Twist",
            "Mountain Climber",
            "Leg Raise",
            "Plank with Rotation",
            "Ab Rollout",
            "Side Plank",
            "Plancha",
            "Crunches",
            "Mountain Climbers",
            "Leg Raises",
            "Plank con Rotación",
        ),
    ),
)


class MuscleGroupTaxonomy:
    """Exercise name -> muscle group lookup built from an ordered group list."""

    def __init__(self, groups: Iterable[MuscleGroup]) -> None:
        self._groups = tuple(groups)
        lookup: dict[str, str] = {}
        seen_groups: set[str] = set()
        for group in self._groups:
            if not group.name.strip():
                raise ValueError("Muscle group name must not be empty")
            if group.name in seen_groups:
                raise ValueError(f"Duplicate muscle group {group.name!r}")
            seen_groups.add(group.name)
            for exercise in group.exercises:
                owner = lookup.get(exercise)
                if owner is not None and owner != group.name:
                    raise ValueError(
                        f"Exercise {exercise!r} is listed under both {owner!r} and {group.name!r}"
                    )
                lookup[exercise] = group.name
        self._lookup = lookup

    @property
    def group_names(self) -> tuple[str, ...]:
        return tuple(group.name for group in self._groups)

    def exercises_in(self, group_name: str) -> tuple[str, ...]:
        for group in self._groups:
            if group.name == group_name:
                return group.exercises
        return ()

    def classify(self, exercise: str) -> str:
        return self._lookup.get(exercise, UNCLASSIFIED)

    def __contains__(self, exercise: object) -> bool:
        return exercise in self._lookup

    def __len__(self) -> int:
        return len(self._lookup)

    @classmethod
    def from_entries(cls, entries: Iterable[dict[str, Any]]) -> "MuscleGroupTaxonomy":
        """Build from ``[{"group": ..., "exercises": [...]}, ...]`` in order."""
        groups: list[MuscleGroup] = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise ValueError(f"Taxonomy entry must be an object, got {type(entry).__name__}")
            name = entry.get("group")
            exercises = entry.get("exercises")
            if not isinstance(name, str) or not isinstance(exercises, list):
                raise ValueError("Taxonomy entry needs a 'group' string and an 'exercises' list")
            groups.append(
                MuscleGroup(name=name, exercises=tuple(str(ex) for ex in exercises))
            )
        return cls(groups)


DEFAULT_TAXONOMY = MuscleGroupTaxonomy(DEFAULT_GROUPS)


def load_taxonomy(path: str | None) -> MuscleGroupTaxonomy:
    """Load the taxonomy configured at startup, or the built-in default."""
    if not path:
        return DEFAULT_TAXONOMY
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError("Taxonomy file must contain a list of group entries")
    taxonomy = MuscleGroupTaxonomy.from_entries(raw)
    logger.info(
        "Loaded muscle group taxonomy from %s (groups=%d, exercises=%d)",
        path,
        len(taxonomy.group_names),
        len(taxonomy),
    )
    return taxonomy

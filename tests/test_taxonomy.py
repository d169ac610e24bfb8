import json

import pytest

from gymlog_analytics.taxonomy import (
    DEFAULT_GROUPS,
    DEFAULT_TAXONOMY,
    UNCLASSIFIED,
    MuscleGroup,
    MuscleGroupTaxonomy,
    load_taxonomy,
)


class TestDefaultTaxonomy:
    def test_groups_in_order(self):
        assert DEFAULT_TAXONOMY.group_names == (
            "Chest", "Back", "Shoulders", "Biceps", "Triceps", "Legs", "Core",
        )

    def test_every_exercise_in_exactly_one_group(self):
        assert len(DEFAULT_TAXONOMY) == sum(len(g.exercises) for g in DEFAULT_GROUPS)

    @pytest.mark.parametrize("exercise,group", [
        ("Bench Press", "Chest"),
        ("Pull-Up", "Back"),
        ("Lateral Raise", "Shoulders"),
        ("Hammer Curl", "Biceps"),
        ("Skull Crusher", "Triceps"),
        ("Squat", "Legs"),
        ("Plank", "Core"),
    ])
    def test_classify(self, exercise, group):
        assert DEFAULT_TAXONOMY.classify(exercise) == group
        assert exercise in DEFAULT_TAXONOMY

    @pytest.mark.parametrize("exercise,group", [
        ("Press de Banca", "Chest"),
        ("Jalón al Pecho", "Back"),
        ("Elevaciones Laterales", "Shoulders"),
        ("Curl Martillo", "Biceps"),
        ("Press Francés", "Triceps"),
        ("Sentadilla", "Legs"),
        ("Plancha", "Core"),
    ])
    def test_classify_mobile_app_names(self, exercise, group):
        assert DEFAULT_TAXONOMY.classify(exercise) == group

    def test_unknown_is_unclassified(self):
        assert DEFAULT_TAXONOMY.classify("Zercher Carry") == UNCLASSIFIED
        assert "Zercher Carry" not in DEFAULT_TAXONOMY

    def test_exact_match_only(self):
        assert DEFAULT_TAXONOMY.classify("squat") == UNCLASSIFIED
        assert DEFAULT_TAXONOMY.classify(" Squat") == UNCLASSIFIED

    def test_exercises_in(self):
        assert "Squat" in DEFAULT_TAXONOMY.exercises_in("Legs")
        assert DEFAULT_TAXONOMY.exercises_in("Forearms") == ()


class TestValidation:
    def test_exercise_in_two_groups(self):
        with pytest.raises(ValueError, match="listed under both"):
            MuscleGroupTaxonomy([
                MuscleGroup("Back", ("Deadlift",)),
                MuscleGroup("Legs", ("Deadlift",)),
            ])

    def test_duplicate_group(self):
        with pytest.raises(ValueError, match="Duplicate muscle group"):
            MuscleGroupTaxonomy([MuscleGroup("Legs", ()), MuscleGroup("Legs", ("Squat",))])

    def test_empty_group_name(self):
        with pytest.raises(ValueError):
            MuscleGroupTaxonomy([MuscleGroup("  ", ("Squat",))])

    def test_repeat_within_group_allowed(self):
        taxonomy = MuscleGroupTaxonomy([MuscleGroup("Legs", ("Squat", "Squat"))])
        assert taxonomy.classify("Squat") == "Legs"


class TestFromEntries:
    def test_builds_in_order(self):
        taxonomy = MuscleGroupTaxonomy.from_entries([
            {"group": "Upper", "exercises": ["Bench Press", "Pull-Up"]},
            {"group": "Lower", "exercises": ["Squat"]},
        ])
        assert taxonomy.group_names == ("Upper", "Lower")
        assert taxonomy.classify("Pull-Up") == "Upper"

    @pytest.mark.parametrize("entries", [
        ["Legs"],
        [{"group": "Legs"}],
        [{"group": 3, "exercises": []}],
        [{"group": "Legs", "exercises": "Squat"}],
    ])
    def test_bad_shape(self, entries):
        with pytest.raises(ValueError):
            MuscleGroupTaxonomy.from_entries(entries)


class TestLoadTaxonomy:
    def test_default_when_unset(self):
        assert load_taxonomy(None) is DEFAULT_TAXONOMY
        assert load_taxonomy("") is DEFAULT_TAXONOMY

    def test_from_file(self, tmp_path):
        path = tmp_path / "taxonomy.json"
        path.write_text(json.dumps([{"group": "Posterior", "exercises": ["Deadlift"]}]))
        taxonomy = load_taxonomy(str(path))
        assert taxonomy.group_names == ("Posterior",)
        assert taxonomy.classify("Deadlift") == "Posterior"
        assert taxonomy.classify("Squat") == UNCLASSIFIED

    def test_file_must_hold_a_list(self, tmp_path):
        path = tmp_path / "taxonomy.json"
        path.write_text(json.dumps({"Legs": ["Squat"]}))
        with pytest.raises(ValueError, match="list"):
            load_taxonomy(str(path))

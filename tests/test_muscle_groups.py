import logging
from datetime import datetime, timezone

from gymlog_analytics.handlers.muscle_groups import muscle_group_rollup
from gymlog_analytics.models import WorkoutSession
from gymlog_analytics.taxonomy import DEFAULT_TAXONOMY, MuscleGroup, MuscleGroupTaxonomy

NOW = datetime(2026, 2, 10, 18, 0, tzinfo=timezone.utc)


def _session(session_id, *exercises):
    return WorkoutSession.from_record({
        "id": session_id,
        "timestamp": NOW,
        "exercises": [
            {"name": name, "sets": [{"weight": w, "reps": r} for w, r in sets]}
            for name, sets in exercises
        ],
    })


def _log():
    return [
        _session("1", ("Squat", [(100, 5)]), ("Bench Press", [(60, 10)])),
        _session("2", ("Squat", [(100, 5)]), ("Leg Press", [(200, 10)]),
                 ("Zercher Carry", [(50, 5)])),
    ]


class TestRollup:
    def test_volume_and_frequency(self):
        views = muscle_group_rollup(_log(), DEFAULT_TAXONOMY)
        assert [v.group for v in views] == ["Legs", "Chest"]
        legs, chest = views
        assert legs.volume == 3000.0
        assert legs.frequency == 3
        assert legs.exercise_names == ("Squat", "Leg Press")
        assert legs.exercise_count == 2
        assert chest.volume == 600.0
        assert chest.frequency == 1

    def test_percentages(self):
        views = muscle_group_rollup(_log(), DEFAULT_TAXONOMY)
        # 3000/3600 and 600/3600
        assert [v.percentage_of_total_volume for v in views] == [83, 17]

    def test_unclassified_excluded_and_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="gymlog_analytics.handlers.muscle_groups"):
            views = muscle_group_rollup(_log(), DEFAULT_TAXONOMY)
        assert all("Zercher Carry" not in v.exercise_names for v in views)
        assert "Zercher Carry" in caplog.text

    def test_zero_volume_group_omitted(self):
        sessions = [
            _session("1", ("Squat", [(100, 5)])),
            WorkoutSession.from_record({
                "id": "2", "timestamp": NOW,
                "exercises": [{"name": "Plank", "sets": [{"reps": 60}]}],
            }),
        ]
        views = muscle_group_rollup(sessions, DEFAULT_TAXONOMY)
        assert [v.group for v in views] == ["Legs"]
        assert views[0].percentage_of_total_volume == 100

    def test_incomplete_sets_add_no_volume(self):
        session = WorkoutSession.from_record({
            "id": "1", "timestamp": NOW,
            "exercises": [{"name": "Squat", "sets": [
                {"weight": 100, "reps": 5},
                {"weight": 140, "reps": 5, "completed": False},
            ]}],
        })
        assert muscle_group_rollup([session], DEFAULT_TAXONOMY)[0].volume == 500.0

    def test_equal_volume_keeps_first_seen_group(self):
        sessions = [_session("1", ("Bench Press", [(100, 5)]), ("Squat", [(100, 5)]))]
        views = muscle_group_rollup(sessions, DEFAULT_TAXONOMY)
        assert [v.group for v in views] == ["Chest", "Legs"]
        assert [v.percentage_of_total_volume for v in views] == [50, 50]


class TestEmpty:
    def test_no_sessions(self):
        assert muscle_group_rollup([], DEFAULT_TAXONOMY) == []

    def test_only_unclassified(self):
        sessions = [_session("1", ("Zercher Carry", [(50, 5)]))]
        assert muscle_group_rollup(sessions, DEFAULT_TAXONOMY) == []

    def test_no_volume_anywhere(self):
        sessions = [_session("1", ("Squat", [(None, 5)]))]
        assert muscle_group_rollup(sessions, DEFAULT_TAXONOMY) == []


def test_custom_taxonomy():
    taxonomy = MuscleGroupTaxonomy([
        MuscleGroup("Posterior Chain", ("Deadlift", "Romanian Deadlift")),
    ])
    sessions = [_session("1", ("Deadlift", [(140, 3)]), ("Squat", [(100, 5)]))]
    views = muscle_group_rollup(sessions, taxonomy)
    assert [v.group for v in views] == ["Posterior Chain"]
    assert views[0].volume == 420.0


def test_to_dict_includes_exercise_count():
    data = muscle_group_rollup(_log(), DEFAULT_TAXONOMY)[0].to_dict()
    assert data["exercise_names"] == ["Squat", "Leg Press"]
    assert data["exercise_count"] == 2


def test_mobile_app_record_names():
    sessions = [
        WorkoutSession.from_record({
            "id": 1739210400000,
            "date": "2026-02-10T18:00:00.000Z",
            "type": "Pierna",
            "exercises": [
                {"name": "Sentadilla", "sets": [{"weight": "100", "reps": "5"}]},
                {"name": "Press de Banca", "sets": [{"weight": "62,5", "reps": "8"}]},
            ],
        }),
    ]
    views = muscle_group_rollup(sessions, DEFAULT_TAXONOMY)
    assert [(v.group, v.volume) for v in views] == [("Legs", 500.0), ("Chest", 500.0)]

from datetime import datetime, timedelta, timezone

import pytest

from gymlog_analytics.handlers.weekly_progress import weekly_progress
from gymlog_analytics.models import WorkoutSession

# Tuesday; the week started Sunday Feb 8
NOW = datetime(2026, 2, 10, 18, 0, tzinfo=timezone.utc)
WEEK_START = datetime(2026, 2, 8, tzinfo=timezone.utc)


def _session(session_id, ts, *, type_label="Legs", exercises=()):
    return WorkoutSession.from_record({
        "id": session_id,
        "timestamp": ts,
        "type": type_label,
        "exercises": list(exercises),
    })


class TestCompleted:
    def test_counts_sessions_since_sunday(self):
        sessions = [
            _session("mon", datetime(2026, 2, 9, 7, 0, tzinfo=timezone.utc)),
            _session("sun", WEEK_START),
            _session("sat", WEEK_START - timedelta(minutes=1)),
        ]
        view = weekly_progress(sessions, NOW, 5)
        assert view.week_start == WEEK_START
        assert view.completed == 2
        assert view.target == 5
        assert view.ratio == pytest.approx(0.4)

    def test_ratio_capped(self):
        sessions = [_session(str(i), WEEK_START + timedelta(hours=i)) for i in range(6)]
        view = weekly_progress(sessions, NOW, 5)
        assert view.completed == 6
        assert view.ratio == 1.0

    def test_zero_target(self):
        view = weekly_progress([_session("1", NOW)], NOW, 0)
        assert view.ratio == 0.0

    def test_empty(self):
        view = weekly_progress([], NOW, 5)
        assert view.completed == 0
        assert view.ratio == 0.0
        assert view.last_session is None


class TestLastSession:
    def test_most_recent_regardless_of_order(self):
        latest = _session(
            "b",
            NOW - timedelta(hours=2),
            type_label="Push",
            exercises=[
                {"name": "Bench Press", "sets": [{"weight": 60, "reps": 8}] * 3},
                {"name": "Triceps Pushdown", "sets": []},
            ],
        )
        earlier = _session("a", NOW - timedelta(days=3))
        view = weekly_progress([latest, earlier], NOW, 5)
        last = view.last_session
        assert last.id == "b"
        assert last.type_label == "Push"
        assert last.exercises == (("Bench Press", 3), ("Triceps Pushdown", 0))

    def test_last_session_may_predate_week(self):
        old = _session("old", NOW - timedelta(days=30))
        view = weekly_progress([old], NOW, 5)
        assert view.completed == 0
        assert view.last_session.id == "old"

    def test_to_dict(self):
        s = _session("b", NOW, exercises=[{"name": "Squat", "sets": [{"weight": 100, "reps": 5}]}])
        data = weekly_progress([s], NOW, 4).to_dict()
        assert data["week_start"] == WEEK_START.isoformat()
        assert data["ratio"] == 0.25
        assert data["last_session"]["exercises"] == [{"name": "Squat", "sets": 1}]

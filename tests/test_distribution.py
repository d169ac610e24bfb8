from datetime import datetime, timezone

import pytest

from gymlog_analytics.handlers.distribution import PALETTE, UNTYPED_LABEL, distribution
from gymlog_analytics.models import WorkoutSession

NOW = datetime(2026, 2, 10, 18, 0, tzinfo=timezone.utc)


def _sessions(*labels):
    return [
        WorkoutSession.from_record({"id": str(i), "timestamp": NOW, "type": label})
        for i, label in enumerate(labels)
    ]


def test_empty():
    assert distribution([]) == []


def test_sorted_by_count_descending():
    slices = distribution(_sessions("Push", "Legs", "Legs", "Pull", "Legs", "Push"))
    assert [(s.label, s.count) for s in slices] == [("Legs", 3), ("Push", 2), ("Pull", 1)]
    assert [s.percentage for s in slices] == [50, 33, 17]


def test_angles_are_cumulative():
    slices = distribution(_sessions("Push", "Legs", "Legs", "Pull", "Legs", "Push"))
    assert [s.start_angle for s in slices] == pytest.approx([0.0, 180.0, 300.0])
    assert [s.sweep_angle for s in slices] == pytest.approx([180.0, 120.0, 60.0])
    assert sum(s.sweep_angle for s in slices) == pytest.approx(360.0)


def test_colors_by_rank():
    slices = distribution(_sessions("Push", "Legs", "Legs"))
    assert [s.color for s in slices] == [PALETTE[0], PALETTE[1]]


def test_palette_cycles():
    labels = [f"Type {i}" for i in range(len(PALETTE) + 2)]
    slices = distribution(_sessions(*labels))
    assert slices[len(PALETTE)].color == PALETTE[0]
    assert slices[len(PALETTE) + 1].color == PALETTE[1]


def test_ties_keep_first_seen_order():
    slices = distribution(_sessions("Pull", "Push"))
    assert [s.label for s in slices] == ["Pull", "Push"]
    assert [s.percentage for s in slices] == [50, 50]


def test_percentages_round_half_up_independently():
    slices = distribution(_sessions("B", "B", "B", "B", "B", "B", "B", "A"))
    # 87.5 and 12.5 both round up, so the total can exceed 100
    assert [s.percentage for s in slices] == [88, 13]


def test_blank_label_is_untyped():
    slices = distribution(_sessions("", None, "Legs"))
    assert slices[0].label == UNTYPED_LABEL
    assert slices[0].count == 2


def test_single_label_full_circle():
    slices = distribution(_sessions("Legs"))
    assert len(slices) == 1
    assert slices[0].percentage == 100
    assert slices[0].sweep_angle == pytest.approx(360.0)


def test_to_dict():
    data = distribution(_sessions("Legs"))[0].to_dict()
    assert data == {
        "label": "Legs",
        "count": 1,
        "percentage": 100,
        "start_angle": 0.0,
        "sweep_angle": 360.0,
        "color": PALETTE[0],
    }

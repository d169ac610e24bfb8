"""Session-type distribution for the pie chart.

Colours come from a fixed palette indexed by rank so the same snapshot
always renders the same way.
"""

import logging
from collections.abc import Sequence

from ..models import WorkoutSession
from ..registry import ViewContext, view_handler
from ..utils import round_half_up
from ..views import DistributionSlice

logger = logging.getLogger(__name__)

UNTYPED_LABEL = "Untyped"

PALETTE: tuple[str, ...] = (
    "#6200ee",
    "#03dac6",
    "#ef476f",
    "#ffd166",
    "#06d6a0",
    "#118ab2",
    "#f78c6b",
    "#073b4c",
)


def distribution(sessions: Sequence[WorkoutSession]) -> list[DistributionSlice]:
    total = len(sessions)
    if total == 0:
        return []

    counts: dict[str, int] = {}
    for session in sessions:
        label = session.type_label or UNTYPED_LABEL
        counts[label] = counts.get(label, 0) + 1

    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)

    slices: list[DistributionSlice] = []
    start_angle = 0.0
    for rank, (label, count) in enumerate(ranked):
        sweep = 360.0 * count / total
        slices.append(
            DistributionSlice(
                label=label,
                count=count,
                percentage=round_half_up(100.0 * count / total),
                start_angle=start_angle,
                sweep_angle=sweep,
                color=PALETTE[rank % len(PALETTE)],
            )
        )
        start_angle += sweep
    return slices


@view_handler("distribution", scope="period", view_meta={
    "description": "Share of sessions per session type label",
    "output_schema": [{
        "label": "string",
        "count": "integer",
        "percentage": "integer — rounded independently per label",
        "start_angle": "number — degrees, cumulative in rank order",
        "sweep_angle": "number — degrees",
        "color": "string — palette colour by rank",
    }],
})
def build_distribution(
    sessions: Sequence[WorkoutSession], ctx: ViewContext
) -> tuple[DistributionSlice, ...]:
    slices = distribution(sessions)
    logger.debug("Computed distribution (labels=%d)", len(slices))
    return tuple(slices)

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from domain.diagram_config import DiagramConfig
from domain.models import Activity, ActivityPlacement, Point, RowKey, RowPlacement, Size
from domain.services.time_mapping import TimeScale

logger = logging.getLogger(__name__)


def compose_activity_box(
    config: DiagramConfig,
    scale: TimeScale,
    activity: Activity,
    index: int,
    rows_by_key: Mapping[RowKey, RowPlacement],
) -> ActivityPlacement | None:
    gap = config.layout.individual.gap
    placements = [
        rows_by_key[participation.row_key]
        for participation in activity.participations
        if participation.row_key in rows_by_key
    ]
    if not placements:
        logger.debug("Activity %s has no participant rows in view", activity.id)
        return None

    lowest = min(placement.top for placement in placements)
    highest = max(placement.bottom for placement in placements)
    top = lowest - gap / 2
    bottom = highest + gap / 2
    return ActivityPlacement(
        activity=activity,
        index=index,
        origin=Point(scale.to_x(activity.beginning), top),
        size=Size(scale.span(activity.beginning, activity.ending), bottom - top),
        row_count=len({placement.index for placement in placements}),
        participant_count=len(placements),
    )


def compose_activity_boxes(
    config: DiagramConfig,
    scale: TimeScale,
    activities: Sequence[Activity],
    rows_by_key: Mapping[RowKey, RowPlacement],
) -> list[ActivityPlacement]:
    boxes: list[ActivityPlacement] = []
    for index, activity in enumerate(activities):
        box = compose_activity_box(config, scale, activity, index, rows_by_key)
        if box is not None:
            boxes.append(box)
    return boxes

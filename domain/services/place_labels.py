from __future__ import annotations

from collections.abc import Sequence

from domain.diagram_config import DiagramConfig
from domain.models import ActivityPlacement, LabelPlacement, Point, RowPlacement
from domain.services.declutter_labels import LabelCandidate, declutter, truncate_label


def individual_label_candidates(
    config: DiagramConfig, rows: Sequence[RowPlacement]
) -> list[LabelCandidate]:
    layout = config.layout.individual
    labels = config.labels.individual
    x = layout.x_margin + labels.left_margin
    return [
        LabelCandidate(
            role="individual_label",
            owner_id=placement.row.row_id,
            text=truncate_label(placement.row.individual.name, labels.max_chars),
            anchor="start",
            position=Point(x, placement.top + layout.height / 2 + labels.top_margin),
            font_size=labels.font_size,
        )
        for placement in rows
    ]


def activity_label_y(config: DiagramConfig, box: ActivityPlacement) -> float:
    layout = config.layout.individual
    labels = config.labels.activity
    # counts declared participations, dangling ones included
    if len(box.activity.participations) == 1:
        return box.origin.y - labels.top_margin / 1.5

    row_pitch = layout.height + layout.gap
    spanned_rows = round(box.size.height / row_pitch) if row_pitch > 0 else 1
    middle = box.origin.y + box.size.height / 2
    if spanned_rows % 2 == 0:
        position = middle
    else:
        # odd spans would put the text on top of the middle row; use the gap above it
        position = middle - layout.height / 2 - layout.gap / 2
    return position + labels.top_margin


def activity_label_candidates(
    config: DiagramConfig, boxes: Sequence[ActivityPlacement]
) -> list[LabelCandidate]:
    labels = config.labels.activity
    return [
        LabelCandidate(
            role="activity_label",
            owner_id=box.activity.id,
            text=truncate_label(box.activity.name, labels.max_chars),
            anchor="middle",
            position=Point(box.origin.x + box.size.width / 2, activity_label_y(config, box)),
            font_size=labels.font_size,
        )
        for box in boxes
    ]


def place_labels(
    config: DiagramConfig,
    rows: Sequence[RowPlacement],
    boxes: Sequence[ActivityPlacement],
) -> list[LabelPlacement]:
    placed: list[LabelPlacement] = []
    if config.labels.individual.enabled:
        placed.extend(declutter(individual_label_candidates(config, rows)))
    if config.labels.activity.enabled:
        placed.extend(declutter(activity_label_candidates(config, boxes)))
    return placed

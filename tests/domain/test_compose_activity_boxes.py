from __future__ import annotations

import pytest

from domain.diagram_config import DiagramConfig
from domain.models import (
    Activity,
    DisplayRow,
    Individual,
    Participation,
    PlainRow,
    Point,
    RowPlacement,
    Size,
)
from domain.services.compose_activity_boxes import compose_activity_box, compose_activity_boxes
from domain.services.time_mapping import TimeScale

SCALE = TimeScale(start_of_time=0, end_of_time=100, x_base=150, available_width=800, label_column=True)


def _placements(*row_ids: str) -> dict:
    placements = {}
    for index, row_id in enumerate(row_ids):
        entity = Individual(id=row_id, name=row_id)
        row = DisplayRow(ref=PlainRow(row_id), individual=entity, beginning=-1, ending=9999999999999)
        placements[row.key] = RowPlacement(
            row=row,
            index=index,
            origin=Point(0, 35 + 30 * index),
            size=Size(900, 20),
            open_start=True,
            open_end=True,
        )
    return placements


def _activity(activity_id: str, *participants: str) -> Activity:
    return Activity(
        id=activity_id,
        name=activity_id,
        beginning=10,
        ending=30,
        participations=[Participation(individual_id=p) for p in participants],
    )


def test_box_spans_participant_rows_with_half_gap() -> None:
    rows = _placements("a", "b", "c")

    box = compose_activity_box(DiagramConfig(), SCALE, _activity("x", "a", "c"), 0, rows)

    assert box is not None
    assert box.origin == Point(230, 30)
    assert box.size.width == pytest.approx(160)
    assert box.size.height == pytest.approx(90)
    assert (box.row_count, box.participant_count) == (2, 2)


def test_single_participant_box_covers_its_row() -> None:
    box = compose_activity_box(DiagramConfig(), SCALE, _activity("x", "b"), 0, _placements("a", "b"))

    assert box is not None
    assert (box.origin.y, box.size.height) == (60, 30)


def test_activity_without_rows_has_no_box() -> None:
    rows = _placements("a")

    assert compose_activity_box(DiagramConfig(), SCALE, _activity("x", "ghost"), 0, rows) is None
    assert compose_activity_box(DiagramConfig(), SCALE, _activity("y"), 1, rows) is None


def test_boxes_keep_activity_index() -> None:
    rows = _placements("a", "b")
    activities = [_activity("x", "ghost"), _activity("y", "a"), _activity("z", "b")]

    boxes = compose_activity_boxes(DiagramConfig(), SCALE, activities, rows)

    assert [(box.activity.id, box.index) for box in boxes] == [("y", 1), ("z", 2)]

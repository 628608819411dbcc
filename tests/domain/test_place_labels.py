from __future__ import annotations

import pytest

from domain.diagram_config import DiagramConfig
from domain.models import (
    Activity,
    ActivityPlacement,
    DisplayRow,
    Individual,
    Participation,
    PlainRow,
    Point,
    RowPlacement,
    Size,
)
from domain.services.place_labels import activity_label_y, place_labels


def _row_placement(row_id: str, index: int, name: str | None = None) -> RowPlacement:
    entity = Individual(id=row_id, name=name or row_id.upper())
    row = DisplayRow(ref=PlainRow(row_id), individual=entity, beginning=-1, ending=9999999999999)
    return RowPlacement(
        row=row,
        index=index,
        origin=Point(33.3, 35 + 30 * index),
        size=Size(900, 20),
        open_start=True,
        open_end=True,
    )


def _box(top: float, height: float, participants: int, name: str = "Lift") -> ActivityPlacement:
    return ActivityPlacement(
        activity=Activity(
            id=name.lower(),
            name=name,
            beginning=0,
            ending=10,
            participations=[Participation(individual_id=f"p{idx}") for idx in range(participants)],
        ),
        index=0,
        origin=Point(200, top),
        size=Size(100, height),
        row_count=participants,
        participant_count=participants,
    )


@pytest.mark.parametrize(
    ("top", "height", "participants", "expected"),
    [
        (30, 30, 1, 30 - 5 / 1.5),
        (30, 60, 2, 65),
        (30, 90, 3, 65),
        (30, 120, 4, 95),
    ],
)
def test_activity_label_sits_between_rows(
    top: float, height: float, participants: int, expected: float
) -> None:
    assert activity_label_y(DiagramConfig(), _box(top, height, participants)) == pytest.approx(
        expected
    )


def test_individual_labels_are_placed_in_label_column() -> None:
    labels = place_labels(DiagramConfig(), [_row_placement("a", 0), _row_placement("b", 1)], [])

    assert [(label.owner_id, label.text) for label in labels] == [("a", "A"), ("b", "B")]
    assert [label.position for label in labels] == [Point(45, 50), Point(45, 80)]
    assert all(label.role == "individual_label" for label in labels)


def test_activity_label_is_centred_over_box() -> None:
    labels = place_labels(DiagramConfig(), [], [_box(30, 60, 2)])

    assert len(labels) == 1
    assert labels[0].anchor == "middle"
    assert labels[0].position == Point(250, 65)


def test_long_names_are_truncated() -> None:
    config = DiagramConfig.model_validate({"labels": {"individual": {"maxChars": 4}}})

    labels = place_labels(config, [_row_placement("a", 0, name="Banksman")], [])

    assert labels[0].text == "Bank..."


def test_disabled_label_kinds_are_skipped() -> None:
    config = DiagramConfig.model_validate(
        {"labels": {"individual": {"enabled": False}, "activity": {"enabled": False}}}
    )

    assert place_labels(config, [_row_placement("a", 0)], [_box(30, 60, 2)]) == []


def test_dangling_participant_still_counts_towards_label_rule() -> None:
    box = _box(30, 30, 2)
    resolved_once = ActivityPlacement(
        activity=box.activity,
        index=0,
        origin=box.origin,
        size=box.size,
        row_count=1,
        participant_count=1,
    )

    assert activity_label_y(DiagramConfig(), resolved_once) == pytest.approx(35)

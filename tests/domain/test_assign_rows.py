from __future__ import annotations

import pytest

from domain.diagram_config import DiagramConfig
from domain.models import END_OF_TIME, DisplayRow, Individual, PlainRow
from domain.services.assign_rows import assign_rows, full_row_width, place_row
from domain.services.time_mapping import TimeScale

CHEVRON = 20 / 3
FULL_WIDTH = CHEVRON + 1000 + 10 - 80

# interval of 8px per time unit over [0, 100]
SCALE = TimeScale(
    start_of_time=0,
    end_of_time=100,
    x_base=150,
    available_width=800,
    label_column=True,
)


def _row(row_id: str, beginning: float, ending: float) -> DisplayRow:
    individual = Individual(id=row_id, name=row_id, beginning=beginning, ending=ending)
    return DisplayRow(ref=PlainRow(row_id), individual=individual, beginning=beginning, ending=ending)


def test_bounded_row_spans_its_own_extent() -> None:
    placement = place_row(DiagramConfig(), SCALE, _row("e", 10, 50), 0)

    assert placement.origin.x == pytest.approx(230)
    assert placement.size.width == pytest.approx(320)
    assert (placement.open_start, placement.open_end) == (False, False)


def test_open_ended_row_overruns_right_edge() -> None:
    placement = place_row(DiagramConfig(), SCALE, _row("e", 10, END_OF_TIME), 0)

    assert placement.origin.x == pytest.approx(230)
    assert placement.size.width == pytest.approx(90 * 8 + 10)
    assert (placement.open_start, placement.open_end) == (False, True)


def test_open_started_row_begins_at_left_margin() -> None:
    placement = place_row(DiagramConfig(), SCALE, _row("e", -1, 50), 0)

    assert placement.origin.x == pytest.approx(40 - CHEVRON)
    assert placement.size.width == pytest.approx(FULL_WIDTH - 50 * 8 - 10)
    assert (placement.open_start, placement.open_end) == (True, False)


@pytest.mark.parametrize(
    "scale",
    [
        SCALE,
        TimeScale(start_of_time=40, end_of_time=45, x_base=50, available_width=900, label_column=False),
        TimeScale(start_of_time=0, end_of_time=0, x_base=150, available_width=810, label_column=True),
    ],
)
def test_unbounded_row_always_takes_full_width(scale: TimeScale) -> None:
    config = DiagramConfig()
    placement = place_row(config, scale, _row("e", -1, END_OF_TIME), 3)

    assert full_row_width(config) == pytest.approx(FULL_WIDTH)
    assert placement.origin.x == pytest.approx(40 - CHEVRON)
    assert placement.size.width == pytest.approx(FULL_WIDTH)
    assert (placement.open_start, placement.open_end) == (True, True)


def test_bounded_extent_outside_window_is_drawn_open() -> None:
    scale = TimeScale(start_of_time=20, end_of_time=60, x_base=150, available_width=800, label_column=True)
    placement = place_row(DiagramConfig(), scale, _row("e", 10, 80), 0)

    assert (placement.open_start, placement.open_end) == (True, True)
    assert placement.size.width == pytest.approx(FULL_WIDTH)


def test_rows_are_stacked_in_order() -> None:
    rows = [_row("a", 0, 10), _row("b", 0, 10), _row("c", 0, 10)]
    placements = assign_rows(DiagramConfig(), SCALE, rows)

    assert [placement.row.row_id for placement in placements] == ["a", "b", "c"]
    assert [placement.origin.y for placement in placements] == [35, 65, 95]
    assert all(placement.size.height == 20 for placement in placements)


def test_row_wholly_after_window_keeps_its_extent() -> None:
    placement = place_row(DiagramConfig(), SCALE, _row("late", 150, 160), 0)

    assert placement.origin.x == pytest.approx(150 + 150 * 8)
    assert placement.size.width == pytest.approx(80)
    assert (placement.open_start, placement.open_end) == (False, False)


def test_row_wholly_before_window_keeps_its_extent() -> None:
    scale = TimeScale(start_of_time=20, end_of_time=60, x_base=150, available_width=800, label_column=True)

    placement = place_row(DiagramConfig(), scale, _row("early", 0, 10), 0)

    assert placement.origin.x == pytest.approx(150 - 20 * 20)
    assert placement.size.width == pytest.approx(200)
    assert (placement.open_start, placement.open_end) == (False, False)


@pytest.mark.parametrize(
    ("beginning", "ending"),
    [(150, END_OF_TIME), (-1, 10), (120, 130), (0, 5)],
)
def test_rows_outside_window_never_get_negative_width(beginning: float, ending: float) -> None:
    scale = TimeScale(start_of_time=20, end_of_time=100, x_base=150, available_width=800, label_column=True)

    placement = place_row(DiagramConfig(), scale, _row("e", beginning, ending), 0)

    assert placement.size.width >= 0

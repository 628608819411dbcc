from __future__ import annotations

from collections.abc import Sequence

from domain.diagram_config import DiagramConfig
from domain.models import (
    DisplayRow,
    Point,
    RowPlacement,
    Size,
    is_bounded_beginning,
    is_bounded_ending,
)
from domain.services.time_mapping import TimeScale


def chevron_offset(config: DiagramConfig) -> float:
    return config.layout.individual.height / 3


def full_row_width(config: DiagramConfig) -> float:
    layout = config.layout.individual
    return (
        chevron_offset(config)
        + config.base_width
        + layout.temporal_margin
        - layout.x_margin * 2
    )


def row_top(config: DiagramConfig, index: int) -> float:
    layout = config.layout.individual
    return layout.top_margin + layout.gap + index * (layout.height + layout.gap)


def place_row(config: DiagramConfig, scale: TimeScale, row: DisplayRow, index: int) -> RowPlacement:
    layout = config.layout.individual
    bounded_start = is_bounded_beginning(row.beginning)
    bounded_end = is_bounded_ending(row.ending)
    if (bounded_start and row.beginning > scale.end_of_time) or (
        bounded_end and row.ending < scale.start_of_time
    ):
        return _place_outside_window(config, scale, row, index)

    starts = bounded_start and row.beginning >= scale.start_of_time
    stops = bounded_end and row.ending <= scale.end_of_time

    if starts:
        x = scale.to_x(row.beginning)
    else:
        x = layout.x_margin - chevron_offset(config)

    if starts and stops:
        width = scale.span(row.beginning, row.ending)
    elif starts:
        width = scale.span(row.beginning, scale.end_of_time) + layout.temporal_margin
    elif stops:
        width = (
            full_row_width(config)
            - scale.span(row.ending, scale.end_of_time)
            - layout.temporal_margin
        )
    else:
        width = full_row_width(config)

    return RowPlacement(
        row=row,
        index=index,
        origin=Point(x, row_top(config, index)),
        size=Size(width, layout.height),
        open_start=not starts,
        open_end=not stops,
    )


def _place_outside_window(
    config: DiagramConfig, scale: TimeScale, row: DisplayRow, index: int
) -> RowPlacement:
    """Rows lying wholly before or after the window keep their own extent."""
    layout = config.layout.individual
    bounded_start = is_bounded_beginning(row.beginning)
    bounded_end = is_bounded_ending(row.ending)
    if bounded_start:
        x = scale.to_x(row.beginning)
    else:
        x = layout.x_margin - chevron_offset(config)
    if bounded_end:
        width = max(0.0, scale.to_x(row.ending) - x)
    else:
        width = layout.temporal_margin
    return RowPlacement(
        row=row,
        index=index,
        origin=Point(x, row_top(config, index)),
        size=Size(width, layout.height),
        open_start=not bounded_start,
        open_end=not bounded_end,
    )


def assign_rows(
    config: DiagramConfig, scale: TimeScale, rows: Sequence[DisplayRow]
) -> list[RowPlacement]:
    return [place_row(config, scale, row, index) for index, row in enumerate(rows)]

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from domain.diagram_config import DiagramConfig
from domain.models import (
    Activity,
    Interval,
    Participation,
    ParticipationSegment,
    Point,
    RowPlacement,
    Size,
)
from domain.services.time_mapping import TimeScale


@dataclass(frozen=True)
class VisibleParticipation:
    activity: Activity
    participation: Participation
    interval: Interval
    order: int


@dataclass(frozen=True)
class LaneAssignment:
    entry: VisibleParticipation
    interval: Interval
    lane_index: int
    total_lanes: int


def breakpoints(entries: Sequence[VisibleParticipation]) -> list[float]:
    instants: set[float] = set()
    for entry in entries:
        instants.add(entry.interval.start)
        instants.add(entry.interval.end)
    return sorted(instants)


def pack_lanes(entries: Sequence[VisibleParticipation]) -> list[LaneAssignment]:
    """Split time at every breakpoint and stack the participations active in each piece.

    Lanes within a piece are ordered by activity beginning, ties keep input order.
    """
    points = breakpoints(entries)
    assignments: list[LaneAssignment] = []
    for t0, t1 in zip(points, points[1:]):
        active = [
            entry
            for entry in entries
            if entry.interval.start < t1 and entry.interval.end > t0
        ]
        if not active:
            continue
        active.sort(key=lambda entry: (entry.activity.beginning, entry.order))
        piece = Interval(t0, t1)
        for lane_index, entry in enumerate(active):
            assignments.append(
                LaneAssignment(
                    entry=entry,
                    interval=piece,
                    lane_index=lane_index,
                    total_lanes=len(active),
                )
            )
    return assignments


def lane_geometry(
    config: DiagramConfig, placement: RowPlacement, lane_index: int, total_lanes: int
) -> tuple[float, float]:
    layout = config.layout.individual
    band = layout.band_height
    group_top = placement.top + (placement.size.height - band) / 2
    lane_height = band / total_lanes
    height = lane_height - layout.lane_gap if total_lanes > 1 else lane_height
    return group_top + lane_index * lane_height, max(0.0, height)


def pack_row_segments(
    config: DiagramConfig,
    scale: TimeScale,
    placement: RowPlacement,
    entries: Sequence[VisibleParticipation],
) -> list[ParticipationSegment]:
    segments: list[ParticipationSegment] = []
    row = placement.row
    for assignment in pack_lanes(entries):
        y, height = lane_geometry(
            config, placement, assignment.lane_index, assignment.total_lanes
        )
        piece = assignment.interval
        segments.append(
            ParticipationSegment(
                activity_id=assignment.entry.activity.id,
                row_id=row.row_id,
                individual_id=row.individual.id,
                participation=assignment.entry.participation,
                interval=piece,
                lane_index=assignment.lane_index,
                total_lanes=assignment.total_lanes,
                origin=Point(scale.to_x(piece.start), y),
                size=Size(scale.span(piece.start, piece.end), height),
            )
        )
    return segments

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import Dict, List

from domain.diagram_config import DiagramConfig
from domain.models import (
    AxisPlacement,
    InstallationPeriodPlacement,
    InstallationRow,
    Interval,
    LayoutResult,
    ModelSnapshot,
    ParticipationSegment,
    Point,
    RowKey,
    RowPlacement,
    Size,
    SpaceTimePlan,
)
from domain.ports.layout import LayoutEngine
from domain.services.assign_rows import assign_rows
from domain.services.build_display_rows import (
    DiagramView,
    activities_in_view,
    build_display_rows,
)
from domain.services.build_layout_shapes import SpaceTimeShapeBuilder
from domain.services.compose_activity_boxes import compose_activity_boxes
from domain.services.pack_participation_lanes import VisibleParticipation, pack_row_segments
from domain.services.place_labels import place_labels
from domain.services.resolve_visibility import VisibilityResolver
from domain.services.time_mapping import TimeScale, build_time_scale
from domain.services.viewport import viewport_size

logger = logging.getLogger(__name__)


class SpaceTimeLayoutEngine(LayoutEngine):
    def __init__(self, config: DiagramConfig | None = None) -> None:
        self.config = config or DiagramConfig()

    def build_plan(self, snapshot: ModelSnapshot, view: DiagramView | None = None) -> SpaceTimePlan:
        view = view or DiagramView()
        resolver = VisibilityResolver.for_snapshot(snapshot)
        activities = activities_in_view(snapshot, view)
        display_rows = build_display_rows(snapshot, resolver, view)

        scale = build_time_scale(self.config, activities, display_rows)
        rows = assign_rows(self.config, scale, display_rows)
        rows_by_key: Dict[RowKey, RowPlacement] = {placement.row.key: placement for placement in rows}

        boxes = compose_activity_boxes(self.config, scale, activities, rows_by_key)

        entries_by_row: Dict[RowKey, List[VisibleParticipation]] = defaultdict(list)
        order = 0
        for activity in activities:
            for participation in activity.participations:
                placement = rows_by_key.get(participation.row_key)
                if placement is None:
                    logger.debug(
                        "Skipping participation of %s in %s: no such row",
                        participation.individual_id,
                        activity.id,
                    )
                    continue
                interval = resolver.visible_interval(activity, placement.row)
                if interval is None:
                    continue
                entries_by_row[placement.row.key].append(
                    VisibleParticipation(
                        activity=activity,
                        participation=participation,
                        interval=interval,
                        order=order,
                    )
                )
                order += 1

        segments: List[ParticipationSegment] = []
        for placement in rows:
            entries = entries_by_row.get(placement.row.key)
            if entries:
                segments.extend(pack_row_segments(self.config, scale, placement, entries))

        periods = self._installation_periods(rows, scale)
        labels = place_labels(self.config, rows, boxes)
        canvas = viewport_size(self.config, len(rows))
        axes = self._axes(canvas) if self.config.presentation.axis.enabled else []

        return SpaceTimePlan(
            rows=rows,
            activities=boxes,
            segments=segments,
            installation_periods=periods,
            labels=labels,
            axes=axes,
            canvas=canvas,
        )

    def _installation_periods(
        self,
        rows: Sequence[RowPlacement],
        scale: TimeScale,
    ) -> List[InstallationPeriodPlacement]:
        periods: List[InstallationPeriodPlacement] = []
        for placement in rows:
            ref = placement.row.ref
            if not isinstance(ref, InstallationRow):
                continue
            installation = placement.row.individual.installation(ref.installation_id)
            if installation is None:
                continue
            # row extent is the installation period already cropped to its target
            start = max(placement.row.beginning, scale.start_of_time)
            end = min(placement.row.ending, scale.end_of_time)
            if end <= start:
                continue
            periods.append(
                InstallationPeriodPlacement(
                    row_id=ref.row_id,
                    installation_id=installation.id,
                    interval=Interval(start, end),
                    origin=Point(scale.to_x(start), placement.top),
                    size=Size(scale.span(start, end), placement.size.height),
                )
            )
        return periods

    def _axes(self, canvas: Size) -> List[AxisPlacement]:
        axis = self.config.presentation.axis
        width, height = canvas.width, canvas.height
        time_axis = AxisPlacement(
            role="time_axis",
            start=Point(axis.margin, height - axis.margin),
            end=Point(width - axis.end_margin, height - axis.margin),
            label="Time",
            label_position=Point(width / 2 - axis.end_margin, height - axis.margin + axis.text_offset_x),
        )
        space_axis = AxisPlacement(
            role="space_axis",
            start=Point(axis.margin, height - axis.margin + axis.width / 2),
            end=Point(axis.margin, axis.end_margin),
            label="Space",
            label_position=Point(axis.margin * 2 + axis.text_offset_y, height / 2 + axis.margin),
            label_rotation=270.0,
        )
        return [time_axis, space_axis]


def layout(
    snapshot: ModelSnapshot,
    config: DiagramConfig | None = None,
    view: DiagramView | None = None,
) -> LayoutResult:
    """Compute the full diagram for one model snapshot."""
    config = config or DiagramConfig()
    builder = SpaceTimeShapeBuilder(SpaceTimeLayoutEngine(config), config)
    return builder.convert(snapshot, view)

from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import List

from domain.diagram_config import DiagramConfig
from domain.models import (
    ActivityPlacement,
    AxisPlacement,
    InstallationPeriodPlacement,
    LabelPlacement,
    LayoutResult,
    LineShape,
    ModelSnapshot,
    ParticipationSegment,
    RectShape,
    RowPlacement,
    Shape,
    ShapeKeys,
    ShapeStyle,
    TextShape,
)
from domain.ports.layout import LayoutEngine
from domain.services.build_display_rows import DiagramView


class SpaceTimeShapeBuilder:
    """Turns a space-time plan into the flat shape list handed to the renderer.

    Shapes are emitted in paint order: rows, row labels, activities, activity
    labels, participation segments, installation periods, axes.
    """

    def __init__(self, layout_engine: LayoutEngine, config: DiagramConfig) -> None:
        self.layout_engine = layout_engine
        self.config = config
        self.namespace = uuid.uuid5(uuid.NAMESPACE_DNS, "spacetime-layout")

    def convert(self, snapshot: ModelSnapshot, view: DiagramView | None = None) -> LayoutResult:
        plan = self.layout_engine.build_plan(snapshot, view)
        individual_labels = [label for label in plan.labels if label.role == "individual_label"]
        activity_labels = [label for label in plan.labels if label.role == "activity_label"]

        shapes: List[Shape] = []
        shapes.extend(self._build_rows(plan.rows))
        shapes.extend(self._build_labels(individual_labels, self.config.labels.individual.color))
        shapes.extend(self._build_activities(plan.activities))
        shapes.extend(self._build_labels(activity_labels, self.config.labels.activity.color))
        shapes.extend(self._build_segments(plan.segments))
        shapes.extend(self._build_installation_periods(plan.installation_periods))
        shapes.extend(self._build_axes(plan.axes))

        metadata = {
            "row_count": len(plan.rows),
            "activity_count": len(plan.activities),
        }
        if snapshot.name:
            metadata["model_name"] = snapshot.name
        return LayoutResult(shapes=shapes, canvas=plan.canvas, metadata=metadata)

    def _build_rows(self, rows: Iterable[RowPlacement]) -> List[Shape]:
        style = self.config.presentation.individual
        return [
            RectShape(
                shape_id=self._stable_id("individual", placement.row.row_id),
                kind="individual",
                origin=placement.origin,
                size=placement.size,
                style=ShapeStyle(
                    fill=style.fill, stroke=style.stroke, stroke_width=style.stroke_width
                ),
                keys=ShapeKeys(
                    individual_id=placement.row.individual.id, row_id=placement.row.row_id
                ),
                open_start=placement.open_start,
                open_end=placement.open_end,
            )
            for placement in rows
        ]

    def _build_activities(self, boxes: Iterable[ActivityPlacement]) -> List[Shape]:
        style = self.config.presentation.activity
        shapes: List[Shape] = []
        for box in boxes:
            shapes.append(
                RectShape(
                    shape_id=self._stable_id("activity", box.activity.id),
                    kind="activity",
                    origin=box.origin,
                    size=box.size,
                    style=ShapeStyle(
                        fill=style.fill[box.index % len(style.fill)],
                        stroke=style.stroke[box.index % len(style.stroke)],
                        stroke_width=style.stroke_width,
                        stroke_dasharray=style.stroke_dasharray,
                        opacity=style.opacity,
                    ),
                    keys=ShapeKeys(activity_id=box.activity.id),
                )
            )
        return shapes

    def _build_segments(self, segments: Iterable[ParticipationSegment]) -> List[Shape]:
        style = self.config.presentation.participation
        return [
            RectShape(
                shape_id=self._stable_id(
                    "participation",
                    segment.activity_id,
                    segment.row_id,
                    repr(segment.interval.start),
                    str(segment.lane_index),
                ),
                kind="participation",
                origin=segment.origin,
                size=segment.size,
                style=ShapeStyle(
                    fill=style.fill,
                    stroke=style.stroke,
                    stroke_width=style.stroke_width,
                    stroke_dasharray=style.stroke_dasharray,
                    opacity=style.opacity,
                ),
                keys=ShapeKeys(
                    activity_id=segment.activity_id,
                    individual_id=segment.individual_id,
                    row_id=segment.row_id,
                    participation_key=segment.participation_key,
                ),
            )
            for segment in segments
        ]

    def _build_installation_periods(
        self, periods: Iterable[InstallationPeriodPlacement]
    ) -> List[Shape]:
        style = self.config.presentation.installation
        return [
            RectShape(
                shape_id=self._stable_id("installation", period.row_id, period.installation_id),
                kind="installation",
                origin=period.origin,
                size=period.size,
                style=ShapeStyle(
                    fill=style.fill, stroke=style.stroke, stroke_width=style.stroke_width
                ),
                keys=ShapeKeys(row_id=period.row_id),
            )
            for period in periods
        ]

    def _build_labels(self, labels: Iterable[LabelPlacement], color: str) -> List[Shape]:
        shapes: List[Shape] = []
        for label in labels:
            if label.role == "individual_label":
                keys = ShapeKeys(row_id=label.owner_id)
            else:
                keys = ShapeKeys(activity_id=label.owner_id)
            shapes.append(
                TextShape(
                    shape_id=self._stable_id(label.role, label.owner_id),
                    kind=label.role,
                    position=label.position,
                    content=label.text,
                    font_size=label.font_size,
                    anchor=label.anchor,
                    color=color,
                    keys=keys,
                )
            )
        return shapes

    def _build_axes(self, axes: Iterable[AxisPlacement]) -> List[Shape]:
        axis_style = self.config.presentation.axis
        shapes: List[Shape] = []
        for axis in axes:
            shapes.append(
                LineShape(
                    shape_id=self._stable_id(axis.role),
                    kind=axis.role,
                    start=axis.start,
                    end=axis.end,
                    style=ShapeStyle(stroke=axis_style.colour, stroke_width=axis_style.width),
                )
            )
            shapes.append(
                TextShape(
                    shape_id=self._stable_id(axis.role, "label"),
                    kind="axis_label",
                    position=axis.label_position,
                    content=axis.label,
                    font_size="0.8em",
                    anchor="middle" if axis.label_rotation else "start",
                    color="white",
                    rotation=axis.label_rotation,
                )
            )
        return shapes

    def _stable_id(self, *parts: str) -> str:
        return str(uuid.uuid5(self.namespace, "|".join(parts)))

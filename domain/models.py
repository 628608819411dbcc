from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

BEFORE_TIME = -1
END_OF_TIME = 9_999_999_999_999
LAYOUT_SCHEMA_VERSION = "1.0"


def is_bounded_beginning(value: float) -> bool:
    return value > BEFORE_TIME


def is_bounded_ending(value: float) -> bool:
    return value < END_OF_TIME


class EntityType(str, Enum):
    INDIVIDUAL = "Individual"
    SYSTEM = "System"
    SYSTEM_COMPONENT = "SystemComponent"
    INSTALLED_COMPONENT = "InstalledComponent"


class SnapshotModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class Kind(SnapshotModel):
    id: str
    name: str


class Installation(SnapshotModel):
    id: str = Field(..., min_length=1)
    component_id: str
    target_id: str
    beginning: float = 0
    ending: Optional[float] = None
    system_context_id: Optional[str] = None
    sc_installation_context_id: Optional[str] = None


class Individual(SnapshotModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    type: Optional[Kind] = None
    description: Optional[str] = None
    beginning: float = BEFORE_TIME
    ending: float = END_OF_TIME
    begins_with_participant: bool = False
    ends_with_participant: bool = False
    entity_type: EntityType = EntityType.INDIVIDUAL
    installations: List[Installation] = Field(default_factory=list)

    @model_validator(mode="after")
    def ensure_ordered_extent(self) -> "Individual":
        if (
            is_bounded_beginning(self.beginning)
            and is_bounded_ending(self.ending)
            and self.beginning > self.ending
        ):
            msg = f"Individual {self.id} begins after it ends"
            raise ValueError(msg)
        return self

    @property
    def is_installable(self) -> bool:
        return self.entity_type in {
            EntityType.SYSTEM_COMPONENT,
            EntityType.INSTALLED_COMPONENT,
        }

    def installation(self, installation_id: str) -> Installation | None:
        for inst in self.installations:
            if inst.id == installation_id:
                return inst
        return None


class Participation(SnapshotModel):
    individual_id: str = Field(..., min_length=1)
    role: Optional[Kind] = None
    installation_id: Optional[str] = None
    context_installation_id: Optional[str] = None

    @property
    def row_key(self) -> "RowKey":
        return (self.individual_id, self.installation_id, self.context_installation_id)


class Activity(SnapshotModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    type: Optional[Kind] = None
    description: Optional[str] = None
    beginning: float
    ending: float
    part_of: Optional[str] = None
    participations: List[Participation] = Field(default_factory=list)

    @model_validator(mode="after")
    def ensure_positive_duration(self) -> "Activity":
        if self.beginning >= self.ending:
            msg = f"Activity {self.id} must begin before it ends"
            raise ValueError(msg)
        return self

    @field_validator("participations", mode="after")
    @classmethod
    def collapse_duplicate_participations(
        cls, participations: List[Participation]
    ) -> List[Participation]:
        # Later entries replace earlier ones for the same row, keeping first position.
        by_key: Dict[RowKey, Participation] = {}
        for participation in participations:
            by_key[participation.row_key] = participation
        return list(by_key.values())


class ModelSnapshot(SnapshotModel):
    name: Optional[str] = None
    description: Optional[str] = None
    individuals: List[Individual] = Field(default_factory=list)
    activities: List[Activity] = Field(default_factory=list)

    @field_validator("individuals", mode="after")
    @classmethod
    def ensure_unique_individual_ids(cls, individuals: List[Individual]) -> List[Individual]:
        seen: Set[str] = set()
        for individual in individuals:
            if individual.id in seen:
                msg = f"Duplicate individual id found: {individual.id}"
                raise ValueError(msg)
            seen.add(individual.id)
        return individuals

    @field_validator("activities", mode="after")
    @classmethod
    def ensure_unique_activity_ids(cls, activities: List[Activity]) -> List[Activity]:
        seen: Set[str] = set()
        for activity in activities:
            if activity.id in seen:
                msg = f"Duplicate activity id found: {activity.id}"
                raise ValueError(msg)
            seen.add(activity.id)
        return activities

    def individual(self, individual_id: str) -> Individual | None:
        for individual in self.individuals:
            if individual.id == individual_id:
                return individual
        return None

    def activity(self, activity_id: str) -> Activity | None:
        for activity in self.activities:
            if activity.id == activity_id:
                return activity
        return None

    def individuals_by_id(self) -> Dict[str, Individual]:
        return {individual.id: individual for individual in self.individuals}

    def earliest_participant_beginning(self, individual_id: str) -> float:
        """Beginning of the earliest activity the individual takes part in, or BEFORE_TIME."""
        beginnings = [
            activity.beginning
            for activity in self.activities
            if any(p.individual_id == individual_id for p in activity.participations)
        ]
        return min(beginnings, default=BEFORE_TIME)

    def last_participant_ending(self, individual_id: str) -> float:
        """Ending of the latest activity the individual takes part in, or END_OF_TIME."""
        endings = [
            activity.ending
            for activity in self.activities
            if any(p.individual_id == individual_id for p in activity.participations)
        ]
        return max(endings, default=END_OF_TIME)

    def has_participants(self, individual_id: str) -> bool:
        return any(
            p.individual_id == individual_id
            for activity in self.activities
            for p in activity.participations
        )

    def parts_of(self, activity_id: str) -> List[Activity]:
        return [activity for activity in self.activities if activity.part_of == activity_id]

    def has_parts(self, activity_id: str) -> bool:
        return bool(self.parts_of(activity_id))


RowKey = tuple[str, Optional[str], Optional[str]]


@dataclass(frozen=True)
class PlainRow:
    individual_id: str

    @property
    def key(self) -> RowKey:
        return (self.individual_id, None, None)

    @property
    def row_id(self) -> str:
        return self.individual_id


@dataclass(frozen=True)
class InstallationRow:
    component_id: str
    target_id: str
    installation_id: str
    context_installation_id: str | None = None

    @property
    def key(self) -> RowKey:
        return (self.component_id, self.installation_id, self.context_installation_id)

    @property
    def row_id(self) -> str:
        row_id = f"{self.component_id}__installed_in__{self.target_id}__{self.installation_id}"
        if self.context_installation_id:
            row_id += f"__ctx_{self.context_installation_id}"
        return row_id


RowRef = Union[PlainRow, InstallationRow]


@dataclass(frozen=True)
class DisplayRow:
    ref: RowRef
    individual: Individual
    beginning: float
    ending: float
    nesting_level: int = 0

    @property
    def key(self) -> RowKey:
        return self.ref.key

    @property
    def row_id(self) -> str:
        return self.ref.row_id

    @property
    def is_virtual(self) -> bool:
        return isinstance(self.ref, InstallationRow)


@dataclass(frozen=True)
class Interval:
    start: float
    end: float

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def covers(self, instant: float) -> bool:
        return self.start <= instant < self.end

    def intersect(self, other: "Interval") -> "Interval":
        return Interval(max(self.start, other.start), min(self.end, other.end))


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Box:
    origin: Point
    size: Size

    @property
    def right(self) -> float:
        return self.origin.x + self.size.width

    @property
    def bottom(self) -> float:
        return self.origin.y + self.size.height

    def overlaps(self, other: "Box") -> bool:
        return (
            self.origin.x < other.right
            and other.origin.x < self.right
            and self.origin.y < other.bottom
            and other.origin.y < self.bottom
        )


@dataclass(frozen=True)
class RowPlacement:
    row: DisplayRow
    index: int
    origin: Point
    size: Size
    open_start: bool
    open_end: bool

    @property
    def top(self) -> float:
        return self.origin.y

    @property
    def bottom(self) -> float:
        return self.origin.y + self.size.height


@dataclass(frozen=True)
class ActivityPlacement:
    activity: Activity
    index: int
    origin: Point
    size: Size
    row_count: int
    participant_count: int


@dataclass(frozen=True)
class ParticipationSegment:
    activity_id: str
    row_id: str
    individual_id: str
    participation: Participation
    interval: Interval
    lane_index: int
    total_lanes: int
    origin: Point
    size: Size

    @property
    def participation_key(self) -> str:
        return f"{self.activity_id}::{self.row_id}"


@dataclass(frozen=True)
class InstallationPeriodPlacement:
    row_id: str
    installation_id: str
    interval: Interval
    origin: Point
    size: Size


@dataclass(frozen=True)
class LabelPlacement:
    role: str  # "individual_label" or "activity_label"
    owner_id: str
    text: str
    anchor: str  # "start" or "middle"
    position: Point
    box: Box
    font_size: str


@dataclass(frozen=True)
class AxisPlacement:
    role: str  # "time_axis" or "space_axis"
    start: Point
    end: Point
    label: str
    label_position: Point
    label_rotation: float = 0.0


@dataclass(frozen=True)
class SpaceTimePlan:
    rows: List[RowPlacement]
    activities: List[ActivityPlacement]
    segments: List[ParticipationSegment]
    installation_periods: List[InstallationPeriodPlacement]
    labels: List[LabelPlacement]
    axes: List[AxisPlacement]
    canvas: Size


@dataclass(frozen=True)
class ShapeStyle:
    fill: str | None = None
    stroke: str | None = None
    stroke_width: str | float | None = None
    stroke_dasharray: str | None = None
    opacity: str | None = None


@dataclass(frozen=True)
class ShapeKeys:
    activity_id: str | None = None
    individual_id: str | None = None
    row_id: str | None = None
    participation_key: str | None = None


@dataclass(frozen=True)
class RectShape:
    shape_id: str
    kind: str
    origin: Point
    size: Size
    style: ShapeStyle
    keys: ShapeKeys = ShapeKeys()
    open_start: bool = False
    open_end: bool = False

    def to_dict(self) -> dict:
        return {
            "type": "rect",
            "id": self.shape_id,
            "kind": self.kind,
            "x": self.origin.x,
            "y": self.origin.y,
            "width": self.size.width,
            "height": self.size.height,
            "openStart": self.open_start,
            "openEnd": self.open_end,
            **_style_dict(self.style),
            **_keys_dict(self.keys),
        }


@dataclass(frozen=True)
class TextShape:
    shape_id: str
    kind: str
    position: Point
    content: str
    font_size: str
    anchor: str
    color: str | None = None
    rotation: float = 0.0
    keys: ShapeKeys = ShapeKeys()

    def to_dict(self) -> dict:
        return {
            "type": "text",
            "id": self.shape_id,
            "kind": self.kind,
            "x": self.position.x,
            "y": self.position.y,
            "content": self.content,
            "fontSize": self.font_size,
            "anchor": self.anchor,
            "color": self.color,
            "rotation": self.rotation,
            **_keys_dict(self.keys),
        }


@dataclass(frozen=True)
class LineShape:
    shape_id: str
    kind: str
    start: Point
    end: Point
    style: ShapeStyle
    arrow_end: bool = True

    def to_dict(self) -> dict:
        return {
            "type": "line",
            "id": self.shape_id,
            "kind": self.kind,
            "x1": self.start.x,
            "y1": self.start.y,
            "x2": self.end.x,
            "y2": self.end.y,
            "arrowEnd": self.arrow_end,
            **_style_dict(self.style),
        }


Shape = Union[RectShape, TextShape, LineShape]


@dataclass(frozen=True)
class LayoutResult:
    shapes: List[Shape]
    canvas: Size
    metadata: dict = field(default_factory=dict)

    def shapes_of_kind(self, kind: str) -> List[Shape]:
        return [shape for shape in self.shapes if shape.kind == kind]

    def to_dict(self) -> dict:
        return {
            "type": "spacetime-layout",
            "version": LAYOUT_SCHEMA_VERSION,
            "canvas": {"width": self.canvas.width, "height": self.canvas.height},
            "metadata": self.metadata,
            "shapes": [shape.to_dict() for shape in self.shapes],
        }


def _style_dict(style: ShapeStyle) -> dict:
    payload = {
        "fill": style.fill,
        "stroke": style.stroke,
        "strokeWidth": style.stroke_width,
        "strokeDasharray": style.stroke_dasharray,
        "opacity": style.opacity,
    }
    return {key: value for key, value in payload.items() if value is not None}


def _keys_dict(keys: ShapeKeys) -> dict:
    payload = {
        "activityId": keys.activity_id,
        "individualId": keys.individual_id,
        "rowId": keys.row_id,
        "participationKey": keys.participation_key,
    }
    return {key: value for key, value in payload.items() if value is not None}

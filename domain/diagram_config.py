from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ConfigModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class ViewPortConfig(ConfigModel):
    zoom: float = 1.0
    x: float = 1000.0


class IndividualLayoutConfig(ConfigModel):
    top_margin: float = 25.0
    bottom_margin: float = 30.0
    height: float = 20.0
    gap: float = 10.0
    x_margin: float = 40.0
    temporal_margin: float = 10.0
    text_length: float = 100.0
    max_band_height: Optional[float] = None
    lane_gap: float = 1.0

    @property
    def band_height(self) -> float:
        if self.max_band_height is None:
            return self.height
        return min(self.max_band_height, self.height)


class LayoutSection(ConfigModel):
    individual: IndividualLayoutConfig = IndividualLayoutConfig()


class IndividualPresentation(ConfigModel):
    stroke_width: str = "1px"
    stroke: str = "#7F7F7F"
    fill: str = "#B1B1B0"
    fill_hover: str = "#8d8d8b"


class ActivityPresentation(ConfigModel):
    stroke_width: str = "1px"
    stroke: List[str] = Field(default_factory=lambda: ["#29123b"])
    stroke_dasharray: str = "5,3"
    fill: List[str] = Field(
        default_factory=lambda: [
            "#440099",
            "#e7004c",
            "#ff9664",
            "#00bbcc",
            "#a1ded2",
            "#981f92",
            "#f15bb5",
            "#fee440",
            "#00bb4f",
            "#292b2c",
            "#0d6efd",
            "#ffffff",
        ]
    )
    opacity: str = "0.5"
    opacity_hover: str = "0.7"

    @field_validator("stroke", "fill", mode="before")
    @classmethod
    def normalize_palette(cls, value: object) -> List[str]:
        if value is None or value == "" or value == []:
            return ["#29123b"]
        if isinstance(value, str):
            return [value]
        return [str(item) for item in value]  # type: ignore[union-attr]


class ParticipationPresentation(ConfigModel):
    stroke_width: str = "1px"
    stroke: str = "#29123b"
    stroke_dasharray: str = "5,3"
    fill: str = "#F2F2F2"
    opacity: str = "0.5"
    opacity_hover: str = "0.9"


class InstallationPresentation(ConfigModel):
    stroke_width: str = "1px"
    stroke: str = "#374151"
    fill: str = "url(#diagonal-hatch)"


class AxisPresentation(ConfigModel):
    enabled: bool = True
    colour: str = "#7F7F7F"
    width: float = 15.0
    margin: float = 20.0
    text_offset_x: float = 5.0
    text_offset_y: float = 4.0
    end_margin: float = 30.0


class PresentationSection(ConfigModel):
    individual: IndividualPresentation = IndividualPresentation()
    activity: ActivityPresentation = ActivityPresentation()
    participation: ParticipationPresentation = ParticipationPresentation()
    installation: InstallationPresentation = InstallationPresentation()
    axis: AxisPresentation = AxisPresentation()


class IndividualLabelsConfig(ConfigModel):
    enabled: bool = True
    left_margin: float = 5.0
    top_margin: float = 5.0
    color: str = "black"
    font_size: str = "0.8em"
    max_chars: int = 24


class ActivityLabelsConfig(ConfigModel):
    enabled: bool = True
    top_margin: float = 5.0
    color: str = "#441d62"
    font_size: str = "0.7em"
    max_chars: int = 24


class LabelsSection(ConfigModel):
    individual: IndividualLabelsConfig = IndividualLabelsConfig()
    activity: ActivityLabelsConfig = ActivityLabelsConfig()


class DiagramConfig(ConfigModel):
    view_port: ViewPortConfig = ViewPortConfig()
    layout: LayoutSection = LayoutSection()
    presentation: PresentationSection = PresentationSection()
    labels: LabelsSection = LabelsSection()

    @property
    def base_width(self) -> float:
        return self.view_port.x * self.view_port.zoom

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from domain.diagram_config import DiagramConfig
from domain.models import Activity, DisplayRow, is_bounded_beginning, is_bounded_ending


@dataclass(frozen=True)
class TimeScale:
    start_of_time: float
    end_of_time: float
    x_base: float
    available_width: float
    label_column: bool

    @property
    def duration(self) -> float:
        duration = self.end_of_time - self.start_of_time
        return duration if duration > 0 else 1.0

    @property
    def time_interval(self) -> float:
        return self.available_width / self.duration

    def to_x(self, instant: float) -> float:
        return self.x_base + (instant - self.start_of_time) * self.time_interval

    def span(self, beginning: float, ending: float) -> float:
        return (ending - beginning) * self.time_interval


def reserves_label_column(config: DiagramConfig, rows: Sequence[DisplayRow]) -> bool:
    """Entity labels get their own column only when some row runs off the left edge."""
    if not config.labels.individual.enabled:
        return False
    if not rows:
        return True
    return any(not is_bounded_beginning(row.beginning) for row in rows)


def time_domain(
    activities: Sequence[Activity], rows: Sequence[DisplayRow]
) -> tuple[float, float]:
    if activities:
        return (
            min(activity.beginning for activity in activities),
            max(activity.ending for activity in activities),
        )
    beginnings = [row.beginning for row in rows if is_bounded_beginning(row.beginning)]
    endings = [row.ending for row in rows if is_bounded_ending(row.ending)]
    instants = beginnings + endings
    if not instants:
        return 0.0, 0.0
    return min(instants), max(instants)


def build_time_scale(
    config: DiagramConfig,
    activities: Sequence[Activity],
    rows: Sequence[DisplayRow],
) -> TimeScale:
    layout = config.layout.individual
    start_of_time, end_of_time = time_domain(activities, rows)
    label_column = reserves_label_column(config, rows)

    available_width = config.base_width - layout.x_margin * 2 - layout.temporal_margin
    x_base = layout.x_margin + layout.temporal_margin
    if label_column:
        available_width -= layout.text_length
        x_base += layout.text_length

    return TimeScale(
        start_of_time=start_of_time,
        end_of_time=end_of_time,
        x_base=x_base,
        available_width=available_width,
        label_column=label_column,
    )

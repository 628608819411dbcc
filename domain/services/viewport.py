from __future__ import annotations

from domain.diagram_config import DiagramConfig
from domain.models import Size


def viewport_height(config: DiagramConfig, row_count: int) -> float:
    layout = config.layout.individual
    rows = max(1, row_count)
    return (
        layout.top_margin
        + layout.gap
        + rows * (layout.height + layout.gap)
        + layout.bottom_margin
    )


def viewport_size(config: DiagramConfig, row_count: int) -> Size:
    return Size(config.base_width, viewport_height(config, row_count))

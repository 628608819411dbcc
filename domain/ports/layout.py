from __future__ import annotations

from typing import Protocol

from domain.models import ModelSnapshot, SpaceTimePlan
from domain.services.build_display_rows import DiagramView


class LayoutEngine(Protocol):
    def build_plan(self, snapshot: ModelSnapshot, view: DiagramView | None = None) -> SpaceTimePlan:
        ...

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import LayoutResult, ModelSnapshot


class SnapshotRepository(Protocol):
    def load_all_with_paths(self, directory: Path) -> Sequence[tuple[Path, ModelSnapshot]]: ...

    def load_by_path(self, path: Path) -> ModelSnapshot: ...


class LayoutResultRepository(Protocol):
    def save(self, result: LayoutResult, path: Path) -> None: ...

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from adapters.filesystem.json_utils import load_json, write_json_atomic
from domain.models import LayoutResult, ModelSnapshot
from domain.ports.repositories import LayoutResultRepository, SnapshotRepository

LAYOUT_SUFFIX = ".layout.json"


class FileSystemSnapshotRepository(SnapshotRepository):
    def load_all_with_paths(self, directory: Path) -> List[tuple[Path, ModelSnapshot]]:
        return [(path, self.load_by_path(path)) for path in sorted(self._iter_paths(directory))]

    def load_by_path(self, path: Path) -> ModelSnapshot:
        if not path.exists():
            msg = f"Snapshot file not found: {path}"
            raise FileNotFoundError(msg)
        return ModelSnapshot.model_validate(load_json(path))

    def _iter_paths(self, directory: Path) -> Iterable[Path]:
        for path in directory.glob("*.json"):
            if path.name.endswith(LAYOUT_SUFFIX):
                continue
            yield path


class FileSystemLayoutResultRepository(LayoutResultRepository):
    def save(self, result: LayoutResult, path: Path) -> None:
        write_json_atomic(path, result.to_dict())

    @staticmethod
    def target_path(output_dir: Path, snapshot_path: Path) -> Path:
        return output_dir / f"{snapshot_path.stem}{LAYOUT_SUFFIX}"

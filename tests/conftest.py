from __future__ import annotations

import os
from collections.abc import Callable, Generator
from typing import Any

import pytest

from domain.diagram_config import DiagramConfig
from domain.models import ModelSnapshot


def _clear_stl_env() -> None:
    for key in list(os.environ):
        if key.startswith("STL_"):
            os.environ.pop(key, None)


_clear_stl_env()


@pytest.fixture(autouse=True)
def clear_stl_env() -> Generator[None, None, None]:
    _clear_stl_env()
    yield
    _clear_stl_env()


@pytest.fixture
def diagram_config() -> DiagramConfig:
    return DiagramConfig()


@pytest.fixture
def config_factory() -> Callable[..., DiagramConfig]:
    def _factory(**overrides: Any) -> DiagramConfig:
        return DiagramConfig.model_validate(overrides)

    return _factory


@pytest.fixture
def snapshot_factory() -> Callable[..., ModelSnapshot]:
    def _factory(
        individuals: list[dict[str, Any]] | None = None,
        activities: list[dict[str, Any]] | None = None,
    ) -> ModelSnapshot:
        return ModelSnapshot.model_validate(
            {"individuals": individuals or [], "activities": activities or []}
        )

    return _factory

from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.diagram_config import DiagramConfig
from domain.services.build_display_rows import DiagramView

DEFAULT_CONFIG_PATH = Path("config/spacetime.yaml")


class ViewSettings(BaseModel):
    activity_context: str | None = None
    hide_non_participating: bool = False

    def to_view(self) -> DiagramView:
        return DiagramView(
            activity_context=self.activity_context or None,
            hide_non_participating=self.hide_non_participating,
        )


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STL_", env_nested_delimiter="__")

    diagram: DiagramConfig = DiagramConfig()
    view: ViewSettings = ViewSettings()
    snapshot_dir: Path = Path("data/snapshots")
    layout_out_dir: Path = Path("data/layouts")

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("STL_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous

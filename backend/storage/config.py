"""Global app configuration (new-session defaults, export naming, prompts)."""

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from quiet_year.engine import DEFAULT_TURNS_PER_PLAYER
from quiet_year.models import Season

from .core import data_dir, write_atomic


class AppConfig(BaseModel):
    """Validated settings. Bad values are rejected before they are saved."""

    turns_per_player: int = Field(DEFAULT_TURNS_PER_PLAYER, gt=0)
    default_view_mode: Literal["type", "player"] = "type"
    export_filename: str = Field("quiet-year-save.json", min_length=1, pattern=r'^[^/\\"]+$')
    prompts: dict[Season, list[str]] = Field(default_factory=dict)


_SCALARS = ("turns_per_player", "default_view_mode", "export_filename")


def _config_path() -> Path:
    return data_dir() / "config.json"


def _merge_prompts(target: dict[str, list[str]], overrides: Any) -> None:
    if not isinstance(overrides, dict):
        return
    for season, prompts in overrides.items():
        if isinstance(prompts, list):
            target[season] = list(prompts)


def get_config() -> dict[str, Any]:
    """Read config, returning defaults merged with stored values."""
    config = AppConfig().model_dump()
    path = _config_path()
    if path.is_file():
        stored = json.loads(path.read_text())
        for key in _SCALARS:
            if key in stored:
                config[key] = stored[key]
        if "prompts" in stored:
            _merge_prompts(config["prompts"], stored["prompts"])
    return config


def update_config(fields: dict[str, Any]) -> dict[str, Any]:
    """Merge fields into config and persist. Returns full config.

    Scalars are overwritten; prompts are merged season by season.

    Raises:
        pydantic.ValidationError: the merged config is invalid; nothing is saved.
    """
    config = get_config()
    for key in _SCALARS:
        if key in fields:
            config[key] = fields[key]
    if "prompts" in fields:
        _merge_prompts(config["prompts"], fields["prompts"])
    config = AppConfig.model_validate(config).model_dump()
    write_atomic(_config_path(), json.dumps(config, indent=2))
    return config

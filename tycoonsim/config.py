from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import Difficulty

logger = logging.getLogger(__name__)

ENV_PREFIX = "TYCOONSIM_"


class SimConfig(BaseSettings):
    """Run settings. Environment (TYCOONSIM_*) beats the config file, which beats defaults."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore", validate_assignment=True)

    seed: Optional[int] = None
    difficulty: Difficulty = "normal"
    stable_size: int = Field(5, ge=1)
    schedule_days: int = Field(7, ge=1)
    starter_count: int = Field(3, ge=0)
    save_path: str = str(Path("saves") / "tycoon.json")
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings):
        # file values arrive as init kwargs; let the environment override them
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def load_config(path: Optional[Path] = None) -> SimConfig:
    """Defaults, overlaid with the JSON file at `path`, then the environment.

    An unreadable or invalid file logs a warning and falls back to defaults.
    Invalid environment values raise ValidationError.
    """
    if path is None or not path.exists():
        return SimConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8", errors="ignore"))
        if not isinstance(data, dict):
            raise ValueError("config root must be an object")
        return SimConfig(**data)
    except (ValueError, ValidationError) as exc:
        logger.warning("config at %s is unreadable (%s); using defaults", path, exc)
        return SimConfig()


def save_config(path: Path, cfg: SimConfig) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(cfg.model_dump_json(indent=2), encoding="utf-8")

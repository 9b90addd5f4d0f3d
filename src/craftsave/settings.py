from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Optional

import yaml
from platformdirs import user_config_dir

from .models import DEFAULT_NAME, SavefileOptions

logger = logging.getLogger(__name__)

APP_NAME = "craftsave"


def merge_settings(base: dict, overlay: Optional[dict]) -> dict:
    """Overlay nested mappings onto ``base`` without mutating either side."""
    merged = dict(base)
    for key, value in (overlay or {}).items():
        current = base.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            merged[key] = merge_settings(current, value)
        else:
            merged[key] = value
    return merged


@dataclass
class SavefileSettings:
    name: str = DEFAULT_NAME
    generate_element_uses: bool = True
    generate_reverse_recipe_map: bool = True

    def to_options(self) -> SavefileOptions:
        return SavefileOptions(
            name=self.name,
            generate_element_uses=self.generate_element_uses,
            generate_reverse_recipe_map=self.generate_reverse_recipe_map,
        )


@dataclass
class BinarySettings:
    append_header: bool = True


@dataclass
class LoggingSettings:
    level: str = "INFO"


@dataclass
class Settings:
    savefile: SavefileSettings = field(default_factory=SavefileSettings)
    binary: BinarySettings = field(default_factory=BinarySettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @staticmethod
    def default_path() -> Path:
        return Path(user_config_dir(APP_NAME)) / "settings.yaml"

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def _from_dict(cls, data: dict) -> "Settings":
        sections = {}
        for section in dataclasses.fields(cls):
            known = {f.name for f in dataclasses.fields(section.default_factory)}
            values = data.get(section.name) or {}
            for key in sorted(set(values) - known):
                logger.warning("Ignoring unknown setting %s.%s", section.name, key)
            sections[section.name] = section.default_factory(**{k: v for k, v in values.items() if k in known})
        return cls(**sections)

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "Settings":
        """Packaged defaults, then the user file at ``user_path`` when it exists."""
        try:
            with resources.files("craftsave.config").joinpath("default_settings.yaml").open("r", encoding="utf-8") as f:
                default_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            default_data = dataclasses.asdict(Settings())

        user_data = {}
        if user_path is not None:
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user settings from %s", user_path)
            else:
                logger.warning("User settings file not found: %s", user_path)

        settings = cls._from_dict(merge_settings(default_data, user_data))
        logger.debug("Settings merged: %s", settings)
        return settings

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(dataclasses.asdict(self), f, sort_keys=False)
        logger.info("Saved settings to %s", path)

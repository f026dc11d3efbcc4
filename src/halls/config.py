from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from jsonschema import Draft202012Validator
from platformdirs import user_config_dir

from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "crystal-halls"
USER_SETTINGS_FILE = "settings.yaml"

# HALLS_* variable -> (section, key, converter)
ENV_OVERRIDES = {
    "HALLS_SEED": ("world", "seed", int),
    "HALLS_LEVELS": ("world", "level_count", int),
    "HALLS_MAP_WIDTH": ("map", "width", int),
    "HALLS_MAP_HEIGHT": ("map", "height", int),
    "HALLS_BASE_VISION": ("view", "base_vision", int),
    "HALLS_TICK_SECONDS": ("pacing", "tick_seconds", float),
}


@dataclass(frozen=True)
class WorldConfig:
    """Immutable configuration threaded through generation and the turn protocol.

    Defaults mirror ``halls/data/defaults.yaml`` so tests can build a config
    without touching the filesystem.
    """

    level_count: int = 5
    seed: int = 1
    map_width: int = 64
    map_height: int = 40
    min_room_size: int = 5
    max_room_width: int = 14
    max_room_height: int = 10
    room_attempts: int = 40
    view_width: int = 41
    view_height: int = 25
    base_vision: int = 6
    warrior_hp: int = 30
    inventory_capacity: int = 8
    coin_value: int = 1
    evolve_interval: int = 100
    tick_seconds: float = 0.1

    def __post_init__(self) -> None:
        if self.level_count < 1:
            raise ConfigError("level_count must be >= 1")
        if self.min_room_size < 3:
            raise ConfigError("min_room_size must be >= 3 (wall ring plus interior)")
        if self.max_room_width < self.min_room_size or self.max_room_height < self.min_room_size:
            raise ConfigError("max room width/height must be >= min_room_size")
        if self.max_room_width > self.map_width - 2 or self.max_room_height > self.map_height - 2:
            raise ConfigError("rooms must fit inside the map with a one cell border")
        if self.room_attempts < 1:
            raise ConfigError("room_attempts must be >= 1")
        if self.seed < 0:
            raise ConfigError("seed must be >= 0")
        if self.warrior_hp < 1:
            raise ConfigError("warrior_hp must be >= 1")
        if self.view_width < 1 or self.view_height < 1:
            raise ConfigError("view width/height must be >= 1")
        if self.base_vision < 0:
            raise ConfigError("base_vision must be >= 0")
        if self.inventory_capacity < 0:
            raise ConfigError("inventory_capacity must be >= 0")
        if self.evolve_interval < 1:
            raise ConfigError("evolve_interval must be >= 1")
        if self.tick_seconds < 0:
            raise ConfigError("tick_seconds must be >= 0")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorldConfig":
        """Build a config from the sectioned mapping used by the YAML files."""
        world = data.get("world", {})
        map_ = data.get("map", {})
        view = data.get("view", {})
        warrior = data.get("warrior", {})
        economy = data.get("economy", {})
        pacing = data.get("pacing", {})
        defaults = cls.__dataclass_fields__
        return cls(
            level_count=int(world.get("level_count", defaults["level_count"].default)),
            seed=int(world.get("seed", defaults["seed"].default)),
            map_width=int(map_.get("width", defaults["map_width"].default)),
            map_height=int(map_.get("height", defaults["map_height"].default)),
            min_room_size=int(map_.get("min_room_size", defaults["min_room_size"].default)),
            max_room_width=int(map_.get("max_room_width", defaults["max_room_width"].default)),
            max_room_height=int(map_.get("max_room_height", defaults["max_room_height"].default)),
            room_attempts=int(map_.get("room_attempts", defaults["room_attempts"].default)),
            view_width=int(view.get("width", defaults["view_width"].default)),
            view_height=int(view.get("height", defaults["view_height"].default)),
            base_vision=int(view.get("base_vision", defaults["base_vision"].default)),
            warrior_hp=int(warrior.get("hp", defaults["warrior_hp"].default)),
            inventory_capacity=int(warrior.get("inventory_capacity", defaults["inventory_capacity"].default)),
            coin_value=int(economy.get("coin_value", defaults["coin_value"].default)),
            evolve_interval=int(pacing.get("evolve_interval", defaults["evolve_interval"].default)),
            tick_seconds=float(pacing.get("tick_seconds", defaults["tick_seconds"].default)),
        )

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {
            "world": {"level_count": self.level_count, "seed": self.seed},
            "map": {
                "width": self.map_width,
                "height": self.map_height,
                "min_room_size": self.min_room_size,
                "max_room_width": self.max_room_width,
                "max_room_height": self.max_room_height,
                "room_attempts": self.room_attempts,
            },
            "view": {"width": self.view_width, "height": self.view_height, "base_vision": self.base_vision},
            "warrior": {"hp": self.warrior_hp, "inventory_capacity": self.inventory_capacity},
            "economy": {"coin_value": self.coin_value},
            "pacing": {"evolve_interval": self.evolve_interval, "tick_seconds": self.tick_seconds},
        }


def default_user_path() -> Path:
    return Path(user_config_dir(APP_NAME)) / USER_SETTINGS_FILE


def _load_yaml(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")
    return data


def _load_defaults() -> dict:
    with resources.files("halls.data").joinpath("defaults.yaml").open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _load_schema() -> dict:
    with resources.files("halls.data").joinpath("config.schema.json").open("r", encoding="utf-8") as f:
        return json.load(f)


def _deep_merge(base: dict, overlay: dict) -> dict:
    merged = dict(base)
    for k, v in (overlay or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            merged[k] = _deep_merge(base[k], v)
        else:
            merged[k] = v
    return merged


def _apply_env(data: dict, env: Mapping[str, str]) -> dict:
    merged = _deep_merge(data, {})
    for var, (section, key, convert) in ENV_OVERRIDES.items():
        raw = env.get(var)
        if raw is None or raw == "":
            continue
        try:
            value = convert(raw)
        except ValueError as exc:
            raise ConfigError(f"{var}={raw!r} is not a valid {convert.__name__}") from exc
        merged.setdefault(section, {})
        merged[section] = dict(merged[section], **{key: value})
        logger.debug("Environment override %s -> %s.%s=%r", var, section, key, value)
    return merged


def validate_settings(data: dict) -> None:
    """
    Validate a sectioned settings mapping against the packaged JSON schema.

    Raises:
        ConfigError describing the first schema violation.
    """
    validator = Draft202012Validator(_load_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        for err in errors:
            logger.error("Settings validation error at %s: %s", list(err.path), err.message)
        first = errors[0]
        raise ConfigError(f"Invalid settings at {'.'.join(str(p) for p in first.path) or '<root>'}: {first.message}")


def load_config(user_path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None) -> WorldConfig:
    """Load configuration from built-in defaults, an optional user file and HALLS_* overrides.

    If user_path is None the platform config directory is consulted; a missing
    user file is not an error.
    """
    data = _load_defaults()
    path = user_path if user_path is not None else default_user_path()
    if path.exists():
        data = _deep_merge(data, _load_yaml(path))
        logger.info("Loaded user settings from %s", path)
    else:
        logger.debug("No user settings at %s; using defaults", path)
    data = _apply_env(data, os.environ if env is None else env)
    validate_settings(data)
    config = WorldConfig.from_dict(data)
    logger.debug("Resolved config: %s", config)
    return config


__all__ = ["WorldConfig", "default_user_path", "load_config", "validate_settings"]

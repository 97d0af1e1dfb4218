from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from jsonschema import Draft202012Validator
from platformdirs import user_config_dir

from ..constants import MAX_HEALTH, NOTIFICATION_SECONDS
from ..exceptions import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "loot1004"
CONFIG_ENV = "LOOT1004_CONFIG"


@dataclass(frozen=True)
class Difficulty:
    """A preset chosen before a run. Only the target score differs."""

    key: str
    label: str
    target: int


@dataclass(frozen=True)
class GameConfig:
    difficulties: Dict[str, Difficulty]
    default_difficulty: str = "normal"
    starting_cards: Dict[str, int] = field(
        default_factory=lambda: {"heal": 2, "trap_disarm": 3, "map": 2, "multiplier_card": 1}
    )
    max_health: int = MAX_HEALTH
    notification_seconds: float = NOTIFICATION_SECONDS

    def difficulty(self, key: str) -> Optional[Difficulty]:
        return self.difficulties.get(key)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "GameConfig":
        """Validate a parsed document and build the config.

        Raises:
            ConfigError: if the document does not match the schema or names an
            unknown default difficulty.
        """
        _validate(raw)
        difficulties = {
            key: Difficulty(key=key, label=str(body.get("label", key.title())), target=int(body["target"]))
            for key, body in raw["difficulties"].items()
        }
        default_key = str(raw.get("default_difficulty", next(iter(difficulties))))
        if default_key not in difficulties:
            raise ConfigError(f"default_difficulty {default_key!r} is not a defined difficulty")
        cards = {"heal": 0, "trap_disarm": 0, "map": 0, "multiplier_card": 0}
        cards.update({k: int(v) for k, v in (raw.get("starting_cards") or {}).items()})
        return cls(
            difficulties=difficulties,
            default_difficulty=default_key,
            starting_cards=cards,
            max_health=int(raw.get("max_health", MAX_HEALTH)),
            notification_seconds=float(raw.get("notification_seconds", NOTIFICATION_SECONDS)),
        )


@lru_cache(maxsize=1)
def _load_schema() -> Dict[str, Any]:
    text = resource_files("loot1004.config").joinpath("schema.json").read_text(encoding="utf-8")
    return json.loads(text)


def _validate(raw: Any) -> None:
    if not isinstance(raw, Mapping):
        raise ConfigError("Configuration document must be a mapping")
    validator = Draft202012Validator(_load_schema())
    errors = sorted(validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        for err in errors:
            logger.error("Config validation error at %s: %s", list(err.path), err.message)
        first = errors[0]
        raise ConfigError(f"Invalid configuration at {list(first.path)}: {first.message}")


def discover_config_path(env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """Find a user-supplied config file, if any.

    LOOT1004_CONFIG wins; otherwise ``config.yaml`` in the platform user config
    directory is used when it exists.
    """
    env = os.environ if env is None else env
    env_path = env.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser().resolve()
    candidate = Path(user_config_dir(APP_NAME)) / "config.yaml"
    if candidate.exists():
        return candidate
    return None


def load_config(path: Optional[str | Path] = None, *, env: Optional[Mapping[str, str]] = None) -> GameConfig:
    """Load game configuration from YAML.

    If no path is given and none is discovered, loads the embedded default
    resource at loot1004/config/defaults.yaml.
    """
    chosen = Path(path).expanduser() if path is not None else discover_config_path(env)
    if chosen is None:
        data = resource_files("loot1004.config").joinpath("defaults.yaml").read_text(encoding="utf-8")
        logger.debug("Loaded embedded default config resource")
    else:
        try:
            data = chosen.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read config file {chosen}: {exc}") from exc
        logger.debug("Loaded config from path: %s", chosen)

    try:
        raw = yaml.safe_load(data) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in config: {exc}") from exc

    config = GameConfig.from_dict(raw)
    logger.info(
        "Difficulties: %s | default=%s",
        {k: d.target for k, d in config.difficulties.items()},
        config.default_difficulty,
    )
    return config


__all__ = ["Difficulty", "GameConfig", "load_config", "discover_config_path"]

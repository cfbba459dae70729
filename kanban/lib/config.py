"""
Game settings loader.

Reads kanban.env (KEY=value), coerces values, validates them against the
"game" schema and returns a GameConfig. Every key is optional; a missing
default file means "play with the standard rules".
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import envparse
from . import validate

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "kanban.env"
CONFIG_ENV_VAR = "KANBAN_CONFIG"


@dataclass
class GameConfig:
    """Game settings from kanban.env"""
    max_days: int = 35
    start_day: int = 1
    initial_backlog: int = 5  # Stories revealed at game start
    backlog_target: int = 5  # Backlog is topped up to this size after every round
    resources_per_kind: int = 3
    effort_min: int = 4  # Effort one resource delivers per round, inclusive range
    effort_max: int = 8
    wip_prioritized: int = 3
    wip_analysis: int = 4  # analyzed-in-progress + analyzed-done
    wip_development: int = 3  # developed-in-progress + developed-done
    wip_testing: int = 3
    seed: Optional[int] = None
    catalog_path: Optional[Path] = None

    @property
    def effort_range(self) -> tuple[int, int]:
        return (self.effort_min, self.effort_max)


# Env key -> GameConfig attribute, all integer-valued
INT_KEYS = {
    "MAX_DAYS": "max_days",
    "START_DAY": "start_day",
    "INITIAL_BACKLOG": "initial_backlog",
    "BACKLOG_TARGET": "backlog_target",
    "RESOURCES_PER_KIND": "resources_per_kind",
    "EFFORT_MIN": "effort_min",
    "EFFORT_MAX": "effort_max",
    "WIP_PRIORITIZED": "wip_prioritized",
    "WIP_ANALYSIS": "wip_analysis",
    "WIP_DEVELOPMENT": "wip_development",
    "WIP_TESTING": "wip_testing",
    "SEED": "seed",
}


def config_from_env(env: dict[str, str], base_dir: Optional[Path] = None) -> GameConfig:
    """Build a GameConfig from parsed env values.

    Args:
        env: Raw KEY -> value strings (from envparse)
        base_dir: Directory relative CATALOG_PATH values are resolved against

    Raises:
        ValueError: If an integer key holds a non-integer
        ValidationError: If values fall outside the game schema
    """
    values: dict = {}

    for key, raw in env.items():
        if key in INT_KEYS:
            try:
                values[INT_KEYS[key]] = int(raw)
            except ValueError:
                raise ValueError(f"{key} must be an integer, got '{raw}'") from None
        elif key == "CATALOG_PATH":
            values["catalog_path"] = raw
        else:
            logger.warning(f"Unknown setting '{key}' ignored")

    validate.validate(values, "game")

    config = GameConfig(**{k: v for k, v in values.items() if k != "catalog_path"})
    if "catalog_path" in values:
        catalog_path = Path(values["catalog_path"])
        if not catalog_path.is_absolute() and base_dir is not None:
            catalog_path = base_dir / catalog_path
        config.catalog_path = catalog_path

    if config.effort_min > config.effort_max:
        raise validate.ValidationError(
            "game", f"EFFORT_MIN ({config.effort_min}) exceeds EFFORT_MAX ({config.effort_max})"
        )

    return config


def resolve_config_path(explicit: Optional[str] = None) -> Optional[Path]:
    """Pick the settings file to read, or None to play with defaults.

    An explicit path or $KANBAN_CONFIG is returned as given (load_game_config
    fails if it is missing); ./kanban.env is used only when present.
    """
    if explicit:
        return Path(explicit)
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)
    default = Path.cwd() / DEFAULT_CONFIG_NAME
    if default.exists():
        return default
    return None


def load_game_config(path: Optional[Path] = None) -> GameConfig:
    """Load kanban.env and return GameConfig.

    If path is None, returns defaults.

    Raises:
        FileNotFoundError: If path is given but doesn't exist
    """
    if path is None:
        return GameConfig()

    env = envparse.load_env(str(path))
    config = config_from_env(env, base_dir=Path(path).parent)
    logger.info(f"Loaded game settings from {path}")
    return config

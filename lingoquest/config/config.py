from __future__ import annotations

"""Configuration loading and validation for LingoQuest scoring.

This module loads the YAML mode/difficulty table, validates it into frozen
pydantic models, and falls back to built-in defaults for any entry that
fails validation so a bad table never stops a game.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError

from .constants import RewardTier, enum_value

logger = logging.getLogger(__name__)

DEFAULTS_PATH = Path(__file__).with_name("defaults.yml")

# Base points used when a mode is missing from the table.
FALLBACK_CORRECT = 10
FALLBACK_INCORRECT = 0
FALLBACK_PENALTY = -2


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class ScoringConfig(_Frozen):
    correct: int = FALLBACK_CORRECT
    incorrect: int = FALLBACK_INCORRECT
    time_bonus: float = Field(5, ge=0)
    streak_multiplier: float = Field(1.2, ge=1.0)
    max_streak: PositiveInt = 5
    reward_bonus: int = 0


class ModeConfig(_Frozen):
    name: str = ""
    time_limit: Optional[float] = Field(default=None, gt=0)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    reward_thresholds: Optional[Dict[RewardTier, PositiveInt]] = None

    @property
    def rewards_enabled(self) -> bool:
        return bool(self.reward_thresholds)


class DifficultyConfig(_Frozen):
    name: str = ""
    time_multiplier: float = Field(1.0, gt=0)


class PenaltyConfig(_Frozen):
    skip_question: int = -5
    time_out: int = -3


class BonusPointsConfig(_Frozen):
    perfect_round: int = 50


class TimerConfig(_Frozen):
    default_time: float = Field(60, gt=0)
    quick_answer_fraction: float = Field(0.25, gt=0, le=1)


class RewardConfig(_Frozen):
    display_ms: int = Field(5000, ge=0)


class StorageConfig(_Frozen):
    history_limit: PositiveInt = 100
    key_prefix: str = "lingoquest_"


DEFAULT_MODE = ModeConfig(name="default")
DEFAULT_DIFFICULTY = DifficultyConfig(name="default")


class GameConfig(_Frozen):
    """Read-only scoring table handed to the engines."""

    version: str = "1.0.0"
    modes: Dict[str, ModeConfig] = Field(default_factory=dict)
    difficulty: Dict[str, DifficultyConfig] = Field(default_factory=dict)
    penalties: PenaltyConfig = Field(default_factory=PenaltyConfig)
    bonus_points: BonusPointsConfig = Field(default_factory=BonusPointsConfig)
    timer: TimerConfig = Field(default_factory=TimerConfig)
    rewards: RewardConfig = Field(default_factory=RewardConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    def mode(self, name: Any) -> Optional[ModeConfig]:
        return self.modes.get(enum_value(name))

    def difficulty_for(self, name: Any) -> Optional[DifficultyConfig]:
        return self.difficulty.get(enum_value(name))


_M = TypeVar("_M", bound=BaseModel)


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the raw scoring table from YAML.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        The raw configuration dictionary.
    """
    if path:
        return _load_yaml(Path(path))
    return _load_yaml(DEFAULTS_PATH)


def _section(model: Type[_M], raw: Any, label: str) -> _M:
    if raw is None:
        return model()
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Invalid %s config, using defaults (%d errors)", label, exc.error_count())
        return model()


def validate_config(cfg: Optional[Dict[str, Any]]) -> GameConfig:
    """Validate a raw table into a GameConfig.

    Each mode, difficulty and section is validated on its own; an entry that
    fails is replaced by its defaults and a warning is logged.
    """
    cfg = cfg if isinstance(cfg, dict) else {}

    modes: Dict[str, ModeConfig] = {}
    raw_modes = cfg.get("modes") or {}
    if not isinstance(raw_modes, dict):
        logger.warning("Config 'modes' must be a mapping, ignoring it")
        raw_modes = {}
    for name, raw in raw_modes.items():
        modes[str(name)] = _section(ModeConfig, raw or {}, f"mode '{name}'")

    difficulty: Dict[str, DifficultyConfig] = {}
    raw_diff = cfg.get("difficulty") or {}
    if not isinstance(raw_diff, dict):
        logger.warning("Config 'difficulty' must be a mapping, ignoring it")
        raw_diff = {}
    for name, raw in raw_diff.items():
        difficulty[str(name)] = _section(DifficultyConfig, raw or {}, f"difficulty '{name}'")

    return GameConfig(
        version=str(cfg.get("version", "1.0.0")),
        modes=modes,
        difficulty=difficulty,
        penalties=_section(PenaltyConfig, cfg.get("penalties"), "penalties"),
        bonus_points=_section(BonusPointsConfig, cfg.get("bonus_points"), "bonus_points"),
        timer=_section(TimerConfig, cfg.get("timer"), "timer"),
        rewards=_section(RewardConfig, cfg.get("rewards"), "rewards"),
        storage=_section(StorageConfig, cfg.get("storage"), "storage"),
    )


@lru_cache(maxsize=1)
def default_config() -> GameConfig:
    """The packaged scoring table, loaded once."""
    return validate_config(load_config())

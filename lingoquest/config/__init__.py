from .constants import (
    AnswerOutcome,
    Difficulty,
    GameMode,
    RewardTier,
    REWARD_THRESHOLDS,
    HISTORY_KEY,
    HIGH_SCORES_KEY,
)
from .config import (
    GameConfig,
    ModeConfig,
    ScoringConfig,
    DifficultyConfig,
    PenaltyConfig,
    BonusPointsConfig,
    TimerConfig,
    RewardConfig,
    StorageConfig,
    DEFAULT_MODE,
    DEFAULT_DIFFICULTY,
    load_config,
    validate_config,
    default_config,
)

__all__ = [
    "AnswerOutcome",
    "Difficulty",
    "GameMode",
    "RewardTier",
    "REWARD_THRESHOLDS",
    "HISTORY_KEY",
    "HIGH_SCORES_KEY",
    "GameConfig",
    "ModeConfig",
    "ScoringConfig",
    "DifficultyConfig",
    "PenaltyConfig",
    "BonusPointsConfig",
    "TimerConfig",
    "RewardConfig",
    "StorageConfig",
    "DEFAULT_MODE",
    "DEFAULT_DIFFICULTY",
    "load_config",
    "validate_config",
    "default_config",
]

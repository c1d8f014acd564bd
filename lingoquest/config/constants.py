from __future__ import annotations

"""Enumerations shared by the scoring and reward engines."""

from enum import Enum


class GameMode(str, Enum):
    CLASSIC = "classic"
    HOLLYBOLLY = "hollybolly"
    MIXLINGO = "mixlingo"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class AnswerOutcome(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    SKIPPED = "skipped"
    TIMEOUT = "timeout"


class RewardTier(str, Enum):
    BOX_OFFICE = "box_office"
    DIRECTOR = "director"
    HERO = "hero"


# Unlock order and streak length per tier.
REWARD_THRESHOLDS = {
    RewardTier.BOX_OFFICE: 1,
    RewardTier.DIRECTOR: 2,
    RewardTier.HERO: 3,
}

HISTORY_KEY = "game_scores"
HIGH_SCORES_KEY = "high_scores"


def enum_value(value: object) -> str:
    """Return the plain string for an enum member or a raw string."""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)

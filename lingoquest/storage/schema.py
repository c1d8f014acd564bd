from __future__ import annotations

"""Schema constants and Pydantic models for persisted score data."""

from typing import Dict, Optional

import pandas as pd
from pydantic import BaseModel, Field, ValidationInfo, field_validator

# --- Constants ---

BONUS_KEYS = ["time_bonus", "streak_bonus", "special_bonus"]

HISTORY_DTYPES = {
    "played_at": pd.DatetimeTZDtype(tz="UTC"),
    "game_mode": "string",
    "difficulty": "string",
    "final_score": "Int64",
    "total_answered": "UInt16",
    "correct_answers": "UInt16",
    "accuracy": "UInt8",
    "max_streak": "UInt16",
    "game_duration_ms": "Int64",
    "total_bonuses": "Int64",
    "time_bonus": "Int64",
    "streak_bonus": "Int64",
    "special_bonus": "Int64",
    "score_per_minute": "float32",
}


# --- Pydantic models ---

class ScoreHistoryEntry(BaseModel):
    """One finished game as stored under the history key."""

    final_score: int = Field(ge=0)
    total_answered: int = Field(ge=0)
    correct_answers: int = Field(ge=0)
    accuracy: int = Field(ge=0, le=100)
    max_streak: int = Field(ge=0)
    current_streak: int = Field(default=0, ge=0)
    game_duration_ms: int = Field(default=0, ge=0)
    average_time_per_question_ms: float = Field(default=0.0, ge=0)
    game_mode: str
    difficulty: str
    total_bonuses: int = 0
    bonus_breakdown: Dict[str, int] = Field(default_factory=dict)
    score_per_minute: float = 0.0
    game_start_time: Optional[float] = None
    game_end_time: float

    @field_validator("correct_answers")
    @classmethod
    def _correct_le_answered(cls, v: int, info: ValidationInfo) -> int:
        total = int(info.data.get("total_answered", 0))
        if v > total:
            raise ValueError("correct_answers must be <= total_answered")
        return v

    @field_validator("bonus_breakdown")
    @classmethod
    def _fill_bonus_keys(cls, v: Dict[str, int]) -> Dict[str, int]:
        return {k: int(v.get(k, 0)) for k in BONUS_KEYS}


class HighScoreEntry(BaseModel):
    """Best game for one ``{mode}_{difficulty}`` category."""

    score: int = Field(ge=0)
    accuracy: int = Field(ge=0, le=100)
    max_streak: int = Field(ge=0)
    date: float
    game_mode: str
    difficulty: str


def high_score_key(game_mode: str, difficulty: str) -> str:
    return f"{game_mode}_{difficulty}"

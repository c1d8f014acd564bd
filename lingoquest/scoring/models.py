from __future__ import annotations

"""Scoring records: per-question deltas, bonus entries and game summaries."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ScoreDelta:
    """Points awarded for one question outcome.

    ``base_score`` is the table value before the difficulty multiplier;
    ``total_question_score`` is never negative.
    """

    base_score: int
    difficulty_multiplier: float
    time_bonus: int
    streak_bonus: int
    total_question_score: int
    previous_score: int
    outcome: str
    error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_score": self.base_score,
            "difficulty_multiplier": self.difficulty_multiplier,
            "time_bonus": self.time_bonus,
            "streak_bonus": self.streak_bonus,
            "total_question_score": self.total_question_score,
            "previous_score": self.previous_score,
            "outcome": self.outcome,
            "error": self.error,
        }


@dataclass(frozen=True)
class BonusRecord:
    """One entry in the append-only bonus history.

    Formula bonuses carry time/streak amounts; special bonuses carry a
    type, amount and reason.
    """

    timestamp: float
    time_bonus: int = 0
    streak_bonus: int = 0
    streak: int = 0
    question_index: int = 0
    type: Optional[str] = None
    amount: int = 0
    reason: str = ""

    @property
    def is_special(self) -> bool:
        return self.type is not None


@dataclass(frozen=True)
class BonusBreakdown:
    time_bonus: int = 0
    streak_bonus: int = 0
    special_bonus: int = 0

    @property
    def total(self) -> int:
        return self.time_bonus + self.streak_bonus + self.special_bonus


@dataclass(frozen=True)
class GameSummary:
    final_score: int
    total_answered: int
    correct_answers: int
    accuracy: int
    max_streak: int
    current_streak: int
    game_duration_ms: int
    average_time_per_question_ms: float
    game_mode: str
    difficulty: str
    total_bonuses: int
    bonus_breakdown: BonusBreakdown = field(default_factory=BonusBreakdown)
    score_per_minute: float = 0.0
    game_start_time: Optional[float] = None
    game_end_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "final_score": self.final_score,
            "total_answered": self.total_answered,
            "correct_answers": self.correct_answers,
            "accuracy": self.accuracy,
            "max_streak": self.max_streak,
            "current_streak": self.current_streak,
            "game_duration_ms": self.game_duration_ms,
            "average_time_per_question_ms": self.average_time_per_question_ms,
            "game_mode": self.game_mode,
            "difficulty": self.difficulty,
            "total_bonuses": self.total_bonuses,
            "bonus_breakdown": {
                "time_bonus": self.bonus_breakdown.time_bonus,
                "streak_bonus": self.bonus_breakdown.streak_bonus,
                "special_bonus": self.bonus_breakdown.special_bonus,
            },
            "score_per_minute": self.score_per_minute,
            "game_start_time": self.game_start_time,
            "game_end_time": self.game_end_time,
        }

from __future__ import annotations

"""Score calculation engine with streak tracking.

One ``ScoreCalculator`` owns the score state of one game: running score,
current/max streak, answer counters, question timing and the bonus history.
It turns each answer outcome into a ``ScoreDelta``, publishes the change on
the event bus, and persists finished games and high scores to a key-value
store.

Scoring failures never stop a game: ``calculate_score`` converts any internal
error into a zeroed delta flagged ``error``, and storage failures are logged
while the in-memory summary is still returned.
"""

import logging
import math
import time
from typing import Any, Callable, List, Mapping, Optional

from ..app.events import (
    EventBus,
    GameStarted,
    NewHighScore,
    ScoreUpdated,
    SpecialBonusApplied,
    StreakBroken,
    StreakUpdated,
)
from ..app.explain import trace as xtrace
from ..config.config import (
    DEFAULT_DIFFICULTY,
    DEFAULT_MODE,
    FALLBACK_CORRECT,
    FALLBACK_INCORRECT,
    FALLBACK_PENALTY,
    GameConfig,
    ModeConfig,
    default_config,
)
from ..config.constants import (
    HIGH_SCORES_KEY,
    HISTORY_KEY,
    AnswerOutcome,
    Difficulty,
    GameMode,
    enum_value,
)
from ..storage.schema import HighScoreEntry, ScoreHistoryEntry, high_score_key
from ..storage.store import KeyValueStore
from ..util.rounding import round_half_up
from .models import BonusBreakdown, BonusRecord, GameSummary, ScoreDelta

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def _stored_score(entry: Any) -> Optional[float]:
    """Score of a stored high-score entry, or None when it has no usable one."""
    if not isinstance(entry, Mapping):
        return None
    score = entry.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)) or not math.isfinite(score):
        return None
    return float(score)


class ScoreCalculator:
    def __init__(
        self,
        bus: EventBus,
        store: KeyValueStore,
        config: Optional[GameConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.bus = bus
        self.store = store
        self.config = config if config is not None else default_config()
        self._clock: Clock = clock or time.time
        self.game_mode: str = GameMode.CLASSIC.value
        self.difficulty: str = Difficulty.MEDIUM.value
        self.reset_game()

    # --- lifecycle ---

    def start_game(self, game_mode: Any, difficulty: Any) -> None:
        self.reset_game()
        self.game_mode = enum_value(game_mode)
        self.difficulty = enum_value(difficulty)
        self.game_start_time = self._clock()

        if self.config.mode(self.game_mode) is None:
            logger.warning("Unknown game mode '%s', using default scoring", self.game_mode)
        if self.config.difficulty_for(self.difficulty) is None:
            logger.warning("Unknown difficulty '%s', using multiplier 1.0", self.difficulty)

        xtrace("game_started", {"mode": self.game_mode, "difficulty": self.difficulty})
        self.bus.emit(GameStarted(game_mode=self.game_mode, difficulty=self.difficulty, timestamp=self.game_start_time))

    def start_question(self) -> None:
        self.question_start_time = self._clock()

    def reset_game(self) -> None:
        self.current_score = 0
        self.current_streak = 0
        self.max_streak = 0
        self.total_answered = 0
        self.correct_answers = 0
        self.game_start_time: Optional[float] = None
        self.question_start_time: Optional[float] = None
        self.bonus_history: List[BonusRecord] = []

    def destroy(self) -> None:
        """Save a game still in progress, then clear all state."""
        if self.game_start_time is not None and self.total_answered > 0:
            self.save_game_score()
        self.reset_game()

    # --- scoring ---

    def calculate_score(self, outcome: Any, metadata: Optional[Mapping[str, Any]] = None) -> ScoreDelta:
        """Score one question outcome and update streak and counters.

        Args:
            outcome: An AnswerOutcome (or its string value).
            metadata: Question data from the generator; only carried for
                subscribers, scoring does not depend on it.

        Returns:
            The ScoreDelta for this question, or a zeroed delta with
            ``error=True`` if scoring failed.
        """
        outcome_value = enum_value(outcome)
        previous = self.current_score
        try:
            base = self._base_score(outcome_value)
            multiplier = self._difficulty_multiplier()
            weighted = round_half_up(base * multiplier)

            time_bonus = 0
            streak_bonus = 0
            if outcome_value == AnswerOutcome.CORRECT.value:
                # Both bonuses read the streak before this answer counts
                time_bonus = self._time_bonus()
                streak_bonus = self._streak_bonus()
                self._update_streak(True)
                self.correct_answers += 1
            else:
                self._update_streak(False)

            total = max(0, weighted + time_bonus + streak_bonus)
            self.current_score += total
            self.total_answered += 1
            self.question_start_time = None

            delta = ScoreDelta(
                base_score=base,
                difficulty_multiplier=multiplier,
                time_bonus=time_bonus,
                streak_bonus=streak_bonus,
                total_question_score=total,
                previous_score=previous,
                outcome=outcome_value,
            )
            self._track_bonus(delta)
        except Exception:
            logger.exception("Error calculating score for outcome %r", outcome_value)
            return self._error_delta(outcome_value, previous)

        xtrace("score_calculated", {**delta.to_dict(), "current_score": self.current_score})
        self.bus.emit(
            ScoreUpdated(
                delta=delta,
                current_score=self.current_score,
                current_streak=self.current_streak,
                accuracy=self.accuracy,
            )
        )
        return delta

    def _mode(self) -> Optional[ModeConfig]:
        return self.config.mode(self.game_mode)

    def _base_score(self, outcome: str) -> int:
        mode = self._mode()
        if mode is None:
            if outcome == AnswerOutcome.CORRECT.value:
                return FALLBACK_CORRECT
            if outcome == AnswerOutcome.INCORRECT.value:
                return FALLBACK_INCORRECT
            return FALLBACK_PENALTY

        if outcome == AnswerOutcome.CORRECT.value:
            return mode.scoring.correct
        if outcome == AnswerOutcome.INCORRECT.value:
            return mode.scoring.incorrect
        if outcome == AnswerOutcome.SKIPPED.value:
            return self.config.penalties.skip_question
        if outcome == AnswerOutcome.TIMEOUT.value:
            return self.config.penalties.time_out
        logger.warning("Unknown answer outcome %r scores 0", outcome)
        return 0

    def _difficulty_multiplier(self) -> float:
        diff = self.config.difficulty_for(self.difficulty) or DEFAULT_DIFFICULTY
        return float(diff.time_multiplier)

    def time_limit(self) -> float:
        """Seconds allowed per question for the current mode and difficulty."""
        mode = self._mode()
        base = mode.time_limit if mode is not None and mode.time_limit else self.config.timer.default_time
        return float(base) * self._difficulty_multiplier()

    def _time_bonus(self) -> int:
        if self.question_start_time is None:
            return 0
        elapsed = max(0.0, self._clock() - self.question_start_time)
        quick_threshold = self.time_limit() * self.config.timer.quick_answer_fraction
        if elapsed > quick_threshold:
            return 0
        rate = (self._mode() or DEFAULT_MODE).scoring.time_bonus
        return round_half_up(rate * (quick_threshold - elapsed))

    def _streak_bonus(self) -> int:
        if self.current_streak < 2:
            return 0
        scoring = (self._mode() or DEFAULT_MODE).scoring
        effective = min(self.current_streak, scoring.max_streak)
        return round_half_up(scoring.correct * (scoring.streak_multiplier - 1) * effective)

    def _update_streak(self, is_correct: bool) -> None:
        if is_correct:
            self.current_streak += 1
            self.max_streak = max(self.max_streak, self.current_streak)
            self.bus.emit(
                StreakUpdated(
                    current_streak=self.current_streak,
                    max_streak=self.max_streak,
                    is_new_record=self.current_streak == self.max_streak,
                )
            )
            return
        if self.current_streak > 0:
            broken = self.current_streak
            self.current_streak = 0
            self.bus.emit(StreakBroken(broken_streak=broken, max_streak=self.max_streak))

    def _track_bonus(self, delta: ScoreDelta) -> None:
        if delta.time_bonus == 0 and delta.streak_bonus == 0:
            return
        self.bonus_history.append(
            BonusRecord(
                timestamp=self._clock(),
                time_bonus=delta.time_bonus,
                streak_bonus=delta.streak_bonus,
                streak=self.current_streak,
                question_index=self.total_answered,
            )
        )

    def _error_delta(self, outcome: str, previous: int) -> ScoreDelta:
        return ScoreDelta(
            base_score=0,
            difficulty_multiplier=1.0,
            time_bonus=0,
            streak_bonus=0,
            total_question_score=0,
            previous_score=previous,
            outcome=outcome,
            error=True,
        )

    def apply_special_bonus(self, bonus_type: str, amount: int, reason: str = "") -> BonusRecord:
        """Add a one-off bonus (perfect round, reward unlock, ...) to the score."""
        record = BonusRecord(timestamp=self._clock(), type=str(bonus_type), amount=int(amount), reason=reason)
        self.current_score = max(0, self.current_score + record.amount)
        self.bonus_history.append(record)
        xtrace("special_bonus", {"type": record.type, "amount": record.amount, "reason": reason})
        self.bus.emit(
            SpecialBonusApplied(
                type=record.type,
                amount=record.amount,
                reason=reason,
                timestamp=record.timestamp,
                current_score=self.current_score,
            )
        )
        return record

    # --- summaries ---

    @property
    def accuracy(self) -> int:
        if self.total_answered <= 0:
            return 0
        return round_half_up(self.correct_answers / self.total_answered * 100)

    def bonus_breakdown(self) -> BonusBreakdown:
        formula = [b for b in self.bonus_history if not b.is_special]
        time_bonus = sum(b.time_bonus for b in formula)
        streak_bonus = sum(b.streak_bonus for b in formula)
        special = sum(b.amount for b in self.bonus_history if b.is_special)
        return BonusBreakdown(time_bonus=time_bonus, streak_bonus=streak_bonus, special_bonus=special)

    def get_game_summary(self) -> GameSummary:
        end = self._clock()
        duration_ms = int(round((end - self.game_start_time) * 1000)) if self.game_start_time is not None else 0
        duration_ms = max(0, duration_ms)
        breakdown = self.bonus_breakdown()
        return GameSummary(
            final_score=self.current_score,
            total_answered=self.total_answered,
            correct_answers=self.correct_answers,
            accuracy=self.accuracy,
            max_streak=self.max_streak,
            current_streak=self.current_streak,
            game_duration_ms=duration_ms,
            average_time_per_question_ms=duration_ms / self.total_answered if self.total_answered > 0 else 0.0,
            game_mode=self.game_mode,
            difficulty=self.difficulty,
            total_bonuses=breakdown.total,
            bonus_breakdown=breakdown,
            score_per_minute=self.current_score / (duration_ms / 60000) if duration_ms > 0 else 0.0,
            game_start_time=self.game_start_time,
            game_end_time=end,
        )

    # --- persistence ---

    def save_game_score(self) -> GameSummary:
        """Append this game to the history (newest last) and update high scores."""
        summary = self.get_game_summary()
        try:
            history = self.store.get(HISTORY_KEY, [])
            if not isinstance(history, list):
                logger.warning("Score history is not a list, starting a new one")
                history = []
            entry = ScoreHistoryEntry.model_validate(summary.to_dict())
            history.append(entry.model_dump())
            limit = self.config.storage.history_limit
            if len(history) > limit:
                history = history[-limit:]
            self.store.set(HISTORY_KEY, history)
            logger.info("Game score saved (%s, %s): %d", summary.game_mode, summary.difficulty, summary.final_score)
        except Exception:
            logger.exception("Failed to save game score")
            return summary

        self.update_high_scores(summary)
        return summary

    def update_high_scores(self, summary: GameSummary) -> bool:
        """Record ``summary`` as the category best if it strictly beats the stored one.

        Returns True when a new high score was written.
        """
        key = high_score_key(summary.game_mode, summary.difficulty)
        try:
            high_scores = self.store.get(HIGH_SCORES_KEY, {})
            if not isinstance(high_scores, dict):
                logger.warning("High score table is not a mapping, starting a new one")
                high_scores = {}

            best = _stored_score(high_scores.get(key))
            if best is None and key in high_scores:
                logger.warning("Discarding high score entry for %s with no usable score", key)
            if best is not None and summary.final_score <= best:
                return False

            entry = HighScoreEntry(
                score=summary.final_score,
                accuracy=summary.accuracy,
                max_streak=summary.max_streak,
                date=summary.game_end_time,
                game_mode=summary.game_mode,
                difficulty=summary.difficulty,
            )
            high_scores[key] = entry.model_dump()
            self.store.set(HIGH_SCORES_KEY, high_scores)
        except Exception:
            logger.exception("Failed to update high scores")
            return False

        logger.info("New high score for %s: %d", key, entry.score)
        self.bus.emit(NewHighScore(category=key, **entry.model_dump()))
        return True

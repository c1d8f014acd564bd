from __future__ import annotations

"""Game Session: orchestrates score calculation, rewards and persistence.

CLI- and UI-agnostic. The host drives it in game order:
``start`` → (``next_question`` → ``answer``)* → ``end_round`` → ``finish``.
"""

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from ..config.config import GameConfig, ModeConfig, default_config
from ..config.constants import AnswerOutcome, RewardTier, enum_value
from ..rewards.engine import RewardEngine
from ..rewards.models import RewardRecord
from ..rewards.presenter import RewardPresenter
from ..scoring.calculator import ScoreCalculator
from ..scoring.models import GameSummary, ScoreDelta
from ..storage.store import KeyValueStore
from .events import EventBus
from .explain import trace as xtrace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnswerResult:
    delta: ScoreDelta
    active_rewards: List[RewardTier] = field(default_factory=list)
    unlocked: List[RewardRecord] = field(default_factory=list)


@dataclass
class RoundState:
    index: int = 0
    answered: int = 0
    correct: int = 0

    @property
    def perfect(self) -> bool:
        return self.answered > 0 and self.correct == self.answered


class GameSession:
    def __init__(
        self,
        store: KeyValueStore,
        bus: Optional[EventBus] = None,
        config: Optional[GameConfig] = None,
        presenter: Optional[RewardPresenter] = None,
        clock: Optional[Callable[[], float]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config if config is not None else default_config()
        self.bus = bus if bus is not None else EventBus()
        clock = clock or time.time
        self.scores = ScoreCalculator(self.bus, store, config=self.config, clock=clock)
        self.rewards = RewardEngine(self.bus, presenter=presenter, config=self.config, clock=clock, rng=rng)
        self.round = RoundState()
        self.active = False

    @property
    def mode(self) -> Optional[ModeConfig]:
        return self.config.mode(self.scores.game_mode)

    @property
    def rewards_enabled(self) -> bool:
        mode = self.mode
        return mode is not None and mode.rewards_enabled

    def start(self, game_mode: Any, difficulty: Any) -> None:
        self.scores.start_game(game_mode, difficulty)
        self.rewards.reset()
        self.round = RoundState()
        self.active = True

    def next_question(self) -> None:
        self.scores.start_question()

    def answer(self, outcome: Any, metadata: Any = None) -> AnswerResult:
        """Score one answer and, in reward modes, feed the reward engine."""
        if not self.active:
            logger.warning("answer() called with no game in progress")
        delta = self.scores.calculate_score(outcome, metadata)
        is_correct = enum_value(outcome) == AnswerOutcome.CORRECT.value

        self.round.answered += 1
        if is_correct:
            self.round.correct += 1

        if not self.rewards_enabled:
            return AnswerResult(delta=delta)

        active = self.rewards.process_answer(is_correct, metadata)
        unlocked = list(self.rewards.last_unlocked)
        bonus = self.mode.scoring.reward_bonus if self.mode is not None else 0
        if bonus:
            for record in unlocked:
                self.scores.apply_special_bonus("reward", bonus, f"{record.type.value} unlocked")
        return AnswerResult(delta=delta, active_rewards=active, unlocked=unlocked)

    def end_round(self) -> bool:
        """Close the current round; returns True if the perfect-round bonus was paid."""
        perfect = self.round.perfect
        if perfect:
            self.scores.apply_special_bonus(
                "perfect_round",
                self.config.bonus_points.perfect_round,
                f"all {self.round.answered} answers correct in round {self.round.index + 1}",
            )
        xtrace("round_ended", {"round": self.round.index + 1, "perfect": perfect})
        self.round = RoundState(index=self.round.index + 1)
        return perfect

    def finish(self) -> GameSummary:
        """Persist the game and return its summary."""
        summary = self.scores.save_game_score()
        self.active = False
        xtrace("game_finished", summary.to_dict())
        return summary

    def close(self) -> None:
        """Release the session; an unfinished game is saved first."""
        if self.active:
            self.scores.destroy()
        else:
            self.scores.reset_game()
        self.rewards.destroy()
        self.active = False

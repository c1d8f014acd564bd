from __future__ import annotations

"""Tiny synchronous pub/sub event bus with typed payloads.

Each notification is its own dataclass; ``name`` is the channel it is
published on, so subscribers know the payload shape from the name alone.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Dict, List, Optional

if TYPE_CHECKING:
    from ..rewards.models import RewardRecord
    from ..scoring.models import ScoreDelta

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    name: ClassVar[str] = ""


@dataclass(frozen=True)
class GameStarted(Event):
    name: ClassVar[str] = "score:gameStarted"

    game_mode: str
    difficulty: str
    timestamp: float


@dataclass(frozen=True)
class ScoreUpdated(Event):
    name: ClassVar[str] = "score:updated"

    delta: ScoreDelta
    current_score: int
    current_streak: int
    accuracy: int


@dataclass(frozen=True)
class StreakUpdated(Event):
    name: ClassVar[str] = "score:streakUpdated"

    current_streak: int
    max_streak: int
    is_new_record: bool


@dataclass(frozen=True)
class StreakBroken(Event):
    name: ClassVar[str] = "score:streakBroken"

    broken_streak: int
    max_streak: int


@dataclass(frozen=True)
class SpecialBonusApplied(Event):
    name: ClassVar[str] = "score:specialBonus"

    type: str
    amount: int
    reason: str
    timestamp: float
    current_score: int


@dataclass(frozen=True)
class NewHighScore(Event):
    name: ClassVar[str] = "score:newHighScore"

    category: str
    score: int
    accuracy: int
    max_streak: int
    date: float
    game_mode: str
    difficulty: str


@dataclass(frozen=True)
class RewardUnlocked(Event):
    name: ClassVar[str] = "rewardUnlocked"

    reward: RewardRecord
    streak: int


Handler = Callable[[Any], None]


class EventBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[Handler]] = {}

    def subscribe(self, event: str, handler: Handler) -> None:
        self._subs.setdefault(event, []).append(handler)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        handlers = self._subs.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: Event) -> None:
        for h in list(self._subs.get(event.name, [])):
            try:
                h(event)
            except Exception:
                # One failing subscriber must not starve the others
                logger.exception("Event handler error for %s", event.name)

    def clear(self, event: Optional[str] = None) -> None:
        if event is None:
            self._subs.clear()
        else:
            self._subs.pop(event, None)

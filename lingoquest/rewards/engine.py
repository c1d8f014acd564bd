from __future__ import annotations

"""HollyBolly reward engine: streak-milestone unlocks.

Tracks its own correct-answer streak from ``process_answer`` calls and
unlocks each reward tier at most once per uninterrupted streak. A wrong
answer clears every unpinned active reward; history is kept for display.
"""

import random
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..app.events import EventBus, RewardUnlocked
from ..app.explain import trace as xtrace
from ..config.config import GameConfig, default_config
from ..config.constants import REWARD_THRESHOLDS, RewardTier
from ..util.randomness import choose, make_rng
from .formatting import PLACEHOLDER, box_office_comparison, format_money
from .models import RewardRecord
from .presenter import RewardBoard, RewardPresenter

DIRECTOR_FACTS = [
    "Known for innovative filmmaking techniques",
    "Multiple award winner and industry pioneer",
    "Master of visual storytelling",
    "Influenced generations of filmmakers",
    "Box office success across multiple genres",
]

ACTOR_ACHIEVEMENTS = [
    "Global superstar with massive fan following",
    "Academy Award nominee/winner",
    "Highest-paid actor in multiple years",
    "Cultural icon and philanthropy leader",
    "Box office record holder",
]


def _section(metadata: Any, *keys: str) -> Mapping[str, Any]:
    if not isinstance(metadata, Mapping):
        return {}
    for key in keys:
        value = metadata.get(key)
        if isinstance(value, Mapping):
            return value
    return {}


def _field(section: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in section:
            return section[key]
    return None


def _text(value: Any) -> str:
    if value is None:
        return PLACEHOLDER
    text = str(value).strip()
    return text or PLACEHOLDER


class RewardEngine:
    def __init__(
        self,
        bus: EventBus,
        presenter: Optional[RewardPresenter] = None,
        config: Optional[GameConfig] = None,
        clock: Optional[Callable[[], float]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.bus = bus
        self.presenter: RewardPresenter = presenter if presenter is not None else RewardBoard()
        self.config = config if config is not None else default_config()
        self._clock = clock or time.time
        self._rng = rng or make_rng()
        self.current_streak = 0
        self.total_correct = 0
        self.reward_history: List[RewardRecord] = []
        self.last_unlocked: List[RewardRecord] = []
        self._active: Dict[RewardTier, RewardRecord] = {}

    @property
    def active_rewards(self) -> List[RewardTier]:
        return [tier for tier in REWARD_THRESHOLDS if tier in self._active]

    def active_record(self, tier: RewardTier) -> Optional[RewardRecord]:
        return self._active.get(tier)

    def process_answer(self, is_correct: bool, metadata: Any = None) -> List[RewardTier]:
        """Feed one answer; returns the active tiers in unlock order."""
        self.last_unlocked = []
        if is_correct:
            self.current_streak += 1
            self.total_correct += 1
            for tier, threshold in REWARD_THRESHOLDS.items():
                if self.current_streak >= threshold and tier not in self._active:
                    self.last_unlocked.append(self._unlock(tier, metadata))
        else:
            self.current_streak = 0
            self._clear_active(keep_pinned=True)
        return self.active_rewards

    def _unlock(self, tier: RewardTier, metadata: Any) -> RewardRecord:
        title, icon, data = self._build(tier, metadata)
        record = RewardRecord(type=tier, title=title, icon=icon, unlocked=self._clock(), data=data)

        self._active[tier] = record
        self.reward_history.append(record)
        xtrace("reward_unlocked", {"type": tier.value, "streak": self.current_streak})
        self.bus.emit(RewardUnlocked(reward=record, streak=self.current_streak))

        dismiss_at = None
        if not record.pinned:
            dismiss_at = record.unlocked + self.config.rewards.display_ms / 1000
        self.presenter.show(record, self.current_streak, dismiss_at)
        return record

    def _build(self, tier: RewardTier, metadata: Any) -> Tuple[str, str, Dict[str, Any]]:
        if tier is RewardTier.BOX_OFFICE:
            box = _section(metadata, "box_office", "boxOffice")
            hollywood = _field(box, "hollywood")
            bollywood = _field(box, "bollywood")
            return (
                "Box Office Revealed! 💰",
                "💰",
                {
                    "hollywood": format_money(hollywood),
                    "bollywood": format_money(bollywood),
                    "comparison": box_office_comparison(hollywood, bollywood),
                },
            )
        if tier is RewardTier.DIRECTOR:
            director = _section(metadata, "director")
            return (
                "Director Details! 🎬",
                "🎬",
                {
                    "name": _text(_field(director, "name")),
                    "net_worth": format_money(_field(director, "net_worth", "netWorth")),
                    "fun_fact": choose(self._rng, DIRECTOR_FACTS),
                },
            )
        actors = _section(metadata, "actors")
        return (
            "Lead Actor Revealed! ⭐",
            "⭐",
            {
                "name": _text(_field(actors, "lead")),
                "net_worth": format_money(_field(actors, "net_worth", "netWorth")),
                "achievement": choose(self._rng, ACTOR_ACHIEVEMENTS),
            },
        )

    def toggle_pin(self, record: RewardRecord) -> bool:
        record.pinned = not record.pinned
        self.presenter.set_pinned(record, record.pinned)
        return record.pinned

    def _clear_active(self, *, keep_pinned: bool) -> None:
        for tier, record in list(self._active.items()):
            if keep_pinned and record.pinned:
                continue
            del self._active[tier]
            self.presenter.hide(record)

    def get_reward_history(self) -> List[RewardRecord]:
        return list(self.reward_history)

    def reset(self) -> None:
        """Start a fresh streak; pins do not survive a full reset."""
        self.current_streak = 0
        self.last_unlocked = []
        self._clear_active(keep_pinned=False)

    def destroy(self) -> None:
        self.presenter.clear()
        self.reward_history = []
        self.last_unlocked = []
        self._active.clear()
        self.current_streak = 0

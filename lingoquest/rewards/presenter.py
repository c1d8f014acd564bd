from __future__ import annotations

"""Reward presentation: the UI-facing side of reward unlocks.

The engine never runs timers. It tells a presenter when a record should be
shown and by when it may be dismissed; the host calls ``expire(now)`` from
its own clock tick.
"""

from dataclasses import dataclass
from typing import List, Optional, Protocol

from .models import RewardRecord


class RewardPresenter(Protocol):
    def show(self, record: RewardRecord, streak: int, dismiss_at: Optional[float]) -> None: ...

    def hide(self, record: RewardRecord) -> None: ...

    def set_pinned(self, record: RewardRecord, pinned: bool) -> None: ...

    def clear(self) -> None: ...


@dataclass
class _Card:
    record: RewardRecord
    streak: int
    dismiss_at: Optional[float]


class RewardBoard:
    """In-memory presenter that keeps the list of visible reward cards."""

    def __init__(self) -> None:
        self._cards: List[_Card] = []

    def _index(self, record: RewardRecord) -> int:
        for i, card in enumerate(self._cards):
            if card.record is record:
                return i
        return -1

    def show(self, record: RewardRecord, streak: int, dismiss_at: Optional[float]) -> None:
        if self._index(record) < 0:
            self._cards.append(_Card(record=record, streak=streak, dismiss_at=dismiss_at))

    def hide(self, record: RewardRecord) -> None:
        i = self._index(record)
        if i >= 0:
            del self._cards[i]

    def set_pinned(self, record: RewardRecord, pinned: bool) -> None:
        # Pin state lives on the record; nothing else to track here
        return

    def clear(self) -> None:
        self._cards.clear()

    def visible(self) -> List[RewardRecord]:
        return [c.record for c in self._cards]

    def streak_for(self, record: RewardRecord) -> Optional[int]:
        i = self._index(record)
        return self._cards[i].streak if i >= 0 else None

    def expire(self, now: float) -> List[RewardRecord]:
        """Hide unpinned cards whose dismiss time has passed; return them."""
        gone = [
            c.record
            for c in self._cards
            if not c.record.pinned and c.dismiss_at is not None and c.dismiss_at <= now
        ]
        for record in gone:
            self.hide(record)
        return gone

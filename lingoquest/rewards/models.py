from __future__ import annotations

"""Reward record dataclass."""

from dataclasses import dataclass, field
from typing import Any, Dict

from ..config.constants import RewardTier


@dataclass(eq=False)
class RewardRecord:
    """A reward unlocked at a streak milestone.

    Compared by identity: a tier unlocked twice yields two distinct records.
    """

    type: RewardTier
    title: str
    icon: str
    unlocked: float
    data: Dict[str, Any] = field(default_factory=dict)
    pinned: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "title": self.title,
            "icon": self.icon,
            "unlocked": self.unlocked,
            "data": dict(self.data),
            "pinned": self.pinned,
        }

"""LingoQuest score and reward engine.

Turns a stream of answer outcomes into a running score with streak and time
bonuses, and unlocks HollyBolly rewards at streak milestones.
"""

from __future__ import annotations

__version__ = "1.0.0"

__all__ = ["__version__"]

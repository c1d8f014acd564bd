from .models import BonusBreakdown, BonusRecord, GameSummary, ScoreDelta
from .calculator import ScoreCalculator

__all__ = [
    "BonusBreakdown",
    "BonusRecord",
    "GameSummary",
    "ScoreDelta",
    "ScoreCalculator",
]

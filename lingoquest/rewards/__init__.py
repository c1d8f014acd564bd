from .models import RewardRecord
from .formatting import PLACEHOLDER, box_office_comparison, format_currency, format_money
from .presenter import RewardBoard, RewardPresenter
from .engine import RewardEngine

__all__ = [
    "RewardRecord",
    "PLACEHOLDER",
    "box_office_comparison",
    "format_currency",
    "format_money",
    "RewardBoard",
    "RewardPresenter",
    "RewardEngine",
]

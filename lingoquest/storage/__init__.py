from .schema import BONUS_KEYS, HISTORY_DTYPES, ScoreHistoryEntry, HighScoreEntry, high_score_key
from .store import (
    DEFAULT_PREFIX,
    StorageError,
    KeyValueStore,
    MemoryStore,
    JsonFileStore,
)

__all__ = [
    "BONUS_KEYS",
    "HISTORY_DTYPES",
    "ScoreHistoryEntry",
    "HighScoreEntry",
    "high_score_key",
    "DEFAULT_PREFIX",
    "StorageError",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
]

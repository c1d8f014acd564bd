"""Shared test doubles: a settable clock, an event recorder and a broken store."""

from typing import Any, List

from lingoquest.app.events import EventBus
from lingoquest.storage.store import StorageError

ALL_EVENTS = [
    "score:gameStarted",
    "score:updated",
    "score:streakUpdated",
    "score:streakBroken",
    "score:specialBonus",
    "score:newHighScore",
    "rewardUnlocked",
]

TITANIC = {
    "id": "titanic",
    "movie": "Titanic",
    "box_office": {"hollywood": 2_200_000_000, "bollywood": 1_500_000_000},
    "director": {"name": "James Cameron", "net_worth": 700_000_000},
    "actors": {"lead": "Leonardo DiCaprio", "net_worth": 260_000_000},
}


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class Recorder:
    """Subscribes to every event and keeps them in arrival order."""

    def __init__(self, bus: EventBus) -> None:
        self.events: List[Any] = []
        for name in ALL_EVENTS:
            bus.subscribe(name, self.events.append)

    def named(self, name: str) -> List[Any]:
        return [e for e in self.events if e.name == name]


class FailingStore:
    def get(self, key: str, default: Any = None) -> Any:
        return default

    def set(self, key: str, value: Any) -> None:
        raise StorageError("disk full")

    def remove(self, key: str) -> None:
        raise StorageError("disk full")

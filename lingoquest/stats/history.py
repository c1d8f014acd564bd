from __future__ import annotations

"""Score history analytics using pandas + pyarrow.

Unit of data: one row per finished game, read from the history key of a
key-value store.
"""

from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
from pydantic import ValidationError

from ..config.constants import HISTORY_KEY, enum_value
from ..scoring.models import GameSummary
from ..storage.schema import BONUS_KEYS, HISTORY_DTYPES, ScoreHistoryEntry
from ..storage.store import KeyValueStore


def _empty_df() -> pd.DataFrame:
    return pd.DataFrame({k: pd.Series(dtype=v) for k, v in HISTORY_DTYPES.items()})


def _row(entry: ScoreHistoryEntry) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "played_at": pd.Timestamp(entry.game_end_time, unit="s", tz="UTC"),
        "game_mode": entry.game_mode,
        "difficulty": entry.difficulty,
        "final_score": entry.final_score,
        "total_answered": entry.total_answered,
        "correct_answers": entry.correct_answers,
        "accuracy": entry.accuracy,
        "max_streak": entry.max_streak,
        "game_duration_ms": entry.game_duration_ms,
        "total_bonuses": entry.total_bonuses,
        "score_per_minute": entry.score_per_minute,
    }
    for k in BONUS_KEYS:
        row[k] = entry.bonus_breakdown.get(k, 0)
    return row


def history_frame(store: KeyValueStore) -> pd.DataFrame:
    """Load the stored game history as a typed DataFrame, oldest first.

    Entries that fail validation are skipped.
    """
    raw = store.get(HISTORY_KEY, [])
    rows: List[Dict[str, Any]] = []
    for item in raw if isinstance(raw, list) else []:
        try:
            rows.append(_row(ScoreHistoryEntry.model_validate(item)))
        except ValidationError:
            continue
    if not rows:
        return _empty_df()
    df = pd.DataFrame(rows)
    for col, dt in HISTORY_DTYPES.items():
        df[col] = df[col].astype(dt)
    return df[list(HISTORY_DTYPES.keys())]


def query_trend(df: pd.DataFrame, *, game_mode: Any, difficulty: Any) -> pd.DataFrame:
    """Filter rows for one (mode, difficulty) category sorted by play time."""
    mode = enum_value(game_mode)
    diff = enum_value(difficulty)
    dff = df[(df["game_mode"] == mode) & (df["difficulty"] == diff)]
    return dff.sort_values("played_at").reset_index(drop=True)


def best_by_category(df: pd.DataFrame) -> pd.DataFrame:
    """Best score, games played and mean accuracy per (mode, difficulty)."""
    if df.empty:
        return pd.DataFrame(columns=["game_mode", "difficulty", "games", "best_score", "mean_accuracy"])
    grouped = df.groupby(["game_mode", "difficulty"], observed=True)
    out = grouped.agg(
        games=("final_score", "size"),
        best_score=("final_score", "max"),
        mean_accuracy=("accuracy", "mean"),
    )
    return out.reset_index()


def export_ndjson(df: pd.DataFrame, out_path: Path) -> None:
    """Export a DataFrame to line-delimited JSON (NDJSON) for quick inspection."""
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_json(out_path, orient="records", lines=True, date_format="iso")


def export_parquet(df: pd.DataFrame, out_path: Path) -> None:
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(out_path, engine="pyarrow", compression="zstd", index=False)


def format_summary(summary: GameSummary) -> str:
    """Return a human-readable summary of one game."""
    lines = [
        f"Mode: {summary.game_mode} ({summary.difficulty})",
        f"Score: {summary.final_score}",
        f"Total: {summary.correct_answers}/{summary.total_answered} correct ({summary.accuracy}%)",
        f"Best streak: {summary.max_streak}",
    ]
    b = summary.bonus_breakdown
    if b.total:
        lines.append(f"Bonuses: time {b.time_bonus}, streak {b.streak_bonus}, special {b.special_bonus}")
    if summary.game_duration_ms > 0:
        lines.append(f"Duration: {summary.game_duration_ms / 1000:.1f}s ({summary.score_per_minute:.1f} pts/min)")
    return "\n".join(lines)

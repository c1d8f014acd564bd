from __future__ import annotations

"""Minimal tracing helpers (Explain Mode).

Enable with ``enable()`` or the LINGOQUEST_EXPLAIN environment variable and
emit terse, readable lines at scoring milestones.
"""

import json
import os
from typing import Any, Dict

_ENABLED = os.environ.get("LINGOQUEST_EXPLAIN", "").strip().lower() in {"1", "true", "yes", "on"}


def enable(flag: bool = True) -> None:
    global _ENABLED
    _ENABLED = bool(flag)


def enabled() -> bool:
    return _ENABLED


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not _ENABLED:
        return
    data = payload or {}
    try:
        # keep it short; one line JSON
        line = json.dumps(data, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        print(f"[EXPLAIN] {event}")
        return
    print(f"[EXPLAIN] {event} :: {line}")

"""
JSON file store for supervision schedules.

A missing or unreadable file loads as an empty schedule so a fresh exam
period can start from nothing.
"""

from __future__ import annotations

import json
from pathlib import Path

from .log import get_logger
from .models import Schedule

log = get_logger(__name__)


def load_schedule(path: str | Path) -> Schedule:
    schedule_path = Path(path)
    if not schedule_path.exists():
        return Schedule()

    try:
        data = json.loads(schedule_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("schedule file must hold a JSON object")
        return Schedule.from_dict(data)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        log.warning("schedule_unreadable", path=str(schedule_path), error=str(e))
        return Schedule()


def save_schedule(schedule: Schedule, path: str | Path) -> None:
    """Write ``schedule`` as JSON, creating parent directories if needed."""
    schedule_path = Path(path)
    schedule_path.parent.mkdir(parents=True, exist_ok=True)
    schedule_path.write_text(
        json.dumps(schedule.to_dict(), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )

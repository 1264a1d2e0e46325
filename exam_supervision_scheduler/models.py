"""
Data model shared by the engine, the planners and the adapters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterator, List, Optional, Tuple

REGULAR = 'regular'
SPECIAL = 'special'
ROOM_TYPES = (REGULAR, SPECIAL)

MORNING = 'morning'
EVENING = 'evening'
PERIODS = (MORNING, EVENING)

DEFAULT_REQUIREMENTS = {REGULAR: 1, SPECIAL: 2}


@dataclass
class Supervisor:
    name: str
    subject: Optional[str] = None


@dataclass
class Room:
    """
    An exam room. ``supervisors`` overrides the per-type requirement.
    """

    name: str
    type: str = REGULAR
    supervisors: Optional[int] = None

    def required_count(self, requirements: Optional[Dict[str, int]] = None) -> int:
        if self.supervisors is not None:
            return int(self.supervisors)
        return (requirements or DEFAULT_REQUIREMENTS)[self.type]


@dataclass
class Assignment:
    room: str
    supervisors: List[str] = field(default_factory=list)
    room_type: str = REGULAR

    @property
    def main_supervisor(self) -> Optional[str]:
        return self.supervisors[0] if self.supervisors else None

    def to_dict(self) -> dict:
        return {'room': self.room, 'type': self.room_type, 'supervisors': list(self.supervisors)}

    @classmethod
    def from_dict(cls, data: dict) -> 'Assignment':
        return cls(
            room=str(data['room']),
            supervisors=[str(s) for s in data.get('supervisors', [])],
            room_type=data.get('type', REGULAR),
        )


@dataclass
class ExamDay:
    weekday: str
    date: date

    @property
    def label(self) -> str:
        return self.date.strftime('%d/%m/%Y')

    @property
    def key(self) -> str:
        """Day label used in schedules, e.g. ``'Sunday 16/06/2024'``."""
        return f"{self.weekday} {self.label}"


@dataclass
class Schedule:
    """
    Assignments keyed by day key, then by period.

    Writing a (day, period) slot replaces whatever was there.
    """

    days: Dict[str, Dict[str, List[Assignment]]] = field(default_factory=dict)

    def set(self, day: str, period: str, assignments: List[Assignment]) -> None:
        if period not in PERIODS:
            raise ValueError(f"Unknown period {period!r}, expected one of {PERIODS}")
        slot = self.days.setdefault(day, {p: [] for p in PERIODS})
        slot[period] = list(assignments)

    def get(self, day: str, period: str) -> List[Assignment]:
        return list(self.days.get(day, {}).get(period, []))

    def __iter__(self) -> Iterator[Tuple[str, str, List[Assignment]]]:
        for day, periods in self.days.items():
            for period in PERIODS:
                yield day, period, periods.get(period, [])

    def __len__(self) -> int:
        return len(self.days)

    def records(self) -> List[dict]:
        """Flatten into one row per supervisor slot."""
        rows = []
        for day, period, assignments in self:
            for assignment in assignments:
                for slot, name in enumerate(assignment.supervisors, start=1):
                    rows.append({
                        'Day': day,
                        'Period': period,
                        'Room': assignment.room,
                        'Type': assignment.room_type,
                        'Slot': slot,
                        'Supervisor': name,
                    })
        return rows

    def to_dict(self) -> dict:
        return {
            day: {period: [a.to_dict() for a in periods.get(period, [])] for period in PERIODS}
            for day, periods in self.days.items()
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Schedule':
        schedule = cls()
        for day, periods in data.items():
            for period in PERIODS:
                schedule.set(day, period, [Assignment.from_dict(a) for a in periods.get(period, [])])
        return schedule

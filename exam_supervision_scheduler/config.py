"""
Scheduler configuration.

A single explicit object handed to the scheduler and its collaborators at
construction time. Nothing in the package reads settings from a global store.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .models import REGULAR, SPECIAL

ENGLISH_WEEKDAYS = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')
ARABIC_WEEKDAYS = ('الإثنين', 'الثلاثاء', 'الأربعاء', 'الخميس', 'الجمعة', 'السبت', 'الأحد')


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Settings for distributing supervisors over an exam period.

    Attributes:
        supervisors_per_regular_room: Slots for a ``regular`` room
        supervisors_per_special_room: Slots for a ``special`` room
        exclude_morning_supervisors: Keep the morning's supervisors out of the
            same day's evening pool
        strict_exclusion: Never fall back to excluded supervisors, even when
            the remaining pool is too small
        pin_main_supervisor: Keep each room's morning main supervisor for the
            evening and only re-roll the remaining slots
        seed: Seed for the shuffle; ``None`` draws fresh entropy each run
        weekday_names: Monday-first weekday names used for day labels
        start_date: First exam day (``YYYY-MM-DD``)
        end_date: Last exam day (``YYYY-MM-DD``), inclusive
        solver_timeout: Maximum time in seconds for the balanced planner
        weight_same_day: Penalty for a supervisor serving both periods of a day
        weight_fairness: Penalty for deviating from the fair load
        log_level: Logging level name (DEBUG, INFO, WARNING, ...)
        log_json: Render log lines as JSON instead of console text
    """

    supervisors_per_regular_room: int = 1
    supervisors_per_special_room: int = 2
    exclude_morning_supervisors: bool = True
    strict_exclusion: bool = False
    pin_main_supervisor: bool = False
    seed: Optional[int] = None
    weekday_names: Tuple[str, ...] = field(default=ENGLISH_WEEKDAYS)
    start_date: str = ''
    end_date: str = ''
    solver_timeout: int = 60
    weight_same_day: int = 100
    weight_fairness: int = 10
    log_level: str = 'INFO'
    log_json: bool = False

    def __post_init__(self):
        if self.supervisors_per_regular_room < 1 or self.supervisors_per_special_room < 1:
            raise ValueError("Every room needs at least one supervisor")
        if len(self.weekday_names) != 7:
            raise ValueError("weekday_names must list exactly seven names, Monday first")

    @property
    def requirements(self) -> Dict[str, int]:
        return {
            REGULAR: self.supervisors_per_regular_room,
            SPECIAL: self.supervisors_per_special_room,
        }

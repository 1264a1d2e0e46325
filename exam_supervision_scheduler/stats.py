"""
Supervision statistics over a schedule.
"""

from typing import Any, Dict, Iterable, Optional

import pandas as pd

from .models import EVENING, MORNING, Schedule

LOAD_COLUMNS = ['Supervisor', 'Total', 'Morning', 'Evening', 'Days', 'Fair', 'Deviation']


def schedule_frame(schedule: Schedule) -> pd.DataFrame:
    """One row per supervisor slot: Day, Period, Room, Type, Slot, Supervisor."""
    return pd.DataFrame(schedule.records(), columns=['Day', 'Period', 'Room', 'Type', 'Slot', 'Supervisor'])


def calculate_supervision_stats(schedule: Schedule,
                                supervisors: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """
    Count assignments overall, per supervisor, per day, per room and per period.

    Supervisors listed in ``supervisors`` appear with a count of 0 when they
    were never assigned.
    """
    df = schedule_frame(schedule)

    per_supervisor = {name: 0 for name in supervisors or []}
    per_supervisor.update({k: int(v) for k, v in df['Supervisor'].value_counts().items()})

    per_day = {day: 0 for day in schedule.days}
    per_day.update({k: int(v) for k, v in df['Day'].value_counts().items()})

    periods = df['Period'].value_counts()
    return {
        'total_assignments': int(len(df)),
        'assignments_per_supervisor': per_supervisor,
        'assignments_per_day': per_day,
        'assignments_per_room': {k: int(v) for k, v in df['Room'].value_counts().items()},
        'morning_assignments': int(periods.get(MORNING, 0)),
        'evening_assignments': int(periods.get(EVENING, 0)),
    }


def load_table(schedule: Schedule, supervisors: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """
    Per-supervisor load with deviation from an even share of all slots.
    """
    df = schedule_frame(schedule)
    names = list(dict.fromkeys(list(supervisors or []) + df['Supervisor'].tolist()))
    if not names:
        return pd.DataFrame(columns=LOAD_COLUMNS)

    fair = len(df) / len(names)
    rows = []
    for name in names:
        mine = df[df['Supervisor'] == name]
        rows.append({
            'Supervisor': name,
            'Total': len(mine),
            'Morning': int((mine['Period'] == MORNING).sum()),
            'Evening': int((mine['Period'] == EVENING).sum()),
            'Days': mine['Day'].nunique(),
            'Fair': round(fair, 1),
            'Deviation': round(len(mine) - fair, 1),
        })
    return pd.DataFrame(rows, columns=LOAD_COLUMNS)


def same_day_double_duty(schedule: Schedule) -> Dict[str, list]:
    """Supervisors serving both periods of a day, keyed by day."""
    df = schedule_frame(schedule)
    doubles = {}
    for day, group in df.groupby('Day', sort=False):
        periods = group.groupby('Supervisor')['Period'].nunique()
        names = sorted(periods[periods > 1].index)
        if names:
            doubles[day] = names
    return doubles

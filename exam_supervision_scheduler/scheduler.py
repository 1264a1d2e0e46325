import re
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from .absences import AbsenceRecord, absent_teachers
from .balanced import BalancedPlanner
from .config import SchedulerConfig
from .days import find_day, generate_days
from .distribution import DistributionResult, RandomShuffler, Shuffler, distribute, pin_main_supervisors
from .log import get_logger
from .models import EVENING, MORNING, PERIODS, REGULAR, SPECIAL, ExamDay, Room, Schedule, Supervisor
from .roster import read_roster
from .stats import calculate_supervision_stats, load_table, same_day_double_duty

log = get_logger(__name__)

METHODS = ('random', 'balanced')


class ExamSupervisionScheduler:
    """
    Distributes exam supervision duties over the rooms of an exam period.

    This class holds the roster, the exam days and the schedule being built,
    runs the distribution engine per (day, period), and reports and exports
    the result.
    """

    def __init__(self, config: Optional[SchedulerConfig] = None, shuffler: Optional[Shuffler] = None):
        """
        Args:
            config: Scheduler settings; defaults to SchedulerConfig()
            shuffler: Randomness for the greedy engine; defaults to a
                RandomShuffler seeded from ``config.seed``
        """
        self.config = config or SchedulerConfig()
        self.shuffler = shuffler or RandomShuffler(self.config.seed)

        # Data storage
        self.supervisors: List[Supervisor] = []
        self.rooms: List[Room] = []
        self.days: List[ExamDay] = []
        self.absences: List[AbsenceRecord] = []

        # Results
        self.supervision_schedule = Schedule()
        self.results: Dict[Tuple[str, str], DistributionResult] = {}
        self.solution = None

    def read_roster_file(self, filename: str) -> None:
        """
        Read teachers, rooms and absences from an Excel workbook.

        Args:
            filename: Path to the workbook with Teachers and Rooms sheets
                and an optional Absences sheet
        """
        roster = read_roster(filename)
        self.load_roster(roster.supervisors, roster.rooms)
        self.set_absences(roster.absences)

    def load_roster(self, supervisors: Iterable[Union[str, Supervisor]], rooms: Iterable[Room]) -> None:
        self.supervisors = [s if isinstance(s, Supervisor) else Supervisor(name=str(s)) for s in supervisors]
        self.rooms = list(rooms)
        log.info("roster_set", supervisors=len(self.supervisors), rooms=len(self.rooms))

    def set_exam_period(self, start: Optional[str] = None, end: Optional[str] = None) -> List[ExamDay]:
        """
        Enumerate the exam days; falls back to the configured dates.
        """
        start = start if start is not None else self.config.start_date
        end = end if end is not None else self.config.end_date
        self.days = generate_days(start, end, self.config.weekday_names)
        log.info("exam_period_set", start=str(start), end=str(end), days=len(self.days))
        return self.days

    def set_absences(self, absences: Iterable[AbsenceRecord]) -> None:
        self.absences = list(absences)

    @property
    def supervisor_names(self) -> List[str]:
        return [s.name for s in self.supervisors]

    def supervisor_pool(self, day: ExamDay, period: str) -> List[str]:
        """Roster names minus the teachers marked absent for this day and period."""
        absent = absent_teachers(self.absences, day.date.isoformat(), period)
        return [name for name in self.supervisor_names if name not in absent]

    def blocked_slots(self) -> List[Tuple[str, str, str]]:
        blocked = []
        for day in self.days:
            for period in PERIODS:
                for name in sorted(absent_teachers(self.absences, day.date.isoformat(), period)):
                    blocked.append((name, day.key, period))
        return blocked

    def summarize_supervision_info(self) -> Dict[str, Any]:
        """
        Summarize the loaded roster and exam period.

        Returns:
            Dictionary containing summary statistics
        """
        if not self.rooms:
            raise ValueError("No roster loaded. Please run read_roster_file first.")

        slots = sum(room.required_count(self.config.requirements) for room in self.rooms)
        return {
            'total_supervisors': len(set(self.supervisor_names)),
            'total_rooms': len(self.rooms),
            'regular_rooms': sum(1 for room in self.rooms if room.type == REGULAR),
            'special_rooms': sum(1 for room in self.rooms if room.type == SPECIAL),
            'slots_per_period': slots,
            'exam_days': [day.key for day in self.days],
            'total_slots': slots * len(self.days) * len(PERIODS),
        }

    def print_summary(self) -> None:
        """Print a formatted summary of the roster and exam period."""
        summary = self.summarize_supervision_info()

        print("\nSUPERVISION DATA SUMMARY")
        print("=" * 50)
        print(f"Supervisors: {summary['total_supervisors']}")
        print(f"Rooms: {summary['total_rooms']} "
              f"({summary['regular_rooms']} regular, {summary['special_rooms']} special)")
        print(f"Supervisors needed per period: {summary['slots_per_period']}")
        print(f"Total supervision slots: {summary['total_slots']}")

        print("\nEXAM DAYS")
        print("-" * 50)
        for key in summary['exam_days']:
            print(f"  {key}")

        if summary['total_supervisors'] < summary['slots_per_period']:
            print(f"\nWarning: {summary['slots_per_period'] - summary['total_supervisors']} "
                  f"supervisor(s) short per period, some will be reused")

    def distribute_period(self, day: Union[ExamDay, str], period: str) -> DistributionResult:
        """
        Distribute supervisors for one (day, period), replacing any earlier run.

        For the evening, the same day's morning supervisors are excluded
        (``exclude_morning_supervisors``) and each room's morning main
        supervisor is kept (``pin_main_supervisor``).
        """
        if period not in PERIODS:
            raise ValueError(f"Unknown period {period!r}, expected one of {PERIODS}")
        if isinstance(day, str):
            found = find_day(self.days, day)
            if found is None:
                raise ValueError(f"{day!r} is not an exam day. Please run set_exam_period first.")
            day = found

        pool = self.supervisor_pool(day, period)
        morning = self.supervision_schedule.get(day.key, MORNING) if period == EVENING else []
        prior = morning if self.config.exclude_morning_supervisors else None
        pinned = None
        if self.config.pin_main_supervisor:
            pinned = {room: names for room, names in pin_main_supervisors(morning).items()
                      if names[0] in pool}

        result = distribute(
            pool,
            self.rooms,
            prior,
            shuffler=self.shuffler,
            requirements=self.config.requirements,
            pinned=pinned,
            strict_exclusion=self.config.strict_exclusion,
        )
        self.results[day.key, period] = result

        if result.ok:
            self.supervision_schedule.set(day.key, period, result.assignments)
        else:
            log.warning("distribution_failed", day=day.key, period=period, error=str(result.error))
        return result

    def schedule(self, method: str = 'random') -> bool:
        """
        Distribute supervisors over the whole exam period.

        Args:
            method: ``random`` for the greedy engine per (day, period),
                ``balanced`` for the whole-period CP-SAT planner

        Returns:
            True if every (day, period) received a distribution
        """
        if not self.rooms:
            raise ValueError("No roster loaded. Please run read_roster_file first.")
        if not self.days:
            raise ValueError("No exam days. Please run set_exam_period first.")
        if method not in METHODS:
            raise ValueError(f"Unknown method {method!r}, expected one of {METHODS}")

        log.info("scheduling_started", method=method, days=len(self.days))
        self.results = {}

        if method == 'balanced':
            planner = BalancedPlanner(self.config)
            self.solution = planner.plan(self.supervisor_names, self.rooms, self.days, self.blocked_slots())
            if self.solution['status'] == 'INFEASIBLE':
                log.warning("planning_failed", message=self.solution['message'])
                return False
            self.supervision_schedule = self.solution['schedule']
            return True

        self.supervision_schedule = Schedule()
        success = True
        for day in self.days:
            for period in PERIODS:
                success = self.distribute_period(day, period).ok and success
        self.solution = {'status': 'FEASIBLE' if success else 'INFEASIBLE', 'schedule': self.supervision_schedule}
        return success

    def shortage_warnings(self) -> List[Tuple[str, str, Any]]:
        """(day, period, warning) for every run that had to reuse supervisors."""
        return [
            (day, period, warning)
            for (day, period), result in self.results.items()
            for warning in result.warnings
        ]

    def statistics(self) -> Dict[str, Any]:
        return calculate_supervision_stats(self.supervision_schedule, self.supervisor_names)

    def write_solution_to_file(self, filename: str = 'supervision_schedule.xlsx', detailed: bool = False) -> None:
        """
        Write the schedule to an Excel file.

        Args:
            filename: Output filename for the schedule
            detailed: Write one sheet per exam day plus a load sheet
        """
        if not len(self.supervision_schedule):
            print("No schedule to write.")
            return

        schedule_df = self._assignment_frame()
        if not detailed:
            schedule_df.to_excel(filename, index=False)
        else:
            with pd.ExcelWriter(filename, engine='openpyxl') as writer:
                schedule_df.to_excel(writer, sheet_name='Schedule', index=False)
                for day, day_df in schedule_df.groupby('Day', sort=False):
                    day_df.drop(columns='Day').to_excel(writer, sheet_name=self._sheet_name(day), index=False)
                load_table(self.supervision_schedule, self.supervisor_names).to_excel(
                    writer, sheet_name='Load', index=False)
        print(f"\nSchedule saved to '{filename}'")

    def print_solution(self) -> None:
        """Print the per-supervisor load and any shortages."""
        if not len(self.supervision_schedule):
            print("No schedule available.")
            return

        stats = self.statistics()
        print("\nSUPERVISION LOAD")
        print("=" * 80)
        print(f"Total assignments: {stats['total_assignments']} "
              f"({stats['morning_assignments']} morning, {stats['evening_assignments']} evening)")
        print("\nSupervisor           | Total | Morning | Evening | Days |  Fair | Deviation")
        print("-" * 80)
        for _, row in load_table(self.supervision_schedule, self.supervisor_names).iterrows():
            print(f"{row['Supervisor'][:20]:20} | {row['Total']:5} | {row['Morning']:7} | "
                  f"{row['Evening']:7} | {row['Days']:4} | {row['Fair']:5.1f} | {row['Deviation']:+9.1f}")

        doubles = same_day_double_duty(self.supervision_schedule)
        if doubles:
            print("\nSupervisors on duty in both periods:")
            for day, names in doubles.items():
                print(f"  {day}: {', '.join(names)}")

        for day, period, warning in self.shortage_warnings():
            print(f"\nWarning ({day}, {period}): {warning}")

    # Private helper methods
    def _assignment_frame(self) -> pd.DataFrame:
        rows = []
        width = max([len(a.supervisors) for _, _, assignments in self.supervision_schedule
                     for a in assignments] or [1])
        for day, period, assignments in self.supervision_schedule:
            for assignment in assignments:
                row = {'Day': day, 'Period': period, 'Room': assignment.room, 'Type': assignment.room_type}
                for slot in range(width):
                    names = assignment.supervisors
                    row[f'Supervisor {slot + 1}'] = names[slot] if slot < len(names) else ''
                rows.append(row)
        columns = ['Day', 'Period', 'Room', 'Type'] + [f'Supervisor {i + 1}' for i in range(width)]
        return pd.DataFrame(rows, columns=columns)

    @staticmethod
    def _sheet_name(day: str) -> str:
        """Excel sheet names cannot contain []:*?/\\ and are capped at 31 characters."""
        return re.sub(r'[\[\]:*?/\\]', '-', day)[:31]

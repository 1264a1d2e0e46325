"""
Whole-period supervision planning with a CP-SAT model.

Where the greedy engine rolls one (day, period) at a time, this planner
assigns the complete exam period in one model so that loads are even across
supervisors and same-day double duty is avoided wherever possible.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ortools.sat.python import cp_model

from .config import SchedulerConfig
from .log import get_logger
from .models import PERIODS, Assignment, ExamDay, Room, Schedule

log = get_logger(__name__)

Blocked = Tuple[str, str, str]


class BalancedPlanner:
    """
    Plan every (day, period) of an exam period at once.

    Hard constraints: every room gets its required number of supervisors, no
    supervisor holds two rooms in the same (day, period), blocked
    (supervisor, day key, period) triples stay free. Soft: serving both
    periods of a day, deviating from the even load.
    """

    def __init__(self, config: Optional[SchedulerConfig] = None):
        self.config = config or SchedulerConfig()
        self.model = None
        self.solver = None
        self.x = {}
        self.doubles = {}
        self.solution = None

    def plan(self,
             supervisors: Sequence[str],
             rooms: Sequence[Room],
             days: Sequence[ExamDay],
             blocked: Optional[Iterable[Blocked]] = None) -> Dict[str, Any]:
        """
        Build and solve the model.

        Returns:
            Solution dict with ``status`` (OPTIMAL, FEASIBLE or INFEASIBLE),
            ``schedule`` and ``objective_value`` when solved, ``message`` when not
        """
        self.supervisors = list(dict.fromkeys(s for s in supervisors if s))
        self.rooms = list(rooms)
        self.days = list(days)
        self.blocked = set(blocked or [])

        if not self.supervisors or not self.rooms or not self.days:
            self.solution = {'status': 'INFEASIBLE',
                             'message': 'Supervisors, rooms and exam days are all required'}
            return self.solution

        self._initialize_model()
        self._create_decision_variables()
        if not self._add_constraints():
            return self.solution
        self._define_objective()

        status = self._solve_model()
        if status in [cp_model.OPTIMAL, cp_model.FEASIBLE]:
            self._extract_solution(status)
        else:
            self.solution = {'status': 'INFEASIBLE', 'message': 'No feasible solution found'}
        return self.solution

    def _required(self, room: Room) -> int:
        return room.required_count(self.config.requirements)

    def _slots(self):
        for d_idx, day in enumerate(self.days):
            for period in PERIODS:
                for r_idx, room in enumerate(self.rooms):
                    yield d_idx, day, period, r_idx, room

    def _initialize_model(self) -> None:
        self.model = cp_model.CpModel()
        self.x = {}
        self.doubles = {}

    def _create_decision_variables(self) -> None:
        """x[s, d, p, r]: supervisor s holds room r on day d, period p."""
        for s_idx, name in enumerate(self.supervisors):
            for d_idx, day, period, r_idx, room in self._slots():
                if (name, day.key, period) in self.blocked:
                    continue
                self.x[s_idx, d_idx, period, r_idx] = self.model.NewBoolVar(
                    f'x_{s_idx}_{d_idx}_{period}_{r_idx}')
        log.debug("decision_variables", count=len(self.x))

    def _add_constraints(self) -> bool:
        s_indices = range(len(self.supervisors))

        for d_idx, day, period, r_idx, room in self._slots():
            holders = [self.x[s, d_idx, period, r_idx] for s in s_indices
                       if (s, d_idx, period, r_idx) in self.x]
            if len(holders) < self._required(room):
                self.solution = {
                    'status': 'INFEASIBLE',
                    'message': f"Not enough available supervisors for {room.name} on {day.key} ({period})",
                }
                return False
            self.model.Add(sum(holders) == self._required(room))

        for s in s_indices:
            for d_idx, day in enumerate(self.days):
                daily = []
                for period in PERIODS:
                    held = [self.x[s, d_idx, period, r] for r in range(len(self.rooms))
                            if (s, d_idx, period, r) in self.x]
                    if held:
                        self.model.Add(sum(held) <= 1)
                    daily.extend(held)
                if daily and self.config.exclude_morning_supervisors:
                    double = self.model.NewBoolVar(f'double_{s}_{d_idx}')
                    self.model.Add(sum(daily) <= 1 + double)
                    self.doubles[s, d_idx] = double
        return True

    def _define_objective(self) -> None:
        total_slots = sum(self._required(room) for room in self.rooms) * len(self.days) * len(PERIODS)
        fair = int(round(total_slots / len(self.supervisors)))

        held = {s: [] for s in range(len(self.supervisors))}
        for (s_idx, _, _, _), var in self.x.items():
            held[s_idx].append(var)

        deviation = 0
        for s in range(len(self.supervisors)):
            load = sum(held[s])
            pos_dev = self.model.NewIntVar(0, total_slots, f'pos_dev_{s}')
            neg_dev = self.model.NewIntVar(0, total_slots, f'neg_dev_{s}')
            self.model.Add(load - fair == pos_dev - neg_dev)
            deviation += pos_dev + neg_dev

        self.model.Minimize(
            self.config.weight_same_day * sum(self.doubles.values())
            + self.config.weight_fairness * deviation
        )

    def _solve_model(self) -> int:
        log.info("solving_model", variables=len(self.x), timeout=self.config.solver_timeout)
        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = self.config.solver_timeout
        if self.config.seed is not None:
            solver.parameters.random_seed = self.config.seed
        status = solver.Solve(self.model)
        self.solver = solver
        log.info("solver_finished", status=solver.StatusName(status))
        return status

    def _extract_solution(self, status: int) -> None:
        schedule = Schedule()
        for d_idx, day in enumerate(self.days):
            for period in PERIODS:
                assignments: List[Assignment] = []
                for r_idx, room in enumerate(self.rooms):
                    names = [self.supervisors[s] for s in range(len(self.supervisors))
                             if (s, d_idx, period, r_idx) in self.x
                             and self.solver.Value(self.x[s, d_idx, period, r_idx]) == 1]
                    assignments.append(Assignment(room=room.name, supervisors=names, room_type=room.type))
                schedule.set(day.key, period, assignments)

        self.solution = {
            'status': 'OPTIMAL' if status == cp_model.OPTIMAL else 'FEASIBLE',
            'schedule': schedule,
            'double_duty': sum(self.solver.Value(v) for v in self.doubles.values()),
            'objective_value': self.solver.ObjectiveValue(),
        }

"""
Absence and lateness tracking for students and teachers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

ABSENT = 'absent'
LATE = 'late'
PRESENT = 'present'
STATUSES = (ABSENT, LATE, PRESENT)

STUDENT = 'student'
TEACHER = 'teacher'


@dataclass
class AbsenceRecord:
    """
    One attendance observation. ``date`` uses the same ``YYYY-MM-DD`` form as
    the exam period settings.
    """

    id: str
    name: str
    status: str
    date: str
    period: str
    type: str = TEACHER
    notes: Optional[str] = None

    def __post_init__(self):
        if self.status not in STATUSES:
            raise ValueError(f"Unknown absence status {self.status!r}")
        if self.type not in (STUDENT, TEACHER):
            raise ValueError(f"Unknown person type {self.type!r}")


def filter_by_type(absences: Iterable[AbsenceRecord], person_type: str) -> List[AbsenceRecord]:
    return [a for a in absences if a.type == person_type]


def filter_by_status(absences: Iterable[AbsenceRecord], status: str) -> List[AbsenceRecord]:
    return [a for a in absences if a.status == status]


def filter_by_date(absences: Iterable[AbsenceRecord], date: str) -> List[AbsenceRecord]:
    return [a for a in absences if a.date == date]


def filter_by_period(absences: Iterable[AbsenceRecord], period: str) -> List[AbsenceRecord]:
    return [a for a in absences if a.period == period]


def group_by_date(absences: Iterable[AbsenceRecord]) -> Dict[str, List[AbsenceRecord]]:
    grouped: Dict[str, List[AbsenceRecord]] = {}
    for absence in absences:
        grouped.setdefault(absence.date, []).append(absence)
    return grouped


def group_by_type(absences: Iterable[AbsenceRecord]) -> Dict[str, List[AbsenceRecord]]:
    grouped: Dict[str, List[AbsenceRecord]] = {STUDENT: [], TEACHER: []}
    for absence in absences:
        grouped[absence.type].append(absence)
    return grouped


def _rate(count: int, total: int) -> float:
    return count / total * 100 if total > 0 else 0.0


def calculate_absence_stats(absences: Iterable[AbsenceRecord], total_students: int,
                            total_teachers: int) -> Dict[str, float]:
    """Absence and lateness counts with rates in percent of the population."""
    absences = list(absences)

    def count(person_type, status):
        return sum(1 for a in absences if a.type == person_type and a.status == status)

    student_absences = count(STUDENT, ABSENT)
    teacher_absences = count(TEACHER, ABSENT)
    student_lates = count(STUDENT, LATE)
    teacher_lates = count(TEACHER, LATE)

    return {
        'total_students': total_students,
        'total_teachers': total_teachers,
        'student_absences': student_absences,
        'teacher_absences': teacher_absences,
        'student_lates': student_lates,
        'teacher_lates': teacher_lates,
        'student_absence_rate': _rate(student_absences, total_students),
        'teacher_absence_rate': _rate(teacher_absences, total_teachers),
        'student_late_rate': _rate(student_lates, total_students),
        'teacher_late_rate': _rate(teacher_lates, total_teachers),
    }


def absent_teachers(absences: Iterable[AbsenceRecord], date: str, period: str) -> set:
    """Names of teachers marked absent for one exam date and period."""
    return {
        a.name for a in absences
        if a.type == TEACHER and a.status == ABSENT and a.date == date and a.period == period
    }

"""
Exam Supervision Scheduler Package

Assigns supervisors (proctors) to exam rooms for each exam day and period,
keeping the morning's supervisors out of the evening and spreading duties
fairly across the roster.
"""

from .config import SchedulerConfig
from .days import generate_days
from .distribution import DistributionResult, RandomShuffler, distribute
from .errors import InsufficientSupervisors, InvalidDateRange, NoSupervisorsAvailable, SupervisionError
from .models import Assignment, ExamDay, Room, Schedule
from .scheduler import ExamSupervisionScheduler
from .utils import (
    validate_roster_file
)

__version__ = '1.0.0'
__author__ = 'Exam Supervision Scheduling Team'

__all__ = [
    'Assignment',
    'DistributionResult',
    'ExamDay',
    'ExamSupervisionScheduler',
    'InsufficientSupervisors',
    'InvalidDateRange',
    'NoSupervisorsAvailable',
    'RandomShuffler',
    'Room',
    'Schedule',
    'SchedulerConfig',
    'SupervisionError',
    'distribute',
    'generate_days',
    'validate_roster_file'
]

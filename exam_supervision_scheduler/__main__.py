# exam_supervision_scheduler/__main__.py

"""
Main script for running the Exam Supervision Scheduler.

Usage:
    python -m exam_supervision_scheduler roster.xlsx --start 2024-06-16 --end 2024-06-20 [options]
"""

import argparse
import sys

from .config import ARABIC_WEEKDAYS, ENGLISH_WEEKDAYS, SchedulerConfig
from .days import parse_date
from .errors import InvalidDateRange, SupervisionError
from .log import setup_logging
from .models import PERIODS
from .scheduler import METHODS, ExamSupervisionScheduler
from .storage import load_schedule, save_schedule
from .utils import validate_roster_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Exam Supervision Scheduler - Assign supervisors to exam rooms fairly'
    )

    # Required arguments
    parser.add_argument('input_file',
                        help='Excel roster with Teachers and Rooms sheets')

    # Exam period
    parser.add_argument('-s', '--start', default='',
                        help='First exam day, YYYY-MM-DD')
    parser.add_argument('-e', '--end', default='',
                        help='Last exam day, YYYY-MM-DD (inclusive)')

    # Optional arguments
    parser.add_argument('-o', '--output',
                        default='supervision_schedule.xlsx',
                        help='Output filename for the schedule (default: supervision_schedule.xlsx)')

    parser.add_argument('-m', '--method',
                        choices=METHODS,
                        default='random',
                        help='random: shuffle per day and period; balanced: plan the whole period (default: random)')

    parser.add_argument('--seed',
                        type=int,
                        default=None,
                        help='Seed for repeatable random distributions')

    parser.add_argument('-t', '--timeout',
                        type=int,
                        default=60,
                        help='Solver timeout in seconds for the balanced method (default: 60)')

    # Supervision policy
    parser.add_argument('--regular',
                        type=int,
                        default=1,
                        help='Supervisors per regular room (default: 1)')

    parser.add_argument('--special',
                        type=int,
                        default=2,
                        help='Supervisors per special room (default: 2)')

    parser.add_argument('--allow-double-duty',
                        action='store_true',
                        help='Do not keep morning supervisors out of the evening')

    parser.add_argument('--strict-exclusion',
                        action='store_true',
                        help='Never reuse morning supervisors in the evening, even when short')

    parser.add_argument('--pin-main',
                        action='store_true',
                        help="Keep each room's morning main supervisor for the evening")

    # Weight arguments
    parser.add_argument('--weight-same-day',
                        type=int,
                        default=100,
                        help='Balanced method: penalty for serving both periods of a day (default: 100)')

    parser.add_argument('--weight-fairness',
                        type=int,
                        default=10,
                        help='Balanced method: penalty for deviating from the even load (default: 10)')

    # Re-roll a single slot
    parser.add_argument('--schedule-file',
                        help='JSON file the schedule is loaded from and saved to')

    parser.add_argument('--day',
                        help='Only redistribute this exam day (YYYY-MM-DD); needs --period')

    parser.add_argument('--period',
                        choices=PERIODS,
                        help='Period to redistribute with --day')

    # Additional options
    parser.add_argument('--arabic',
                        action='store_true',
                        help='Arabic weekday names in day labels')

    parser.add_argument('--detailed',
                        action='store_true',
                        help='Export detailed schedule with one sheet per day and a load sheet')

    parser.add_argument('--validate-only',
                        action='store_true',
                        help='Only validate the input file without scheduling')

    parser.add_argument('--log-level',
                        default='WARNING',
                        help='Log level (default: WARNING)')

    parser.add_argument('--log-json',
                        action='store_true',
                        help='Write logs as JSON lines')

    return parser


def config_from_args(args: argparse.Namespace) -> SchedulerConfig:
    return SchedulerConfig(
        supervisors_per_regular_room=args.regular,
        supervisors_per_special_room=args.special,
        exclude_morning_supervisors=not args.allow_double_duty,
        strict_exclusion=args.strict_exclusion,
        pin_main_supervisor=args.pin_main,
        seed=args.seed,
        weekday_names=ARABIC_WEEKDAYS if args.arabic else ENGLISH_WEEKDAYS,
        start_date=args.start,
        end_date=args.end,
        solver_timeout=args.timeout,
        weight_same_day=args.weight_same_day,
        weight_fairness=args.weight_fairness,
        log_level=args.log_level,
        log_json=args.log_json,
    )


def redistribute(scheduler: ExamSupervisionScheduler, day: str, period: str) -> bool:
    """Re-roll one (day, period) of an existing schedule."""
    wanted = parse_date(day)
    exam_day = next((d for d in scheduler.days if d.date == wanted), None)
    if exam_day is None:
        print(f"{day} is not within the exam period.")
        return False

    result = scheduler.distribute_period(exam_day, period)
    if not result.ok:
        print(f"Cannot distribute {exam_day.key} ({period}): {result.error}")
        print("Import a teacher roster before distributing.")
        return False
    for warning in result.warnings:
        print(f"Warning: {warning}")
    return True


def main(argv=None):
    """Main function to run the scheduler from command line."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.day and not args.period:
        parser.error('--day requires --period')

    try:
        config = config_from_args(args)
    except ValueError as e:
        print(f"Invalid settings: {e}")
        sys.exit(1)
    setup_logging(json_output=config.log_json, log_level=config.log_level)

    # Validate input file
    print(f"Validating input file: {args.input_file}")
    is_valid, errors = validate_roster_file(args.input_file)

    if not is_valid:
        print("Input file validation failed:")
        for error in errors:
            print(f"  - {error}")
        sys.exit(1)

    print("Input file validation successful.")

    if args.validate_only:
        sys.exit(0)

    try:
        scheduler = ExamSupervisionScheduler(config)

        scheduler.read_roster_file(args.input_file)

        if not scheduler.set_exam_period():
            print("No exam days configured - check --start and --end (YYYY-MM-DD).")
            sys.exit(1)

        if args.schedule_file:
            scheduler.supervision_schedule = load_schedule(args.schedule_file)

        if args.day:
            success = redistribute(scheduler, args.day, args.period)
        else:
            scheduler.print_summary()
            success = scheduler.schedule(method=args.method)

        if not success:
            print("\nScheduling failed.")
            print("Consider:")
            print("  - Importing a teacher roster with at least one name")
            print("  - Checking teacher absences for the exam period")
            print("  - Ensuring enough teachers for every room in a period")
            sys.exit(1)

        scheduler.print_solution()
        scheduler.write_solution_to_file(args.output, detailed=args.detailed)

        if args.schedule_file:
            save_schedule(scheduler.supervision_schedule, args.schedule_file)

    except (SupervisionError, InvalidDateRange, ValueError) as e:
        print(f"\nError during scheduling: {str(e)}")
        sys.exit(1)


if __name__ == '__main__':
    main()

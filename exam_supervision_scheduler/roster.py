"""
Roster import from Excel workbooks.

Expected layout:
    Teachers sheet: a name column (detected, see NAME_COLUMNS), optional Subject
    Rooms sheet:    Room, Type (regular/special), optional Supervisors
    Absences sheet: optional; Name, Date, Period, optional Status, Type, Notes
"""

import zipfile
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import pandas as pd

from .errors import RosterError
from .log import get_logger
from .absences import ABSENT, TEACHER, AbsenceRecord
from .models import PERIODS, ROOM_TYPES, Room, Supervisor

log = get_logger(__name__)

TEACHERS_SHEET = 'Teachers'
ROOMS_SHEET = 'Rooms'
ABSENCES_SHEET = 'Absences'

NAME_COLUMNS = ('name', 'teacher', 'الاسم', 'اسم', 'الأستاذ', 'استاذ', 'مدرس')
SUBJECT_COLUMNS = ('Subject', 'subject', 'المادة', 'مادة')
ROOM_TYPE_ALIASES = {
    'regular': 'regular', 'normal': 'regular', 'عادية': 'regular', 'عادي': 'regular',
    'special': 'special', 'خاصة': 'special', 'خاص': 'special',
}


@dataclass
class Roster:
    supervisors: List[Supervisor] = field(default_factory=list)
    rooms: List[Room] = field(default_factory=list)
    absences: List[AbsenceRecord] = field(default_factory=list)

    @property
    def supervisor_names(self) -> List[str]:
        return [s.name for s in self.supervisors]


def detect_name_column(columns: Sequence) -> Optional[str]:
    """First column whose header contains a known name identifier, else the first column."""
    for column in columns:
        header = str(column).lower()
        if any(candidate in header for candidate in NAME_COLUMNS):
            return column
    return columns[0] if len(columns) else None


def _cell(row: pd.Series, column) -> Optional[str]:
    if column is None or column not in row.index or pd.isna(row[column]):
        return None
    text = str(row[column]).strip()
    return text or None


def teachers_from_frame(df: pd.DataFrame) -> List[Supervisor]:
    """
    Build supervisors from a teachers sheet.

    Rows without a name get a numbered placeholder so the row count matches
    the sheet.
    """
    if df.empty:
        raise RosterError("No data found in the teachers sheet")

    name_column = detect_name_column(list(df.columns))
    subject_column = next((c for c in SUBJECT_COLUMNS if c in df.columns), None)

    supervisors = []
    for index, (_, row) in enumerate(df.iterrows(), start=1):
        name = _cell(row, name_column) or f"Teacher {index}"
        supervisors.append(Supervisor(name=name, subject=_cell(row, subject_column)))
    return supervisors


def rooms_from_frame(df: pd.DataFrame) -> List[Room]:
    missing = [c for c in ('Room', 'Type') if c not in df.columns]
    if missing:
        raise RosterError(f"Rooms sheet missing columns: {', '.join(missing)}")

    rooms = []
    for _, row in df.iterrows():
        name = _cell(row, 'Room')
        if name is None:
            continue
        raw_type = (_cell(row, 'Type') or 'regular').lower()
        room_type = ROOM_TYPE_ALIASES.get(raw_type)
        if room_type not in ROOM_TYPES:
            raise RosterError(f"Room {name!r} has unknown type {raw_type!r}")
        count = None
        if 'Supervisors' in df.columns and not pd.isna(row['Supervisors']):
            count = int(row['Supervisors'])
            if count < 1:
                raise RosterError(f"Room {name!r} needs at least one supervisor")
        rooms.append(Room(name=name, type=room_type, supervisors=count))
    return rooms


def absences_from_frame(df: pd.DataFrame) -> List[AbsenceRecord]:
    """
    Build teacher absences from an absences sheet.

    Date cells may be Excel dates or ``YYYY-MM-DD`` text; Status defaults to
    absent and Type to teacher.
    """
    missing = [c for c in ('Name', 'Date', 'Period') if c not in df.columns]
    if missing:
        raise RosterError(f"Absences sheet missing columns: {', '.join(missing)}")

    absences = []
    for index, (_, row) in enumerate(df.iterrows(), start=1):
        name = _cell(row, 'Name')
        if name is None:
            continue
        try:
            day = pd.to_datetime(row['Date'], format='%Y-%m-%d').strftime('%Y-%m-%d')
        except (TypeError, ValueError) as e:
            raise RosterError(f"Absence of {name!r} has an invalid date {row['Date']!r}") from e
        period = (_cell(row, 'Period') or '').lower()
        if period not in PERIODS:
            raise RosterError(f"Absence of {name!r} has unknown period {period!r}")
        try:
            absences.append(AbsenceRecord(
                id=str(index),
                name=name,
                status=(_cell(row, 'Status') or ABSENT).lower(),
                date=day,
                period=period,
                type=(_cell(row, 'Type') or TEACHER).lower(),
                notes=_cell(row, 'Notes'),
            ))
        except ValueError as e:
            raise RosterError(f"Absence of {name!r}: {e}") from e
    return absences


def read_roster(filename: str) -> Roster:
    """
    Read teachers, rooms and, when present, absences from an Excel workbook.

    Raises:
        RosterError: if the file cannot be read or holds invalid rows
    """
    log.info("reading_roster", filename=filename)
    try:
        with pd.ExcelFile(filename) as excel_file:
            teachers_df = excel_file.parse(TEACHERS_SHEET)
            rooms_df = excel_file.parse(ROOMS_SHEET)
            absences_df = (excel_file.parse(ABSENCES_SHEET)
                           if ABSENCES_SHEET in excel_file.sheet_names else None)
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise RosterError(f"Error reading {filename}: {e}") from e

    roster = Roster(
        supervisors=teachers_from_frame(teachers_df),
        rooms=rooms_from_frame(rooms_df),
        absences=absences_from_frame(absences_df) if absences_df is not None else [],
    )
    log.info("roster_loaded", supervisors=len(roster.supervisors), rooms=len(roster.rooms),
             absences=len(roster.absences))
    return roster

"""
Unit tests for roster import and validation.
"""

import tempfile
import unittest
from pathlib import Path

import pandas as pd

from exam_supervision_scheduler.errors import RosterError
from exam_supervision_scheduler.roster import (
    absences_from_frame,
    detect_name_column,
    read_roster,
    rooms_from_frame,
    teachers_from_frame,
)
from exam_supervision_scheduler.utils import validate_roster_file


def write_workbook(path: Path, sheets: dict) -> None:
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name, df in sheets.items():
            df.to_excel(writer, sheet_name=name, index=False)


class TestReadRoster(unittest.TestCase):
    def test_read_teachers_and_rooms(self) -> None:
        teachers = pd.DataFrame({"No": [1, 2, 3], "Teacher Name": ["Amina", None, "Karim"],
                                 "Subject": ["Math", "Physics", None]})
        rooms = pd.DataFrame({"Room": ["R1", "Lab", "Hall"], "Type": ["regular", "Special", "regular"],
                              "Supervisors": [None, None, 3]})

        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "roster.xlsx"
            write_workbook(p, {"Teachers": teachers, "Rooms": rooms})
            roster = read_roster(str(p))

        self.assertEqual(roster.supervisor_names, ["Amina", "Teacher 2", "Karim"])
        self.assertEqual(roster.supervisors[0].subject, "Math")
        self.assertIsNone(roster.supervisors[2].subject)
        self.assertEqual([(r.name, r.type, r.supervisors) for r in roster.rooms],
                         [("R1", "regular", None), ("Lab", "special", None), ("Hall", "regular", 3)])

    def test_read_absences_sheet(self) -> None:
        teachers = pd.DataFrame({"Name": ["Amina", "Karim"]})
        rooms = pd.DataFrame({"Room": ["R1"], "Type": ["regular"]})
        absences = pd.DataFrame({"Name": ["Karim", None], "Date": ["2024-06-17", "2024-06-18"],
                                 "Period": ["Morning", "evening"], "Notes": ["sick", None]})

        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "roster.xlsx"
            write_workbook(p, {"Teachers": teachers, "Rooms": rooms, "Absences": absences})
            roster = read_roster(str(p))

        self.assertEqual(len(roster.absences), 1)
        absence = roster.absences[0]
        self.assertEqual((absence.name, absence.date, absence.period), ("Karim", "2024-06-17", "morning"))
        self.assertEqual((absence.status, absence.type, absence.notes), ("absent", "teacher", "sick"))

    def test_absences_sheet_is_optional(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "roster.xlsx"
            write_workbook(p, {"Teachers": pd.DataFrame({"Name": ["A"]}),
                               "Rooms": pd.DataFrame({"Room": ["R1"], "Type": ["regular"]})})
            self.assertEqual(read_roster(str(p)).absences, [])

    def test_missing_file(self) -> None:
        with self.assertRaises(RosterError):
            read_roster("does-not-exist.xlsx")


class TestFrames(unittest.TestCase):
    def test_detect_name_column(self) -> None:
        self.assertEqual(detect_name_column(["رقم", "الاسم الكامل"]), "الاسم الكامل")
        self.assertEqual(detect_name_column(["Code", "Teacher"]), "Teacher")
        self.assertEqual(detect_name_column(["Code", "Other"]), "Code")
        self.assertIsNone(detect_name_column([]))

    def test_empty_teachers_sheet(self) -> None:
        with self.assertRaises(RosterError):
            teachers_from_frame(pd.DataFrame({"Name": []}))

    def test_unknown_room_type(self) -> None:
        with self.assertRaises(RosterError):
            rooms_from_frame(pd.DataFrame({"Room": ["R1"], "Type": ["vip"]}))

    def test_rooms_sheet_needs_columns(self) -> None:
        with self.assertRaises(RosterError):
            rooms_from_frame(pd.DataFrame({"Room": ["R1"]}))

    def test_arabic_room_types_and_blank_rows(self) -> None:
        rooms = rooms_from_frame(pd.DataFrame({"Room": ["A", None, "B"], "Type": ["عادية", "regular", "خاصة"]}))
        self.assertEqual([(r.name, r.type) for r in rooms], [("A", "regular"), ("B", "special")])

    def test_absences_with_bad_rows(self) -> None:
        with self.assertRaises(RosterError):
            absences_from_frame(pd.DataFrame({"Name": ["A"], "Date": ["2024-06-17"]}))
        with self.assertRaises(RosterError):
            absences_from_frame(pd.DataFrame({"Name": ["A"], "Date": ["2024-06-17"], "Period": ["night"]}))
        with self.assertRaises(RosterError):
            absences_from_frame(pd.DataFrame({"Name": ["A"], "Date": ["17/06/2024"], "Period": ["morning"]}))
        with self.assertRaises(RosterError):
            absences_from_frame(pd.DataFrame({"Name": ["A"], "Date": ["2024-06-17"], "Period": ["morning"],
                                              "Status": ["missing"]}))


class TestValidateRosterFile(unittest.TestCase):
    def test_valid_file(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "roster.xlsx"
            write_workbook(p, {"Teachers": pd.DataFrame({"Name": ["A"]}),
                               "Rooms": pd.DataFrame({"Room": ["R1"], "Type": ["regular"]})})
            self.assertEqual(validate_roster_file(str(p)), (True, []))

    def test_missing_sheet_and_columns(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "roster.xlsx"
            write_workbook(p, {"Rooms": pd.DataFrame({"Room": ["R1"]})})
            is_valid, errors = validate_roster_file(str(p))

        self.assertFalse(is_valid)
        self.assertIn("Missing required sheets: Teachers", errors)
        self.assertIn("Rooms sheet missing columns: Type", errors)

    def test_absences_sheet_needs_columns(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "roster.xlsx"
            write_workbook(p, {"Teachers": pd.DataFrame({"Name": ["A"]}),
                               "Rooms": pd.DataFrame({"Room": ["R1"], "Type": ["regular"]}),
                               "Absences": pd.DataFrame({"Name": ["A"], "Date": ["2024-06-17"]})})
            is_valid, errors = validate_roster_file(str(p))

        self.assertFalse(is_valid)
        self.assertEqual(errors, ["Absences sheet missing columns: Period"])

    def test_missing_file(self) -> None:
        is_valid, errors = validate_roster_file("does-not-exist.xlsx")
        self.assertFalse(is_valid)
        self.assertEqual(errors, ["File not found: does-not-exist.xlsx"])


if __name__ == "__main__":
    unittest.main()

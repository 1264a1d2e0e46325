"""
Utility functions for the exam supervision scheduler.
"""

import pandas as pd
from typing import List, Tuple

from .roster import ABSENCES_SHEET, ROOMS_SHEET, TEACHERS_SHEET


def validate_roster_file(filename: str) -> Tuple[bool, List[str]]:
    """
    Validate that the roster workbook has the required sheets and columns.

    Args:
        filename: Path to the Excel file

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    try:
        excel_file = pd.ExcelFile(filename)

        required_sheets = [TEACHERS_SHEET, ROOMS_SHEET]
        missing_sheets = [sheet for sheet in required_sheets
                          if sheet not in excel_file.sheet_names]

        if missing_sheets:
            errors.append(f"Missing required sheets: {', '.join(missing_sheets)}")

        if TEACHERS_SHEET in excel_file.sheet_names:
            teachers_df = excel_file.parse(TEACHERS_SHEET)
            if teachers_df.empty or len(teachers_df.columns) == 0:
                errors.append("Teachers sheet is empty")

        if ROOMS_SHEET in excel_file.sheet_names:
            rooms_df = excel_file.parse(ROOMS_SHEET)
            required_room_cols = ['Room', 'Type']
            missing_cols = [col for col in required_room_cols
                            if col not in rooms_df.columns]
            if missing_cols:
                errors.append(f"Rooms sheet missing columns: {', '.join(missing_cols)}")

        if ABSENCES_SHEET in excel_file.sheet_names:
            absences_df = excel_file.parse(ABSENCES_SHEET)
            required_absence_cols = ['Name', 'Date', 'Period']
            missing_cols = [col for col in required_absence_cols
                            if col not in absences_df.columns]
            if missing_cols:
                errors.append(f"Absences sheet missing columns: {', '.join(missing_cols)}")

    except FileNotFoundError:
        errors.append(f"File not found: {filename}")
    except Exception as e:
        errors.append(f"Error reading file: {str(e)}")

    return len(errors) == 0, errors

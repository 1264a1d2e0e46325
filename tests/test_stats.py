"""
Unit tests for supervision statistics.
"""

import unittest

from exam_supervision_scheduler.models import Assignment, Schedule
from exam_supervision_scheduler.stats import calculate_supervision_stats, load_table, same_day_double_duty

DAY = "Sunday 16/06/2024"


def sample_schedule() -> Schedule:
    schedule = Schedule()
    schedule.set(DAY, "morning", [Assignment("R1", ["A"]), Assignment("R2", ["B", "C"], "special")])
    schedule.set(DAY, "evening", [Assignment("R1", ["D"]), Assignment("R2", ["A", "E"], "special")])
    return schedule


class TestSupervisionStats(unittest.TestCase):
    def test_counts(self) -> None:
        stats = calculate_supervision_stats(sample_schedule(), ["A", "B", "C", "D", "E", "F"])

        self.assertEqual(stats["total_assignments"], 6)
        self.assertEqual(stats["morning_assignments"], 3)
        self.assertEqual(stats["evening_assignments"], 3)
        self.assertEqual(stats["assignments_per_supervisor"]["A"], 2)
        self.assertEqual(stats["assignments_per_supervisor"]["F"], 0)
        self.assertEqual(stats["assignments_per_room"], {"R1": 2, "R2": 4})
        self.assertEqual(stats["assignments_per_day"], {DAY: 6})

    def test_empty_schedule(self) -> None:
        stats = calculate_supervision_stats(Schedule(), ["A"])
        self.assertEqual(stats["total_assignments"], 0)
        self.assertEqual(stats["assignments_per_supervisor"], {"A": 0})

    def test_load_table(self) -> None:
        table = load_table(sample_schedule(), ["A", "B", "C", "D", "E", "F"])
        self.assertEqual(list(table["Supervisor"]), ["A", "B", "C", "D", "E", "F"])

        row_a = table[table["Supervisor"] == "A"].iloc[0]
        self.assertEqual(row_a["Total"], 2)
        self.assertEqual(row_a["Morning"], 1)
        self.assertEqual(row_a["Evening"], 1)
        self.assertEqual(row_a["Days"], 1)
        self.assertAlmostEqual(row_a["Deviation"], 1.0)

        row_f = table[table["Supervisor"] == "F"].iloc[0]
        self.assertEqual(row_f["Total"], 0)
        self.assertAlmostEqual(row_f["Deviation"], -1.0)

    def test_same_day_double_duty(self) -> None:
        self.assertEqual(same_day_double_duty(sample_schedule()), {DAY: ["A"]})


if __name__ == "__main__":
    unittest.main()

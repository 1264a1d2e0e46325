"""
CLI tests.

We run main() in-process on a small roster workbook and check exit codes and
the files written.
"""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock
from pathlib import Path

import pandas as pd

from exam_supervision_scheduler.__main__ import build_parser, config_from_args, main


def write_roster(path: Path, teachers) -> None:
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame({"Name": teachers}).to_excel(writer, sheet_name="Teachers", index=False)
        pd.DataFrame({"Room": ["R1", "S1"], "Type": ["regular", "special"]}).to_excel(
            writer, sheet_name="Rooms", index=False)


def run(argv) -> str:
    buf = io.StringIO()
    with redirect_stdout(buf):
        main(argv)
    return buf.getvalue()


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)
        self.roster = self.dir / "roster.xlsx"
        write_roster(self.roster, ["T1", "T2", "T3", "T4", "T5", "T6"])

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_full_run_writes_schedule(self) -> None:
        output = self.dir / "out.xlsx"
        store = self.dir / "schedule.json"
        out = run([str(self.roster), "-s", "2024-06-16", "-e", "2024-06-17", "--seed", "4",
                   "-o", str(output), "--schedule-file", str(store)])

        self.assertIn("SUPERVISION LOAD", out)
        self.assertTrue(output.exists())
        data = json.loads(store.read_text(encoding="utf-8"))
        self.assertEqual(sorted(data), ["Monday 17/06/2024", "Sunday 16/06/2024"])

    def test_reroll_one_period(self) -> None:
        store = self.dir / "schedule.json"
        base = [str(self.roster), "-s", "2024-06-16", "-e", "2024-06-17",
                "-o", str(self.dir / "out.xlsx"), "--schedule-file", str(store)]
        run(base + ["--seed", "1"])
        before = json.loads(store.read_text(encoding="utf-8"))

        run(base + ["--seed", "2", "--day", "2024-06-17", "--period", "evening"])
        after = json.loads(store.read_text(encoding="utf-8"))

        self.assertEqual(after["Sunday 16/06/2024"], before["Sunday 16/06/2024"])
        self.assertEqual(after["Monday 17/06/2024"]["morning"], before["Monday 17/06/2024"]["morning"])
        self.assertEqual(len(after["Monday 17/06/2024"]["evening"]), 2)

    def test_validate_only(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            run([str(self.roster), "--validate-only"])
        self.assertEqual(ctx.exception.code, 0)

    def test_invalid_file_exits_with_error(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            run([str(self.dir / "missing.xlsx")])
        self.assertEqual(ctx.exception.code, 1)

    def test_missing_dates_exit_with_error(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            run([str(self.roster), "-s", "", "-e", "2024-06-20"])
        self.assertEqual(ctx.exception.code, 1)

    def test_day_outside_period(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            run([str(self.roster), "-s", "2024-06-16", "-e", "2024-06-17",
                 "--day", "2024-07-01", "--period", "morning", "-o", str(self.dir / "out.xlsx")])
        self.assertEqual(ctx.exception.code, 1)

    def test_logging_options_reach_the_config(self) -> None:
        args = build_parser().parse_args([str(self.roster), "--log-level", "DEBUG", "--log-json"])
        config = config_from_args(args)
        self.assertEqual(config.log_level, "DEBUG")
        self.assertTrue(config.log_json)

        config = config_from_args(build_parser().parse_args([str(self.roster)]))
        self.assertEqual(config.log_level, "WARNING")
        self.assertFalse(config.log_json)

    def test_main_configures_logging_from_settings(self) -> None:
        with mock.patch("exam_supervision_scheduler.__main__.setup_logging") as setup_logging:
            with self.assertRaises(SystemExit):
                run([str(self.roster), "--validate-only", "--log-level", "ERROR", "--log-json"])
        setup_logging.assert_called_once_with(json_output=True, log_level="ERROR")

    def test_invalid_settings_exit_with_error(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            out = io.StringIO()
            with redirect_stdout(out):
                main([str(self.roster), "-s", "2024-06-16", "-e", "2024-06-17", "--regular", "0"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("Invalid settings", out.getvalue())


if __name__ == "__main__":
    unittest.main()

import json
import shutil
import unittest
from pathlib import Path

from timetable_engine.config import ScheduleConfig, load_config
from timetable_engine.errors import ValidationError


class TestScheduleConfig(unittest.TestCase):
    def setUp(self):
        self.test_data_dir = Path(__file__).parent / "test_data" / "config"
        self.test_data_dir.mkdir(parents=True, exist_ok=True)

    def tearDown(self):
        shutil.rmtree(self.test_data_dir, ignore_errors=True)

    def test_defaults(self):
        config = load_config()
        self.assertEqual(config.days_of_week[0], "Monday")
        self.assertEqual(len(config.days_of_week), 6)
        self.assertEqual(config.max_same_subject_per_day, 1)
        self.assertIsNone(config.max_daily_load_per_batch)
        self.assertEqual([w.end for w in config.break_windows], ["10:45", "13:30"])

    def test_camel_case_options(self):
        config = ScheduleConfig.from_dict({
            "daysOfWeek": ["Monday", "Tuesday"],
            "dayStart": "9:00",
            "dayEnd": "13:00",
            "slotLengthMinutes": 50,
            "breakWindows": [{"start": "10:40", "durationMinutes": 20}],
            "maxSameSubjectPerDay": 2,
            "maxDailyLoadPerBatch": 4,
        })
        self.assertEqual(config.day_start, "09:00")
        self.assertEqual(config.break_windows[0].end, "11:00")
        self.assertEqual(config.max_daily_load_per_batch, 4)

    def test_unknown_option(self):
        with self.assertRaises(ValidationError):
            ScheduleConfig.from_dict({"lunchAt": "12:00"})

    def test_load_from_file(self):
        path = self.test_data_dir / "config.json"
        path.write_text(json.dumps({"day_start": "09:00", "day_end": "15:00", "break_windows": []}))
        config = load_config(path)
        self.assertEqual(config.day_end, "15:00")
        self.assertEqual(config.break_windows, [])
        self.assertEqual(ScheduleConfig.from_dict(config.to_dict()).to_dict(), config.to_dict())

    def test_unreadable_file(self):
        path = self.test_data_dir / "broken.json"
        path.write_text("{not json")
        with self.assertRaises(ValidationError):
            load_config(path)
        with self.assertRaises(ValidationError):
            load_config(self.test_data_dir / "missing.json")

    def test_bad_caps(self):
        with self.assertRaises(ValidationError):
            ScheduleConfig(max_same_subject_per_day=0)
        with self.assertRaises(ValidationError):
            ScheduleConfig(break_windows=[{"start": "10:00", "duration_minutes": 0}])
        with self.assertRaises(ValidationError):
            ScheduleConfig(max_daily_load_per_faculty=0)

    def test_non_numeric_values_name_the_option(self):
        with self.assertRaisesRegex(ValidationError, "slot_length_minutes"):
            ScheduleConfig.from_dict({"slotLengthMinutes": "sixty"})
        with self.assertRaisesRegex(ValidationError, "duration_minutes"):
            ScheduleConfig.from_dict({"breakWindows": [{"start": "10:30", "durationMinutes": "x"}]})
        with self.assertRaisesRegex(ValidationError, "max_same_subject_per_day"):
            ScheduleConfig.from_dict({"maxSameSubjectPerDay": None})
        with self.assertRaisesRegex(ValidationError, "max_daily_load_per_batch"):
            ScheduleConfig.from_dict({"maxDailyLoadPerBatch": [6]})
        with self.assertRaises(ValidationError):
            ScheduleConfig.from_dict({"breakWindows": [{"start": "10:30"}]})

    def test_bad_value_in_file_is_a_validation_error(self):
        path = self.test_data_dir / "bad_value.json"
        path.write_text(json.dumps({"slotLengthMinutes": "sixty"}))
        with self.assertRaises(ValidationError):
            load_config(path)

    def test_faculty_daily_load_option(self):
        self.assertIsNone(ScheduleConfig().max_daily_load_per_faculty)
        config = ScheduleConfig.from_dict({"maxDailyLoadPerFaculty": "3"})
        self.assertEqual(config.max_daily_load_per_faculty, 3)
        self.assertEqual(config.to_dict()["max_daily_load_per_faculty"], 3)


if __name__ == "__main__":
    unittest.main()

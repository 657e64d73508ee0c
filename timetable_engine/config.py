import json
import logging

from timetable_engine.errors import ValidationError
from timetable_engine.models.timeslots import from_minutes, to_minutes

logger = logging.getLogger("timetable.config")

# Defaults follow the department grid: six teaching days, 60 minute periods,
# a tea break after the second period and lunch after the fourth.
DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
DAY_START = "08:30"
DAY_END = "16:30"
SLOT_LENGTH_MINUTES = 60
BREAK_WINDOWS = [
    {"start": "10:30", "duration_minutes": 15},  # tea
    {"start": "12:45", "duration_minutes": 45},  # lunch
]
MAX_SAME_SUBJECT_PER_DAY = 1
MAX_DAILY_LOAD_PER_BATCH = None
MAX_DAILY_LOAD_PER_FACULTY = None
SUBSTITUTE_SAME_DEPARTMENT = True

# camelCase spellings accepted from JSON documents
_ALIASES = {
    "daysOfWeek": "days_of_week",
    "dayStart": "day_start",
    "dayEnd": "day_end",
    "slotLengthMinutes": "slot_length_minutes",
    "breakWindows": "break_windows",
    "maxSameSubjectPerDay": "max_same_subject_per_day",
    "maxDailyLoadPerBatch": "max_daily_load_per_batch",
    "maxDailyLoadPerFaculty": "max_daily_load_per_faculty",
    "substituteSameDepartment": "substitute_same_department",
}


def _as_int(name, value, optional=False):
    if value is None and optional:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer, got {value!r}")


class BreakWindow:
    def __init__(self, start, duration_minutes):
        self.start = from_minutes(to_minutes(start))
        self.duration_minutes = _as_int(f"break at {start} duration_minutes", duration_minutes)
        if self.duration_minutes <= 0:
            raise ValidationError(f"break at {start} must have a positive duration")

    @property
    def start_minutes(self):
        return to_minutes(self.start)

    @property
    def end_minutes(self):
        return self.start_minutes + self.duration_minutes

    @property
    def end(self):
        return from_minutes(self.end_minutes)

    def to_dict(self):
        return {"start": self.start, "duration_minutes": self.duration_minutes}

    def __repr__(self):
        return f"BreakWindow({self.start}-{self.end})"


class ScheduleConfig:
    def __init__(
        self,
        days_of_week=None,
        day_start=DAY_START,
        day_end=DAY_END,
        slot_length_minutes=SLOT_LENGTH_MINUTES,
        break_windows=None,
        max_same_subject_per_day=MAX_SAME_SUBJECT_PER_DAY,
        max_daily_load_per_batch=MAX_DAILY_LOAD_PER_BATCH,
        max_daily_load_per_faculty=MAX_DAILY_LOAD_PER_FACULTY,
        substitute_same_department=SUBSTITUTE_SAME_DEPARTMENT,
    ):
        self.days_of_week = list(days_of_week if days_of_week is not None else DAYS)
        self.day_start = from_minutes(to_minutes(day_start))
        self.day_end = from_minutes(to_minutes(day_end))
        self.slot_length_minutes = _as_int("slot_length_minutes", slot_length_minutes)
        windows = BREAK_WINDOWS if break_windows is None else break_windows
        if not isinstance(windows, (list, tuple)):
            raise ValidationError(f"break_windows must be a list, got {windows!r}")
        self.break_windows = [w if isinstance(w, BreakWindow) else self._parse_window(w) for w in windows]
        self.max_same_subject_per_day = _as_int("max_same_subject_per_day", max_same_subject_per_day)
        self.max_daily_load_per_batch = _as_int("max_daily_load_per_batch", max_daily_load_per_batch, optional=True)
        self.max_daily_load_per_faculty = _as_int("max_daily_load_per_faculty", max_daily_load_per_faculty, optional=True)
        self.substitute_same_department = bool(substitute_same_department)

        if self.max_same_subject_per_day < 1:
            raise ValidationError("max_same_subject_per_day must be at least 1")
        if self.max_daily_load_per_batch is not None and self.max_daily_load_per_batch < 1:
            raise ValidationError("max_daily_load_per_batch must be at least 1")
        if self.max_daily_load_per_faculty is not None and self.max_daily_load_per_faculty < 1:
            raise ValidationError("max_daily_load_per_faculty must be at least 1")

    @staticmethod
    def _parse_window(window):
        try:
            duration = window.get("duration_minutes", window.get("durationMinutes"))
            start = window["start"]
        except (KeyError, TypeError, AttributeError):
            raise ValidationError(f"break window {window!r} needs 'start' and 'duration_minutes'")
        if duration is None:
            raise ValidationError(f"break window {window!r} needs 'start' and 'duration_minutes'")
        return BreakWindow(start, duration)

    @classmethod
    def from_dict(cls, data):
        options = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name not in _ALIASES.values():
                raise ValidationError(f"unknown configuration option {key!r}")
            options[name] = value
        return cls(**options)

    def to_dict(self):
        return {
            "days_of_week": list(self.days_of_week),
            "day_start": self.day_start,
            "day_end": self.day_end,
            "slot_length_minutes": self.slot_length_minutes,
            "break_windows": [w.to_dict() for w in self.break_windows],
            "max_same_subject_per_day": self.max_same_subject_per_day,
            "max_daily_load_per_batch": self.max_daily_load_per_batch,
            "max_daily_load_per_faculty": self.max_daily_load_per_faculty,
            "substitute_same_department": self.substitute_same_department,
        }

    def __repr__(self):
        return (f"ScheduleConfig(days={len(self.days_of_week)}, {self.day_start}-{self.day_end}, "
                f"slot={self.slot_length_minutes}min, breaks={self.break_windows})")


def load_config(path=None):
    """Load schedule options from a JSON file; defaults when no path is given."""
    if path is None:
        return ScheduleConfig()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(f"cannot read configuration {path}: {e}")
    if not isinstance(data, dict):
        raise ValidationError(f"configuration {path} must be a JSON object")
    config = ScheduleConfig.from_dict(data)
    logger.info("Loaded schedule configuration from %s", path)
    return config

from timetable_engine.errors import ValidationError


def to_minutes(value):
    """Parse an "HH:MM" clock string into minutes since midnight."""
    try:
        hours, minutes = map(int, str(value).strip().split(":"))
    except ValueError:
        raise ValidationError(f"invalid clock time {value!r}, expected HH:MM")
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValidationError(f"invalid clock time {value!r}, expected HH:MM")
    return hours * 60 + minutes


def from_minutes(total):
    return f"{total // 60:02d}:{total % 60:02d}"


class TimeSlot:
    def __init__(self, day, start_time, end_time):
        self.day = day                                 # e.g. "Monday"
        self.start_time = from_minutes(to_minutes(start_time))
        self.end_time = from_minutes(to_minutes(end_time))

    @property
    def label(self):
        return f"{self.start_time}-{self.end_time}"

    def __eq__(self, other):
        if not isinstance(other, TimeSlot):
            return NotImplemented
        return (self.day, self.start_time, self.end_time) == (other.day, other.start_time, other.end_time)

    def __hash__(self):
        return hash((self.day, self.start_time, self.end_time))

    def __repr__(self):
        return f"TimeSlot(Day={self.day}, {self.start_time}-{self.end_time})"

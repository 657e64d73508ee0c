from timetable_engine.errors import ValidationError
from timetable_engine.models.timeslots import TimeSlot, from_minutes, to_minutes

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class SlotCalendar:
    """The fixed weekly grid of teaching slots, break windows excluded."""

    def __init__(self, config):
        self.config = config
        self.days = list(config.days_of_week)
        self._validate()
        self.slots = self._build_day_slots()
        self._by_start = {s.start_time: s for s in self.slots}

    def _validate(self):
        cfg = self.config
        if not self.days:
            raise ValidationError("days_of_week must name at least one day")
        for day in self.days:
            if day not in WEEKDAYS:
                raise ValidationError(f"unknown day {day!r} in days_of_week")
        if len(set(self.days)) != len(self.days):
            raise ValidationError("days_of_week contains duplicates")
        if cfg.slot_length_minutes <= 0:
            raise ValidationError("slot_length_minutes must be positive")
        start, end = to_minutes(cfg.day_start), to_minutes(cfg.day_end)
        if end <= start:
            raise ValidationError(f"day_end {cfg.day_end} must be after day_start {cfg.day_start}")
        for window in cfg.break_windows:
            if window.start_minutes < start or window.end_minutes > end:
                raise ValidationError(
                    f"break window {window.start}-{window.end} lies outside the day {cfg.day_start}-{cfg.day_end}"
                )

    def _build_day_slots(self):
        start, end = to_minutes(self.config.day_start), to_minutes(self.config.day_end)
        length = self.config.slot_length_minutes
        breaks = sorted(self.config.break_windows, key=lambda w: w.start_minutes)

        slots, cursor = [], start
        while cursor + length <= end:
            overlapping = [w for w in breaks if w.start_minutes < cursor + length and cursor < w.end_minutes]
            if overlapping:
                # resume the grid once the break is over
                cursor = max(cursor, overlapping[0].end_minutes)
                continue
            slots.append((from_minutes(cursor), from_minutes(cursor + length)))
            cursor += length
        return [TimeSlot(self.days[0], s, e) for s, e in slots]

    def _check_day(self, day):
        if day not in self.days:
            raise ValidationError(f"{day!r} is not a teaching day")

    def cells_for_day(self, day):
        self._check_day(day)
        return [TimeSlot(day, s.start_time, s.end_time) for s in self.slots]

    def cells(self):
        return [slot for day in self.days for slot in self.cells_for_day(day)]

    def slot_at(self, day, start_time):
        self._check_day(day)
        slot = self._by_start.get(start_time)
        return TimeSlot(day, slot.start_time, slot.end_time) if slot else None

    def is_break(self, day, time):
        self._check_day(day)
        minute = to_minutes(time)
        return any(w.start_minutes <= minute < w.end_minutes for w in self.config.break_windows)

    def are_consecutive(self, day, first, second):
        """True when ``second`` starts exactly where ``first`` ends, with no break between."""
        a, b = self.slot_at(day, first.start_time), self.slot_at(day, second.start_time)
        return a is not None and b is not None and a.end_time == b.start_time

    def runs(self, day, length):
        """Every window of ``length`` back-to-back slots on ``day``, in calendar order."""
        day_slots = self.cells_for_day(day)
        runs = []
        for i in range(len(day_slots) - length + 1):
            window = day_slots[i:i + length]
            if all(self.are_consecutive(day, a, b) for a, b in zip(window, window[1:])):
                runs.append(window)
        return runs

    def __len__(self):
        return len(self.days) * len(self.slots)

    def __repr__(self):
        return f"SlotCalendar(days={self.days}, slots={[s.label for s in self.slots]})"

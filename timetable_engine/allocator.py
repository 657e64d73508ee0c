import logging

from timetable_engine.config import ScheduleConfig
from timetable_engine.conflicts import ConflictIndex
from timetable_engine.errors import ValidationError
from timetable_engine.models.assignment import Assignment
from timetable_engine.models.timetable import Timetable
from timetable_engine.slot_calendar import SlotCalendar

logger = logging.getLogger("timetable.allocator")


def _check_unique(records, key, kind):
    seen = set()
    for record in records:
        ident = key(record)
        if ident in seen:
            raise ValidationError(f"duplicate {kind} identifier", ident)
        seen.add(ident)


class Allocator:
    """Deterministic greedy placement of every batch's weekly subject load.

    Batches are processed in (department, year, semester, id) order and
    subjects inside a batch by descending occurrence count, so the hardest
    subjects claim cells first. Each occurrence takes the first cell (or pair
    of back-to-back cells for a lab) in calendar order where the batch, a
    matching room and a department faculty are all free; the lowest room and
    faculty identifiers win ties. An occurrence that fits nowhere becomes an
    unscheduled placeholder flagged ``conflict``.
    """

    def __init__(self, subjects, faculty, rooms, batches, config=None):
        self.config = config or ScheduleConfig()
        self.calendar = SlotCalendar(self.config)
        self.subjects = list(subjects)
        self.faculty = sorted(faculty, key=lambda f: f.faculty_id)
        self.rooms = sorted(rooms, key=lambda r: r.room_id)
        self.batches = sorted(batches, key=lambda b: b.sort_key())

        self.index = ConflictIndex()
        self.subject_day_count = {}   # (batch, subject, day) -> occurrences placed
        self.batch_day_load = {}      # (batch, day) -> slots occupied
        self.faculty_day_load = {}    # (faculty, day) -> slots taught
        self._runs = {}

    def validate(self):
        _check_unique(self.subjects, lambda s: s.code, "subject")
        _check_unique(self.faculty, lambda f: f.faculty_id, "faculty")
        _check_unique(self.rooms, lambda r: r.room_id, "room")
        _check_unique(self.batches, lambda b: b.batch_id, "batch")

        for subject in self.subjects:
            if subject.weekly_hours <= 0:
                raise ValidationError("subject weekly hours must be positive", subject.code)
        for room in self.rooms:
            if room.capacity <= 0:
                raise ValidationError("room capacity must be positive", room.room_id)
        for batch in self.batches:
            if batch.size <= 0:
                raise ValidationError("batch size must be positive", batch.batch_id)
            if not self.subjects_for(batch):
                raise ValidationError("batch has no subjects for its department/year/semester", batch.batch_id)

    def subjects_for(self, batch):
        matching = [s for s in self.subjects if s.applies_to(batch)]
        return sorted(matching, key=lambda s: (-s.occurrences, s.code))

    def allocate(self):
        self.validate()
        timetable = Timetable(self.calendar.days)
        logger.info(
            "Allocating %d batches over %d cells (%d slots/day)",
            len(self.batches), len(self.calendar), len(self.calendar.slots),
        )

        for batch in self.batches:
            for subject in self.subjects_for(batch):
                for _ in range(subject.occurrences):
                    timetable.add(self._place(batch, subject))

        placed = sum(1 for _ in timetable.scheduled())
        logger.info("Allocation finished: placed=%d unscheduled=%d", placed, len(timetable.unscheduled))
        return timetable

    def _day_runs(self, day, span):
        if (day, span) not in self._runs:
            self._runs[(day, span)] = self.calendar.runs(day, span)
        return self._runs[(day, span)]

    def _day_allowed(self, batch, subject, day):
        placed = self.subject_day_count.get((batch.batch_id, subject.code, day), 0)
        if placed >= self.config.max_same_subject_per_day:
            return False
        cap = self.config.max_daily_load_per_batch
        load = self.batch_day_load.get((batch.batch_id, day), 0)
        return cap is None or load + subject.span <= cap

    def _pick_room(self, day, starts, subject, batch):
        for room in self.rooms:
            if room.can_host(subject, batch) and all(self.index.room_free(day, s, room.room_id) for s in starts):
                return room
        return None

    def _pick_faculty(self, day, starts, subject):
        cap = self.config.max_daily_load_per_faculty
        for member in self.faculty:
            if member.department != subject.department:
                continue
            if cap is not None and self.faculty_day_load.get((member.faculty_id, day), 0) + len(starts) > cap:
                continue
            if all(self.index.faculty_free(day, s, member.faculty_id) for s in starts):
                return member
        return None

    def _place(self, batch, subject):
        for day in self.calendar.days:
            if not self._day_allowed(batch, subject, day):
                continue
            for run in self._day_runs(day, subject.span):
                starts = [slot.start_time for slot in run]
                if not all(self.index.batch_free(day, s, batch.batch_id) for s in starts):
                    continue
                room = self._pick_room(day, starts, subject, batch)
                if room is None:
                    continue
                member = self._pick_faculty(day, starts, subject)
                if member is None:
                    continue

                for s in starts:
                    self.index.reserve(day, s, member.faculty_id, room.room_id, batch.batch_id)
                key = (batch.batch_id, subject.code, day)
                self.subject_day_count[key] = self.subject_day_count.get(key, 0) + 1
                self.batch_day_load[(batch.batch_id, day)] = self.batch_day_load.get((batch.batch_id, day), 0) + len(starts)
                load_key = (member.faculty_id, day)
                self.faculty_day_load[load_key] = self.faculty_day_load.get(load_key, 0) + len(starts)

                logger.debug("Placed %s for %s on %s %s in %s with %s",
                             subject.code, batch.batch_id, day, starts[0], room.room_id, member.faculty_id)
                return Assignment(
                    subject_code=subject.code,
                    subject_name=subject.name,
                    batch_id=batch.batch_id,
                    day=day,
                    slots=starts,
                    end_time=run[-1].end_time,
                    faculty_id=member.faculty_id,
                    faculty_name=member.name,
                    room_id=room.room_id,
                    duration=subject.span,
                )

        logger.warning("No free cell for %s (%s) in batch %s; left unscheduled",
                       subject.code, subject.kind, batch.batch_id)
        return Assignment(
            subject_code=subject.code,
            subject_name=subject.name,
            batch_id=batch.batch_id,
            duration=subject.span,
            conflict=True,
        )


def generate(subjects, faculty, rooms, batches, config=None):
    """Build a complete weekly timetable; infeasible occurrences come back flagged, never raised."""
    return Allocator(subjects, faculty, rooms, batches, config).allocate()

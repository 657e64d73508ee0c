import logging
import threading
from contextlib import contextmanager
from datetime import datetime

from timetable_engine import views
from timetable_engine.allocator import generate
from timetable_engine.config import ScheduleConfig
from timetable_engine.errors import NotFound
from timetable_engine.models.absence import ABSENT, AbsenceRecord
from timetable_engine.substitution import SubstitutionResolver

logger = logging.getLogger("timetable.service")


class TimetableService:
    """Runs the engine against a repository and publishes the live timetable.

    One generation at a time; substitutions for the same (date, faculty) are
    serialized. Readers get whichever complete timetable was last published,
    since publishing is a single reference swap.
    """

    def __init__(self, repository, config=None):
        self.repository = repository
        self.config = config or ScheduleConfig()
        self._current = None
        self._generation_lock = threading.Lock()
        self._publish_lock = threading.Lock()
        self._absence_locks = {}  # (date, faculty) -> [lock, holders]
        self._absence_locks_guard = threading.Lock()
        self.last_outcomes = []

    @contextmanager
    def _absence_lock(self, date, faculty_id):
        # entries live only while a report for the key is running or waiting
        key = (date, faculty_id)
        with self._absence_locks_guard:
            entry = self._absence_locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._absence_locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._absence_locks[key]

    def generate(self):
        with self._generation_lock:
            timetable = generate(
                self.repository.load_subjects(),
                self.repository.load_faculty(),
                self.repository.load_rooms(),
                self.repository.load_batches(),
                self.config,
            )
            timetable.generated_at = datetime.now().isoformat(timespec="seconds")
            with self._publish_lock:
                self.repository.save_timetable(timetable)
                self._current = timetable
        logger.info("Published timetable generated at %s (%d conflicts)",
                    timetable.generated_at, timetable.conflict_count)
        return timetable

    def current(self):
        timetable = self._current
        if timetable is None:
            timetable = self.repository.load_timetable()
            self._current = timetable
        return timetable

    def report_absence(self, date, faculty_id):
        """Record ``faculty_id`` absent on ``date`` and bind substitutes for their classes."""
        with self._absence_lock(date, faculty_id):
            try:
                record = self.repository.load_absence(date, faculty_id)
                record.status = ABSENT
            except NotFound:
                record = AbsenceRecord(date, faculty_id, ABSENT)

            resolver = SubstitutionResolver(
                self.repository.load_faculty(),
                same_department=self.config.substitute_same_department,
            )
            with self._publish_lock:
                updated, record = resolver.resolve(self.current(), record)
                self.repository.save_timetable(updated)
                self._current = updated
            self.repository.record_absence(record)
            self.last_outcomes = resolver.outcomes
        return record

    def section_view(self, batch_id):
        return views.by_section(self.current(), batch_id)

    def faculty_view(self, faculty_id):
        return views.by_faculty(self.current(), faculty_id)

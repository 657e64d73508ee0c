import json
import logging
import os
import tempfile
import threading
from pathlib import Path

import pandas as pd

from timetable_engine.errors import NotFound, ValidationError
from timetable_engine.models.absence import AbsenceRecord
from timetable_engine.models.batches import Batch
from timetable_engine.models.faculty import Faculty
from timetable_engine.models.room import Room
from timetable_engine.models.subject import Subject
from timetable_engine.models.timetable import TIMETABLE_KEY, Timetable

logger = logging.getLogger("timetable.repository")

SUBJECT_COLUMNS = ["Subject_Code", "Subject_Name", "Department", "Year", "Semester", "Credits", "Weekly_Hours", "Type"]
FACULTY_COLUMNS = ["Faculty_ID", "Name", "Department"]
ROOM_COLUMNS = ["Room_ID", "Capacity", "Floor", "Type"]
BATCH_COLUMNS = ["Batch_ID", "Department", "Year", "Semester", "Size"]


class TimetableRepository:
    """Storage boundary of the engine. Implementations decide where records live."""

    def load_subjects(self):
        raise NotImplementedError

    def load_faculty(self):
        raise NotImplementedError

    def load_rooms(self):
        raise NotImplementedError

    def load_batches(self):
        raise NotImplementedError

    def save_timetable(self, timetable):
        """Replace the single live timetable in one step."""
        raise NotImplementedError

    def load_timetable(self):
        """Return the live timetable or raise NotFound."""
        raise NotImplementedError

    def record_absence(self, record):
        """Upsert keyed by (date, faculty id)."""
        raise NotImplementedError

    def load_absence(self, date, faculty_id):
        raise NotImplementedError


class InMemoryRepository(TimetableRepository):
    def __init__(self, subjects=(), faculty=(), rooms=(), batches=()):
        self.subjects = list(subjects)
        self.faculty = list(faculty)
        self.rooms = list(rooms)
        self.batches = list(batches)
        self._timetable = None
        self._absences = {}
        self._lock = threading.Lock()

    def load_subjects(self):
        return list(self.subjects)

    def load_faculty(self):
        return list(self.faculty)

    def load_rooms(self):
        return list(self.rooms)

    def load_batches(self):
        return list(self.batches)

    def save_timetable(self, timetable):
        stored = timetable.copy()
        with self._lock:
            self._timetable = stored

    def load_timetable(self):
        with self._lock:
            stored = self._timetable
        if stored is None:
            raise NotFound("no timetable has been generated yet")
        return stored.copy()

    def record_absence(self, record):
        with self._lock:
            self._absences[record.key] = record.copy()

    def load_absence(self, date, faculty_id):
        with self._lock:
            record = self._absences.get((date, faculty_id))
        if record is None:
            raise NotFound(f"no attendance record for {faculty_id} on {date}")
        return record.copy()


def _read_table(path, columns):
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except FileNotFoundError:
        raise ValidationError(f"input file {path} not found")
    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValidationError(f"{Path(path).name} is missing columns: {', '.join(missing)}")
    return df


def _build(path, columns, factory):
    records = []
    for i, row in _read_table(path, columns).iterrows():
        values = [str(row[c]).strip() for c in columns]
        try:
            records.append(factory(*values))
        except ValueError as e:
            raise ValidationError(f"{Path(path).name} row {i + 2}: {e}", values[0])
    return records


class CsvRepository(TimetableRepository):
    """Reads input tables from CSV files in ``data_dir``; keeps the timetable and
    attendance as JSON documents next to them."""

    def __init__(self, data_dir):
        self.data_dir = Path(data_dir)
        self.timetable_file = self.data_dir / f"timetable_{TIMETABLE_KEY}.json"
        self.absences_file = self.data_dir / "attendance.json"
        self._lock = threading.Lock()

    def load_subjects(self):
        return _build(self.data_dir / "subjects.csv", SUBJECT_COLUMNS, Subject)

    def load_faculty(self):
        return _build(self.data_dir / "faculty.csv", FACULTY_COLUMNS, Faculty)

    def load_rooms(self):
        return _build(self.data_dir / "rooms.csv", ROOM_COLUMNS, Room)

    def load_batches(self):
        return _build(self.data_dir / "batches.csv", BATCH_COLUMNS, Batch)

    def _write_json(self, path, document):
        # write next to the target, then swap it in
        fd, tmp = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def save_timetable(self, timetable):
        with self._lock:
            self._write_json(self.timetable_file, timetable.to_dict())
        logger.info("Saved timetable to %s", self.timetable_file)

    def load_timetable(self):
        if not self.timetable_file.exists():
            raise NotFound(f"no timetable stored at {self.timetable_file}")
        with open(self.timetable_file, "r", encoding="utf-8") as f:
            return Timetable.from_dict(json.load(f))

    def _load_absences(self):
        if not self.absences_file.exists():
            return {}
        with open(self.absences_file, "r", encoding="utf-8") as f:
            return json.load(f)

    def record_absence(self, record):
        with self._lock:
            absences = self._load_absences()
            absences[f"{record.date}|{record.faculty_id}"] = record.to_dict()
            self._write_json(self.absences_file, absences)
        logger.info("Recorded attendance for %s on %s (%d substitutions)",
                    record.faculty_id, record.date, len(record.substitutions))

    def load_absence(self, date, faculty_id):
        with self._lock:
            data = self._load_absences().get(f"{date}|{faculty_id}")
        if data is None:
            raise NotFound(f"no attendance record for {faculty_id} on {date}")
        return AbsenceRecord.from_dict(data)

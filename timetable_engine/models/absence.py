import copy
from datetime import datetime

from timetable_engine.errors import ValidationError

PRESENT = "present"
ABSENT = "absent"


class Substitution:
    def __init__(self, slot, substitute_id, substitute_name=""):
        self.slot = slot                       # e.g. "09:30"
        self.substitute_id = substitute_id     # the faculty taking the class
        self.substitute_name = substitute_name

    def to_dict(self):
        return {"slot": self.slot, "substituteId": self.substitute_id, "substituteName": self.substitute_name}

    @classmethod
    def from_dict(cls, data):
        return cls(data["slot"], data["substituteId"], data.get("substituteName", ""))

    def __eq__(self, other):
        if not isinstance(other, Substitution):
            return NotImplemented
        return (self.slot, self.substitute_id) == (other.slot, other.substitute_id)

    def __repr__(self):
        return f"Substitution({self.slot} -> {self.substitute_id})"


class AbsenceRecord:
    """Attendance of one faculty member on one date; unique per (date, faculty_id)."""

    def __init__(self, date, faculty_id, status=ABSENT, substitutions=None):
        self.date = str(date).strip()
        try:
            parsed = datetime.strptime(self.date, "%Y-%m-%d")
        except ValueError:
            raise ValidationError(f"invalid absence date {date!r}, expected YYYY-MM-DD", faculty_id)
        self.weekday = parsed.strftime("%A")
        self.faculty_id = str(faculty_id).strip()
        self.status = str(status).strip().lower()
        if self.status not in (PRESENT, ABSENT):
            raise ValidationError(f"unknown attendance status {status!r}", faculty_id)
        self.substitutions = list(substitutions or [])

    @property
    def key(self):
        return (self.date, self.faculty_id)

    @property
    def is_absent(self):
        return self.status == ABSENT

    def copy(self):
        return copy.deepcopy(self)

    def to_dict(self):
        return {
            "date": self.date,
            "facultyId": self.faculty_id,
            "status": self.status,
            "substitutions": [s.to_dict() for s in self.substitutions],
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            data["date"],
            data["facultyId"],
            data.get("status", ABSENT),
            [Substitution.from_dict(s) for s in data.get("substitutions", [])],
        )

    def __repr__(self):
        return (f"AbsenceRecord({self.date}, {self.faculty_id}, {self.status}, "
                f"substitutions={len(self.substitutions)})")

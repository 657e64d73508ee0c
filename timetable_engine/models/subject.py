import math

from timetable_engine.errors import ValidationError


class SubjectKind:
    THEORY = "theory"
    LAB = "lab"
    ALL = (THEORY, LAB)

    @classmethod
    def parse(cls, value):
        kind = str(value).strip().lower()
        if kind not in cls.ALL:
            raise ValidationError(f"unknown subject type {value!r}")
        return kind


class Subject:
    def __init__(self, code, name, department, year, semester, credits, weekly_hours, kind):
        self.code = str(code).strip()
        self.name = str(name).strip()
        self.department = str(department).strip()
        self.year = int(year)
        self.semester = int(semester)
        self.credits = int(credits)
        self.weekly_hours = int(weekly_hours)
        self.kind = SubjectKind.parse(kind)

    @property
    def is_lab(self):
        return self.kind == SubjectKind.LAB

    @property
    def span(self):
        """Number of consecutive slots one occurrence occupies."""
        return 2 if self.is_lab else 1

    @property
    def occurrences(self):
        if self.is_lab:
            return math.ceil(self.weekly_hours / 2)
        return self.weekly_hours

    def applies_to(self, batch):
        return (self.department, self.year, self.semester) == (batch.department, batch.year, batch.semester)

    def __repr__(self):
        return (f"Subject({self.department}, Sem {self.semester}, {self.code}, "
                f"{self.name}, hours={self.weekly_hours}, type={self.kind})")

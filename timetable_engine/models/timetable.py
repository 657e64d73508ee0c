import copy

from timetable_engine.models.assignment import Assignment

TIMETABLE_KEY = "main"


class Timetable:
    """Weekly grid of assignments: day -> start time -> [Assignment].

    Every assignment is filed under its first slot. Occurrences that could
    not be placed are kept in ``unscheduled``.
    """

    def __init__(self, days, key=TIMETABLE_KEY, generated_at=None):
        self.key = key
        self.days = list(days)
        self.grid = {day: {} for day in self.days}
        self.unscheduled = []
        self.generated_at = generated_at

    def add(self, assignment):
        if assignment.is_placeholder:
            self.unscheduled.append(assignment)
        else:
            self.grid.setdefault(assignment.day, {}).setdefault(assignment.start_time, []).append(assignment)
        return assignment

    def at(self, day, start_time):
        return list(self.grid.get(day, {}).get(start_time, []))

    def scheduled(self):
        for day in self.days:
            for start in sorted(self.grid.get(day, {})):
                for assignment in self.grid[day][start]:
                    yield assignment

    def assignments(self):
        yield from self.scheduled()
        yield from self.unscheduled

    def occupancy(self):
        """Map every covered (day, start) cell to the assignments spanning it."""
        cells = {}
        for assignment in self.scheduled():
            for cell in assignment.cells():
                cells.setdefault(cell, []).append(assignment)
        return cells

    @property
    def conflict_count(self):
        return sum(1 for a in self.assignments() if a.conflict)

    def copy(self):
        return copy.deepcopy(self)

    def to_dict(self):
        return {
            "_id": self.key,
            "generated_at": self.generated_at,
            "conflicts": self.conflict_count,
            "days": list(self.days),
            "data": {
                day: {start: [a.to_dict() for a in self.grid[day][start]] for start in sorted(self.grid[day])}
                for day in self.days
            },
            "unscheduled": [a.to_dict() for a in self.unscheduled],
        }

    @classmethod
    def from_dict(cls, data):
        timetable = cls(data["days"], key=data.get("_id", TIMETABLE_KEY), generated_at=data.get("generated_at"))
        for day in timetable.days:
            for start in sorted(data["data"].get(day, {})):
                for entry in data["data"][day][start]:
                    timetable.add(Assignment.from_dict(entry))
        for entry in data.get("unscheduled", []):
            timetable.add(Assignment.from_dict(entry))
        return timetable

    def __repr__(self):
        total = sum(1 for _ in self.scheduled())
        return (f"Timetable({self.key}, scheduled={total}, "
                f"unscheduled={len(self.unscheduled)}, conflicts={self.conflict_count})")

import logging

from timetable_engine.conflicts import ConflictIndex
from timetable_engine.errors import ValidationError
from timetable_engine.models.absence import Substitution

logger = logging.getLogger("timetable.substitution")

PENDING = "pending"
SEARCHING = "searching"
ASSIGNED = "assigned"
UNFILLED = "unfilled"


class SlotOutcome:
    def __init__(self, assignment):
        self.assignment = assignment
        self.state = PENDING
        self.substitute_id = None

    def __repr__(self):
        return (f"SlotOutcome({self.assignment.day} {self.assignment.start_time}, "
                f"{self.assignment.batch_id}, {self.state}, substitute={self.substitute_id})")


class SubstitutionResolver:
    def __init__(self, faculty_pool, same_department=True):
        self.faculty_pool = sorted(faculty_pool, key=lambda f: f.faculty_id)
        self.faculty_by_id = {f.faculty_id: f for f in self.faculty_pool}
        self.same_department = same_department
        self.outcomes = []

    def candidates(self, absent):
        return [
            f for f in self.faculty_pool
            if f.faculty_id != absent.faculty_id
            and (not self.same_department or f.department == absent.department)
        ]

    def affected(self, timetable, faculty_id, day):
        """Assignments bound to ``faculty_id`` on ``day``, earliest slot first."""
        if day not in timetable.grid:
            return []
        return [
            a
            for start in sorted(timetable.grid[day])
            for a in timetable.grid[day][start]
            if a.faculty_id == faculty_id
        ]

    def resolve(self, timetable, record):
        """Rebind every class of the absent faculty on the record's weekday.

        Works on copies; the caller's timetable and record are left as they were.
        """
        timetable, record = timetable.copy(), record.copy()
        self.outcomes = []
        if not record.is_absent:
            logger.info("%s is marked present on %s; nothing to substitute", record.faculty_id, record.date)
            return timetable, record

        absent = self.faculty_by_id.get(record.faculty_id)
        if absent is None:
            raise ValidationError("absent faculty is not in the faculty pool", record.faculty_id)

        index = ConflictIndex.from_timetable(timetable)
        pool = self.candidates(absent)
        for assignment in self.affected(timetable, absent.faculty_id, record.weekday):
            outcome = SlotOutcome(assignment)
            self.outcomes.append(outcome)
            outcome.state = SEARCHING

            substitute = next(
                (f for f in pool if all(index.faculty_free(assignment.day, s, f.faculty_id) for s in assignment.slots)),
                None,
            )
            if substitute is None:
                outcome.state = UNFILLED
                assignment.conflict = True
                logger.warning("No substitute for %s on %s %s (%s); slot left unfilled",
                               absent.faculty_id, record.date, assignment.start_time, assignment.batch_id)
                continue

            for s in assignment.slots:
                index.release(assignment.day, s, absent.faculty_id, assignment.room_id, assignment.batch_id)
                index.reserve(assignment.day, s, substitute.faculty_id, assignment.room_id, assignment.batch_id)
            if assignment.original_faculty_id is None:
                assignment.original_faculty_id = absent.faculty_id
            assignment.faculty_id = substitute.faculty_id
            assignment.faculty_name = substitute.name
            assignment.conflict = False
            record.substitutions.append(Substitution(assignment.start_time, substitute.faculty_id, substitute.name))
            outcome.state = ASSIGNED
            outcome.substitute_id = substitute.faculty_id
            logger.info("%s covers %s for %s on %s %s",
                        substitute.faculty_id, absent.faculty_id, assignment.batch_id, record.date, assignment.start_time)

        return timetable, record


def resolve_substitutions(timetable, absence_record, faculty_pool, same_department=True):
    return SubstitutionResolver(faculty_pool, same_department).resolve(timetable, absence_record)

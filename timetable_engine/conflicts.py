from timetable_engine.errors import ConflictError


class ConflictIndex:
    """Who is committed where: day -> start time -> set of ids, per resource kind."""

    def __init__(self):
        self.faculty_usage = {}
        self.room_usage = {}
        self.batch_usage = {}
        self._held = {}

    @classmethod
    def from_timetable(cls, timetable):
        index = cls()
        for assignment in timetable.scheduled():
            for day, start in assignment.cells():
                index._commit(day, start, assignment.faculty_id, assignment.room_id, assignment.batch_id)
        return index

    @staticmethod
    def _taken(usage, day, start, ident):
        return ident is not None and ident in usage.get(day, {}).get(start, ())

    def faculty_free(self, day, start, faculty_id):
        return not self._taken(self.faculty_usage, day, start, faculty_id)

    def room_free(self, day, start, room_id):
        return not self._taken(self.room_usage, day, start, room_id)

    def batch_free(self, day, start, batch_id):
        return not self._taken(self.batch_usage, day, start, batch_id)

    def is_free(self, day, start, faculty_id=None, room_id=None, batch_id=None):
        return (
            self.faculty_free(day, start, faculty_id)
            and self.room_free(day, start, room_id)
            and self.batch_free(day, start, batch_id)
        )

    def reserve(self, day, start, faculty_id=None, room_id=None, batch_id=None):
        triple = (faculty_id, room_id, batch_id)
        if triple in self._held.get(day, {}).get(start, ()):
            return
        if not self.is_free(day, start, faculty_id, room_id, batch_id):
            taken = [
                ident
                for usage, ident in ((self.faculty_usage, faculty_id), (self.room_usage, room_id), (self.batch_usage, batch_id))
                if self._taken(usage, day, start, ident)
            ]
            raise ConflictError(day, start, taken)
        self._commit(day, start, faculty_id, room_id, batch_id)

    def release(self, day, start, faculty_id=None, room_id=None, batch_id=None):
        for usage, ident in ((self.faculty_usage, faculty_id), (self.room_usage, room_id), (self.batch_usage, batch_id)):
            if ident is not None:
                usage.get(day, {}).get(start, set()).discard(ident)
        self._held.get(day, {}).get(start, set()).discard((faculty_id, room_id, batch_id))

    def _commit(self, day, start, faculty_id, room_id, batch_id):
        for usage, ident in ((self.faculty_usage, faculty_id), (self.room_usage, room_id), (self.batch_usage, batch_id)):
            if ident is not None:
                usage.setdefault(day, {}).setdefault(start, set()).add(ident)
        self._held.setdefault(day, {}).setdefault(start, set()).add((faculty_id, room_id, batch_id))

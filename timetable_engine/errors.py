class TimetableError(Exception):
    """Base class for every error raised by the timetable engine."""


class ValidationError(TimetableError):
    """Malformed or contradictory input, raised before any allocation starts."""

    def __init__(self, message, record_id=None):
        super().__init__(message)
        self.record_id = record_id

    def __str__(self):
        message = super().__str__()
        if self.record_id is not None:
            return f"{message} (record: {self.record_id})"
        return message


class ConflictError(TimetableError):
    """A reservation was requested for a cell that is already taken."""

    def __init__(self, day, start_time, taken):
        self.day = day
        self.start_time = start_time
        self.taken = taken
        super().__init__(f"{day} {start_time} already reserved for {', '.join(taken)}")


class NotFound(TimetableError):
    """The repository holds no record for the requested key."""

class Assignment:
    """One occurrence of a subject for a batch.

    ``slots`` holds the start times the occurrence covers on ``day``; a lab
    covers two consecutive slots. Unscheduled placeholders have no day, no
    slots and no room/faculty binding, and are flagged with ``conflict``.
    """

    def __init__(
        self,
        subject_code,
        subject_name,
        batch_id,
        day=None,
        slots=(),
        end_time=None,
        faculty_id=None,
        faculty_name=None,
        room_id=None,
        duration=1,
        conflict=False,
        original_faculty_id=None,
    ):
        self.subject_code = subject_code
        self.subject_name = subject_name
        self.batch_id = batch_id
        self.day = day
        self.slots = list(slots)
        self.end_time = end_time
        self.faculty_id = faculty_id
        self.faculty_name = faculty_name
        self.room_id = room_id
        self.duration = int(duration)
        self.conflict = bool(conflict)
        self.original_faculty_id = original_faculty_id

    @property
    def start_time(self):
        return self.slots[0] if self.slots else None

    @property
    def is_placeholder(self):
        return self.day is None

    @property
    def is_substituted(self):
        return self.original_faculty_id is not None

    def cells(self):
        return [(self.day, start) for start in self.slots]

    def to_dict(self):
        return {
            "subject": self.subject_code,
            "subject_name": self.subject_name,
            "section": self.batch_id,
            "day": self.day,
            "slots": list(self.slots),
            "end_time": self.end_time,
            "faculty_id": self.faculty_id,
            "faculty": self.faculty_name,
            "room": self.room_id,
            "duration": self.duration,
            "conflict": self.conflict,
            "original_faculty_id": self.original_faculty_id,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            subject_code=data["subject"],
            subject_name=data.get("subject_name", data["subject"]),
            batch_id=data["section"],
            day=data.get("day"),
            slots=data.get("slots", []),
            end_time=data.get("end_time"),
            faculty_id=data.get("faculty_id"),
            faculty_name=data.get("faculty"),
            room_id=data.get("room"),
            duration=data.get("duration", 1),
            conflict=data.get("conflict", False),
            original_faculty_id=data.get("original_faculty_id"),
        )

    def __repr__(self):
        where = f"{self.day} {self.start_time}-{self.end_time}" if self.day else "unscheduled"
        flag = ", CONFLICT" if self.conflict else ""
        return (f"Assignment({self.batch_id}, {self.subject_code}, {where}, "
                f"faculty={self.faculty_id}, room={self.room_id}{flag})")

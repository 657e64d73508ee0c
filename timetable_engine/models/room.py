from timetable_engine.errors import ValidationError


class RoomKind:
    THEORY = "theory"
    LAB = "lab"
    OTHER = "other"
    ALL = (THEORY, LAB, OTHER)

    # spellings seen in room exports
    ALIASES = {"classroom": THEORY, "lecture": THEORY, "laboratory": LAB}

    @classmethod
    def parse(cls, value):
        kind = str(value).strip().lower()
        kind = cls.ALIASES.get(kind, kind)
        if kind not in cls.ALL:
            raise ValidationError(f"unknown room type {value!r}")
        return kind


class Room:
    def __init__(self, room_id, capacity, floor, kind):
        self.room_id = str(room_id).strip()
        self.capacity = int(capacity)
        self.floor = int(floor)
        self.kind = RoomKind.parse(kind)

    def can_host(self, subject, batch):
        return self.kind == subject.kind and self.capacity >= batch.size

    def __repr__(self):
        return (f"Room({self.room_id}, capacity={self.capacity}, "
                f"floor={self.floor}, type={self.kind})")

import unittest

from timetable_engine.conflicts import ConflictIndex
from timetable_engine.errors import ConflictError
from timetable_engine.models.assignment import Assignment
from timetable_engine.models.timetable import Timetable


class TestConflictIndex(unittest.TestCase):
    def setUp(self):
        self.index = ConflictIndex()
        self.index.reserve("Monday", "09:00", "f1", "R1", "CSE-3A")

    def test_reserve_marks_all_three(self):
        self.assertFalse(self.index.is_free("Monday", "09:00", faculty_id="f1"))
        self.assertFalse(self.index.is_free("Monday", "09:00", room_id="R1"))
        self.assertFalse(self.index.is_free("Monday", "09:00", batch_id="CSE-3A"))
        self.assertTrue(self.index.is_free("Monday", "09:00", "f2", "R2", "CSE-3B"))
        self.assertTrue(self.index.is_free("Monday", "10:00", "f1", "R1", "CSE-3A"))

    def test_same_reservation_is_idempotent(self):
        self.index.reserve("Monday", "09:00", "f1", "R1", "CSE-3A")
        self.assertFalse(self.index.faculty_free("Monday", "09:00", "f1"))

    def test_overlapping_reservation_fails(self):
        with self.assertRaises(ConflictError) as ctx:
            self.index.reserve("Monday", "09:00", "f2", "R1", "CSE-3B")
        self.assertEqual(ctx.exception.taken, ["R1"])

    def test_release(self):
        self.index.release("Monday", "09:00", "f1", "R1", "CSE-3A")
        self.assertTrue(self.index.is_free("Monday", "09:00", "f1", "R1", "CSE-3A"))
        self.index.reserve("Monday", "09:00", "f2", "R1", "CSE-3A")
        self.assertFalse(self.index.room_free("Monday", "09:00", "R1"))

    def test_from_timetable_covers_both_lab_slots(self):
        timetable = Timetable(["Monday"])
        timetable.add(Assignment("CSL1", "Lab", "CSE-3A", day="Monday", slots=["09:00", "10:00"],
                                 end_time="11:00", faculty_id="f1", room_id="L1", duration=2))
        timetable.add(Assignment("CS2", "Maths", "CSE-3A", conflict=True))
        index = ConflictIndex.from_timetable(timetable)
        self.assertFalse(index.faculty_free("Monday", "10:00", "f1"))
        self.assertFalse(index.room_free("Monday", "09:00", "L1"))
        self.assertTrue(index.batch_free("Monday", "11:00", "CSE-3A"))


if __name__ == "__main__":
    unittest.main()

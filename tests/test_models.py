import unittest

from timetable_engine.errors import ValidationError
from timetable_engine.models.absence import AbsenceRecord, Substitution
from timetable_engine.models.assignment import Assignment
from timetable_engine.models.room import Room
from timetable_engine.models.subject import Subject, SubjectKind
from timetable_engine.models.timetable import Timetable
from timetable_engine.models.timeslots import TimeSlot, to_minutes


class TestSubject(unittest.TestCase):
    def test_kind_is_normalized(self):
        subject = Subject("23CDL305", "Data Structures Lab", "CSE", 2, 3, 2, "2", " Lab ")
        self.assertEqual(subject.kind, SubjectKind.LAB)
        self.assertTrue(subject.is_lab)
        self.assertEqual(subject.span, 2)

    def test_occurrences(self):
        theory = Subject("23CDT302", "Data Structures", "CSE", 2, 3, 4, 4, "theory")
        lab = Subject("23CDL305", "DS Lab", "CSE", 2, 3, 2, 3, "lab")
        self.assertEqual(theory.occurrences, 4)
        self.assertEqual(lab.occurrences, 2)

    def test_unknown_kind(self):
        with self.assertRaises(ValidationError):
            Subject("X1", "Seminar", "CSE", 1, 1, 1, 1, "seminar")


class TestRoom(unittest.TestCase):
    def test_room_type_aliases(self):
        self.assertEqual(Room("C101", 60, 1, "Classroom").kind, "theory")
        self.assertEqual(Room("L1", 40, 0, "LAB").kind, "lab")
        with self.assertRaises(ValidationError):
            Room("G1", 500, 0, "gym")


class TestTimeSlot(unittest.TestCase):
    def test_clock_parsing(self):
        self.assertEqual(to_minutes("08:30"), 510)
        self.assertEqual(TimeSlot("Monday", "8:30", "9:30").label, "08:30-09:30")
        with self.assertRaises(ValidationError):
            to_minutes("25:00")
        with self.assertRaises(ValidationError):
            to_minutes("noon")


class TestAbsenceRecord(unittest.TestCase):
    def test_weekday_from_date(self):
        record = AbsenceRecord("2024-01-01", "a@college.edu")
        self.assertEqual(record.weekday, "Monday")
        self.assertTrue(record.is_absent)
        self.assertEqual(record.key, ("2024-01-01", "a@college.edu"))

    def test_invalid_date_and_status(self):
        with self.assertRaises(ValidationError):
            AbsenceRecord("01/01/2024", "a@college.edu")
        with self.assertRaises(ValidationError):
            AbsenceRecord("2024-01-01", "a@college.edu", status="late")

    def test_document_shape(self):
        record = AbsenceRecord("2024-01-01", "a@college.edu", substitutions=[Substitution("09:30", "b@college.edu", "B")])
        data = record.to_dict()
        self.assertEqual(data["substitutions"], [{"slot": "09:30", "substituteId": "b@college.edu", "substituteName": "B"}])
        self.assertEqual(AbsenceRecord.from_dict(data).substitutions, record.substitutions)


class TestTimetable(unittest.TestCase):
    def test_placeholders_are_kept_apart(self):
        timetable = Timetable(["Monday", "Tuesday"])
        timetable.add(Assignment("CS1", "Intro", "CSE-1A", day="Monday", slots=["09:00"], end_time="10:00",
                                 faculty_id="f1", room_id="R1"))
        timetable.add(Assignment("CS2", "Maths", "CSE-1A", conflict=True))

        self.assertEqual(len(timetable.at("Monday", "09:00")), 1)
        self.assertEqual(len(timetable.unscheduled), 1)
        self.assertEqual(timetable.conflict_count, 1)
        self.assertEqual(len(list(timetable.assignments())), 2)

    def test_copy_is_independent(self):
        timetable = Timetable(["Monday"])
        timetable.add(Assignment("CS1", "Intro", "CSE-1A", day="Monday", slots=["09:00"], faculty_id="f1"))
        clone = timetable.copy()
        clone.at("Monday", "09:00")[0].faculty_id = "f2"
        self.assertEqual(timetable.at("Monday", "09:00")[0].faculty_id, "f1")


if __name__ == "__main__":
    unittest.main()

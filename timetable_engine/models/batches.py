class Batch:
    def __init__(self, batch_id, department, year, semester, size):
        self.batch_id = str(batch_id).strip()       # e.g. "CSE-3A"
        self.department = str(department).strip()   # e.g. "CSE"
        self.year = int(year)                       # e.g. 3
        self.semester = int(semester)               # e.g. 5
        self.size = int(size)                       # e.g. 60

    def sort_key(self):
        return (self.department, self.year, self.semester, self.batch_id)

    def __repr__(self):
        return (f"Batch({self.batch_id}, Department={self.department}, Year={self.year}, "
                f"Semester={self.semester}, Size={self.size})")

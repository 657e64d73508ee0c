class Faculty:
    def __init__(self, faculty_id, name, department):
        self.faculty_id = str(faculty_id).strip()   # e.g. "krishna.an@sjbit.edu.in"
        self.name = str(name).strip()               # e.g. "Dr. Krishna A. N"
        self.department = str(department).strip()   # e.g. "CSE"

    def __repr__(self):
        return f"Faculty({self.faculty_id}, {self.name}, {self.department})"

"""Read-only projections of a stored timetable, shaped like the grid itself."""


def _project(timetable, keep):
    filtered = {}
    for assignment in timetable.scheduled():
        if keep(assignment):
            filtered.setdefault(assignment.day, {}).setdefault(assignment.start_time, []).append(assignment)
    return filtered


def by_section(timetable, batch_id):
    return _project(timetable, lambda a: a.batch_id == batch_id)


def by_faculty(timetable, faculty_id):
    # substitutes are bound directly, so covered classes show up here too
    return _project(timetable, lambda a: a.faculty_id == faculty_id)


def unscheduled_for_section(timetable, batch_id):
    return [a for a in timetable.unscheduled if a.batch_id == batch_id]

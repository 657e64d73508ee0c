import logging

import pandas as pd
from openpyxl import load_workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from timetable_engine import views

logger = logging.getLogger("timetable.export")

PALETTE = ["FFC7CE", "C6EFCE", "FFEB9C", "BDD7EE", "D9EAD3", "F4CCCC", "D9D2E9", "FCE5CD", "C9DAF8", "EAD1DC"]
CONFLICT_FILL = "FF0000"
THIN_BORDER = Border(left=Side(style="thin"), right=Side(style="thin"), top=Side(style="thin"), bottom=Side(style="thin"))


def _sheet_name(name):
    # Excel limits sheet names to 31 chars and forbids a few characters
    for ch in '[]:*?/\\':
        name = name.replace(ch, "_")
    return name[:31]


def _unique_sheet_name(name, taken):
    # Excel compares sheet names case-insensitively
    taken = {t.lower() for t in taken}
    sheet = _sheet_name(name)
    n = 2
    while sheet.lower() in taken:
        suffix = f"_{n}"
        sheet = _sheet_name(name)[:31 - len(suffix)] + suffix
        n += 1
    return sheet


def _cell_text(assignment, show="room"):
    if show == "room":
        where = f"Lab-{assignment.room_id}" if assignment.duration > 1 else assignment.room_id
    else:
        where = assignment.batch_id
    text = f"{assignment.subject_code} ({where})"
    if assignment.is_substituted:
        text += " *sub"
    return text


def _grid_frame(calendar, projection, show):
    labels = {s.start_time: s.label for s in calendar.slots}
    frame = pd.DataFrame("", index=calendar.days, columns=[s.label for s in calendar.slots])
    for day, cells in projection.items():
        for assignments in cells.values():
            for a in assignments:
                for start in a.slots:
                    frame.at[day, labels[start]] = _cell_text(a, show)
    return frame


def _style_grid(ws, flagged, color_map, spans):
    """Colour by subject, merge each multi-slot assignment, mark flagged cells red.

    ``spans`` maps (day, first slot label) to the number of slots the
    assignment starting there covers; neighbouring cells with the same text
    stay separate unless one assignment spans them.
    """
    for row in range(2, ws.max_row + 1):
        day = ws.cell(row=row, column=1).value
        start_col = 2
        while start_col <= ws.max_column:
            cell = ws.cell(row=row, column=start_col)
            if not cell.value:
                cell.border = THIN_BORDER
                start_col += 1
                continue

            code = str(cell.value).split(" ")[0]
            if code not in color_map:
                color_map[code] = PALETTE[len(color_map) % len(PALETTE)]
            label = ws.cell(row=1, column=start_col).value
            color = CONFLICT_FILL if (day, label, cell.value) in flagged else color_map[code]
            fill = PatternFill(start_color=color, end_color=color, fill_type="solid")
            cell.fill = fill

            merge_count = min(spans.get((day, label), 1) - 1, ws.max_column - start_col)
            for col in range(start_col + 1, start_col + merge_count + 1):
                ws.cell(row=row, column=col).fill = fill
            if merge_count > 0:
                ws.merge_cells(start_row=row, start_column=start_col, end_row=row, end_column=start_col + merge_count)
            cell.alignment = Alignment(horizontal="center", vertical="center")
            for col_idx in range(start_col, start_col + merge_count + 1):
                ws.cell(row=row, column=col_idx).border = THIN_BORDER
            start_col += merge_count + 1


def _fit_columns(ws):
    for col in ws.columns:
        column = getattr(col[0], "column_letter", None)
        if column is None:
            continue
        width = max((len(str(c.value)) for c in col if c.value is not None), default=0)
        ws.column_dimensions[column].width = width + 2


def _merge_spans(calendar, projection):
    labels = {s.start_time: s.label for s in calendar.slots}
    return {
        (a.day, labels[a.slots[0]]): len(a.slots)
        for cells in projection.values()
        for assignments in cells.values()
        for a in assignments
        if a.slots
    }


def _flagged_cells(calendar, projection, show):
    labels = {s.start_time: s.label for s in calendar.slots}
    return {
        (a.day, labels[start], _cell_text(a, show))
        for cells in projection.values()
        for assignments in cells.values()
        for a in assignments
        if a.conflict
        for start in a.slots
    }


def write_section_workbook(timetable, calendar, filename):
    """One sheet per batch with a legend of subject, faculty and room under the grid."""
    batch_ids = sorted({a.batch_id for a in timetable.assignments()})
    projections = {b: views.by_section(timetable, b) for b in batch_ids}

    with pd.ExcelWriter(filename, engine="openpyxl") as writer:
        for batch_id in batch_ids:
            _grid_frame(calendar, projections[batch_id], "room").to_excel(writer, sheet_name=_sheet_name(batch_id), index=True)
        unscheduled = pd.DataFrame(
            [{"Section": a.batch_id, "Subject": a.subject_code, "Title": a.subject_name, "Slots": a.duration}
             for a in timetable.unscheduled],
            columns=["Section", "Subject", "Title", "Slots"],
        )
        unscheduled.to_excel(writer, sheet_name="Unscheduled", index=False)

    wb = load_workbook(filename)
    color_map = {}
    for batch_id in batch_ids:
        ws = wb[_sheet_name(batch_id)]
        projection = projections[batch_id]
        _style_grid(ws, _flagged_cells(calendar, projection, "room"), color_map, _merge_spans(calendar, projection))

        start_row = ws.max_row + 3
        for col, title in enumerate(["S.No", "Subject Code", "Subject Title", "Faculty", "Room", "Color"], start=2):
            header = ws.cell(start_row, col, title)
            header.border = THIN_BORDER
            header.font = Font(bold=True)
            header.alignment = Alignment(horizontal="center", vertical="center")

        legend = {}
        for a in timetable.scheduled():
            if a.batch_id == batch_id:
                entry = legend.setdefault(a.subject_code, [a.subject_name, set(), set()])
                entry[1].add(a.faculty_name or a.faculty_id or "")
                entry[2].add(a.room_id or "")
        for i, (code, (title, faculty, rooms)) in enumerate(sorted(legend.items()), start=1):
            ws.cell(start_row + i, 2, i).border = THIN_BORDER
            ws.cell(start_row + i, 3, code).border = THIN_BORDER
            ws.cell(start_row + i, 4, title).border = THIN_BORDER
            ws.cell(start_row + i, 5, ", ".join(sorted(faculty))).border = THIN_BORDER
            ws.cell(start_row + i, 6, ", ".join(sorted(rooms))).border = THIN_BORDER
            color = color_map.get(code, "FFFFFF")
            ws.cell(start_row + i, 7, "").fill = PatternFill(start_color=color, end_color=color, fill_type="solid")
            ws.cell(start_row + i, 7).border = THIN_BORDER
        _fit_columns(ws)

    _fit_columns(wb["Unscheduled"])
    wb.save(filename)
    logger.info("Saved section timetables for %d batches to %s", len(batch_ids), filename)


def write_faculty_workbook(timetable, calendar, filename, faculty=()):
    """One sheet per faculty member, cells naming subject and section."""
    names = {f.faculty_id: f.name for f in faculty}
    faculty_ids = sorted({a.faculty_id for a in timetable.scheduled() if a.faculty_id} | set(names))
    projections = {f: views.by_faculty(timetable, f) for f in faculty_ids}

    sheet_names = {}
    with pd.ExcelWriter(filename, engine="openpyxl") as writer:
        for faculty_id in faculty_ids:
            sheet = _unique_sheet_name(names.get(faculty_id, faculty_id), sheet_names.values())
            sheet_names[faculty_id] = sheet
            _grid_frame(calendar, projections[faculty_id], "section").to_excel(writer, sheet_name=sheet, index=True)
        if not faculty_ids:
            pd.DataFrame("", index=calendar.days, columns=[s.label for s in calendar.slots]).to_excel(
                writer, sheet_name="Faculty", index=True
            )

    wb = load_workbook(filename)
    color_map = {}
    for faculty_id in faculty_ids:
        ws = wb[sheet_names[faculty_id]]
        projection = projections[faculty_id]
        _style_grid(ws, _flagged_cells(calendar, projection, "section"), color_map, _merge_spans(calendar, projection))
        _fit_columns(ws)
    wb.save(filename)
    logger.info("Saved faculty timetables for %d faculty to %s", len(faculty_ids), filename)

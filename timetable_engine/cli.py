import argparse
import logging
import sys
from pathlib import Path

from timetable_engine.config import load_config
from timetable_engine.errors import TimetableError
from timetable_engine.export import write_faculty_workbook, write_section_workbook
from timetable_engine.repository import CsvRepository
from timetable_engine.service import TimetableService
from timetable_engine.slot_calendar import SlotCalendar
from timetable_engine.substitution import ASSIGNED

logger = logging.getLogger("timetable")


def setup_logging(verbose=False, log_file=None):
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )


def build_parser():
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--data-dir", default="./data", help="directory holding the input CSV files")
    common.add_argument("--config", default=None, help="JSON file with schedule options")
    common.add_argument("--log-file", default=None)
    common.add_argument("-v", "--verbose", action="store_true")

    parser = argparse.ArgumentParser(prog="timetable", description="Weekly class timetable generator")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", parents=[common], help="generate and store a new timetable")
    gen.add_argument("--output-dir", default="./output", help="where --excel writes the workbooks")
    gen.add_argument("--excel", action="store_true", help="write section and faculty workbooks")

    subst = sub.add_parser("substitute", parents=[common], help="mark a faculty member absent and bind substitutes")
    subst.add_argument("--date", required=True, help="YYYY-MM-DD")
    subst.add_argument("--faculty", required=True, help="faculty identifier")

    show = sub.add_parser("show", parents=[common], help="print the stored timetable for one section or faculty")
    who = show.add_mutually_exclusive_group(required=True)
    who.add_argument("--section")
    who.add_argument("--faculty")
    return parser


def _print_projection(projection):
    for day, cells in projection.items():
        for start in sorted(cells):
            for a in cells[start]:
                flag = "  [CONFLICT]" if a.conflict else ""
                print(f"{day:<10} {start}-{a.end_time}  {a.subject_code:<10} {a.batch_id:<8} "
                      f"{a.room_id or '-':<8} {a.faculty_name or a.faculty_id or '-'}{flag}")


def run(args):
    config = load_config(args.config)
    repository = CsvRepository(args.data_dir)
    service = TimetableService(repository, config)

    if args.command == "generate":
        timetable = service.generate()
        if timetable.unscheduled:
            logger.warning("%d occurrences could not be placed", len(timetable.unscheduled))
        if args.excel:
            out = Path(args.output_dir)
            out.mkdir(parents=True, exist_ok=True)
            calendar = SlotCalendar(config)
            write_section_workbook(timetable, calendar, out / "section_timetable.xlsx")
            write_faculty_workbook(timetable, calendar, out / "faculty_timetable.xlsx", repository.load_faculty())
        return 0

    if args.command == "substitute":
        record = service.report_absence(args.date, args.faculty)
        for outcome in service.last_outcomes:
            a = outcome.assignment
            who = outcome.substitute_id if outcome.state == ASSIGNED else "UNFILLED"
            print(f"{a.day} {a.start_time} {a.subject_code} {a.batch_id}: {who}")
        logger.info("%d substitutions recorded for %s on %s", len(record.substitutions), args.faculty, args.date)
        return 0

    if args.section:
        _print_projection(service.section_view(args.section))
    else:
        _print_projection(service.faculty_view(args.faculty))
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, args.log_file)
    try:
        return run(args)
    except TimetableError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())

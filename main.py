"""
Main entry point for the Timetable Scheduler application
"""
import argparse
import json
import sys

from database.csv_importer import import_csv_directory
from database.database_manager import DatabaseManager
from database.timetable_service import TimetableService
from solver.config import get_logger
from solver.errors import InfeasibleScheduleError
from solver.report import format_result, timetable_to_json

logger = get_logger("main")


def run_gui():
    from PyQt6.QtWidgets import QApplication
    from gui.main_window import MainWindow

    app = QApplication(sys.argv)
    app.setApplicationName("Timetable Scheduler")

    window = MainWindow()
    window.show()

    return app.exec()


def run_headless(args) -> int:
    with DatabaseManager(args.db) as db:
        db.create_schema()
        if args.import_csv:
            import_csv_directory(db, args.import_csv)

        service = TimetableService(db)
        try:
            result = service.generate_and_save()
        except InfeasibleScheduleError as e:
            for line in format_result(service.snapshot, e.result):
                print(line)
            logger.error("%s", e)
            return 1

        for line in format_result(service.snapshot, result):
            print(line)

        if args.json:
            with open(args.json, "w") as f:
                json.dump(timetable_to_json(service.snapshot, result), f, indent=2)
            logger.info("JSON exported to: %s", args.json)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Weekly class timetable generator")
    parser.add_argument("--db", help="SQLite database file")
    parser.add_argument("--headless", action="store_true", help="solve without the GUI")
    parser.add_argument("--import-csv", metavar="DIR", help="import CSV files before solving")
    parser.add_argument("--json", metavar="OUT", help="write the timetable as JSON")
    args = parser.parse_args(argv)

    if args.headless:
        if not args.db:
            parser.error("--headless requires --db")
        return run_headless(args)
    return run_gui()


if __name__ == "__main__":
    sys.exit(main())

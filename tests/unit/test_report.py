"""
Tests for the result listing, JSON export and the headless entry point.
"""

import json

from main import main
from solver.csp_solver import CSPSolver
from solver.report import format_result, session_records, timetable_to_json


class TestSessionRecords:
    def test_record_fields(self, single_variable_snapshot):
        single_variable_snapshot.rooms[0].building = "Main"
        result = CSPSolver(single_variable_snapshot).solve()

        (record,) = session_records(single_variable_snapshot, result)

        assert record["courseName"] == "Intro to CS"
        assert record["instructor"] == "Dr. A"
        assert record["room"] == "R101 (Main)"
        assert record["day"] == "Monday"
        assert record["time"] == "9:00 AM - 10:30 AM"
        assert record["score"] == -50


class TestTimetableToJson:
    def test_success(self, department_snapshot):
        result = CSPSolver(department_snapshot).solve()

        data = timetable_to_json(department_snapshot, result)

        assert data["success"] is True
        assert data["stats"]["totalSessions"] == 10
        assert data["stats"]["ignoredSections"] == ["GHOST-A"]
        assert len(data["sessions"]) == 10
        assert data["metrics"]["assignment_count"] == 10
        json.dumps(data)

    def test_failure_has_no_sessions(self, single_variable_snapshot):
        single_variable_snapshot.rooms[0].capacity = 1
        result = CSPSolver(single_variable_snapshot).solve()

        data = timetable_to_json(single_variable_snapshot, result)

        assert data["success"] is False
        assert data["sessions"] == []


class TestFormatResult:
    def test_success_listing(self, backtrack_snapshot):
        result = CSPSolver(backtrack_snapshot).solve()

        lines = format_result(backtrack_snapshot, result)

        assert lines[0].startswith("LB100 | Lab Course | Section S1 #1")
        assert "Backtracks: 3  Fallback relaxations: 0" in lines

    def test_failure_line(self, single_variable_snapshot):
        single_variable_snapshot.rooms[0].capacity = 1
        result = CSPSolver(single_variable_snapshot).solve()

        lines = format_result(single_variable_snapshot, result)

        assert len(lines) == 1
        assert lines[0].startswith("No solution found.")


class TestHeadlessMain:
    def _write_csvs(self, directory, room_capacity):
        (directory / "courses.csv").write_text(
            "CourseID,CourseName,Credits,Type,SessionsPerWeek\nCS101,Intro,3,LECTURE,1\n"
        )
        (directory / "instructors.csv").write_text(
            "InstructorID,Name,Role,PreferredSlots,QualifiedCourses\nPROF01,Dr. A,Professor,,CS101\n"
        )
        (directory / "rooms.csv").write_text(
            f"RoomID,Type,Capacity,Building,Floor\nR101,LECTURE,{room_capacity},A,1\n"
        )
        (directory / "timeSlots.csv").write_text(
            "Day,StartTime,EndTime,Priority\nMonday,9:00 AM,10:30 AM,0\n"
        )
        (directory / "sections.csv").write_text(
            "SectionID,CourseID,SectionName,Capacity,PreferredInstructor\nCS101-A,CS101,A,20,\n"
        )

    def test_solves_and_exports(self, tmp_path, capsys):
        self._write_csvs(tmp_path, 30)
        out = tmp_path / "timetable.json"

        code = main(["--db", str(tmp_path / "t.db"), "--headless",
                     "--import-csv", str(tmp_path), "--json", str(out)])

        assert code == 0
        data = json.loads(out.read_text())
        assert data["sessions"][0]["roomName"] == "R101"
        assert "Solution found" in capsys.readouterr().out

    def test_infeasible_exit_code(self, tmp_path, capsys):
        self._write_csvs(tmp_path, 5)

        code = main(["--db", str(tmp_path / "t.db"), "--headless", "--import-csv", str(tmp_path)])

        assert code == 1
        assert "No solution found" in capsys.readouterr().out

"""
Database manager for accessing SQLite database
"""
import sqlite3
from typing import Any, Dict, Iterable, List

from models.data_models import (
    Assignment, Course, EntitySnapshot, Instructor, Room, Section, TimeSlot
)
from solver.config import get_logger
from solver.errors import DataLoadError

logger = get_logger("database")

SCHEMA = """
    CREATE TABLE IF NOT EXISTS Courses (
        CourseCode TEXT PRIMARY KEY,
        CourseName TEXT,
        Credits INTEGER DEFAULT 0,
        Type TEXT,
        SessionsPerWeek INTEGER DEFAULT 1
    );
    CREATE TABLE IF NOT EXISTS Sections (
        SectionID TEXT PRIMARY KEY,
        CourseCode TEXT,
        SectionName TEXT,
        Capacity INTEGER DEFAULT 30,
        PreferredInstructor TEXT
    );
    CREATE TABLE IF NOT EXISTS Instructor (
        InstructorID TEXT PRIMARY KEY,
        Name TEXT,
        Role TEXT,
        PreferredSlots TEXT,
        QualifiedCourses TEXT
    );
    CREATE TABLE IF NOT EXISTS Rooms (
        RoomName TEXT PRIMARY KEY,
        RoomType TEXT,
        Capacity INTEGER,
        Building TEXT,
        Floor INTEGER
    );
    CREATE TABLE IF NOT EXISTS TimeSlots (
        TimeSlotID INTEGER PRIMARY KEY,
        Day TEXT,
        StartTime TEXT,
        EndTime TEXT,
        Priority INTEGER DEFAULT 0
    );
    CREATE TABLE IF NOT EXISTS TimetableEntries (
        EntryID INTEGER PRIMARY KEY AUTOINCREMENT,
        SectionID TEXT,
        CourseCode TEXT,
        InstructorID TEXT,
        RoomName TEXT,
        TimeSlotID INTEGER
    );
"""

ENTITY_TABLES = ("Courses", "Sections", "Instructor", "Rooms", "TimeSlots")


class DatabaseManager:
    def __init__(self, db_file: str):
        self.db_file = db_file
        try:
            self.connection = sqlite3.connect(db_file)
        except sqlite3.Error as e:
            logger.error("Database error: %s", e)
            raise DataLoadError(f"Cannot open database {db_file}: {e}") from e

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __del__(self):
        self.close()

    def close(self):
        connection = getattr(self, "connection", None)
        if connection:
            connection.close()
            self.connection = None

    def _fetch(self, sql: str, what: str, params: tuple = ()) -> List[tuple]:
        try:
            cursor = self.connection.cursor()
            cursor.execute(sql, params)
            return cursor.fetchall()
        except sqlite3.Error as e:
            logger.error("Error while fetching %s: %s", what, e)
            raise DataLoadError(f"Error while fetching {what}: {e}") from e

    def _write(self, sql: str, what: str, rows: Iterable[tuple]) -> int:
        rows = list(rows)
        try:
            with self.connection:
                self.connection.executemany(sql, rows)
        except sqlite3.Error as e:
            logger.error("Error while writing %s: %s", what, e)
            raise DataLoadError(f"Error while writing {what}: {e}") from e
        return len(rows)

    def create_schema(self):
        try:
            self.connection.executescript(SCHEMA)
        except sqlite3.Error as e:
            logger.error("Error while creating schema: %s", e)
            raise DataLoadError(f"Error while creating schema: {e}") from e

    def get_courses(self) -> List[Course]:
        rows = self._fetch(
            "SELECT CourseCode, CourseName, Credits, Type, SessionsPerWeek FROM Courses;",
            "courses",
        )
        return [
            Course(
                code=row[0] or "",
                name=row[1] or "",
                credits=row[2] or 0,
                type=row[3] or "",
                sessions_per_week=row[4] or 1,
            )
            for row in rows
        ]

    def get_sections(self) -> List[Section]:
        rows = self._fetch(
            "SELECT SectionID, CourseCode, SectionName, Capacity, PreferredInstructor FROM Sections;",
            "sections",
        )
        return [
            Section(
                id=row[0] or "",
                course_code=row[1] or "",
                section_name=row[2] or "",
                capacity=row[3] if row[3] is not None else 30,
                preferred_instructor=row[4] or None,
            )
            for row in rows
        ]

    def get_instructors(self) -> List[Instructor]:
        rows = self._fetch(
            "SELECT InstructorID, Name, Role, PreferredSlots, QualifiedCourses FROM Instructor;",
            "instructors",
        )
        return [
            Instructor(
                external_id=row[0] or "",
                name=row[1] or "",
                role=row[2] or "",
                preferred_slots=row[3] or "",
                qualified_courses=row[4] or "",
            )
            for row in rows
        ]

    def get_rooms(self) -> List[Room]:
        rows = self._fetch(
            "SELECT RoomName, RoomType, Capacity, Building, Floor FROM Rooms;",
            "rooms",
        )
        return [
            Room(
                name=row[0] or "",
                type=row[1] or "",
                capacity=row[2] or 0,
                building=row[3] or None,
                floor=row[4],
            )
            for row in rows
        ]

    def get_time_slots(self) -> List[TimeSlot]:
        rows = self._fetch(
            "SELECT TimeSlotID, Day, StartTime, EndTime, Priority FROM TimeSlots ORDER BY TimeSlotID;",
            "time slots",
        )
        return [
            TimeSlot(
                id=row[0],
                day=row[1] or "",
                start_time=row[2] or "",
                end_time=row[3] or "",
                priority=row[4] or 0,
            )
            for row in rows
        ]

    def load_snapshot(self) -> EntitySnapshot:
        snapshot = EntitySnapshot(
            courses=self.get_courses(),
            instructors=self.get_instructors(),
            rooms=self.get_rooms(),
            time_slots=self.get_time_slots(),
            sections=self.get_sections(),
        )
        logger.info(
            "Loaded %d courses, %d sections, %d instructors, %d rooms, %d time slots",
            len(snapshot.courses), len(snapshot.sections), len(snapshot.instructors),
            len(snapshot.rooms), len(snapshot.time_slots),
        )
        return snapshot

    def add_courses(self, courses: Iterable[Course]) -> int:
        return self._write(
            "INSERT OR REPLACE INTO Courses VALUES (?, ?, ?, ?, ?);",
            "courses",
            ((c.code, c.name, c.credits, c.type, c.sessions_per_week) for c in courses),
        )

    def add_sections(self, sections: Iterable[Section]) -> int:
        return self._write(
            "INSERT OR REPLACE INTO Sections VALUES (?, ?, ?, ?, ?);",
            "sections",
            ((s.id, s.course_code, s.section_name, s.capacity, s.preferred_instructor)
             for s in sections),
        )

    def add_instructors(self, instructors: Iterable[Instructor]) -> int:
        return self._write(
            "INSERT OR REPLACE INTO Instructor VALUES (?, ?, ?, ?, ?);",
            "instructors",
            ((i.external_id, i.name, i.role, i.preferred_slots, i.qualified_courses)
             for i in instructors),
        )

    def add_rooms(self, rooms: Iterable[Room]) -> int:
        return self._write(
            "INSERT OR REPLACE INTO Rooms VALUES (?, ?, ?, ?, ?);",
            "rooms",
            ((r.name, r.type, r.capacity, r.building, r.floor) for r in rooms),
        )

    def add_time_slots(self, time_slots: Iterable[TimeSlot]) -> int:
        return self._write(
            "INSERT OR REPLACE INTO TimeSlots VALUES (?, ?, ?, ?, ?);",
            "time slots",
            ((t.id, t.day, t.start_time, t.end_time, t.priority) for t in time_slots),
        )

    def clear_entities(self):
        try:
            with self.connection:
                for table in ENTITY_TABLES:
                    self.connection.execute(f"DELETE FROM {table};")
        except sqlite3.Error as e:
            logger.error("Error while clearing entities: %s", e)
            raise DataLoadError(f"Error while clearing entities: {e}") from e

    def clear_timetable(self):
        try:
            with self.connection:
                self.connection.execute("DELETE FROM TimetableEntries;")
        except sqlite3.Error as e:
            logger.error("Error while clearing timetable: %s", e)
            raise DataLoadError(f"Error while clearing timetable: {e}") from e

    def save_timetable(self, assignments: Iterable[Assignment]) -> int:
        """Replace stored timetable entries with the given assignments"""
        self.clear_timetable()
        return self._write(
            "INSERT INTO TimetableEntries (SectionID, CourseCode, InstructorID, RoomName, TimeSlotID) "
            "VALUES (?, ?, ?, ?, ?);",
            "timetable entries",
            ((a.section_id, a.course_code, a.instructor_id, a.room_name, a.timeslot_id)
             for a in assignments),
        )

    def get_timetable_entries(self) -> List[Dict[str, Any]]:
        rows = self._fetch(
            "SELECT SectionID, CourseCode, InstructorID, RoomName, TimeSlotID "
            "FROM TimetableEntries ORDER BY EntryID;",
            "timetable entries",
        )
        return [
            {
                "sectionId": row[0],
                "courseCode": row[1],
                "instructorId": row[2],
                "roomName": row[3],
                "timeslotId": row[4],
            }
            for row in rows
        ]

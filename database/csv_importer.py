"""
Bulk import of entity CSV files into the database
"""
import os
import re
from typing import Dict, List, Optional

import pandas as pd

from database.database_manager import DatabaseManager
from models.data_models import Course, Instructor, Room, Section, TimeSlot
from solver.config import get_logger

logger = get_logger("csv_importer")

CSV_FILES = {
    "courses": "courses.csv",
    "instructors": "instructors.csv",
    "rooms": "rooms.csv",
    "timeslots": "timeSlots.csv",
    "sections": "sections.csv",
}


def read_csv(path: str) -> List[Dict[str, str]]:
    """Rows of a CSV file as string dicts; a missing file gives no rows"""
    if not os.path.exists(path):
        logger.info("No %s found, skipping", os.path.basename(path))
        return []
    df = pd.read_csv(path, dtype=str).fillna("")
    df.columns = [c.strip() for c in df.columns]
    return df.to_dict("records")


def _int(value: str, default: Optional[int] = 0) -> Optional[int]:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _upper_type(value: str) -> str:
    return (value.strip() or "LECTURE").upper()


def import_csv_directory(db: DatabaseManager, directory: str) -> Dict[str, int]:
    """Replace stored entities with the CSV files found in directory"""
    rows = {key: read_csv(os.path.join(directory, name)) for key, name in CSV_FILES.items()}

    courses = [
        Course(
            code=r.get("CourseID", "").strip(),
            name=r.get("CourseName", ""),
            credits=_int(r.get("Credits", "")),
            type=_upper_type(r.get("Type", "")),
            sessions_per_week=_int(r.get("SessionsPerWeek", ""), 1) or 1,
        )
        for r in rows["courses"]
    ]
    instructors = [
        Instructor(
            external_id=r.get("InstructorID", "").strip(),
            name=r.get("Name", ""),
            role=r.get("Role", ""),
            preferred_slots=r.get("PreferredSlots", ""),
            qualified_courses=re.sub(r",\s*", ",", r.get("QualifiedCourses", "")),
        )
        for r in rows["instructors"]
    ]
    rooms = [
        Room(
            name=r.get("RoomID", "").strip(),
            type=_upper_type(r.get("Type", "")),
            capacity=_int(r.get("Capacity", "")),
            building=r.get("Building", "").strip() or None,
            floor=_int(r.get("Floor", ""), None),
        )
        for r in rows["rooms"]
    ]
    # ids follow file order; a TimeSlotID column is ignored
    time_slots = [
        TimeSlot(
            id=index,
            day=r.get("Day", "").strip(),
            start_time=r.get("StartTime", "").strip(),
            end_time=r.get("EndTime", "").strip(),
            priority=_int(r.get("Priority", "")),
        )
        for index, r in enumerate(rows["timeslots"], start=1)
    ]
    sections = [
        Section(
            id=r.get("SectionID", "").strip(),
            course_code=(r.get("CourseID", "") or r.get("CourseCode", "")).strip(),
            section_name=r.get("SectionName", ""),
            capacity=_int(r.get("Capacity", ""), 30),
            preferred_instructor=r.get("PreferredInstructor", "").strip() or None,
        )
        for r in rows["sections"]
    ]

    db.clear_entities()
    counts = {
        "courses": db.add_courses(courses),
        "instructors": db.add_instructors(instructors),
        "rooms": db.add_rooms(rooms),
        "timeslots": db.add_time_slots(time_slots),
        "sections": db.add_sections(sections),
    }
    logger.info("Imported %s", counts)
    return counts

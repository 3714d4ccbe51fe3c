"""
Pytest configuration and fixtures for timetable solver tests.
"""

import pytest

from models.data_models import (
    Course, EntitySnapshot, Instructor, Room, Section, TimeSlot
)


@pytest.fixture
def single_variable_snapshot():
    """One qualified instructor, one room, one slot, one section"""
    return EntitySnapshot(
        courses=[Course("CS101", "Intro to CS", 3, "LECTURE", 1)],
        instructors=[Instructor("PROF01", "Dr. A", "Professor", "", "CS101")],
        rooms=[Room("R101", "LECTURE", 30)],
        time_slots=[TimeSlot(1, "Monday", "9:00 AM", "10:30 AM")],
        sections=[Section("CS101-A", "CS101", "A", 20)],
    )


@pytest.fixture
def backtrack_snapshot():
    """
    Three sections with equal domain sizes where the best-scored first
    choice for S1 leaves no room for S3, forcing three backtracks.
    """
    return EntitySnapshot(
        courses=[
            Course("LB100", "Lab Course", 1, "LAB", 1),
            Course("LC100", "Lecture Course", 3, "LECTURE", 1),
        ],
        instructors=[
            Instructor("I1", "Dr. One", "Professor", "", "LB100,LC100"),
            Instructor("I2", "Dr. Two", "Professor", "Not on Monday", ""),
        ],
        rooms=[
            Room("A", "LAB", 30),
            Room("B", "LECTURE", 30),
        ],
        time_slots=[
            TimeSlot(1, "Monday", "9:00 AM", "10:30 AM", 0),
            TimeSlot(2, "Tuesday", "9:00 AM", "10:30 AM", 1),
        ],
        sections=[
            Section("S1", "LB100", "1", 20),
            Section("S2", "LC100", "1", 20),
            Section("S3", "LC100", "2", 20),
        ],
    )


@pytest.fixture
def department_snapshot():
    """A small department: mixed course types, restrictions, one bad section"""
    days = ["Sunday", "Monday", "Tuesday", "Wednesday"]
    times = [
        ("8:00 AM", "9:30 AM", 1),
        ("9:45 AM", "11:15 AM", 0),
        ("11:30 AM", "1:00 PM", 0),
        ("2:00 PM", "3:30 PM", 0),
        ("4:00 PM", "5:30 PM", 2),
    ]
    slots = []
    for day in days:
        for start, end, priority in times:
            slots.append(TimeSlot(len(slots) + 1, day, start, end, priority))

    return EntitySnapshot(
        courses=[
            Course("CS101", "Intro to CS", 3, "LECTURE", 2),
            Course("CS102", "Programming Lab", 1, "LAB", 1),
            Course("CS201", "Data Structures", 3, "LECTURE AND LAB", 2),
            Course("MA101", "Calculus", 3, "lecture", 3),
        ],
        instructors=[
            Instructor("PROF01", "Dr. A", "Professor", "Not on Sunday", "CS101, CS201"),
            Instructor("PROF02", "Dr. B", "Assistant Professor", "", "CS102,CS201"),
            Instructor("PROF03", "Dr. C", "Professor", "not on monday, not on tuesday", "MA101"),
        ],
        rooms=[
            Room("R101", "LECTURE", 50, "A", 1),
            Room("R102", "LECTURE", 40, "A", 3),
            Room("LAB1", "LAB", 30, "B", 0),
            Room("LAB2", "LAB", 40),
        ],
        time_slots=slots,
        sections=[
            Section("CS101-A", "CS101", "A", 40),
            Section("CS101-B", "CS101", "B", 30),
            Section("CS102-A", "CS102", "A", 25),
            Section("CS201-A", "CS201", "A", 35, "PROF02"),
            Section("MA101-A", "MA101", "A", 45),
            Section("GHOST-A", "XX999", "A", 10),
        ],
    )

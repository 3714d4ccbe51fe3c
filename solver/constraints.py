"""
Hard constraints: domain filters and the commit-time conflict check
"""
import re
from collections import defaultdict
from typing import Dict, List, Set, Tuple

from models.data_models import (
    Assignment, Candidate, Instructor, Room, ScoreBreakdown,
    SessionVariable, TimeSlot
)

NOT_ON_PATTERN = re.compile(r"not on ([a-z]+)")


def room_type_compatible(course_type: str, room_type: str) -> bool:
    """A LECTURE AND LAB course may use either room type"""
    ct = (course_type or "").upper()
    rt = (room_type or "").upper()
    if ct == rt:
        return True
    if "LECTURE" in ct and rt == "LECTURE":
        return True
    if "LAB" in ct and rt == "LAB":
        return True
    return False


def forbidden_days(preferred_slots: str) -> List[str]:
    """Days named in 'not on <day>' clauses, lower-cased"""
    if not preferred_slots:
        return []
    return NOT_ON_PATTERN.findall(preferred_slots.lower())


def instructor_allows_timeslot(instructor: Instructor, time_slot: TimeSlot) -> bool:
    day = (time_slot.day or "").lower()
    return day not in forbidden_days(instructor.preferred_slots)


class ScheduleState:
    """
    The partial solution: committed assignments in commit order, with
    occupancy indexes for the conflict check and the soft scorer.
    """

    def __init__(self):
        self.assignments: List[Assignment] = []
        self._entries: List[Tuple[Assignment, Candidate]] = []
        self._room_busy: Set[Tuple[str, int]] = set()
        self._instructor_busy: Set[Tuple[str, int]] = set()
        self._by_section_day: Dict[Tuple[str, str], List[TimeSlot]] = defaultdict(list)
        self._by_instructor_day: Dict[Tuple[str, str], List[Room]] = defaultdict(list)

    def __len__(self) -> int:
        return len(self.assignments)

    def conflicts(self, candidate: Candidate) -> bool:
        """Same instructor or same room already used in this timeslot"""
        ts_id = candidate.time_slot.id
        if (candidate.instructor.external_id, ts_id) in self._instructor_busy:
            return True
        if (candidate.room.name, ts_id) in self._room_busy:
            return True
        return False

    def section_day_slots(self, section_id: str, day: str) -> List[TimeSlot]:
        return self._by_section_day.get((section_id, day), [])

    def instructor_day_rooms(self, instructor_id: str, day: str) -> List[Room]:
        return self._by_instructor_day.get((instructor_id, day), [])

    def commit(self, variable: SessionVariable, candidate: Candidate,
               score: int, breakdown: ScoreBreakdown) -> Assignment:
        ts = candidate.time_slot
        assignment = Assignment(
            section_id=variable.section.id,
            session_number=variable.session_number,
            course_code=variable.course.code,
            instructor_id=candidate.instructor.external_id,
            room_name=candidate.room.name,
            timeslot_id=ts.id,
            score=score,
            breakdown=breakdown,
        )
        self.assignments.append(assignment)
        self._entries.append((assignment, candidate))
        self._room_busy.add((candidate.room.name, ts.id))
        self._instructor_busy.add((candidate.instructor.external_id, ts.id))
        self._by_section_day[(assignment.section_id, ts.day)].append(ts)
        self._by_instructor_day[(assignment.instructor_id, ts.day)].append(candidate.room)
        return assignment

    def undo(self) -> Assignment:
        """Remove the most recent assignment"""
        assignment, candidate = self._entries.pop()
        self.assignments.pop()
        ts = candidate.time_slot
        self._room_busy.discard((candidate.room.name, ts.id))
        self._instructor_busy.discard((candidate.instructor.external_id, ts.id))
        self._by_section_day[(assignment.section_id, ts.day)].pop()
        self._by_instructor_day[(assignment.instructor_id, ts.day)].pop()
        return assignment

"""
Data models for the timetable scheduling system
"""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Set


@dataclass
class Course:
    code: str
    name: str = ""
    credits: int = 0
    type: str = "LECTURE"
    sessions_per_week: int = 1


@dataclass
class Section:
    id: str
    course_code: str
    section_name: str = ""
    capacity: int = 30
    preferred_instructor: Optional[str] = None


@dataclass
class Instructor:
    external_id: str
    name: str = ""
    role: str = ""
    preferred_slots: str = ""
    qualified_courses: str = ""

    def qualified_course_set(self) -> Set[str]:
        """Split the comma-separated course list into upper-cased codes"""
        return {
            token.strip().upper()
            for token in (self.qualified_courses or "").split(",")
            if token.strip()
        }


@dataclass
class Room:
    name: str
    type: str
    capacity: int
    building: Optional[str] = None
    floor: Optional[int] = None


@dataclass
class TimeSlot:
    id: int
    day: str
    start_time: str
    end_time: str
    priority: int = 0


@dataclass
class EntitySnapshot:
    """Everything one solve needs, loaded up front"""
    courses: List[Course] = field(default_factory=list)
    instructors: List[Instructor] = field(default_factory=list)
    rooms: List[Room] = field(default_factory=list)
    time_slots: List[TimeSlot] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)


@dataclass
class SessionVariable:
    section: Section
    course: Course
    session_number: int

    @property
    def var_id(self) -> str:
        return f"{self.section.id}#{self.session_number}"


@dataclass
class Candidate:
    time_slot: TimeSlot
    room: Room
    instructor: Instructor


@dataclass
class ScoreBreakdown:
    """Contributions of each soft rule to one candidate's score"""
    qualified_instructor: bool = False
    preferred_instructor: bool = False
    time_priority: int = 0
    distance_penalty: int = 0
    clustering_penalty: int = 0
    gap_penalty: int = 0


@dataclass
class Assignment:
    section_id: str
    session_number: int
    course_code: str
    instructor_id: str
    room_name: str
    timeslot_id: int
    score: int = 0
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)

    def to_record(self) -> Dict[str, Any]:
        """Plain record handed to persistence"""
        return {
            "sectionId": self.section_id,
            "courseCode": self.course_code,
            "instructorId": self.instructor_id,
            "roomName": self.room_name,
            "timeslotId": self.timeslot_id,
        }


@dataclass
class DomainStats:
    min: int = 0
    max: int = 0
    average: float = 0.0


@dataclass
class ConstraintBreakdown:
    qualified_instructor_bonus: int = 0
    preferred_instructor_bonus: int = 0
    early_late_penalty: int = 0
    distance_penalty: int = 0
    same_day_clustering: int = 0
    gap_penalty: int = 0


@dataclass
class SolveMetrics:
    phase_seconds: Dict[str, float] = field(default_factory=dict)
    variable_count: int = 0
    assignment_count: int = 0
    backtrack_count: int = 0
    fallback_count: int = 0
    total_soft_score: int = 0
    domain_stats: DomainStats = field(default_factory=DomainStats)
    constraint_breakdown: ConstraintBreakdown = field(default_factory=ConstraintBreakdown)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CSPResult:
    success: bool
    assignments: List[Assignment]
    metrics: SolveMetrics
    ignored_sections: List[str] = field(default_factory=list)

    @property
    def soft_cost(self) -> int:
        return self.metrics.total_soft_score

    @property
    def solve_seconds(self) -> float:
        return sum(self.metrics.phase_seconds.values())

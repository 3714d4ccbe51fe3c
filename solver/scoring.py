"""
Soft constraint scoring for candidate assignments
"""
import re
from typing import Optional, Tuple

from models.data_models import Candidate, Room, ScoreBreakdown, SessionVariable
from solver.config import ScoringWeights, get_logger
from solver.constraints import ScheduleState

logger = get_logger("scoring")

TIME_PATTERN = re.compile(r"^\s*(1[0-2]|0?[1-9]):([0-5]\d)\s*([AaPp][Mm])\s*$")


def parse_time_minutes(time_str: str) -> int:
    """Parse 'H:MM AM/PM' into minutes after midnight, 0 when unparseable"""
    match = TIME_PATTERN.match(time_str or "")
    if not match:
        logger.debug("Unparseable time string %r, using 0", time_str)
        return 0
    hours, mins, period = int(match.group(1)), int(match.group(2)), match.group(3).upper()
    if period == "PM" and hours != 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0
    return hours * 60 + mins


def room_distance(a: Room, b: Room, weights: Optional[ScoringWeights] = None) -> int:
    weights = weights or ScoringWeights()
    if not a.building or not b.building:
        return weights.unknown_building_distance
    if a.building != b.building:
        return weights.other_building_distance
    if a.floor is not None and b.floor is not None:
        return abs(a.floor - b.floor)
    return weights.unknown_building_distance


class SoftScorer:
    """
    Scores a candidate against the partial solution. Lower is better.

    Rules:
      - qualified instructor bonus
      - section's preferred instructor bonus
      - early/late timeslot penalty (by timeslot priority)
      - room distance from the instructor's other rooms that day
      - clustering of the section's sessions on one day
      - idle gap between the section's sessions on one day
    """

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or ScoringWeights()

    def score(self, variable: SessionVariable, candidate: Candidate,
              state: ScheduleState) -> Tuple[int, ScoreBreakdown]:
        w = self.weights
        ts = candidate.time_slot
        breakdown = ScoreBreakdown()
        score = 0

        if variable.course.code.upper() in candidate.instructor.qualified_course_set():
            breakdown.qualified_instructor = True
            score += w.qualified_instructor_bonus

        preferred = variable.section.preferred_instructor
        if preferred and preferred == candidate.instructor.external_id:
            breakdown.preferred_instructor = True
            score += w.preferred_instructor_bonus

        priority = ts.priority or 0
        breakdown.time_priority = priority
        score += w.time_priority_penalty * priority

        for prev_room in state.instructor_day_rooms(candidate.instructor.external_id, ts.day):
            breakdown.distance_penalty += w.distance_penalty * room_distance(
                prev_room, candidate.room, w
            )
        score += breakdown.distance_penalty

        same_day = state.section_day_slots(variable.section.id, ts.day)
        if same_day:
            breakdown.clustering_penalty = w.clustering_penalty * len(same_day)
            score += breakdown.clustering_penalty

            start = parse_time_minutes(ts.start_time)
            gap = min(abs(start - parse_time_minutes(prev.end_time)) for prev in same_day)
            if gap > w.gap_threshold_minutes:
                breakdown.gap_penalty = w.gap_penalty * (gap // 60)
                score += breakdown.gap_penalty

        return score, breakdown

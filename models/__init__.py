"""Data models package"""
from .data_models import (
    Course, Section, Instructor, Room, TimeSlot, EntitySnapshot,
    SessionVariable, Candidate, ScoreBreakdown, Assignment,
    DomainStats, ConstraintBreakdown, SolveMetrics, CSPResult
)

__all__ = [
    'Course', 'Section', 'Instructor', 'Room', 'TimeSlot', 'EntitySnapshot',
    'SessionVariable', 'Candidate', 'ScoreBreakdown', 'Assignment',
    'DomainStats', 'ConstraintBreakdown', 'SolveMetrics', 'CSPResult'
]

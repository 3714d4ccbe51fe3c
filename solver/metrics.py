"""
Run metrics for a solve: phase timings, counters and the soft constraint tally
"""
import time
from contextlib import contextmanager
from typing import Iterable, List

from models.data_models import (
    Assignment, ConstraintBreakdown, DomainStats, SolveMetrics
)

PHASES = ("data_load", "domain_construction", "search")


class BreakdownAccumulator:
    """
    Tallies soft constraint contributions of committed assignments.
    Undone assignments are removed again, so after a successful search
    the tally covers exactly the final timetable.
    """

    def __init__(self):
        self.totals = ConstraintBreakdown()

    def _apply(self, assignment: Assignment, sign: int):
        b = assignment.breakdown
        t = self.totals
        if b.qualified_instructor:
            t.qualified_instructor_bonus += sign
        if b.preferred_instructor:
            t.preferred_instructor_bonus += sign
        if b.time_priority > 0:
            t.early_late_penalty += sign
        t.distance_penalty += sign * b.distance_penalty
        if b.clustering_penalty > 0:
            t.same_day_clustering += sign
        if b.gap_penalty > 0:
            t.gap_penalty += sign

    def add(self, assignment: Assignment):
        self._apply(assignment, 1)

    def remove(self, assignment: Assignment):
        self._apply(assignment, -1)


def domain_stats(sizes: Iterable[int]) -> DomainStats:
    sizes = list(sizes)
    if not sizes:
        return DomainStats()
    return DomainStats(min=min(sizes), max=max(sizes), average=sum(sizes) / len(sizes))


class MetricsCollector:
    def __init__(self):
        self.metrics = SolveMetrics(phase_seconds={name: 0.0 for name in PHASES})
        self.breakdown = BreakdownAccumulator()

    @contextmanager
    def phase(self, name: str):
        """Time a block and add it to the named phase"""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.metrics.phase_seconds[name] = self.metrics.phase_seconds.get(name, 0.0) + elapsed

    def record_domains(self, sizes: List[int]):
        self.metrics.variable_count = len(sizes)
        self.metrics.domain_stats = domain_stats(sizes)

    def record_fallback(self):
        self.metrics.fallback_count += 1

    def record_backtrack(self):
        self.metrics.backtrack_count += 1

    def finish(self, assignments: List[Assignment]) -> SolveMetrics:
        self.metrics.assignment_count = len(assignments)
        self.metrics.total_soft_score = sum(a.score for a in assignments)
        self.metrics.constraint_breakdown = self.breakdown.totals
        return self.metrics

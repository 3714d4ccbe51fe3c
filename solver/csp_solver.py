"""
CSP Solver for timetable generation
"""
import time
from typing import Callable, Dict, List, Optional, Tuple

from models.data_models import (
    Assignment, CSPResult, Candidate, Course, EntitySnapshot, ScoreBreakdown,
    SessionVariable
)
from solver.config import SolverConfig, apply_logging, get_logger
from solver.constraints import (
    ScheduleState, instructor_allows_timeslot, room_type_compatible
)
from solver.metrics import MetricsCollector
from solver.scoring import SoftScorer

logger = get_logger("csp_solver")

ScoredCandidate = Tuple[int, ScoreBreakdown, Candidate]


class _Frame:
    """One level of the depth-first search"""

    __slots__ = ("index", "scored", "position", "committed")

    def __init__(self, index: int, scored: List[ScoredCandidate]):
        self.index = index
        self.scored = scored
        self.position = 0
        self.committed = False


class CSPSolver:
    def __init__(self, snapshot: EntitySnapshot, config: Optional[SolverConfig] = None):
        self.snapshot = snapshot
        if config is not None:
            apply_logging(config)
        self.config = config or SolverConfig()
        self.scorer = SoftScorer(self.config.weights)
        self.load_seconds = 0.0

        self.course_index: Dict[str, Course] = {c.code: c for c in snapshot.courses}

        self.variables: List[SessionVariable] = []
        self.domains: List[List[Candidate]] = []
        self.order: List[Tuple[SessionVariable, List[Candidate]]] = []
        self.ignored_sections: List[str] = []
        self.relaxed: List[str] = []

    @classmethod
    def from_loader(cls, load_fn: Callable[[], EntitySnapshot],
                    config: Optional[SolverConfig] = None) -> "CSPSolver":
        """Load the snapshot and remember how long it took"""
        start = time.perf_counter()
        snapshot = load_fn()
        solver = cls(snapshot, config)
        solver.load_seconds = time.perf_counter() - start
        return solver

    def expand_sessions(self) -> List[SessionVariable]:
        """One variable per weekly session of each section's course"""
        self.variables = []
        self.ignored_sections = []

        for section in self.snapshot.sections:
            course = self.course_index.get(section.course_code)
            if course is None:
                logger.warning("Section %s references unknown course %s, ignoring",
                               section.id, section.course_code)
                self.ignored_sections.append(section.id)
                continue
            for n in range(1, (course.sessions_per_week or 1) + 1):
                self.variables.append(SessionVariable(section, course, n))

        logger.info("Total variables created: %d", len(self.variables))
        return self.variables

    def build_domain(self, variable: SessionVariable,
                     respect_availability: bool = True) -> List[Candidate]:
        section, course = variable.section, variable.course
        rooms = [
            r for r in self.snapshot.rooms
            if room_type_compatible(course.type, r.type) and r.capacity >= section.capacity
        ]
        domain = []
        for ts in self.snapshot.time_slots:
            for r in rooms:
                for ins in self.snapshot.instructors:
                    if respect_availability and not instructor_allows_timeslot(ins, ts):
                        continue
                    domain.append(Candidate(ts, r, ins))
        return domain

    def build_domains(self, collector: Optional[MetricsCollector] = None) -> List[List[Candidate]]:
        """Build domains for each variable, relaxing day availability once if empty"""
        self.domains = []
        self.relaxed = []

        for v in self.variables:
            domain = self.build_domain(v)
            if not domain:
                domain = self.build_domain(v, respect_availability=False)
                self.relaxed.append(v.var_id)
                if collector:
                    collector.record_fallback()
                logger.info("Relaxed instructor availability for %s (%d candidates)",
                            v.var_id, len(domain))
                if not domain:
                    logger.warning("Variable %s has empty domain", v.var_id)
            self.domains.append(domain)

        sizes = [len(d) for d in self.domains]
        if collector:
            collector.record_domains(sizes)
        if sizes:
            logger.info("Domain sizes: min=%d max=%d avg=%.1f",
                        min(sizes), max(sizes), sum(sizes) / len(sizes))
        return self.domains

    def order_variables(self) -> List[Tuple[SessionVariable, List[Candidate]]]:
        """Most constrained first; stable so ties keep emission order"""
        pairs = list(zip(self.variables, self.domains))
        self.order = sorted(pairs, key=lambda pair: len(pair[1]))
        return self.order

    def _open_frame(self, index: int, state: ScheduleState) -> _Frame:
        variable, domain = self.order[index]
        scored = []
        for cand in domain:
            score, breakdown = self.scorer.score(variable, cand, state)
            scored.append((score, breakdown, cand))
        scored.sort(key=lambda entry: entry[0])
        return _Frame(index, scored)

    def backtrack_search(self, collector: MetricsCollector) -> Optional[List[Assignment]]:
        """
        Depth-first search over the ordered variables, best score first.

        Each frame holds the scored candidates of one variable and whether
        it currently has an assignment committed. A frame that runs out of
        candidates is popped, and its parent undoes its own assignment
        (counted as a backtrack) before trying the next candidate.
        Returns None when the root variable is exhausted.
        """
        state = ScheduleState()
        if not self.order:
            return []

        stack = [self._open_frame(0, state)]
        while stack:
            frame = stack[-1]
            if frame.committed:
                collector.breakdown.remove(state.undo())
                collector.record_backtrack()
                frame.committed = False

            variable = self.order[frame.index][0]
            while frame.position < len(frame.scored):
                score, breakdown, cand = frame.scored[frame.position]
                frame.position += 1
                if state.conflicts(cand):
                    continue
                assignment = state.commit(variable, cand, score, breakdown)
                collector.breakdown.add(assignment)
                frame.committed = True
                break

            if not frame.committed:
                stack.pop()
                continue

            if frame.index + 1 == len(self.order):
                return list(state.assignments)
            stack.append(self._open_frame(frame.index + 1, state))

        return None

    def solve(self) -> CSPResult:
        """Solve the CSP"""
        collector = MetricsCollector()
        collector.metrics.phase_seconds["data_load"] = self.load_seconds

        with collector.phase("domain_construction"):
            self.expand_sessions()
            self.build_domains(collector)
            self.order_variables()

        logger.info("Starting backtrack search over %d variables", len(self.order))
        with collector.phase("search"):
            found = self.backtrack_search(collector)

        metrics = collector.finish(found or [])
        if found is None:
            logger.info("No solution found after %d backtracks", metrics.backtrack_count)
            return CSPResult(False, [], metrics, list(self.ignored_sections))

        logger.info("Solution found: %d assignments, soft score %d, %d backtracks",
                    metrics.assignment_count, metrics.total_soft_score,
                    metrics.backtrack_count)
        return CSPResult(True, found, metrics, list(self.ignored_sections))

    def get_variables(self) -> List[SessionVariable]:
        """Get the list of variables"""
        return self.variables

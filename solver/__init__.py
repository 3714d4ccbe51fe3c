"""Timetable CSP solver package"""
from .csp_solver import CSPSolver
from .config import SolverConfig, ScoringWeights
from .errors import SchedulingError, InfeasibleScheduleError, DataLoadError

__all__ = [
    'CSPSolver', 'SolverConfig', 'ScoringWeights',
    'SchedulingError', 'InfeasibleScheduleError', 'DataLoadError'
]

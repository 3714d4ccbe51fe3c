"""
Generate a timetable from stored entities and persist it
"""
from typing import Any, Dict, List, Optional

from database.database_manager import DatabaseManager
from models.data_models import CSPResult, EntitySnapshot
from solver.config import SolverConfig, get_logger
from solver.csp_solver import CSPSolver
from solver.errors import InfeasibleScheduleError

logger = get_logger("timetable_service")


class TimetableService:
    def __init__(self, db: DatabaseManager, config: Optional[SolverConfig] = None):
        self.db = db
        self.config = config
        self.snapshot: Optional[EntitySnapshot] = None

    def generate(self) -> CSPResult:
        solver = CSPSolver.from_loader(self.db.load_snapshot, self.config)
        self.snapshot = solver.snapshot
        return solver.solve()

    def generate_and_save(self) -> CSPResult:
        """Solve and store the entries; the previous timetable is always cleared"""
        self.db.clear_timetable()
        result = self.generate()
        if not result.success:
            raise InfeasibleScheduleError(result=result)
        saved = self.db.save_timetable(result.assignments)
        logger.info("Saved %d timetable entries", saved)
        return result

    def get_all(self) -> List[Dict[str, Any]]:
        return self.db.get_timetable_entries()

"""
Main window for the timetable scheduler application
"""
import json
import logging
from pathlib import Path
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QPushButton, QTextEdit, QLabel, QFileDialog, QMessageBox,
    QProgressBar, QTabWidget
)
from PyQt6.QtCore import Qt, QObject, QThread, pyqtSignal
from database.csv_importer import import_csv_directory
from database.database_manager import DatabaseManager
from solver.csp_solver import CSPSolver
from solver.errors import SchedulingError
from solver.report import format_result, timetable_to_json
from gui.timetable_viewer import TimetableViewer


class LogEmitter(QObject):
    message = pyqtSignal(str)


class QtLogHandler(logging.Handler):
    """Forwards log records to the output pane, from any thread"""

    def __init__(self):
        super().__init__()
        self.emitter = LogEmitter()
        self.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    def emit(self, record):
        self.emitter.message.emit(self.format(record))


class SolverThread(QThread):
    """Thread for running the solver"""
    completed = pyqtSignal(object)
    status = pyqtSignal(str)

    def __init__(self, solver):
        super().__init__()
        self.solver = solver

    def run(self):
        try:
            self.status.emit("Searching for a timetable...")
            result = self.solver.solve()
            self.completed.emit(result)
        except Exception as e:
            self.status.emit(f"Solver error: {e}")
            self.completed.emit(None)


class SolverTab(QWidget):
    """Tab for solving timetable scheduling"""

    solution_ready = pyqtSignal()

    def __init__(self):
        super().__init__()
        self.db_manager = None
        self.solver = None
        self.result = None
        self.result_snapshot = None
        self.solver_thread = None

        self.log_handler = QtLogHandler()
        self.log_handler.emitter.message.connect(self.log)
        logging.getLogger("timetable").addHandler(self.log_handler)

        self.init_ui()

    def init_ui(self):
        layout = QVBoxLayout(self)

        title_label = QLabel("Weekly Section Timetable")
        title_label.setStyleSheet("font-size: 16px; font-weight: bold; padding: 8px;")
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title_label)

        button_layout = QHBoxLayout()

        self.load_btn = QPushButton("Load Database")
        self.load_btn.clicked.connect(self.load_database)
        button_layout.addWidget(self.load_btn)

        self.import_btn = QPushButton("Import CSV Folder")
        self.import_btn.clicked.connect(self.import_csv)
        self.import_btn.setEnabled(False)
        button_layout.addWidget(self.import_btn)

        self.solve_btn = QPushButton("Generate")
        self.solve_btn.clicked.connect(self.solve)
        self.solve_btn.setEnabled(False)
        button_layout.addWidget(self.solve_btn)

        self.export_btn = QPushButton("Export JSON")
        self.export_btn.clicked.connect(self.export_json)
        self.export_btn.setEnabled(False)
        button_layout.addWidget(self.export_btn)

        layout.addLayout(button_layout)

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        layout.addWidget(self.progress_bar)

        self.status_label = QLabel("Open a database to begin")
        self.status_label.setStyleSheet("padding: 4px; color: #444;")
        layout.addWidget(self.status_label)

        self.metrics_label = QLabel("")
        self.metrics_label.setStyleSheet("padding: 5px; font-family: monospace;")
        layout.addWidget(self.metrics_label)

        self.output_text = QTextEdit()
        self.output_text.setReadOnly(True)
        self.output_text.setStyleSheet("font-family: monospace;")
        layout.addWidget(self.output_text)

    def log(self, message: str):
        """Append message to output"""
        self.output_text.append(message)

    def load_database(self):
        """Open (or create) a database file"""
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            "Select Database File",
            "",
            "Database Files (*.db);;All Files (*)",
            options=QFileDialog.Option.DontConfirmOverwrite
        )

        if not file_path:
            return

        try:
            if self.db_manager:
                self.db_manager.close()
            self.db_manager = DatabaseManager(file_path)
            self.db_manager.create_schema()
            self.prepare_solver()
            self.import_btn.setEnabled(True)
            self.status_label.setText(f"Using {Path(file_path).name}")
        except SchedulingError as e:
            QMessageBox.critical(self, "Error", f"Failed to load database:\n{str(e)}")

    def import_csv(self):
        """Replace entities with the CSV files of a folder"""
        directory = QFileDialog.getExistingDirectory(self, "Select CSV Folder")
        if not directory or not self.db_manager:
            return

        try:
            counts = import_csv_directory(self.db_manager, directory)
            self.log(f"Imported: {counts}")
            self.prepare_solver()
        except (SchedulingError, OSError, ValueError) as e:
            QMessageBox.critical(self, "Error", f"Failed to import CSV files:\n{str(e)}")

    def prepare_solver(self):
        """Load the entity snapshot on this thread, solving happens on the worker"""
        self.solver = CSPSolver.from_loader(self.db_manager.load_snapshot)
        snapshot = self.solver.snapshot

        self.log(f"-- snapshot: {len(snapshot.courses)} courses, {len(snapshot.sections)} sections, "
                 f"{len(snapshot.instructors)} instructors, {len(snapshot.rooms)} rooms, "
                 f"{len(snapshot.time_slots)} time slots")

        self.solve_btn.setEnabled(bool(snapshot.sections))

    def solve(self):
        """Solve the CSP"""
        if not self.solver:
            return

        self.solve_btn.setEnabled(False)
        self.load_btn.setEnabled(False)
        self.import_btn.setEnabled(False)
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, 0)

        self.solver_thread = SolverThread(self.solver)
        self.solver_thread.status.connect(self.on_status)
        self.solver_thread.completed.connect(self.on_solve_finished)
        self.solver_thread.start()

    def on_status(self, message: str):
        """Show worker status"""
        self.status_label.setText(message)
        self.log(message)

    def on_solve_finished(self, result):
        """Handle solver completion"""
        self.progress_bar.setVisible(False)
        self.solve_btn.setEnabled(True)
        self.load_btn.setEnabled(True)
        self.import_btn.setEnabled(True)

        if result is None:
            self.status_label.setText("Solver stopped with an error")
            return

        self.result = result
        self.show_metrics(result)
        self.result_snapshot = self.solver.snapshot

        try:
            self.db_manager.clear_timetable()
            if result.success:
                self.db_manager.save_timetable(result.assignments)
        except SchedulingError as e:
            self.log(f"Error saving timetable: {str(e)}")

        for line in format_result(self.result_snapshot, result):
            self.log(line)

        if result.success:
            self.status_label.setText(
                f"Scheduled {result.metrics.assignment_count} sessions in {result.solve_seconds:.2f}s")
            self.export_btn.setEnabled(True)
            self.solution_ready.emit()
        else:
            self.status_label.setText("Infeasible: no timetable satisfies the hard constraints")
            self.export_btn.setEnabled(False)
            QMessageBox.warning(self, "Infeasible", "No timetable satisfies every hard constraint.")

        # next run starts from a fresh snapshot
        try:
            self.prepare_solver()
        except SchedulingError as e:
            self.log(f"Error reloading data: {str(e)}")
            self.solve_btn.setEnabled(False)

    def show_metrics(self, result):
        m = result.metrics
        phases = ", ".join(f"{name} {secs * 1000:.1f}ms" for name, secs in m.phase_seconds.items())
        self.metrics_label.setText(
            f"Assignments: {m.assignment_count}/{m.variable_count}   "
            f"Soft score: {m.total_soft_score}   Backtracks: {m.backtrack_count}   "
            f"Fallbacks: {m.fallback_count}\n"
            f"Domains: min {m.domain_stats.min} / max {m.domain_stats.max} / "
            f"avg {m.domain_stats.average:.1f}   {phases}"
        )

    def export_json(self):
        """Export result to JSON"""
        json_data = self.get_result_json()
        if not json_data:
            return

        file_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Timetable",
            "timetable.json",
            "JSON Files (*.json);;All Files (*)"
        )

        if not file_path:
            return

        try:
            with open(file_path, 'w') as f:
                json.dump(json_data, f, indent=2)

            self.log(f"Timetable written to {file_path}")
            self.status_label.setText(f"Wrote {Path(file_path).name}")
        except OSError as e:
            QMessageBox.critical(self, "Error", f"Failed to export JSON:\n{str(e)}")

    def get_result_json(self) -> dict:
        """Get the generated JSON data"""
        if self.result and self.result.success:
            return timetable_to_json(self.result_snapshot, self.result)
        return None


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.init_ui()

    def init_ui(self):
        self.setWindowTitle("Section Timetable Scheduler")
        self.resize(1280, 860)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        layout = QVBoxLayout(central_widget)

        self.tabs = QTabWidget()

        self.solver_tab = SolverTab()
        self.tabs.addTab(self.solver_tab, "Generate")

        self.viewer_tab = TimetableViewer()
        self.tabs.addTab(self.viewer_tab, "Calendar")

        button_layout = QHBoxLayout()
        self.view_result_btn = QPushButton("Open in Calendar")
        self.view_result_btn.clicked.connect(self.view_current_solution)
        self.view_result_btn.setEnabled(False)
        button_layout.addStretch()
        button_layout.addWidget(self.view_result_btn)

        self.solver_tab.solution_ready.connect(lambda: self.view_result_btn.setEnabled(True))

        layout.addWidget(self.tabs)
        layout.addLayout(button_layout)

    def view_current_solution(self):
        """Load current solver result into viewer"""
        json_data = self.solver_tab.get_result_json()
        if json_data:
            self.viewer_tab.load_from_result(json_data)
            self.tabs.setCurrentWidget(self.viewer_tab)
        else:
            QMessageBox.warning(
                self,
                "Nothing to show",
                "Generate a timetable first."
            )

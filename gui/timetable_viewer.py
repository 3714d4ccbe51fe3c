"""
Weekly calendar view of a generated timetable
"""
import json
from typing import Dict, List, Optional
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QComboBox, QPushButton,
    QTableWidget, QTableWidgetItem, QHeaderView, QFileDialog, QMessageBox
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor
from solver.scoring import parse_time_minutes

WEEK_DAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

COLORS = [
    "#4361ee", "#7209b7", "#3a0ca3", "#f72585", "#4cc9f0",
    "#2a9d8f", "#e9c46a", "#f4a261", "#e76f51", "#264653",
    "#023e8a", "#0077b6", "#00b4d8", "#90e0ef", "#6a4c93",
]

# filter label -> session record key
FILTERS = {
    "All": None,
    "Course": "courseCode",
    "Instructor": "instructor",
    "Room": "roomName",
    "Section": "sectionId",
}

GRID_STYLE = """
    QTableWidget { gridline-color: #cfd8dc; font-size: 11px; }
    QTableWidget::item { padding: 4px; }
    QHeaderView::section {
        background-color: #37474f;
        color: #eceff1;
        padding: 6px;
        font-weight: bold;
    }
"""


def day_sort_key(day: str):
    for i, name in enumerate(WEEK_DAYS):
        if name.lower().startswith(day.lower()[:3]):
            return (i, day)
    return (len(WEEK_DAYS), day)


def start_minutes(time_label: str) -> int:
    return parse_time_minutes(time_label.split(" - ")[0])


class TimetableViewer(QWidget):
    """Days across, time ranges down, one coloured block per session"""

    def __init__(self):
        super().__init__()
        self.data: Optional[dict] = None
        self.days: List[str] = []
        self.times: List[str] = []
        self.course_colors: Dict[str, QColor] = {}

        layout = QVBoxLayout(self)
        layout.addLayout(self.build_toolbar())

        self.grid = QTableWidget()
        self.grid.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.grid.setStyleSheet(GRID_STYLE)
        layout.addWidget(self.grid)

        self.summary_label = QLabel("Open a timetable JSON export or generate one")
        self.summary_label.setStyleSheet("padding: 4px; color: #555;")
        layout.addWidget(self.summary_label)

    def build_toolbar(self) -> QHBoxLayout:
        bar = QHBoxLayout()

        open_btn = QPushButton("Open JSON...")
        open_btn.clicked.connect(self.load_timetable)
        bar.addWidget(open_btn)

        bar.addWidget(QLabel("Show:"))
        self.filter_type_combo = QComboBox()
        self.filter_type_combo.addItems(list(FILTERS))
        self.filter_type_combo.setEnabled(False)
        self.filter_type_combo.currentIndexChanged.connect(self.on_filter_type_changed)
        bar.addWidget(self.filter_type_combo)

        self.filter_value_combo = QComboBox()
        self.filter_value_combo.setEnabled(False)
        self.filter_value_combo.currentIndexChanged.connect(self.refresh_table)
        bar.addWidget(self.filter_value_combo)

        bar.addStretch()
        return bar

    def load_timetable(self):
        """Pick an exported file and show it"""
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open Timetable", "", "JSON Files (*.json);;All Files (*)"
        )
        if not file_path:
            return

        try:
            with open(file_path) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Error", f"Could not read {file_path}:\n{e}")
            return

        if not data.get("success", False):
            QMessageBox.warning(self, "Infeasible", "This export holds no feasible timetable.")
            return

        self.load_from_result(data)

    def sessions(self) -> List[Dict]:
        return self.data.get("sessions", []) if self.data else []

    def extract_grid_axes(self):
        sessions = self.sessions()
        self.days = sorted({s.get("day", "") for s in sessions}, key=day_sort_key)
        self.times = sorted({s.get("time", "") for s in sessions}, key=start_minutes)

        self.course_colors = {}
        for i, code in enumerate(sorted({s.get("courseCode", "") for s in sessions})):
            self.course_colors[code] = QColor(COLORS[i % len(COLORS)])

    def on_filter_type_changed(self):
        """Refill the value list for the chosen filter"""
        key = FILTERS.get(self.filter_type_combo.currentText())

        self.filter_value_combo.blockSignals(True)
        self.filter_value_combo.clear()
        if key:
            for value in sorted({str(s.get(key, "")) for s in self.sessions()}):
                self.filter_value_combo.addItem(value, value)
        self.filter_value_combo.blockSignals(False)

        self.filter_value_combo.setEnabled(key is not None)
        self.refresh_table()

    def refresh_table(self):
        if not self.data:
            return

        sessions = self.sessions()
        key = FILTERS.get(self.filter_type_combo.currentText())
        value = self.filter_value_combo.currentData()
        if key and value is not None:
            sessions = [s for s in sessions if str(s.get(key, "")) == value]

        self.fill_grid(sessions)

    def fill_grid(self, sessions: List[Dict]):
        cells: Dict[tuple, List[Dict]] = {}
        for s in sessions:
            cells.setdefault((s.get("day", ""), s.get("time", "")), []).append(s)

        self.grid.clear()
        self.grid.setRowCount(len(self.times))
        self.grid.setColumnCount(len(self.days))
        self.grid.setHorizontalHeaderLabels(self.days)
        self.grid.setVerticalHeaderLabels(self.times)

        for row, time_label in enumerate(self.times):
            for col, day in enumerate(self.days):
                block = cells.get((day, time_label))
                if not block:
                    continue
                text = self.describe(block)
                item = QTableWidgetItem(text)
                item.setToolTip(text)
                color = QColor(self.course_colors.get(block[0].get("courseCode", ""), QColor("#90e0ef")))
                color.setAlpha(70)
                item.setBackground(color)
                item.setTextAlignment(Qt.AlignmentFlag.AlignTop | Qt.AlignmentFlag.AlignLeft)
                self.grid.setItem(row, col, item)

        self.grid.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.grid.verticalHeader().setSectionResizeMode(QHeaderView.ResizeMode.ResizeToContents)

    def describe(self, block: List[Dict]) -> str:
        parts = []
        for s in block:
            parts.append(
                f"{s.get('courseCode', '')} {s.get('courseName', '')}\n"
                f"  {s.get('sectionId', '')} session {s.get('sessionNumber', '')}\n"
                f"  {s.get('instructor', '')} @ {s.get('room', '')}"
            )
        return "\n\n".join(parts)

    def load_from_result(self, json_data: dict):
        """Show an export record produced by timetable_to_json"""
        if not json_data.get("success", False):
            self.summary_label.setText("Nothing to show: the run was infeasible")
            return

        self.data = json_data
        self.extract_grid_axes()
        self.filter_type_combo.setEnabled(True)
        self.on_filter_type_changed()

        stats = json_data.get("stats", {})
        metrics = json_data.get("metrics", {})
        self.summary_label.setText(
            f"{stats.get('assignments', 0)} sessions across {stats.get('totalSections', 0)} sections, "
            f"soft score {metrics.get('total_soft_score', 0)}, "
            f"{metrics.get('backtrack_count', 0)} backtracks, "
            f"{stats.get('solveTime', 0):.2f}s"
        )

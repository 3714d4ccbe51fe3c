"""PyQt6 front end: solver tab and weekly calendar viewer"""
from .main_window import MainWindow, QtLogHandler
from .timetable_viewer import TimetableViewer

__all__ = ['MainWindow', 'QtLogHandler', 'TimetableViewer']

"""SISFO academic core: timetable and grading services."""

__version__ = "0.1.0"

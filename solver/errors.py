"""
Errors raised around timetable generation
"""


class SchedulingError(Exception):
    pass


class InfeasibleScheduleError(SchedulingError):
    """No assignment satisfies every hard constraint"""

    def __init__(self, message: str = "No feasible assignment found for given data and constraints",
                 result=None):
        super().__init__(message)
        self.result = result


class DataLoadError(SchedulingError):
    """The entity store could not be read or written"""

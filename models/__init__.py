"""
Data models and Pydantic schemas for the timetable engine and API.
"""
from .schemas import (
    Period,
    Teacher,
    ClassRoom,
    Subject,
    DutyLocation,
    Schedule,
    Duty,
    Absence,
    Substitution,
    TimetableSnapshot,
    SlotKey,
    Commitment,
    Availability,
    Conflict,
    Moment,
    ActiveClassRow,
    DutyRosterEntry,
    ItineraryEntry,
    TeacherAvailability,
    AbsentTeacher,
    UncoveredLesson,
)

__all__ = [
    "Period",
    "Teacher",
    "ClassRoom",
    "Subject",
    "DutyLocation",
    "Schedule",
    "Duty",
    "Absence",
    "Substitution",
    "TimetableSnapshot",
    "SlotKey",
    "Commitment",
    "Availability",
    "Conflict",
    "Moment",
    "ActiveClassRow",
    "DutyRosterEntry",
    "ItineraryEntry",
    "TeacherAvailability",
    "AbsentTeacher",
    "UncoveredLesson",
]

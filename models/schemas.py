from pydantic import BaseModel, Field
from typing import List, Dict, NamedTuple, Optional, Literal
from datetime import date, datetime


HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

CommitmentKind = Literal["lesson", "duty"]
UnavailableReason = Literal["lesson", "duty", "absent"]
# "substituting" is only reported when choosing cover
CandidateReason = Literal["lesson", "duty", "absent", "substituting"]


# ===========================
# Reference Entities
# ===========================

class Period(BaseModel):
    """A bell period. Times are zero-padded 24h "HH:MM" strings."""
    id: int
    order: int
    start_time: str = Field(pattern=HHMM_PATTERN)
    end_time: str = Field(pattern=HHMM_PATTERN)

    class Config:
        frozen = True


class Teacher(BaseModel):
    id: int
    name: str
    surname: str
    branch: str = ""

    class Config:
        frozen = True

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}".strip()


class ClassRoom(BaseModel):
    id: int
    name: str

    class Config:
        frozen = True


class Subject(BaseModel):
    id: int
    name: str

    class Config:
        frozen = True


class DutyLocation(BaseModel):
    id: int
    name: str

    class Config:
        frozen = True


# ===========================
# Commitment Records
# ===========================

class Schedule(BaseModel):
    """A weekly lesson: day_of_week is 1 (Monday) .. 7 (Sunday)"""
    id: int
    day_of_week: int
    period_id: int
    teacher_id: int
    class_id: int
    subject_id: int

    class Config:
        frozen = True


class Duty(BaseModel):
    """Supervision duty. period_id None means the whole day."""
    id: int
    day_of_week: int
    teacher_id: int
    location_id: int
    period_id: Optional[int] = None

    class Config:
        frozen = True


class Absence(BaseModel):
    """Leave record, inclusive on both dates."""
    id: int
    teacher_id: int
    reason: Optional[str] = None
    start_date: date
    end_date: date

    class Config:
        frozen = True


class Substitution(BaseModel):
    """A cover arranged for one lesson on one date"""
    id: int
    absent_teacher_id: int
    substitute_teacher_id: int
    schedule_id: int
    date: date

    class Config:
        frozen = True


class TimetableSnapshot(BaseModel):
    """Fully materialized record sets supplied by data-access collaborators."""
    periods: List[Period] = []
    teachers: List[Teacher] = []
    classes: List[ClassRoom] = []
    subjects: List[Subject] = []
    locations: List[DutyLocation] = []
    schedules: List[Schedule] = []
    duties: List[Duty] = []
    absences: List[Absence] = []
    substitutions: List[Substitution] = []


# ===========================
# Derived Engine Types
# ===========================

class SlotKey(NamedTuple):
    teacher_id: int
    day_of_week: int
    period_id: int


class Commitment(BaseModel):
    """A teacher's lesson or duty at one day/period."""
    kind: CommitmentKind
    teacher_id: int
    day_of_week: int
    period_id: int
    source_id: int  # Schedule.id or Duty.id
    class_id: Optional[int] = None
    subject_id: Optional[int] = None
    location_id: Optional[int] = None
    all_day: bool = False

    class Config:
        frozen = True


class Availability(BaseModel):
    available: bool
    reason: Optional[UnavailableReason] = None


class Conflict(BaseModel):
    """Two or more commitments for the same teacher at the same day/period"""
    teacher_id: int
    day_of_week: int
    period_id: int
    commitments: List[Commitment]


class Moment(BaseModel):
    """A wall-clock reading already converted to engine conventions."""
    date: date
    day_of_week: int
    time: str


# ===========================
# View Rows
# ===========================

class ActiveClassRow(BaseModel):
    class_id: int
    class_name: str
    has_lesson: bool = False
    schedule_id: Optional[int] = None
    teacher_id: Optional[int] = None
    teacher_name: Optional[str] = None
    subject_id: Optional[int] = None
    subject_name: Optional[str] = None


class DutyRosterEntry(BaseModel):
    duty_id: int
    teacher_id: int
    teacher_name: Optional[str] = None
    period_id: Optional[int] = None  # None: all day
    all_day: bool
    active: bool


class ItineraryEntry(BaseModel):
    schedule_id: int
    period_id: int
    period_order: int
    start_time: str
    end_time: str
    class_id: int
    class_name: Optional[str] = None
    subject_id: int
    subject_name: Optional[str] = None
    is_current: bool = False


class TeacherAvailability(BaseModel):
    teacher_id: int
    full_name: str
    branch: str = ""
    available: bool
    reason: Optional[CandidateReason] = None


class AbsentTeacher(BaseModel):
    absence_id: int
    teacher_id: int
    full_name: Optional[str] = None
    branch: Optional[str] = None
    reason: Optional[str] = None
    start_date: date
    end_date: date
    lessons_missed: int


class UncoveredLesson(BaseModel):
    schedule_id: int
    teacher_id: int
    period_id: int
    period_order: Optional[int] = None
    class_id: int
    subject_id: int


# ===========================
# Request Schemas
# ===========================

class SnapshotRequest(BaseModel):
    """Any request carrying a snapshot and an optional reference instant."""
    snapshot: TimetableSnapshot = TimetableSnapshot()
    now: Optional[datetime] = None


class CurrentPeriodRequest(BaseModel):
    periods: List[Period] = []
    time: str = Field(pattern=HHMM_PATTERN)


class AvailabilityRequest(BaseModel):
    snapshot: TimetableSnapshot = TimetableSnapshot()
    teacher_id: int
    day_of_week: int = Field(ge=1, le=7)
    period_id: int
    reference_date: date


class SubstitutionCandidatesRequest(BaseModel):
    snapshot: TimetableSnapshot = TimetableSnapshot()
    day_of_week: int = Field(ge=1, le=7)
    period_id: int
    reference_date: date


# ===========================
# Response Schemas
# ===========================

class CurrentPeriodResponse(BaseModel):
    time: str
    current_period: Optional[Period] = None


class ConflictsResponse(BaseModel):
    count: int
    conflicts: List[Conflict]


class ActiveClassesResponse(BaseModel):
    day_of_week: int
    time: str
    current_period: Optional[Period] = None
    rows: List[ActiveClassRow]


class DutyRosterResponse(BaseModel):
    day_of_week: int
    time: str
    current_period: Optional[Period] = None
    roster: Dict[int, List[DutyRosterEntry]]


class ItineraryResponse(BaseModel):
    teacher_id: int
    day_of_week: int
    entries: List[ItineraryEntry]


class SubstitutionCandidatesResponse(BaseModel):
    day_of_week: int
    period_id: int
    candidates: List[TeacherAvailability]


class AbsentTeachersResponse(BaseModel):
    date: date
    absent_teachers: List[AbsentTeacher]


class UncoveredLessonsResponse(BaseModel):
    date: date
    day_of_week: int
    lessons: List[UncoveredLesson]


class CurrentDayResponse(BaseModel):
    """Everything the dashboard front page needs for one instant."""
    date: date
    day_of_week: int
    time: str
    current_period: Optional[Period] = None
    active_classes: List[ActiveClassRow]
    duty_roster: Dict[int, List[DutyRosterEntry]]
    absent_teachers: List[AbsentTeacher]
    uncovered_lessons: List[UncoveredLesson]
    conflict_count: int

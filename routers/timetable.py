from fastapi import APIRouter
from config import settings
from models.schemas import (
    ActiveClassesResponse, AbsentTeachersResponse, Availability, AvailabilityRequest,
    ConflictsResponse, CurrentDayResponse, CurrentPeriodRequest, CurrentPeriodResponse,
    DutyRosterResponse, ItineraryResponse, SnapshotRequest, SubstitutionCandidatesRequest,
    SubstitutionCandidatesResponse, TimetableSnapshot, UncoveredLessonsResponse
)
from service.clock import current_moment
from service.time_resolver import resolve_current_period
from service.timetable_engine import TimetableEngine

# Create a router instance
router = APIRouter()


def _engine(snapshot: TimetableSnapshot) -> TimetableEngine:
    return TimetableEngine(snapshot, warn_on_period_overlap=settings.warn_on_period_overlap)


def _moment(request: SnapshotRequest):
    return current_moment(settings.timezone, request.now)


@router.post("/periods/current", response_model=CurrentPeriodResponse)
async def current_period(request: CurrentPeriodRequest):
    """
    Resolve which bell period contains the given time.

    A null current_period means the time is outside class hours.
    """
    period = resolve_current_period(request.periods, request.time, settings.warn_on_period_overlap)
    return CurrentPeriodResponse(time=request.time, current_period=period)


@router.post("/availability", response_model=Availability)
async def teacher_availability(request: AvailabilityRequest):
    """Whether a teacher is free at a day/period; reason is lesson, duty or absent otherwise."""
    engine = _engine(request.snapshot)
    return engine.availability(
        request.teacher_id, request.day_of_week, request.period_id, request.reference_date
    )


@router.post("/conflicts", response_model=ConflictsResponse)
async def conflicts(request: SnapshotRequest):
    """List every teacher/day/period holding more than one commitment."""
    found = _engine(request.snapshot).conflicts()
    return ConflictsResponse(count=len(found), conflicts=found)


@router.post("/dashboard/active-classes", response_model=ActiveClassesResponse)
async def active_classes(request: SnapshotRequest):
    """One row per class with the lesson running now, if any."""
    engine = _engine(request.snapshot)
    moment = _moment(request)
    return ActiveClassesResponse(
        day_of_week=moment.day_of_week,
        time=moment.time,
        current_period=engine.current_period(moment.time),
        rows=engine.active_lessons(moment.day_of_week, moment.time),
    )


@router.post("/dashboard/duty-roster", response_model=DutyRosterResponse)
async def duty_roster(request: SnapshotRequest):
    """Today's duties grouped by location, flagged active when they cover the current period."""
    engine = _engine(request.snapshot)
    moment = _moment(request)
    return DutyRosterResponse(
        day_of_week=moment.day_of_week,
        time=moment.time,
        current_period=engine.current_period(moment.time),
        roster=engine.duty_roster(moment.day_of_week, moment.time),
    )


@router.post("/teachers/{teacher_id}/itinerary", response_model=ItineraryResponse)
async def teacher_itinerary(teacher_id: int, request: SnapshotRequest):
    """The teacher's lessons for today in period order."""
    engine = _engine(request.snapshot)
    moment = _moment(request)
    itinerary = engine.itinerary(teacher_id, moment.day_of_week, moment.time)
    return ItineraryResponse(
        teacher_id=teacher_id,
        day_of_week=moment.day_of_week,
        entries=list(itinerary),
    )


@router.post("/substitutions/candidates", response_model=SubstitutionCandidatesResponse)
async def substitution_candidates(request: SubstitutionCandidatesRequest):
    """All teachers with their availability for covering one period, free teachers first."""
    engine = _engine(request.snapshot)
    return SubstitutionCandidatesResponse(
        day_of_week=request.day_of_week,
        period_id=request.period_id,
        candidates=engine.substitution_candidates(
            request.day_of_week, request.period_id, request.reference_date
        ),
    )


@router.post("/substitutions/uncovered", response_model=UncoveredLessonsResponse)
async def uncovered(request: SnapshotRequest):
    """Today's lessons of absent teachers that nobody covers yet."""
    engine = _engine(request.snapshot)
    moment = _moment(request)
    return UncoveredLessonsResponse(
        date=moment.date,
        day_of_week=moment.day_of_week,
        lessons=engine.uncovered_lessons(moment.date, moment.day_of_week),
    )


@router.post("/dashboard/absent-teachers", response_model=AbsentTeachersResponse)
async def absent_teachers(request: SnapshotRequest):
    engine = _engine(request.snapshot)
    moment = _moment(request)
    return AbsentTeachersResponse(
        date=moment.date,
        absent_teachers=engine.absent_teachers(moment.date, moment.day_of_week),
    )


@router.post("/dashboard/current-day", response_model=CurrentDayResponse)
async def current_day(request: SnapshotRequest):
    """Combined front-page view: current period, classes, duties, absences and cover gaps."""
    engine = _engine(request.snapshot)
    return engine.current_day(_moment(request))

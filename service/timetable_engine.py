"""
Timetable resolution and availability engine.

This module exposes the engine as one object built from a snapshot of
periods, schedules, duties and absences. The commitment index is built
once in the constructor and every query is answered from it.
"""

from datetime import date
from typing import Dict, List, Optional
import logging

from models.schemas import (
    AbsentTeacher, ActiveClassRow, Availability, Conflict, CurrentDayResponse,
    DutyRosterEntry, Moment, Period, TeacherAvailability, TimetableSnapshot,
    UncoveredLesson
)
from service.availability import find_conflicts, is_available
from service.commitment_index import build_index
from service.time_resolver import resolve_current_period
from service.views import (
    TeacherItinerary, absent_teachers, active_lessons_by_class,
    duty_roster_by_location, substitution_candidates, uncovered_lessons
)

logger = logging.getLogger(__name__)


class TimetableEngine:
    """
    Read-only query surface over one timetable snapshot.

    The snapshot is never modified. Build a new engine whenever the
    underlying records change.
    """

    def __init__(self, snapshot: TimetableSnapshot, warn_on_period_overlap: bool = True):
        """
        Initialize the engine.

        Args:
            snapshot: Fully materialized record sets
            warn_on_period_overlap: Log a warning when a time falls in more than one period
        """
        self.snapshot = snapshot
        self.warn_on_period_overlap = warn_on_period_overlap
        self.index = build_index(snapshot.schedules, snapshot.duties, snapshot.periods)

    def current_period(self, time: str) -> Optional[Period]:
        return resolve_current_period(self.snapshot.periods, time, self.warn_on_period_overlap)

    def availability(
        self, teacher_id: int, day_of_week: int, period_id: int, reference_date: date
    ) -> Availability:
        return is_available(
            teacher_id, day_of_week, period_id, self.index, self.snapshot.absences, reference_date
        )

    def conflicts(self) -> List[Conflict]:
        return find_conflicts(self.index)

    def active_lessons(self, day_of_week: int, time: str) -> List[ActiveClassRow]:
        return active_lessons_by_class(
            self.snapshot.classes,
            self.index,
            day_of_week,
            self.current_period(time),
            self.snapshot.teachers,
            self.snapshot.subjects,
        )

    def duty_roster(self, day_of_week: int, time: str) -> Dict[int, List[DutyRosterEntry]]:
        return duty_roster_by_location(
            self.snapshot.duties,
            day_of_week,
            self.current_period(time),
            self.snapshot.locations,
            self.snapshot.teachers,
        )

    def itinerary(self, teacher_id: int, day_of_week: int, time: Optional[str] = None) -> TeacherItinerary:
        current = self.current_period(time) if time else None
        return TeacherItinerary(
            teacher_id,
            day_of_week,
            self.index,
            self.snapshot.periods,
            current,
            self.snapshot.classes,
            self.snapshot.subjects,
        )

    def substitution_candidates(
        self, day_of_week: int, period_id: int, reference_date: date
    ) -> List[TeacherAvailability]:
        return substitution_candidates(
            self.snapshot.teachers, day_of_week, period_id, self.index,
            self.snapshot.absences, reference_date,
            self.snapshot.substitutions, self.snapshot.schedules,
        )

    def absent_teachers(self, reference_date: date, day_of_week: int) -> List[AbsentTeacher]:
        return absent_teachers(
            self.snapshot.absences, reference_date, day_of_week, self.index, self.snapshot.teachers
        )

    def uncovered_lessons(self, reference_date: date, day_of_week: int) -> List[UncoveredLesson]:
        return uncovered_lessons(
            self.index,
            self.snapshot.absences,
            self.snapshot.substitutions,
            reference_date,
            day_of_week,
            self.snapshot.periods,
        )

    def current_day(self, moment: Moment) -> CurrentDayResponse:
        """Combined dashboard view for one instant."""
        current = self.current_period(moment.time)
        if current is None:
            logger.debug(f"No active period at {moment.time}")

        return CurrentDayResponse(
            date=moment.date,
            day_of_week=moment.day_of_week,
            time=moment.time,
            current_period=current,
            active_classes=active_lessons_by_class(
                self.snapshot.classes, self.index, moment.day_of_week, current,
                self.snapshot.teachers, self.snapshot.subjects,
            ),
            duty_roster=duty_roster_by_location(
                self.snapshot.duties, moment.day_of_week, current,
                self.snapshot.locations, self.snapshot.teachers,
            ),
            absent_teachers=self.absent_teachers(moment.date, moment.day_of_week),
            uncovered_lessons=self.uncovered_lessons(moment.date, moment.day_of_week),
            conflict_count=len(self.conflicts()),
        )

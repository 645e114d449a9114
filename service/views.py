"""
Read-only projections over the commitment index.

Each view is recomputed from its inputs on every call and holds no state.
"""

from datetime import date
from typing import Dict, Iterable, Iterator, List, Optional
import logging

from models.schemas import (
    Absence, AbsentTeacher, ActiveClassRow, ClassRoom, Commitment, Duty,
    DutyLocation, DutyRosterEntry, ItineraryEntry, Period, Subject,
    Schedule, SlotKey, Substitution, Teacher, TeacherAvailability, UncoveredLesson
)
from service.availability import absences_on, is_available
from service.commitment_index import CommitmentIndex
from service.time_resolver import sorted_periods

logger = logging.getLogger(__name__)


def _names(entities) -> Dict[int, str]:
    return {e.id: e.name for e in entities}


def _teacher_names(teachers: Iterable[Teacher]) -> Dict[int, str]:
    return {t.id: t.full_name for t in teachers}


def _lessons_on(index: CommitmentIndex, day_of_week: int) -> Iterator[Commitment]:
    for key, commitments in index.items():
        if key.day_of_week != day_of_week:
            continue
        for commitment in commitments:
            if commitment.kind == "lesson":
                yield commitment


# ===========================
# Active Lesson Per Class
# ===========================

def active_lessons_by_class(
    classes: Iterable[ClassRoom],
    index: CommitmentIndex,
    day_of_week: int,
    current_period: Optional[Period],
    teachers: Iterable[Teacher] = (),
    subjects: Iterable[Subject] = (),
) -> List[ActiveClassRow]:
    """
    One row per known class, in catalog order.

    A class with two lessons at the same period shows the one with the
    lowest schedule id.
    """
    occupying: Dict[int, Commitment] = {}
    if current_period is not None:
        for lesson in _lessons_on(index, day_of_week):
            if lesson.period_id != current_period.id:
                continue
            held = occupying.get(lesson.class_id)
            if held is None or lesson.source_id < held.source_id:
                occupying[lesson.class_id] = lesson

    teacher_names = _teacher_names(teachers)
    subject_names = _names(subjects)

    rows = []
    for class_room in classes:
        lesson = occupying.get(class_room.id)
        if lesson is None:
            rows.append(ActiveClassRow(class_id=class_room.id, class_name=class_room.name))
            continue
        rows.append(ActiveClassRow(
            class_id=class_room.id,
            class_name=class_room.name,
            has_lesson=True,
            schedule_id=lesson.source_id,
            teacher_id=lesson.teacher_id,
            teacher_name=teacher_names.get(lesson.teacher_id),
            subject_id=lesson.subject_id,
            subject_name=subject_names.get(lesson.subject_id),
        ))
    return rows


# ===========================
# Duty Roster By Location
# ===========================

def is_duty_active(duty: Duty, current_period: Optional[Period]) -> bool:
    """All-day duties are always active; others only in their own period."""
    if duty.period_id is None:
        return True
    return current_period is not None and duty.period_id == current_period.id


def duty_roster_by_location(
    duties: Iterable[Duty],
    day_of_week: int,
    current_period: Optional[Period],
    locations: Iterable[DutyLocation] = (),
    teachers: Iterable[Teacher] = (),
) -> Dict[int, List[DutyRosterEntry]]:
    """
    Today's duties keyed by location id.

    Known locations come first and are always present, even when nobody
    is posted there.
    """
    roster: Dict[int, List[DutyRosterEntry]] = {loc.id: [] for loc in locations}
    teacher_names = _teacher_names(teachers)

    for duty in duties:
        if duty.day_of_week != day_of_week:
            continue
        if duty.location_id not in roster:
            roster[duty.location_id] = []
        roster[duty.location_id].append(DutyRosterEntry(
            duty_id=duty.id,
            teacher_id=duty.teacher_id,
            teacher_name=teacher_names.get(duty.teacher_id),
            period_id=duty.period_id,
            all_day=duty.period_id is None,
            active=is_duty_active(duty, current_period),
        ))
    return roster


# ===========================
# Teacher Daily Itinerary
# ===========================

class TeacherItinerary:
    """
    A teacher's lessons for one day, ordered by period.

    Iterable any number of times; each pass walks the index again.
    Lessons in periods missing from the catalog are skipped.
    """

    def __init__(
        self,
        teacher_id: int,
        day_of_week: int,
        index: CommitmentIndex,
        periods: Iterable[Period],
        current_period: Optional[Period] = None,
        classes: Iterable[ClassRoom] = (),
        subjects: Iterable[Subject] = (),
    ):
        self.teacher_id = teacher_id
        self.day_of_week = day_of_week
        self.current_period = current_period
        self._index = index
        self._periods = sorted_periods(periods)
        self._class_names = _names(classes)
        self._subject_names = _names(subjects)

    def __iter__(self) -> Iterator[ItineraryEntry]:
        for period in self._periods:
            commitments = self._index.get(SlotKey(self.teacher_id, self.day_of_week, period.id), [])
            for lesson in commitments:
                if lesson.kind != "lesson":
                    continue
                yield ItineraryEntry(
                    schedule_id=lesson.source_id,
                    period_id=period.id,
                    period_order=period.order,
                    start_time=period.start_time,
                    end_time=period.end_time,
                    class_id=lesson.class_id,
                    class_name=self._class_names.get(lesson.class_id),
                    subject_id=lesson.subject_id,
                    subject_name=self._subject_names.get(lesson.subject_id),
                    is_current=self.current_period is not None and period.id == self.current_period.id,
                )

    def __repr__(self) -> str:
        return f"TeacherItinerary(teacher_id={self.teacher_id}, day_of_week={self.day_of_week})"


# ===========================
# Substitution Support
# ===========================

def substitution_candidates(
    teachers: Iterable[Teacher],
    day_of_week: int,
    period_id: int,
    index: CommitmentIndex,
    absences: Iterable[Absence],
    reference_date: date,
    substitutions: Iterable[Substitution] = (),
    schedules: Iterable[Schedule] = (),
) -> List[TeacherAvailability]:
    """
    Every teacher with their availability; free teachers first.

    A teacher already recorded as covering another lesson in this slot on
    `reference_date` is reported as "substituting".
    """
    absences = list(absences)
    slot_schedules = {
        s.id for s in schedules
        if s.day_of_week == day_of_week and s.period_id == period_id
    }
    substituting = {
        s.substitute_teacher_id for s in substitutions
        if s.date == reference_date and s.schedule_id in slot_schedules
    }

    candidates = []
    for teacher in teachers:
        availability = is_available(teacher.id, day_of_week, period_id, index, absences, reference_date)
        available, reason = availability.available, availability.reason
        if available and teacher.id in substituting:
            available, reason = False, "substituting"
        candidates.append(TeacherAvailability(
            teacher_id=teacher.id,
            full_name=teacher.full_name,
            branch=teacher.branch,
            available=available,
            reason=reason,
        ))
    candidates.sort(key=lambda c: not c.available)
    return candidates


def absent_teachers(
    absences: Iterable[Absence],
    reference_date: date,
    day_of_week: int,
    index: CommitmentIndex,
    teachers: Iterable[Teacher] = (),
) -> List[AbsentTeacher]:
    """
    Teachers absent on a date, each with the number of lessons missed that day.

    One row per teacher. When several absence records cover the date, the
    first one in input order is reported.
    """
    lesson_counts: Dict[int, int] = {}
    for lesson in _lessons_on(index, day_of_week):
        lesson_counts[lesson.teacher_id] = lesson_counts.get(lesson.teacher_id, 0) + 1

    by_id = {t.id: t for t in teachers}
    seen = set()
    rows = []
    for absence in absences_on(absences, reference_date):
        if absence.teacher_id in seen:
            continue
        seen.add(absence.teacher_id)
        teacher = by_id.get(absence.teacher_id)
        rows.append(AbsentTeacher(
            absence_id=absence.id,
            teacher_id=absence.teacher_id,
            full_name=teacher.full_name if teacher else None,
            branch=teacher.branch if teacher else None,
            reason=absence.reason,
            start_date=absence.start_date,
            end_date=absence.end_date,
            lessons_missed=lesson_counts.get(absence.teacher_id, 0),
        ))
    return rows


def uncovered_lessons(
    index: CommitmentIndex,
    absences: Iterable[Absence],
    substitutions: Iterable[Substitution],
    reference_date: date,
    day_of_week: int,
    periods: Iterable[Period] = (),
) -> List[UncoveredLesson]:
    """Lessons of absent teachers on a date that have no substitution yet."""
    absent_ids = {a.teacher_id for a in absences_on(absences, reference_date)}
    covered = {s.schedule_id for s in substitutions if s.date == reference_date}
    orders = {p.id: p.order for p in periods}

    lessons = [
        UncoveredLesson(
            schedule_id=lesson.source_id,
            teacher_id=lesson.teacher_id,
            period_id=lesson.period_id,
            period_order=orders.get(lesson.period_id),
            class_id=lesson.class_id,
            subject_id=lesson.subject_id,
        )
        for lesson in _lessons_on(index, day_of_week)
        if lesson.teacher_id in absent_ids and lesson.source_id not in covered
    ]
    # Periods unknown to the catalog sort last
    lessons.sort(key=lambda l: (l.period_order is None, l.period_order or 0, l.schedule_id))
    if lessons:
        logger.info(f"{len(lessons)} lessons without cover on {reference_date.isoformat()}")
    return lessons

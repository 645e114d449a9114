"""
Availability and conflict resolution over a commitment index.
"""

from datetime import date
from typing import Iterable, List
import logging

from models.schemas import Absence, Availability, Conflict
from service.commitment_index import CommitmentIndex, commitments_at

logger = logging.getLogger(__name__)


def absence_covers(absence: Absence, reference_date: date) -> bool:
    return absence.start_date <= reference_date <= absence.end_date


def absences_on(absences: Iterable[Absence], reference_date: date) -> List[Absence]:
    """All absence records covering `reference_date`."""
    return [a for a in absences if absence_covers(a, reference_date)]


def is_absent(teacher_id: int, absences: Iterable[Absence], reference_date: date) -> bool:
    return any(
        a.teacher_id == teacher_id and absence_covers(a, reference_date)
        for a in absences
    )


def is_available(
    teacher_id: int,
    day_of_week: int,
    period_id: int,
    index: CommitmentIndex,
    absences: Iterable[Absence],
    reference_date: date,
) -> Availability:
    """
    Whether a teacher is free at a day/period on a given date.

    First match wins: lesson, then duty, then absence.
    """
    commitments = commitments_at(index, teacher_id, day_of_week, period_id)

    if any(c.kind == "lesson" for c in commitments):
        return Availability(available=False, reason="lesson")

    if any(c.kind == "duty" for c in commitments):
        return Availability(available=False, reason="duty")

    if is_absent(teacher_id, absences, reference_date):
        return Availability(available=False, reason="absent")

    return Availability(available=True)


def find_conflicts(index: CommitmentIndex) -> List[Conflict]:
    """Every index slot holding two or more commitments, sorted by slot."""
    conflicts = [
        Conflict(
            teacher_id=key.teacher_id,
            day_of_week=key.day_of_week,
            period_id=key.period_id,
            commitments=list(commitments),
        )
        for key, commitments in sorted(index.items(), key=lambda item: tuple(item[0]))
        if len(commitments) > 1
    ]

    if conflicts:
        logger.info(f"Found {len(conflicts)} scheduling conflicts")
    return conflicts

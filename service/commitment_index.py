"""
Commitment index: per (teacher, day, period) list of lessons and duties.
"""

from typing import Dict, Iterable, List
import logging

from models.schemas import Commitment, Duty, Period, Schedule, SlotKey

logger = logging.getLogger(__name__)

CommitmentIndex = Dict[SlotKey, List[Commitment]]


def _register(index: CommitmentIndex, commitment: Commitment) -> None:
    key = SlotKey(commitment.teacher_id, commitment.day_of_week, commitment.period_id)
    if key not in index:
        index[key] = []
    index[key].append(commitment)


def lesson_commitment(schedule: Schedule) -> Commitment:
    return Commitment(
        kind="lesson",
        teacher_id=schedule.teacher_id,
        day_of_week=schedule.day_of_week,
        period_id=schedule.period_id,
        source_id=schedule.id,
        class_id=schedule.class_id,
        subject_id=schedule.subject_id,
    )


def duty_commitments(duty: Duty, periods: Iterable[Period]) -> List[Commitment]:
    """One commitment for a period duty, one per catalog period for an all-day duty."""
    if duty.period_id is not None:
        period_ids = [duty.period_id]
    else:
        period_ids = [p.id for p in periods]

    return [
        Commitment(
            kind="duty",
            teacher_id=duty.teacher_id,
            day_of_week=duty.day_of_week,
            period_id=period_id,
            source_id=duty.id,
            location_id=duty.location_id,
            all_day=duty.period_id is None,
        )
        for period_id in period_ids
    ]


def build_index(
    schedules: Iterable[Schedule],
    duties: Iterable[Duty],
    periods: Iterable[Period],
) -> CommitmentIndex:
    """
    Build the commitment index from raw records.

    Lessons are registered before duties, each in input order. Nothing is
    validated: a day or period that no query asks for simply never matches.
    """
    periods = list(periods)
    index: CommitmentIndex = {}

    for schedule in schedules:
        _register(index, lesson_commitment(schedule))

    for duty in duties:
        for commitment in duty_commitments(duty, periods):
            _register(index, commitment)

    logger.debug(f"Commitment index built: {len(index)} slots")
    return index


def commitments_at(index: CommitmentIndex, teacher_id: int, day_of_week: int, period_id: int) -> List[Commitment]:
    return index.get(SlotKey(teacher_id, day_of_week, period_id), [])

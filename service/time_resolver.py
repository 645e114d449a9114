"""
Time resolver: which bell period contains a wall-clock time.
"""

from typing import Iterable, List, Optional
import logging

from models.schemas import Period

logger = logging.getLogger(__name__)


def sorted_periods(periods: Iterable[Period]) -> List[Period]:
    """Catalog in ascending `order` (stable for equal orders)."""
    return sorted(periods, key=lambda p: p.order)


def period_contains(period: Period, time: str) -> bool:
    """Closed interval at both ends. "HH:MM" strings compare lexicographically."""
    return period.start_time <= time <= period.end_time


def resolve_current_period(
    periods: Iterable[Period], time: str, warn_on_overlap: bool = True
) -> Optional[Period]:
    """
    Return the period whose interval contains `time`, or None outside class hours.

    When more than one period matches, the lowest `order` wins.
    """
    matches = [p for p in sorted_periods(periods) if period_contains(p, time)]
    if not matches:
        return None

    if len(matches) > 1 and warn_on_overlap:
        logger.warning(
            f"{len(matches)} periods contain {time} "
            f"(orders {[p.order for p in matches]}); using order {matches[0].order}"
        )
    return matches[0]

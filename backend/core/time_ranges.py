# backend/core/time_ranges.py

"""
Half-open time interval helpers shared by availability and status checks.
"""

from datetime import datetime


def overlaps(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """
    Check whether [start_a, end_a) and [start_b, end_b) intersect.

    A range ending exactly when the other begins does not overlap it, and
    zero-length or inverted ranges never overlap anything.
    """
    if end_a <= start_a or end_b <= start_b:
        return False
    return start_a < end_b and start_b < end_a


def contains(start: datetime, end: datetime, instant: datetime) -> bool:
    """Check whether an instant falls inside [start, end)"""
    return start <= instant < end

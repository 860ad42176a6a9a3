# timeslots.py
#
# Sections are offered as a day pattern ("Sunday-Tuesday-Thursday") and a time
# range ("08:30 - 10:00", 24h). Two sections clash when they share a weekday
# and their ranges intersect. "N/A" sections take no weekday at all.

import datetime
import re
from typing import FrozenSet, Optional, Tuple

from .constants import DAY_PATTERNS, NO_DAYS, SUMMER_MONTHS, SUMMER_TERM, SemesterType
from .errors import InvalidInputError

TIME_RANGE_RE = re.compile(r"^([0-2][0-9]):([0-5][0-9]) - ([0-2][0-9]):([0-5][0-9])$")
SEMESTER_RE = re.compile(r"^(\d{4})-([1-3])$")


def parse_time(t_str: str) -> int:
    """Converts '08:30' to minutes from midnight."""
    try:
        hours, minutes = (int(part) for part in t_str.split(":"))
    except ValueError:
        raise InvalidInputError(f"Invalid clock time {t_str!r}, expected HH:MM") from None
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise InvalidInputError(f"Invalid clock time {t_str!r}, expected HH:MM")
    return hours * 60 + minutes


def parse_time_range(time_str: str) -> Tuple[int, int]:
    """Converts '08:30 - 10:00' to (510, 600)."""
    match = TIME_RANGE_RE.match(time_str or "")
    if not match:
        raise InvalidInputError(f"{time_str!r} is not a valid time range, use HH:MM - HH:MM")
    start_txt, end_txt = time_str.split(" - ")
    start, end = parse_time(start_txt), parse_time(end_txt)
    if end < start:
        raise InvalidInputError(f"Time range {time_str!r} ends before it starts")
    return start, end


def parse_days(days: str) -> FrozenSet[str]:
    """Weekday names of a day pattern; empty for 'N/A'."""
    if days not in DAY_PATTERNS:
        raise InvalidInputError(f"Unknown day pattern {days!r}")
    if days == NO_DAYS:
        return frozenset()
    return frozenset(days.split("-"))


def ranges_overlap(first: Tuple[int, int], second: Tuple[int, int]) -> bool:
    # Touching ranges (10:00 end, 10:00 start) do not overlap.
    return first[0] < second[1] and second[0] < first[1]


def has_time_conflict(days_a: str, time_a: str, days_b: str, time_b: str) -> bool:
    """True if the two offerings share a weekday and their times intersect."""
    if not parse_days(days_a) & parse_days(days_b):
        return False
    return ranges_overlap(parse_time_range(time_a), parse_time_range(time_b))


def parse_semester(semester_id: str) -> Tuple[int, int]:
    """'2025-3' -> (2025, 3). Term 3 is the summer term."""
    match = SEMESTER_RE.match(semester_id or "")
    if not match:
        raise InvalidInputError(f"{semester_id!r} is not a valid semester, use YYYY-N with N in 1..3")
    return int(match.group(1)), int(match.group(2))


def current_semester_id(today: Optional[datetime.date] = None) -> str:
    """June-August is the summer term, February-May the second term, otherwise the first."""
    today = today or datetime.date.today()
    if today.month in SUMMER_MONTHS:
        term = SUMMER_TERM
    elif 2 <= today.month <= 5:
        term = 2
    else:
        term = 1
    return f"{today.year}-{term}"


def semester_type(semester_id: Optional[str] = None, today: Optional[datetime.date] = None) -> SemesterType:
    """Summer for term 3. Without a semester id the current date decides."""
    _, term = parse_semester(semester_id or current_semester_id(today))
    return SemesterType.SUMMER if term == SUMMER_TERM else SemesterType.REGULAR

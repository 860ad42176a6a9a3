from typing import Callable, Iterable, List, Optional, Set, Tuple

from .constants import (
    CHAIN_WEIGHT,
    FAILED_COURSE_PRIORITY,
    GENERAL_CHAIN_MULTIPLIER,
    IMPROVEMENT_BONUS,
    LAB_BONUS,
    PREFERRED_SUBCATEGORY_BONUS,
    SPECIFIC_REQUEST_BONUS,
    Category,
    Rating,
)
from .models import Course, Preferences
from .run_log import RunLog


def priority_score(course: Course, chain_value: float, preferences: Preferences, failed: Set[str],
                   improving: Optional[Set[str]] = None) -> float:
    """
    Composite ordering score, higher is scheduled first.

    Failed courses get an unbounded score. Everything else starts from the
    weighted chain value and collects bonuses for improvement and specific
    requests, general-mandatory chain importance, labs and preferred areas.
    `improving` is the set of eligible improvement retakes; it defaults to the
    preference list.
    """
    if course.course_id in failed:
        return FAILED_COURSE_PRIORITY

    score = chain_value * CHAIN_WEIGHT
    if improving is None:
        improving = set(preferences.courses_to_improve)
    if course.course_id in improving:
        score += IMPROVEMENT_BONUS
    if course.course_id in preferences.specific_courses:
        score += SPECIFIC_REQUEST_BONUS
    if course.category == Category.GENERAL_MANDATORY and chain_value > 0:
        score += chain_value * GENERAL_CHAIN_MULTIPLIER
    if course.is_lab:
        score += LAB_BONUS
    if course.subcategory is not None and preferences.rating_for(course.subcategory) == Rating.PREFER:
        score += PREFERRED_SUBCATEGORY_BONUS
    return score


def prioritize_courses(courses: Iterable[Course], chain_value: Callable[[str], float], preferences: Preferences,
                       failed: Set[str], log: Optional[RunLog] = None,
                       improving: Optional[Set[str]] = None) -> List[Tuple[Course, float]]:
    """Pair every course with its score, sorted descending (stable for ties)."""
    scored = [(c, priority_score(c, chain_value(c.course_id), preferences, failed, improving)) for c in courses]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    if log is not None:
        log.info("Course priorities", [
            {"courseId": c.course_id, "priority": "inf" if s == FAILED_COURSE_PRIORITY else round(s, 2)}
            for c, s in scored
        ])
    return scored

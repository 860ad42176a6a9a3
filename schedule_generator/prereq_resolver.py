from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Set

from .constants import (
    BASIC_CATEGORIES,
    FAILING_GRADES,
    PASS_MARK,
    SPECIAL_COURSE_RULES,
    Category,
    SemesterType,
)
from .models import Course, Preferences, Student
from .run_log import RunLog

# -----------------------------------------------------------------------------
# Grade semantics
# -----------------------------------------------------------------------------

def is_failing(grade: str) -> bool:
    return grade in FAILING_GRADES


def is_passing(grade: str, category: Optional[Category] = None) -> bool:
    """General-mandatory courses are pass/fail: only 'P' passes them."""
    if category == Category.GENERAL_MANDATORY:
        return grade == PASS_MARK
    return not is_failing(grade)


def _category_of(course_id: str, index: Mapping[str, Course]) -> Optional[Category]:
    course = index.get(course_id)
    return course.category if course else None


def passed_course_ids(student: Student, index: Mapping[str, Course]) -> Set[str]:
    """Courses with at least one passing attempt."""
    return {
        a.course_id
        for a in student.completed_courses
        if is_passing(a.grade, _category_of(a.course_id, index))
    }


def failed_course_ids(student: Student, index: Mapping[str, Course]) -> Set[str]:
    """Courses attempted, never passed, and failed at least once."""
    passed = passed_course_ids(student, index)
    return {
        a.course_id
        for a in student.completed_courses
        if a.course_id not in passed and is_failing(a.grade)
    }


def earned_credit_hours(student: Student, index: Mapping[str, Course]) -> int:
    """
    Earned hours from the attempt history: every passed course counts once,
    the project, training and economics courses included. Courses missing
    from the catalog contribute nothing because their hours are unknown.
    """
    return sum(index[cid].credit_hours for cid in passed_course_ids(student, index) if cid in index)


def student_credit_hours(student: Student, index: Mapping[str, Course]) -> int:
    if student.credit_hours is not None:
        return student.credit_hours
    return earned_credit_hours(student, index)

# -----------------------------------------------------------------------------
# Prerequisites
# -----------------------------------------------------------------------------

def missing_prereqs(course: Course, passed: Set[str]) -> List[str]:
    """Prerequisite ids still lacking a passing attempt, in catalog order."""
    return [p for p in course.prerequisites if p not in passed]


def prereqs_satisfied(course: Course, passed: Set[str]) -> bool:
    return not missing_prereqs(course, passed)


def explain_unmet_prereqs(course: Course, passed: Set[str], index: Mapping[str, Course]) -> str:
    """Human readable list of missing prerequisites, e.g. for the run log."""
    missing = missing_prereqs(course, passed)
    if not missing:
        return ""
    names = [f"{pid} ({index[pid].course_name})" if pid in index else pid for pid in missing]
    return f"{course.course_id} needs " + ", ".join(names)

# -----------------------------------------------------------------------------
# Special per-course rules
# -----------------------------------------------------------------------------

def special_rule_violation(course_id: str, earned_hours: int, sem_type: SemesterType,
                           rules: Optional[Dict[str, dict]] = None) -> Optional[str]:
    """
    Check the credit-hour gate and term restriction of one course.
    Returns a reason string when the rule is broken, otherwise None.
    Schedule composition rules (training alongside projects) are checked by
    the builder and validator, which see the whole schedule.
    """
    rules = SPECIAL_COURSE_RULES if rules is None else rules
    rule = rules.get(course_id)
    if not rule:
        return None
    min_hours = rule.get("min_credit_hours")
    if min_hours is not None and earned_hours < min_hours:
        return f"{course_id} requires {min_hours} earned credit hours (student has {earned_hours})"
    if rule.get("no_summer") and sem_type == SemesterType.SUMMER:
        return f"{course_id} cannot be taken in the summer semester"
    return None

# -----------------------------------------------------------------------------
# Eligibility filter
# -----------------------------------------------------------------------------

@dataclass
class EligibleCourses:
    """
    basic: at most one non-failed basic-category course plus any failed ones
    other: every other eligible course
    failed: ids of failed courses, which must all be scheduled
    unavailable_failed: failed courses that cannot be scheduled this term
        (not offered, or missing from the catalog)
    """

    basic: List[Course] = field(default_factory=list)
    other: List[Course] = field(default_factory=list)
    failed: Set[str] = field(default_factory=set)
    unavailable_failed: List[str] = field(default_factory=list)
    reasons: Dict[str, str] = field(default_factory=dict)   # course id -> why it is eligible

    @property
    def courses(self) -> List[Course]:
        return self.basic + self.other


def eligibility_reason(course: Course, *, passed: Set[str], failed: Set[str], preferences: Preferences,
                       earned_hours: int, sem_type: SemesterType,
                       rules: Optional[Dict[str, dict]] = None) -> Optional[str]:
    """
    Decide whether one course may be registered this term.
    Returns why it is eligible ("failed", "improvement", "requested",
    "prerequisites"), or None.
    """
    cid = course.course_id

    if cid in failed:
        return "failed"
    if cid in passed:
        # Improvement is a retake of a course already passed
        return "improvement" if cid in preferences.courses_to_improve else None
    if cid in preferences.specific_courses:
        return "requested"
    if not prereqs_satisfied(course, passed):
        return None
    if special_rule_violation(cid, earned_hours, sem_type, rules):
        return None
    return "prerequisites"


def filter_eligible_courses(index: Mapping[str, Course], student: Student, preferences: Preferences,
                            sem_type: SemesterType, chain_value: Callable[[str], float],
                            log: Optional[RunLog] = None,
                            rules: Optional[Dict[str, dict]] = None) -> EligibleCourses:
    """
    Split the offered catalog into the courses the student may take.

    Only courses with at least one offered section are considered. Of the
    basic-category candidates only the one with the highest chain value is
    kept, together with any failed basic course (failed courses are never
    dropped).
    """
    log = log or RunLog()
    passed = passed_course_ids(student, index)
    failed = failed_course_ids(student, index)
    earned = student_credit_hours(student, index)

    result = EligibleCourses(failed={cid for cid in failed if cid in index})
    basic_candidates: List[Course] = []

    for course in index.values():
        if not course.sections:
            continue
        reason = eligibility_reason(
            course, passed=passed, failed=failed, preferences=preferences,
            earned_hours=earned, sem_type=sem_type, rules=rules,
        )
        if reason is None:
            unmet = explain_unmet_prereqs(course, passed, index)
            blocked = special_rule_violation(course.course_id, earned, sem_type, rules)
            if unmet or blocked:
                log.debug(f"Not eligible: {course.course_id}", {"unmet": unmet, "rule": blocked})
            continue

        result.reasons[course.course_id] = reason
        if course.category in BASIC_CATEGORIES:
            if reason == "failed":
                result.basic.append(course)
            else:
                basic_candidates.append(course)
        else:
            result.other.append(course)

    if basic_candidates:
        # max() keeps the first of equal values, so catalog order breaks ties
        best = max(basic_candidates, key=lambda c: chain_value(c.course_id))
        result.basic.append(best)
        dropped = [c.course_id for c in basic_candidates if c is not best]
        for cid in dropped:
            result.reasons.pop(cid, None)
        log.debug("Basic category pool", {"kept": best.course_id, "dropped": dropped})

    missing_failed = sorted(failed - set(index))
    if missing_failed:
        log.warning("Failed courses missing from the catalog", {"courseIds": missing_failed})
    unoffered = sorted(cid for cid in result.failed if not index[cid].sections)
    if unoffered:
        log.warning("Failed courses not offered this semester", {"courseIds": unoffered})
    result.unavailable_failed = missing_failed + unoffered
    result.failed -= set(unoffered)

    log.info("Eligible courses", {
        "basic": [c.course_id for c in result.basic],
        "other": [c.course_id for c in result.other],
        "failed": sorted(result.failed),
        "unavailableFailed": result.unavailable_failed,
        "earnedCreditHours": earned,
    })
    return result

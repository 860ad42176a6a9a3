"""
Independent re-check of every hard constraint on a candidate schedule.

validate_schedule() never trusts the builder: it recounts credits, category
quotas, labs, special course rules and elective groups, and rescans every
pair of sections for time conflicts. The builder calls it to accept or
reject an attempt, and generate_schedule() calls it again as the final gate.
"""

from itertools import combinations
from typing import Dict, Iterable, List, Optional

from .constants import (
    BASIC_CATEGORIES,
    CATEGORY_CONSTRAINTS,
    LAB_CONSTRAINTS,
    MAX_BASIC_COURSES,
    MAX_PER_BASIC_CATEGORY,
    SEMESTER_CONSTRAINTS,
    SPECIAL_COURSE_RULES,
    Category,
    SemesterType,
)
from .models import Schedule
from .prereq_resolver import special_rule_violation
from .timeslots import has_time_conflict

CHECK_NAMES = (
    "credit_hours",
    "category_limits",
    "category_distribution",
    "lab_distribution",
    "special_rules",
    "university_electives",
    "time_conflicts",
    "failed_courses_included",
)


def check_credit_hours(schedule: Schedule, sem_type: SemesterType, **_) -> List[str]:
    bounds = SEMESTER_CONSTRAINTS[sem_type]
    if not len(schedule):
        return ["Schedule has no courses"]
    total = schedule.total_credits
    if not bounds["min_credits"] <= total <= bounds["max_credits"]:
        return [f"Total credits ({total}) outside {bounds['min_credits']}-{bounds['max_credits']}"]
    return []


def check_category_limits(schedule: Schedule, **_) -> List[str]:
    limit = CATEGORY_CONSTRAINTS[Category.MAJOR_ELECTIVE]["max_courses"]
    count = sum(1 for sc in schedule if sc.category == Category.MAJOR_ELECTIVE)
    if count > limit:
        return [f"{count} major electives exceed the limit of {limit}"]
    return []


def check_category_distribution(schedule: Schedule, **_) -> List[str]:
    reasons = []
    basic = [sc for sc in schedule if sc.category in BASIC_CATEGORIES]
    if len(basic) > MAX_BASIC_COURSES:
        reasons.append(f"{len(basic)} basic-category courses exceed the limit of {MAX_BASIC_COURSES}")
    for category in sorted(BASIC_CATEGORIES, key=lambda c: c.value):
        count = sum(1 for sc in basic if sc.category == category)
        if count > MAX_PER_BASIC_CATEGORY:
            reasons.append(f"{count} {category.value} courses exceed the limit of {MAX_PER_BASIC_CATEGORY}")
    return reasons


def check_lab_distribution(schedule: Schedule, sem_type: SemesterType,
                           lab_limits: Optional[Dict[str, int]] = None, **_) -> List[str]:
    limits = lab_limits or LAB_CONSTRAINTS
    labs = sum(1 for sc in schedule if sc.course.is_lab)
    reasons = []
    if labs > limits["max_labs"]:
        reasons.append(f"{labs} labs exceed the limit of {limits['max_labs']}")
    if sem_type == SemesterType.REGULAR and labs < limits["min_labs"]:
        reasons.append(f"{labs} labs, at least {limits['min_labs']} required in a regular semester")
    return reasons


def check_special_rules(schedule: Schedule, sem_type: SemesterType, earned_hours: int = 0,
                        special_rules: Optional[Dict[str, dict]] = None, **_) -> List[str]:
    rules = SPECIAL_COURSE_RULES if special_rules is None else special_rules
    reasons = []
    for sc in schedule:
        violation = special_rule_violation(sc.course_id, earned_hours, sem_type, rules)
        if violation:
            reasons.append(violation)
        companions = rules.get(sc.course_id, {}).get("regular_allowed_with")
        if companions is not None and sem_type == SemesterType.REGULAR:
            others = [cid for cid in schedule.course_ids if cid != sc.course_id and cid not in companions]
            if others:
                reasons.append(f"{sc.course_id} may only be combined with {', '.join(companions)} "
                               f"in a regular semester (found {', '.join(others)})")
    return reasons


def check_university_electives(schedule: Schedule, **_) -> List[str]:
    limits = CATEGORY_CONSTRAINTS[Category.UNIVERSITY_ELECTIVE]
    electives = [sc for sc in schedule if sc.category == Category.UNIVERSITY_ELECTIVE]
    reasons = []
    if len(electives) > limits["max_courses"]:
        reasons.append(f"{len(electives)} university electives exceed the limit of {limits['max_courses']}")
    per_group: Dict[str, List[str]] = {}
    for sc in electives:
        group = sc.course.elective_group
        if group is not None:
            per_group.setdefault(group.value, []).append(sc.course_id)
    for group, ids in sorted(per_group.items()):
        if len(ids) > limits["max_per_group"]:
            reasons.append(f"Elective {group} has {len(ids)} courses ({', '.join(ids)}), "
                           f"limit {limits['max_per_group']}")
    return reasons


def check_time_conflicts(schedule: Schedule, **_) -> List[str]:
    return [
        f"{a.course_id} ({a.days} {a.time}) conflicts with {b.course_id} ({b.days} {b.time})"
        for a, b in combinations(schedule.courses, 2)
        if has_time_conflict(a.days, a.time, b.days, b.time)
    ]


def check_failed_courses_included(schedule: Schedule, failed: Iterable[str] = (), **_) -> List[str]:
    scheduled = set(schedule.course_ids)
    return [f"Failed course {cid} is missing from the schedule" for cid in sorted(failed) if cid not in scheduled]


CHECKS = {
    "credit_hours": check_credit_hours,
    "category_limits": check_category_limits,
    "category_distribution": check_category_distribution,
    "lab_distribution": check_lab_distribution,
    "special_rules": check_special_rules,
    "university_electives": check_university_electives,
    "time_conflicts": check_time_conflicts,
    "failed_courses_included": check_failed_courses_included,
}


def validate_schedule(schedule: Schedule, sem_type: SemesterType, earned_hours: int = 0,
                      failed: Iterable[str] = (), lab_limits: Optional[Dict[str, int]] = None,
                      special_rules: Optional[Dict[str, dict]] = None) -> dict:
    """
    Returns:
        {"valid": bool,
         "checks": {check name: {"passed": bool, "reasons": [...]}},
         "reasons": every failure reason, in check order}
    """
    failed = set(failed)
    checks = {}
    reasons: List[str] = []
    for name in CHECK_NAMES:
        found = CHECKS[name](
            schedule,
            sem_type=sem_type,
            earned_hours=earned_hours,
            failed=failed,
            lab_limits=lab_limits,
            special_rules=special_rules,
        )
        checks[name] = {"passed": not found, "reasons": found}
        reasons.extend(found)
    return {"valid": not reasons, "checks": checks, "reasons": reasons}

# unit_balancer.py
#
# Greedy schedule assembly. For each candidate credit target the failed
# courses go in first, then (regular term) the best labs up to the lab
# minimum, then the rest of the prioritized list by credit hours, then a
# 1-credit pass to top the total up. Every attempt is handed to the
# validator; the first target that validates wins.

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .constants import (
    BASIC_CATEGORIES,
    CATEGORY_CONSTRAINTS,
    GOOD_BREAK_MINUTES,
    LAB_CONSTRAINTS,
    MAX_BASIC_COURSES,
    MAX_PER_BASIC_CATEGORY,
    PREFERRED_WEEKDAYS,
    SEMESTER_CONSTRAINTS,
    SPECIAL_COURSE_RULES,
    BreakPreference,
    Category,
    SemesterType,
)
from .models import Course, Preferences, Schedule, ScheduledCourse, Section
from .prereq_resolver import special_rule_violation
from .run_log import RunLog
from .schedule_validator import validate_schedule
from .timeslots import ranges_overlap


@dataclass
class BuildContext:
    """Everything about the student and the term that a build attempt needs."""

    preferences: Preferences
    sem_type: SemesterType = SemesterType.REGULAR
    earned_hours: int = 0
    failed: Set[str] = field(default_factory=set)
    lab_limits: Dict[str, int] = field(default_factory=lambda: dict(LAB_CONSTRAINTS))
    special_rules: Dict[str, dict] = field(default_factory=lambda: dict(SPECIAL_COURSE_RULES))

    @property
    def bounds(self) -> Tuple[int, int]:
        limits = SEMESTER_CONSTRAINTS[self.sem_type]
        return limits["min_credits"], limits["max_credits"]

# ─── Credit targets ───────────────────────────────────────────────────────────

def credit_targets(target: int, min_credits: int, max_credits: int) -> List[int]:
    """
    target, target+1, target-1, target+2, ... restricted to [min, max].
    A target outside the bounds is first moved to the nearest bound.
    """
    target = min(max(target, min_credits), max_credits)
    order = [target]
    for step in range(1, max_credits - min_credits + 1):
        for candidate in (target + step, target - step):
            if min_credits <= candidate <= max_credits:
                order.append(candidate)
    # sorted() is stable, so equal distances keep the expansion order
    return sorted(order, key=lambda t: abs(t - target))

# ─── Sections ─────────────────────────────────────────────────────────────────

def conflicts_with(section: Section, placed: Sequence[ScheduledCourse]) -> bool:
    days = section.weekdays
    if not days:
        return False
    start_end = section.minutes
    return any(days & p.section.weekdays and ranges_overlap(start_end, p.section.minutes) for p in placed)


def _smallest_gap(section: Section, placed: Sequence[ScheduledCourse]) -> Optional[int]:
    """Minutes between this section and its closest neighbour on a shared day."""
    start, end = section.minutes
    gaps = []
    for p in placed:
        if not section.weekdays & p.section.weekdays:
            continue
        p_start, p_end = p.section.minutes
        gaps.append(p_start - end if p_start >= end else start - p_end)
    return min(gaps) if gaps else None


def _section_rank(section: Section, placed: Sequence[ScheduledCourse], preferences: Preferences) -> Tuple[int, int]:
    day_rank = 0
    wanted_days = PREFERRED_WEEKDAYS.get(preferences.preferred_days)
    if wanted_days is not None and not section.weekdays <= wanted_days:
        day_rank = 1

    break_rank = 0
    if preferences.prefer_breaks != BreakPreference.ANY:
        gap = _smallest_gap(section, placed)
        low, high = GOOD_BREAK_MINUTES
        if preferences.prefer_breaks == BreakPreference.WANT:
            break_rank = 0 if gap is not None and low <= gap <= high else 1
        else:
            break_rank = 0 if gap is not None and gap < low else 1
    return day_rank, break_rank


def find_compatible_section(course: Course, placed: Sequence[ScheduledCourse],
                            preferences: Preferences) -> Optional[Section]:
    """
    Best conflict-free section of a course, or None.
    Day and break preferences only reorder the candidates, they never exclude one.
    """
    free = [s for s in course.sections if not conflicts_with(s, placed)]
    if not free:
        return None
    # min() keeps the first of equal ranks, i.e. offering order
    return min(free, key=lambda s: _section_rank(s, placed, preferences))

# ─── Hard constraints while building ──────────────────────────────────────────

def blocking_rule(course: Course, placed: Sequence[ScheduledCourse], ctx: BuildContext) -> Optional[str]:
    """Reason the course cannot join the partial schedule, or None."""
    if course.is_lab and sum(1 for p in placed if p.course.is_lab) >= ctx.lab_limits["max_labs"]:
        return "lab limit reached"

    if course.category in BASIC_CATEGORIES:
        basic = [p for p in placed if p.category in BASIC_CATEGORIES]
        if len(basic) >= MAX_BASIC_COURSES:
            return "basic-category limit reached"
        if sum(1 for p in basic if p.category == course.category) >= MAX_PER_BASIC_CATEGORY:
            return f"already has a {course.category.value} course"

    if course.category == Category.UNIVERSITY_ELECTIVE:
        limits = CATEGORY_CONSTRAINTS[Category.UNIVERSITY_ELECTIVE]
        electives = [p for p in placed if p.category == Category.UNIVERSITY_ELECTIVE]
        if len(electives) >= limits["max_courses"]:
            return "university elective limit reached"
        group = course.elective_group
        if group is not None and sum(1 for p in electives if p.course.elective_group == group) >= limits["max_per_group"]:
            return f"already has an elective from {group.value}"

    if course.category == Category.MAJOR_ELECTIVE:
        limit = CATEGORY_CONSTRAINTS[Category.MAJOR_ELECTIVE]["max_courses"]
        if sum(1 for p in placed if p.category == Category.MAJOR_ELECTIVE) >= limit:
            return "major elective limit reached"

    violation = special_rule_violation(course.course_id, ctx.earned_hours, ctx.sem_type, ctx.special_rules)
    if violation:
        return violation

    if ctx.sem_type == SemesterType.REGULAR:
        for rule_id, rule in ctx.special_rules.items():
            companions = rule.get("regular_allowed_with")
            if companions is None:
                continue
            if course.course_id == rule_id and any(p.course_id not in companions for p in placed):
                return f"{rule_id} may only be combined with {', '.join(companions)}"
            if course.course_id not in companions and any(p.course_id == rule_id for p in placed):
                return f"{rule_id} is scheduled and only allows {', '.join(companions)}"
    return None

# ─── Assembly ─────────────────────────────────────────────────────────────────

def select_courses_for_term(prioritized: Sequence[Course], target: int, ctx: BuildContext,
                            log: RunLog) -> Tuple[Optional[List[ScheduledCourse]], List[str]]:
    """
    Build one schedule aimed at `target` credit hours.

    Returns (courses, reasons). courses is None when a failed course has no
    conflict-free section, since a failed course can never be left out.
    """
    placed: List[ScheduledCourse] = []
    reasons: List[str] = []
    total = 0

    def place(course: Course, section: Section) -> None:
        nonlocal total
        placed.append(ScheduledCourse(course, section))
        total += course.credit_hours
        if course.is_lab:
            log.count("labs_added")
        log.debug("Added course", {
            "courseId": course.course_id,
            "section": section.section,
            "credits": course.credit_hours,
            "currentTotal": total,
            "target": target,
        })

    # 1) failed courses, unconditionally
    for course in prioritized:
        if course.course_id not in ctx.failed:
            continue
        log.count("courses_tried")
        section = find_compatible_section(course, placed, ctx.preferences)
        if section is None:
            log.count("time_conflicts")
            reasons.append(f"Failed course {course.course_id} has no conflict-free section")
            return None, reasons
        place(course, section)

    def try_add(course: Course) -> bool:
        if any(p.course_id == course.course_id for p in placed):
            return False
        if total + course.credit_hours > target:
            return False
        log.count("courses_tried")
        blocked = blocking_rule(course, placed, ctx)
        if blocked:
            log.debug(f"Skipping {course.course_id}: {blocked}")
            return False
        section = find_compatible_section(course, placed, ctx.preferences)
        if section is None:
            log.count("time_conflicts")
            log.debug(f"Skipping {course.course_id}: every section conflicts")
            return False
        place(course, section)
        return True

    rest = [c for c in prioritized if c.course_id not in ctx.failed]

    # 2) labs up to the regular-term minimum, highest priority first
    if ctx.sem_type == SemesterType.REGULAR:
        labs = sum(1 for p in placed if p.course.is_lab)
        for course in rest:
            if labs >= ctx.lab_limits["min_labs"]:
                break
            if course.is_lab and try_add(course):
                labs += 1

    # 3) everything else, largest credit hours first
    def fill(candidates: Sequence[Course]) -> None:
        for course in candidates:
            if total >= target:
                break
            try_add(course)

    fill(sorted(rest, key=lambda c: c.credit_hours, reverse=True))

    # 4) top up with 1-credit courses
    if total < target:
        fill([c for c in rest if c.credit_hours == 1])

    if total != target:
        reasons.append(f"Reached {total} of {target} credit hours")
    return placed, reasons


def build_schedule(prioritized: Sequence[Course], ctx: BuildContext, log: RunLog,
                   student_id: str = "", semester: str = "") -> Tuple[Optional[Schedule], Optional[dict]]:
    """
    Try every credit target in order and return the first schedule the
    validator accepts, with its validation report. (None, None) if no
    target works; the per-target reasons are in log.attempts.
    """
    low, high = ctx.bounds
    targets = credit_targets(ctx.preferences.target_credit_hours, low, high)
    log.info("Credit targets", {"requested": ctx.preferences.target_credit_hours,
                                "min": low, "max": high, "targets": targets})

    for target in targets:
        courses, reasons = select_courses_for_term(prioritized, target, ctx, log)
        if courses is None:
            log.record_attempt(target, "aborted", reasons)
            continue

        schedule = Schedule(courses=courses, student_id=student_id, semester=semester)
        report = validate_schedule(
            schedule, ctx.sem_type, ctx.earned_hours, ctx.failed,
            lab_limits=ctx.lab_limits, special_rules=ctx.special_rules,
        )
        if not report["valid"]:
            log.record_attempt(target, "rejected", reasons + report["reasons"],
                               courses=schedule.course_ids, totalCredits=schedule.total_credits)
            continue

        log.record_attempt(target, "accepted", reasons,
                           courses=schedule.course_ids, totalCredits=schedule.total_credits)
        return schedule, report

    return None, None

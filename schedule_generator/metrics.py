"""
Metrics of a finished candidate schedule.

All values are derived and recomputed every time a schedule is built:
difficulty (0-100 plus a level label), balance (0-100), the share of each
technical subcategory, and per-subcategory progress through the catalog.
"""

from typing import Dict, Mapping, Tuple

import pandas as pd

from .constants import (
    BASIC_CATEGORIES,
    CATEGORY_BALANCE_WEIGHT,
    CATEGORY_TARGETS,
    DIFFICULTY_BASE,
    DIFFICULTY_LEVELS,
    DIFFICULTY_WEIGHTS,
    EXAM_TYPE_SCORES,
    GRADE_POINTS,
    HISTORY_FACTORS,
    MAX_DIFFICULTY_PER_COURSE,
    MIXED_EXAM_BONUS,
    OVERSHOOT_MULTIPLIER,
    PREFERENCE_FACTORS,
    SUBCATEGORY_BALANCE_WEIGHT,
    SUBCATEGORY_TARGETS,
    TECHNICAL_SUBCATEGORIES,
    UNDERSHOOT_PENALTY,
    Category,
    Rating,
)
from .models import Course, Metrics, Preferences, Schedule, Student
from .prereq_resolver import passed_course_ids

SCHEDULE_COLUMNS = ["courseId", "category", "subCategory", "creditHours", "isLab", "examType"]


def schedule_frame(schedule: Schedule) -> pd.DataFrame:
    """One row per scheduled course."""
    rows = [
        {
            "courseId": sc.course_id,
            "category": sc.category.value,
            "subCategory": sc.course.subcategory.value if sc.course.subcategory else None,
            "creditHours": sc.credit_hours,
            "isLab": sc.course.is_lab,
            "examType": sc.course.details.exam_type.value,
        }
        for sc in schedule
    ]
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)

# ─── Difficulty ───────────────────────────────────────────────────────────────

def history_factor(student: Student, index: Mapping[str, Course], category: Category) -> float:
    """Students with a strong record in a category perceive its courses as easier."""
    points = [
        GRADE_POINTS[a.grade]
        for a in student.completed_courses
        if a.grade in GRADE_POINTS and a.course_id in index and index[a.course_id].category == category
    ]
    if not points:
        return 1.0
    average = sum(points) / len(points)
    for threshold, factor in HISTORY_FACTORS:
        if average >= threshold:
            return factor
    return HISTORY_FACTORS[-1][1]


def course_difficulty(course: Course, rating: Rating = Rating.NEUTRAL, history: float = 1.0,
                      mixed_exams: bool = False) -> float:
    details = course.details
    components = (
        (DIFFICULTY_WEIGHTS["lab"] if course.is_lab else 0)
        + details.num_projects * DIFFICULTY_WEIGHTS["project"]
        + details.num_quizzes * DIFFICULTY_WEIGHTS["quiz"]
        + details.num_assignments * DIFFICULTY_WEIGHTS["assignment"]
        + details.num_certificates * DIFFICULTY_WEIGHTS["certificate"]
        + course.credit_hours * DIFFICULTY_WEIGHTS["credit"]
        + EXAM_TYPE_SCORES[details.exam_type]
        + (MIXED_EXAM_BONUS if mixed_exams else 0)
    )
    value = DIFFICULTY_BASE[course.category] * components * PREFERENCE_FACTORS[rating] * history
    return min(value, MAX_DIFFICULTY_PER_COURSE)


def difficulty_level(score: float) -> str:
    for lower, label in DIFFICULTY_LEVELS:
        if score >= lower:
            return label
    return DIFFICULTY_LEVELS[-1][1]


def difficulty_score(schedule: Schedule, student: Student, preferences: Preferences,
                     index: Mapping[str, Course]) -> Tuple[int, str]:
    if not len(schedule):
        return 0, difficulty_level(0)
    mixed = len({sc.course.details.exam_type for sc in schedule}) > 1
    total = sum(
        course_difficulty(
            sc.course,
            preferences.rating_for(sc.course.subcategory),
            history_factor(student, index, sc.category),
            mixed,
        )
        for sc in schedule
    )
    score = round(total / (len(schedule) * MAX_DIFFICULTY_PER_COURSE) * 100)
    return score, difficulty_level(score)

# ─── Balance ──────────────────────────────────────────────────────────────────

def range_score(count: int, low: int, high: int) -> float:
    if count < low:
        score = 100 - UNDERSHOOT_PENALTY * (low - count)
    elif count > high:
        score = 100 - UNDERSHOOT_PENALTY * OVERSHOOT_MULTIPLIER * (count - high)
    else:
        score = 100
    return max(score, 0)


def balance_score(schedule: Schedule) -> int:
    frame = schedule_frame(schedule)
    category_counts = frame["category"].value_counts()
    sub_counts = frame["subCategory"].value_counts()

    category_scores = []
    for category, (low, high) in CATEGORY_TARGETS.items():
        count = int(category_counts.get(category.value, 0))
        if category in BASIC_CATEGORIES and count > 1:
            category_scores.append(0)
        else:
            category_scores.append(range_score(count, low, high))

    sub_scores = [range_score(int(sub_counts.get(sub.value, 0)), low, high)
                  for sub, (low, high) in SUBCATEGORY_TARGETS.items()]

    category_level = sum(category_scores) / len(category_scores)
    sub_level = sum(sub_scores) / len(sub_scores)
    return round(CATEGORY_BALANCE_WEIGHT * category_level + SUBCATEGORY_BALANCE_WEIGHT * sub_level)

# ─── Distribution & progress ──────────────────────────────────────────────────

def category_distribution(schedule: Schedule) -> Dict[str, float]:
    """Percent of the schedule's courses in each technical subcategory."""
    frame = schedule_frame(schedule)
    if frame.empty:
        return {sub.value: 0.0 for sub in TECHNICAL_SUBCATEGORIES}
    counts = frame["subCategory"].value_counts()
    return {sub.value: round(float(counts.get(sub.value, 0)) / len(frame) * 100, 2)
            for sub in TECHNICAL_SUBCATEGORIES}


def subcategory_progress(schedule: Schedule, student: Student,
                         index: Mapping[str, Course]) -> Dict[str, Dict[str, int]]:
    """
    Per technical subcategory: catalog total, already passed, in this
    schedule, and what is left afterwards.
    """
    passed = passed_course_ids(student, index)
    scheduled = set(schedule.course_ids)
    catalog = pd.DataFrame(
        [{"courseId": c.course_id, "subCategory": c.subcategory.value if c.subcategory else None}
         for c in index.values()],
        columns=["courseId", "subCategory"],
    )
    catalog["passed"] = catalog["courseId"].isin(passed)
    catalog["scheduled"] = catalog["courseId"].isin(scheduled) & ~catalog["passed"]
    grouped = catalog.groupby("subCategory")[["passed", "scheduled"]].agg(["sum", "count"])

    progress = {}
    for sub in TECHNICAL_SUBCATEGORIES:
        if sub.value in grouped.index:
            row = grouped.loc[sub.value]
            total = int(row[("passed", "count")])
            done = int(row[("passed", "sum")])
            now = int(row[("scheduled", "sum")])
        else:
            total = done = now = 0
        progress[sub.value] = {
            "passed": done,
            "scheduled": now,
            "total": total,
            "remaining": max(total - done - now, 0),
        }
    return progress


def compute_metrics(schedule: Schedule, student: Student, preferences: Preferences,
                    index: Mapping[str, Course]) -> Metrics:
    score, level = difficulty_score(schedule, student, preferences, index)
    return Metrics(
        total_credit_hours=schedule.total_credits,
        difficulty_score=score,
        difficulty_level=level,
        balance_score=balance_score(schedule),
        category_distribution=category_distribution(schedule),
        subcategory_progress=subcategory_progress(schedule, student, index),
    )

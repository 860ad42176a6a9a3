"""
Core domain models for the schedule generator.

Input documents arrive as plain dicts (camelCase keys, as the catalog,
offering, student and preference documents are stored). Each model has a
from_dict() that validates at that boundary, so the rest of the package can
rely on enums and parsed values instead of free-form strings.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from .constants import (
    DEFAULT_TARGET_CREDITS,
    ELECTIVE_GROUPS,
    GRADES,
    LAB_NAME_MARKERS,
    PREFERENCE_MAX_CREDITS,
    PREFERENCE_MIN_CREDITS,
    TECHNICAL_SUBCATEGORIES,
    UNIVERSITY_ELECTIVE_GROUPS,
    BreakPreference,
    Category,
    DayPreference,
    ExamType,
    Rating,
    ScheduleStatus,
    Subcategory,
)
from .errors import InvalidInputError
from .timeslots import parse_days, parse_semester, parse_time_range


def _enum(enum_cls, value, field_name):
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidInputError(f"Invalid {field_name}: {value!r}") from None


def _count(raw: dict, key: str) -> int:
    value = raw.get(key) or 0
    if not isinstance(value, (int, float)) or value < 0:
        raise InvalidInputError(f"{key} must be a non-negative number, got {value!r}")
    return int(value)


# ======================================================================
# Catalog
# ======================================================================

@dataclass(frozen=True)
class CourseDetails:
    is_lab: bool = False
    num_projects: int = 0
    num_quizzes: int = 0
    num_assignments: int = 0
    num_certificates: int = 0
    exam_type: ExamType = ExamType.MID_FINAL

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> "CourseDetails":
        if not raw:
            return cls()
        return cls(
            is_lab=bool(raw.get("isLab", False)),
            num_projects=_count(raw, "numProjects"),
            num_quizzes=_count(raw, "numQuizzes"),
            num_assignments=_count(raw, "numAssignments"),
            num_certificates=_count(raw, "numCertificates"),
            exam_type=_enum(ExamType, raw.get("examType") or ExamType.MID_FINAL.value, "examType"),
        )


@dataclass(frozen=True)
class Section:
    """One offered time slot of a course, e.g. section '2' on Monday-Wednesday."""

    section: str
    days: str
    time: str

    def __post_init__(self):
        # Both raise InvalidInputError on malformed input.
        parse_days(self.days)
        parse_time_range(self.time)

    @property
    def weekdays(self):
        return parse_days(self.days)

    @property
    def minutes(self) -> Tuple[int, int]:
        return parse_time_range(self.time)

    @classmethod
    def from_dict(cls, raw: dict) -> "Section":
        return cls(section=str(raw.get("section", "")), days=raw.get("days"), time=raw.get("time"))

    def as_dict(self):
        return {"section": self.section, "days": self.days, "time": self.time}


@dataclass(frozen=True)
class Course:
    """
    A catalog course, optionally merged with this semester's sections.

    course_id:     "0907101"
    category:      one of the six Category labels
    credit_hours:  0..3
    subcategory:   technical area or elective group, if any
    prerequisites: course ids that must be passed first
    """

    course_id: str
    course_name: str
    category: Category
    credit_hours: int
    subcategory: Optional[Subcategory] = None
    prerequisites: Tuple[str, ...] = ()
    details: CourseDetails = field(default_factory=CourseDetails)
    sections: Tuple[Section, ...] = ()

    @property
    def is_lab(self) -> bool:
        name = self.course_name.lower()
        return self.details.is_lab or any(marker in name for marker in LAB_NAME_MARKERS)

    @property
    def elective_group(self) -> Optional[Subcategory]:
        if self.category != Category.UNIVERSITY_ELECTIVE:
            return None
        if self.subcategory in ELECTIVE_GROUPS:
            return self.subcategory
        for group, course_ids in UNIVERSITY_ELECTIVE_GROUPS.items():
            if self.course_id in course_ids:
                return group
        return None

    def with_sections(self, sections) -> "Course":
        return replace(self, sections=tuple(sections))

    @classmethod
    def from_dict(cls, raw: dict) -> "Course":
        course_id = raw.get("courseId")
        if not course_id:
            raise InvalidInputError("Course is missing courseId")

        credits = raw.get("creditHours")
        if isinstance(credits, bool) or not isinstance(credits, (int, float)):
            raise InvalidInputError(f"Course {course_id} has no numeric creditHours ({credits!r})")
        if credits != int(credits) or not 0 <= credits <= 3:
            raise InvalidInputError(f"Course {course_id} has creditHours outside 0..3 ({credits!r})")

        category = raw.get("category") or raw.get("description")
        subcategory = raw.get("subCategory") or raw.get("subcategory")
        return cls(
            course_id=str(course_id),
            course_name=raw.get("courseName") or str(course_id),
            category=_enum(Category, category, f"category for course {course_id}"),
            credit_hours=int(credits),
            subcategory=_enum(Subcategory, subcategory, f"subCategory for course {course_id}") if subcategory else None,
            prerequisites=tuple(str(p) for p in raw.get("prerequisites") or ()),
            details=CourseDetails.from_dict(raw.get("details")),
        )


# ======================================================================
# Student & preferences
# ======================================================================

@dataclass(frozen=True)
class CourseAttempt:
    course_id: str
    grade: str
    semester: str = ""

    @classmethod
    def from_dict(cls, raw: dict) -> "CourseAttempt":
        grade = raw.get("grade")
        if grade not in GRADES:
            raise InvalidInputError(f"Unknown grade {grade!r} for course {raw.get('courseId')}")
        semester = raw.get("semester") or ""
        if semester:
            parse_semester(semester)
        return cls(course_id=str(raw.get("courseId")), grade=grade, semester=semester)


@dataclass
class Student:
    student_id: str
    credit_hours: Optional[int] = None   # None when the document carries no total
    completed_courses: List[CourseAttempt] = field(default_factory=list)

    def attempts_for(self, course_id: str) -> List[CourseAttempt]:
        return [a for a in self.completed_courses if a.course_id == course_id]

    @classmethod
    def from_dict(cls, raw: dict) -> "Student":
        credit_hours = raw.get("creditHours")
        if credit_hours is not None and (isinstance(credit_hours, bool)
                                         or not isinstance(credit_hours, (int, float)) or credit_hours < 0):
            raise InvalidInputError(f"Student creditHours must be a non-negative number, got {credit_hours!r}")
        return cls(
            student_id=str(raw.get("studentId", "")),
            credit_hours=None if credit_hours is None else int(credit_hours),
            completed_courses=[CourseAttempt.from_dict(c) for c in raw.get("completedCourses") or ()],
        )


@dataclass
class Preferences:
    target_credit_hours: int = DEFAULT_TARGET_CREDITS
    preferred_days: DayPreference = DayPreference.ANY
    prefer_breaks: BreakPreference = BreakPreference.ANY
    category_preferences: Dict[Subcategory, Rating] = field(default_factory=dict)
    courses_to_improve: List[str] = field(default_factory=list)
    specific_courses: List[str] = field(default_factory=list)

    def __post_init__(self):
        target = self.target_credit_hours
        if isinstance(target, bool) or not isinstance(target, int):
            raise InvalidInputError(f"targetCreditHours must be an integer, got {target!r}")
        if not PREFERENCE_MIN_CREDITS <= target <= PREFERENCE_MAX_CREDITS:
            raise InvalidInputError(
                f"targetCreditHours must be between {PREFERENCE_MIN_CREDITS} and "
                f"{PREFERENCE_MAX_CREDITS}, got {target}"
            )

    def rating_for(self, subcategory: Optional[Subcategory]) -> Rating:
        return self.category_preferences.get(subcategory, Rating.NEUTRAL)

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> "Preferences":
        raw = raw or {}
        ratings = {}
        for key, value in (raw.get("categoryPreferences") or {}).items():
            sub = _enum(Subcategory, key, "categoryPreferences key")
            if sub not in TECHNICAL_SUBCATEGORIES:
                raise InvalidInputError(f"categoryPreferences only rates technical areas, got {key!r}")
            ratings[sub] = _enum(Rating, value, f"rating for {key}")
        target = raw.get("targetCreditHours")
        return cls(
            target_credit_hours=DEFAULT_TARGET_CREDITS if target is None else target,
            preferred_days=_enum(DayPreference, raw.get("preferredDays") or DayPreference.ANY.value, "preferredDays"),
            prefer_breaks=_enum(BreakPreference, raw.get("preferBreaks") or BreakPreference.ANY.value, "preferBreaks"),
            category_preferences=ratings,
            courses_to_improve=[str(c) for c in raw.get("coursesToImprove") or ()],
            specific_courses=[str(c) for c in raw.get("specificCourses") or ()],
        )


# ======================================================================
# Output
# ======================================================================

@dataclass(frozen=True)
class ScheduledCourse:
    """A course placed in a schedule together with the section it was given."""

    course: Course
    section: Section

    @property
    def course_id(self) -> str:
        return self.course.course_id

    @property
    def credit_hours(self) -> int:
        return self.course.credit_hours

    @property
    def category(self) -> Category:
        return self.course.category

    @property
    def days(self) -> str:
        return self.section.days

    @property
    def time(self) -> str:
        return self.section.time

    def as_dict(self):
        return {
            "courseId": self.course.course_id,
            "courseName": self.course.course_name,
            "creditHours": self.course.credit_hours,
            "category": self.course.category.value,
            "subCategory": self.course.subcategory.value if self.course.subcategory else None,
            "isLab": self.course.is_lab,
            "section": self.section.section,
            "days": self.section.days,
            "time": self.section.time,
        }


@dataclass
class Schedule:
    courses: List[ScheduledCourse] = field(default_factory=list)
    student_id: str = ""
    semester: str = ""
    status: ScheduleStatus = ScheduleStatus.GENERATED

    @property
    def total_credits(self) -> int:
        return sum(c.credit_hours for c in self.courses)

    @property
    def course_ids(self) -> List[str]:
        return [c.course_id for c in self.courses]

    def __len__(self):
        return len(self.courses)

    def __iter__(self):
        return iter(self.courses)

    def as_dict(self):
        return {
            "studentId": self.student_id,
            "semester": self.semester,
            "status": self.status.value,
            "totalCreditHours": self.total_credits,
            "courses": [c.as_dict() for c in self.courses],
        }


@dataclass
class Metrics:
    total_credit_hours: int
    difficulty_score: int
    difficulty_level: str
    balance_score: int
    category_distribution: Dict[str, float]
    subcategory_progress: Dict[str, Dict[str, int]]

    def as_dict(self):
        return {
            "totalCreditHours": self.total_credit_hours,
            "difficultyScore": {"score": self.difficulty_score, "level": self.difficulty_level},
            "balanceScore": self.balance_score,
            "categoryDistribution": dict(self.category_distribution),
            "subcategoryProgress": {k: dict(v) for k, v in self.subcategory_progress.items()},
        }


@dataclass
class GenerationResult:
    success: bool
    schedule: Optional[Schedule] = None
    metrics: Optional[Metrics] = None
    error: str = ""
    details: dict = field(default_factory=dict)
    log: Optional[object] = None   # the RunLog of this run

    @property
    def total_credit_hours(self) -> int:
        return self.schedule.total_credits if self.schedule else 0

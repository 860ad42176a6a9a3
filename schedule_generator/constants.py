"""
Fixed vocabularies and institutional rules used by the schedule generator.

Everything here is plain data. Callers that need different limits pass
overrides to generate_schedule() instead of editing this module.
"""

from enum import Enum


class Category(str, Enum):
    UNIVERSITY_MANDATORY = "university-mandatory"
    UNIVERSITY_ELECTIVE = "university-elective"
    COLLEGE_MANDATORY = "college-mandatory"
    MAJOR_MANDATORY = "major-mandatory"
    MAJOR_ELECTIVE = "major-elective"
    GENERAL_MANDATORY = "general-mandatory"


class Subcategory(str, Enum):
    NETWORKING = "networking"
    HARDWARE = "hardware"
    SOFTWARE = "software"
    ELECTRICAL = "electrical"
    GROUP_1 = "group-1"
    GROUP_2 = "group-2"
    GROUP_3 = "group-3"


class SemesterType(str, Enum):
    REGULAR = "REGULAR"
    SUMMER = "SUMMER"


class ExamType(str, Enum):
    MID_FINAL = "mid-final"
    FIRST_SECOND = "first-second"
    PRACTICAL = "practical"


class DayPreference(str, Enum):
    SUN_TUE_THU = "sun_tue_thu"
    MON_WED = "mon_wed"
    DAILY = "daily"
    ANY = "idc"


class BreakPreference(str, Enum):
    WANT = "yes"
    DONT_WANT = "no"
    ANY = "idc"


class Rating(str, Enum):
    PREFER = "prefer"
    NEUTRAL = "neutral"
    DISLIKE = "dislike"


class ScheduleStatus(str, Enum):
    GENERATED = "generated"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    INACTIVE = "inactive"


# ─── Categories ───────────────────────────────────────────────────────────────
BASIC_CATEGORIES = frozenset({
    Category.UNIVERSITY_MANDATORY,
    Category.UNIVERSITY_ELECTIVE,
    Category.GENERAL_MANDATORY,
})
TECHNICAL_SUBCATEGORIES = (
    Subcategory.NETWORKING,
    Subcategory.HARDWARE,
    Subcategory.SOFTWARE,
    Subcategory.ELECTRICAL,
)
ELECTIVE_GROUPS = (Subcategory.GROUP_1, Subcategory.GROUP_2, Subcategory.GROUP_3)

# Electives whose catalog entry carries no group tag are placed by id.
UNIVERSITY_ELECTIVE_GROUPS = {
    Subcategory.GROUP_1: ("0400101", "2300101", "2300102", "3400108"),
    Subcategory.GROUP_2: ("0310102", "0400102", "0720100", "1000102", "1100100"),
    Subcategory.GROUP_3: ("1600100", "1900101", "2000100", "2200103", "3400106"),
}

# ─── Grades ───────────────────────────────────────────────────────────────────
GRADES = ("A", "A-", "B+", "B", "B-", "C+", "C", "C-", "D+", "D", "D-", "F", "P")
FAILING_GRADES = frozenset({"F", "D-"})
PASS_MARK = "P"
GRADE_POINTS = {
    "A": 4.0, "A-": 3.75,
    "B+": 3.5, "B": 3.0, "B-": 2.75,
    "C+": 2.5, "C": 2.0, "C-": 1.75,
    "D+": 1.5, "D": 1.0, "D-": 0.75,
    "F": 0.0,
}

# ─── Semester & credit limits ─────────────────────────────────────────────────
SEMESTER_CONSTRAINTS = {
    SemesterType.REGULAR: {"min_credits": 12, "max_credits": 18, "min_labs": 1},
    SemesterType.SUMMER: {"min_credits": 3, "max_credits": 10, "min_labs": 0},
}
PREFERENCE_MIN_CREDITS = 12   # bounds a student may request
PREFERENCE_MAX_CREDITS = 18
DEFAULT_TARGET_CREDITS = 15
SUMMER_TERM = 3
SUMMER_MONTHS = (6, 7, 8)     # used when no semester id is given

LAB_CONSTRAINTS = {"min_labs": 1, "max_labs": 3}
LAB_NAME_MARKERS = ("lab", "مختبر")

CATEGORY_CONSTRAINTS = {
    Category.UNIVERSITY_ELECTIVE: {"max_courses": 3, "max_per_group": 1},
    Category.MAJOR_ELECTIVE: {"max_courses": 5},
}
MAX_BASIC_COURSES = 2          # across all basic categories
MAX_PER_BASIC_CATEGORY = 1

# ─── Special course rules ─────────────────────────────────────────────────────
PROJECT_ONE = "0977598"
PROJECT_TWO = "0977599"
TRAINING = "0947500"
ENGINEERING_ECONOMICS = "0901420"

SPECIAL_COURSE_RULES = {
    PROJECT_ONE: {"min_credit_hours": 120, "no_summer": True},
    PROJECT_TWO: {"no_summer": True},
    TRAINING: {"min_credit_hours": 120, "regular_allowed_with": (PROJECT_ONE, PROJECT_TWO)},
    ENGINEERING_ECONOMICS: {"min_credit_hours": 90},
}

# ─── Chain scoring ────────────────────────────────────────────────────────────
FORWARD_MAX_DEPTH = 5
BACKWARD_MAX_DEPTH = 3
FORWARD_DECAY = 0.9
BACKWARD_DECAY = 0.7
BRANCHING_STEP = 0.2
FORWARD_SHARE = 0.7
BACKWARD_SHARE = 0.3
CHAIN_CATEGORY_WEIGHTS = {
    Category.MAJOR_MANDATORY: 2.0,
    Category.COLLEGE_MANDATORY: 1.5,
}

# ─── Priority weights ─────────────────────────────────────────────────────────
FAILED_COURSE_PRIORITY = float("inf")
IMPROVEMENT_BONUS = 100_000
SPECIFIC_REQUEST_BONUS = 50_000
CHAIN_WEIGHT = 400
GENERAL_CHAIN_MULTIPLIER = 1_000
LAB_BONUS = 1_000
PREFERRED_SUBCATEGORY_BONUS = 200

# ─── Difficulty ───────────────────────────────────────────────────────────────
MAX_DIFFICULTY_PER_COURSE = 10
DIFFICULTY_BASE = {
    Category.UNIVERSITY_MANDATORY: 0.4,
    Category.UNIVERSITY_ELECTIVE: 0.4,
    Category.GENERAL_MANDATORY: 0.4,
    Category.COLLEGE_MANDATORY: 0.9,
    Category.MAJOR_MANDATORY: 1.0,
    Category.MAJOR_ELECTIVE: 0.8,
}
DIFFICULTY_WEIGHTS = {
    "lab": 2.0,
    "project": 1.5,
    "quiz": 0.5,
    "assignment": 0.5,
    "certificate": 0.5,
    "credit": 0.5,
}
EXAM_TYPE_SCORES = {
    ExamType.MID_FINAL: 1.0,
    ExamType.FIRST_SECOND: 1.5,
    ExamType.PRACTICAL: 0.5,
}
MIXED_EXAM_BONUS = 0.5
PREFERENCE_FACTORS = {Rating.PREFER: 0.8, Rating.NEUTRAL: 1.0, Rating.DISLIKE: 1.2}
HISTORY_FACTORS = (            # (min average grade points in the category, factor)
    (3.0, 0.8),
    (2.0, 1.0),
    (0.0, 1.2),
)
DIFFICULTY_LEVELS = (          # (lower bound, label), checked top-down
    (80, "Very Challenging"),
    (65, "Challenging"),
    (45, "Moderate"),
    (30, "Manageable"),
    (0, "Basic"),
)

# ─── Balance ──────────────────────────────────────────────────────────────────
CATEGORY_TARGETS = {           # (min, max) courses per schedule
    Category.UNIVERSITY_MANDATORY: (0, 1),
    Category.UNIVERSITY_ELECTIVE: (0, 1),
    Category.GENERAL_MANDATORY: (0, 1),
    Category.COLLEGE_MANDATORY: (1, 2),
    Category.MAJOR_MANDATORY: (3, 4),
    Category.MAJOR_ELECTIVE: (0, 2),
}
SUBCATEGORY_TARGETS = {sub: (0, 2) for sub in TECHNICAL_SUBCATEGORIES}
UNDERSHOOT_PENALTY = 20        # points per missing course
OVERSHOOT_MULTIPLIER = 3
CATEGORY_BALANCE_WEIGHT = 0.7
SUBCATEGORY_BALANCE_WEIGHT = 0.3

# ─── Section choice ───────────────────────────────────────────────────────────
DAY_PATTERNS = (
    "Sunday-Tuesday-Thursday",
    "Monday-Wednesday",
    "Sunday-Tuesday",
    "Wednesday-Monday",
    "Thursday-Sunday-Tuesday",
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Sunday-Monday-Tuesday-Wednesday-Thursday",
    "N/A",
)
NO_DAYS = "N/A"
PREFERRED_WEEKDAYS = {
    DayPreference.SUN_TUE_THU: frozenset({"Sunday", "Tuesday", "Thursday"}),
    DayPreference.MON_WED: frozenset({"Monday", "Wednesday"}),
}
GOOD_BREAK_MINUTES = (15, 30)

# ─── Run log phases ───────────────────────────────────────────────────────────
PHASE_INIT = "INITIALIZATION"
PHASE_FILTER = "COURSE_FILTERING"
PHASE_PRIORITY = "PRIORITIZATION"
PHASE_BUILD = "SCHEDULE_BUILDING"
PHASE_VALIDATE = "VALIDATION"
PHASE_COMPLETE = "COMPLETION"

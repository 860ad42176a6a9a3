#!/usr/bin/env python3
"""
test_prereq_resolver.py - grade semantics, prerequisites, special rules and
the eligibility filter.
"""

from schedule_generator.constants import (
    ENGINEERING_ECONOMICS,
    PROJECT_ONE,
    PROJECT_TWO,
    Category,
    SemesterType,
)
from schedule_generator.models import Course, CourseAttempt, Preferences, Section, Student
from schedule_generator.prereq_resolver import (
    earned_credit_hours,
    eligibility_reason,
    explain_unmet_prereqs,
    failed_course_ids,
    filter_eligible_courses,
    is_failing,
    is_passing,
    missing_prereqs,
    passed_course_ids,
    special_rule_violation,
    student_credit_hours,
)
from schedule_generator.run_log import RunLog

SECTION = Section("1", "Monday-Wednesday", "08:00 - 09:30")


def make_course(course_id, category=Category.MAJOR_MANDATORY, credits=3, prereqs=(), offered=True, name=None):
    return Course(
        course_id=course_id,
        course_name=name or f"Course {course_id}",
        category=category,
        credit_hours=credits,
        prerequisites=tuple(prereqs),
        sections=(SECTION,) if offered else (),
    )


def create_test_data():
    """A short chain A -> B -> C, a general-mandatory course and some basics."""
    courses = [
        make_course("A"),
        make_course("B", prereqs=["A"]),
        make_course("C", prereqs=["B"]),
        make_course("G", Category.GENERAL_MANDATORY, credits=0),
        make_course("U1", Category.UNIVERSITY_MANDATORY),
        make_course("U2", Category.UNIVERSITY_ELECTIVE),
        make_course("N", offered=False),
        make_course(PROJECT_ONE, prereqs=["A"]),
        make_course(ENGINEERING_ECONOMICS, Category.COLLEGE_MANDATORY),
    ]
    return {c.course_id: c for c in courses}


def student_with(*attempts, credit_hours=None):
    return Student(
        student_id="s1",
        credit_hours=credit_hours,
        completed_courses=[CourseAttempt(cid, grade, "2024-1") for cid, grade in attempts],
    )


def test_grade_semantics():
    assert is_failing("F") and is_failing("D-")
    assert not is_failing("D")
    assert is_passing("D")
    assert is_passing("P", Category.MAJOR_MANDATORY)
    assert is_passing("P", Category.GENERAL_MANDATORY)
    assert not is_passing("A", Category.GENERAL_MANDATORY), "General-mandatory courses pass only with P"


def test_passed_and_failed_with_retakes():
    index = create_test_data()
    student = student_with(("A", "F"), ("A", "C"), ("B", "F"), ("B", "D-"), ("G", "A"))

    passed = passed_course_ids(student, index)
    failed = failed_course_ids(student, index)

    assert "A" in passed, "A retake passed"
    assert "A" not in failed, "A passing retake clears the failure"
    assert "B" in failed and "B" not in passed
    assert "G" not in passed, "A letter grade does not pass a general-mandatory course"
    assert "G" not in failed, "...but it is not a recorded failure either"


def test_earned_credit_hours():
    index = create_test_data()
    student = student_with(("A", "B"), ("A", "A"), ("B", "F"), (PROJECT_ONE, "A"), ("ZZZ", "A"))

    # A counts once, the project counts, failures and unknown courses do not
    assert earned_credit_hours(student, index) == 6
    assert student_credit_hours(student, index) == 6
    assert student_credit_hours(student_with(credit_hours=90), index) == 90


def test_missing_prereqs_and_explanation():
    index = create_test_data()
    assert missing_prereqs(index["C"], {"A"}) == ["B"]
    assert missing_prereqs(index["B"], {"A"}) == []

    text = explain_unmet_prereqs(index["C"], set(), index)
    assert text == "C needs B (Course B)"
    assert explain_unmet_prereqs(index["A"], set(), index) == ""


def test_special_rule_violation():
    assert special_rule_violation(PROJECT_ONE, 119, SemesterType.REGULAR)
    assert special_rule_violation(PROJECT_ONE, 120, SemesterType.REGULAR) is None
    assert special_rule_violation(PROJECT_ONE, 130, SemesterType.SUMMER), "Project 1 not allowed in summer"
    assert special_rule_violation(PROJECT_TWO, 0, SemesterType.SUMMER)
    assert special_rule_violation(ENGINEERING_ECONOMICS, 89, SemesterType.REGULAR)
    assert special_rule_violation(ENGINEERING_ECONOMICS, 90, SemesterType.SUMMER) is None
    assert special_rule_violation("A", 0, SemesterType.SUMMER) is None

    # Overridden rule table
    rules = {"A": {"min_credit_hours": 10}}
    assert special_rule_violation("A", 5, SemesterType.REGULAR, rules)
    assert special_rule_violation(PROJECT_ONE, 0, SemesterType.REGULAR, rules) is None


def test_eligibility_reason_paths():
    index = create_test_data()
    prefs = Preferences(courses_to_improve=["A"], specific_courses=["C"])
    common = dict(preferences=prefs, earned_hours=0, sem_type=SemesterType.REGULAR)

    # Test case: failed course
    assert eligibility_reason(index["B"], passed={"A"}, failed={"B"}, **common) == "failed"
    # Test case: passed course the student wants to improve
    assert eligibility_reason(index["A"], passed={"A"}, failed=set(), **common) == "improvement"
    # Test case: specifically requested, prerequisites ignored
    assert eligibility_reason(index["C"], passed=set(), failed=set(), **common) == "requested"
    # Test case: prerequisites met
    assert eligibility_reason(index["B"], passed={"A"}, failed=set(), **common) == "prerequisites"
    # Test case: prerequisites missing
    assert eligibility_reason(index["B"], passed=set(), failed=set(), **common) is None
    # Test case: passed and not improving -> never eligible, even when requested
    prefs_requested = Preferences(specific_courses=["B"])
    assert eligibility_reason(index["B"], passed={"A", "B"}, failed=set(), preferences=prefs_requested,
                              earned_hours=0, sem_type=SemesterType.REGULAR) is None
    # Test case: credit gate
    assert eligibility_reason(index[PROJECT_ONE], passed={"A"}, failed=set(), **common) is None
    assert eligibility_reason(index[PROJECT_ONE], passed={"A"}, failed=set(), preferences=prefs,
                              earned_hours=120, sem_type=SemesterType.REGULAR) == "prerequisites"


def test_filter_eligible_courses():
    index = create_test_data()
    student = student_with(("A", "B"), ("U1", "D-"))
    prefs = Preferences()
    chain = {"U2": 2.0, "G": 1.0}
    log = RunLog()

    result = filter_eligible_courses(index, student, prefs, SemesterType.REGULAR,
                                     lambda cid: chain.get(cid, 0.0), log)

    other = [c.course_id for c in result.other]
    basic = [c.course_id for c in result.basic]

    assert "A" not in other, "Passed course is not eligible"
    assert "B" in other, "Prerequisite A is passed"
    assert "C" not in other
    assert "N" not in other, "Courses without sections are not eligible"
    assert PROJECT_ONE not in other, "Credit gate not met"
    assert ENGINEERING_ECONOMICS not in other

    # Failed basic course is kept next to the single best other basic course
    assert result.failed == {"U1"}
    assert basic == ["U1", "U2"]
    assert result.reasons["U1"] == "failed"
    assert "G" not in result.reasons
    assert any(e["message"] == "Not eligible: C" for e in log.entries)


def test_basic_pool_keeps_single_course():
    index = create_test_data()
    result = filter_eligible_courses(index, student_with(), Preferences(), SemesterType.REGULAR,
                                     lambda cid: 0.0)
    # All chain values equal: the first basic course in catalog order wins
    assert [c.course_id for c in result.basic] == ["G"]


def test_improvement_requires_passed_attempt():
    index = create_test_data()
    prefs = Preferences(courses_to_improve=["C", "A"])

    assert eligibility_reason(index["C"], passed=set(), failed=set(), preferences=prefs,
                              earned_hours=0, sem_type=SemesterType.REGULAR) is None
    assert eligibility_reason(index["C"], passed={"A", "B"}, failed=set(), preferences=prefs,
                              earned_hours=0, sem_type=SemesterType.REGULAR) == "prerequisites"

    result = filter_eligible_courses(index, student_with(("A", "C+")), prefs, SemesterType.REGULAR,
                                     lambda cid: 0.0)
    assert result.reasons["A"] == "improvement"
    assert "C" not in result.reasons, "Never attempted, and B is not passed"


def test_unavailable_failed_courses_are_kept_visible():
    index = create_test_data()
    student = student_with(("N", "F"), ("X9", "D-"), ("B", "F"), ("A", "B"))
    log = RunLog()

    result = filter_eligible_courses(index, student, Preferences(), SemesterType.REGULAR,
                                     lambda cid: 0.0, log)

    assert result.failed == {"B"}, "Only offered failed courses go to the builder"
    assert result.unavailable_failed == ["X9", "N"]
    assert len(log.warnings) == 2

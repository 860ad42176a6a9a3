"""
test_catalog.py - merging catalog courses with offered sections.
"""

import json
import os
import tempfile

import pytest

from schedule_generator.catalog import build_catalog_index, load_course_catalog
from schedule_generator.constants import Category, Subcategory
from schedule_generator.errors import EmptyCatalogError, InvalidInputError, ScheduleInputError
from schedule_generator.models import Course
from schedule_generator.run_log import RunLog


def create_test_data():
    courses = [
        {"courseId": "0907101", "courseName": "Computer Programming", "category": "major-mandatory",
         "subCategory": "software", "creditHours": 3, "prerequisites": []},
        {"courseId": "0907211", "courseName": "Object Oriented Programming", "category": "major-mandatory",
         "subCategory": "software", "creditHours": 3, "prerequisites": ["0907101"]},
        {"courseId": "0302111", "courseName": "Physics Lab 1", "description": "college-mandatory",
         "creditHours": 1},
        {"courseId": "0301101", "courseName": "Calculus 1", "category": "college-mandatory",
         "creditHours": "three"},
        {"courseId": "9999999", "courseName": "Mystery", "category": "not-a-category", "creditHours": 3},
    ]
    offering = {
        "semester": "2025-1",
        "courses": [
            {"courseId": "0907101", "sections": [
                {"section": "1", "days": "Sunday-Tuesday-Thursday", "time": "08:00 - 09:00"},
                {"section": "2", "days": "Funday", "time": "08:00 - 09:00"},
            ]},
            {"courseId": "0302111", "sections": [
                {"section": "1", "days": "Monday", "time": "14:00 - 17:00"},
            ]},
            {"courseId": "5555555", "sections": [
                {"section": "1", "days": "Monday", "time": "08:00 - 09:00"},
            ]},
        ],
    }
    return courses, offering


def test_build_catalog_index():
    courses, offering = create_test_data()
    log = RunLog()
    index = build_catalog_index(courses, offering, log)

    # Test case: valid courses are kept, offered or not
    assert set(index) == {"0907101", "0907211", "0302111"}
    assert index["0907211"].sections == (), "Unoffered courses keep an empty section list"

    # Test case: malformed section skipped, valid one kept
    assert [s.section for s in index["0907101"].sections] == ["1"]

    # Test case: legacy 'description' field used as category
    assert index["0302111"].category == Category.COLLEGE_MANDATORY
    assert index["0302111"].is_lab, "Lab detected from the course name"
    assert index["0907101"].subcategory == Subcategory.SOFTWARE


def test_invalid_courses_are_warnings():
    courses, offering = create_test_data()
    log = RunLog()
    build_catalog_index(courses, offering, log)

    messages = " | ".join(w["message"] for w in log.warnings)
    assert "'0301101'" in messages, "Non-numeric credit hours should be a warning"
    assert "'9999999'" in messages, "Unknown categories should be a warning"
    assert "0907101" in messages, "Malformed section should be a warning"
    assert any(w.get("data", {}).get("courseIds") == ["5555555"] for w in log.warnings)
    assert log.errors == [], "Nothing here is an error"


def test_empty_index_fails_fast():
    _, offering = create_test_data()
    with pytest.raises(EmptyCatalogError):
        build_catalog_index([{"courseId": "X", "category": "major-mandatory", "creditHours": None}], offering)


def test_missing_offering():
    courses, _ = create_test_data()
    with pytest.raises(ScheduleInputError):
        build_catalog_index(courses, {"semester": "2025-1", "courses": []})
    with pytest.raises(ScheduleInputError):
        build_catalog_index(courses, None)


def test_duplicate_course_first_wins():
    courses, offering = create_test_data()
    duplicate = dict(courses[0], courseName="Second copy")
    log = RunLog()
    index = build_catalog_index(courses + [duplicate], offering, log)
    assert index["0907101"].course_name == "Computer Programming"
    assert any("Duplicate" in w["message"] for w in log.warnings)


def test_course_credit_hours_range():
    with pytest.raises(InvalidInputError):
        Course.from_dict({"courseId": "A", "category": "major-mandatory", "creditHours": 4})
    with pytest.raises(InvalidInputError):
        Course.from_dict({"courseId": "A", "category": "major-mandatory", "creditHours": 2.5})
    assert Course.from_dict({"courseId": "A", "category": "major-mandatory", "creditHours": 0}).credit_hours == 0


def test_load_course_catalog():
    courses, _ = create_test_data()
    with tempfile.TemporaryDirectory() as tmp:
        plain = os.path.join(tmp, "catalog.json")
        wrapped = os.path.join(tmp, "wrapped.json")
        with open(plain, "w") as f:
            json.dump(courses, f)
        with open(wrapped, "w") as f:
            json.dump({"courses": courses}, f)

        assert load_course_catalog(plain) == courses
        assert load_course_catalog(wrapped) == courses

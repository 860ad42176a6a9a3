# sample_data.py
#
# A small, self-consistent computer engineering catalog for one semester.
# Used by `schedule-generator --demo` and by the tests. Sections of courses a
# student could take together never overlap, so a fresh student and the demo
# student can both be scheduled.

import copy

SEMESTER = "2025-1"

MM = "major-mandatory"
ME = "major-elective"
CM = "college-mandatory"


def _course(course_id, name, category, credits, sub=None, prereqs=(), **details):
    doc = {
        "courseId": course_id,
        "courseName": name,
        "category": category,
        "creditHours": credits,
        "prerequisites": list(prereqs),
        "details": {
            "isLab": details.get("lab", False),
            "numProjects": details.get("projects", 0),
            "numQuizzes": details.get("quizzes", 2),
            "numAssignments": details.get("assignments", 2),
            "numCertificates": 0,
            "examType": details.get("exam", "mid-final"),
        },
    }
    if sub:
        doc["subCategory"] = sub
    return doc


CATALOG = [
    _course("0907101", "Computer Programming", MM, 3, "software"),
    _course("0907102", "Computer Programming Lab", MM, 1, "software", lab=True, exam="practical"),
    _course("0907211", "Object Oriented Programming", MM, 3, "software", ["0907101"], projects=1),
    _course("0907231", "Data Structures", MM, 3, "software", ["0907211"], projects=1),
    _course("0907221", "Digital Logic Design", MM, 3, "hardware"),
    _course("0907222", "Digital Logic Lab", MM, 1, "hardware", lab=True, exam="practical"),
    _course("0907321", "Computer Architecture", MM, 3, "hardware", ["0907221"], exam="first-second"),
    _course("0907341", "Computer Networks", MM, 3, "networking", ["0907231"]),
    _course("0907342", "Computer Networks Lab", MM, 1, "networking", ["0907341"], lab=True, exam="practical"),
    _course("0977598", "Graduation Project 1", MM, 3, None, ["0907231"], projects=1, quizzes=0, assignments=0),
    _course("0907451", "Network Security", ME, 3, "networking", ["0907341"]),
    _course("0907461", "Embedded Systems", ME, 3, "hardware", ["0907321"], projects=1),
    _course("0301101", "Calculus 1", CM, 3),
    _course("0301102", "Calculus 2", CM, 3, None, ["0301101"]),
    _course("0302101", "General Physics 1", CM, 3),
    _course("0302111", "General Physics Lab 1", CM, 1, None, lab=True, exam="practical"),
    _course("0901131", "Electric Circuits 1", CM, 3, "electrical", ["0302101"], exam="first-second"),
    _course("2200101", "Arabic Language Skills", "university-mandatory", 3),
    _course("0400101", "Islamic Culture", "university-elective", 3, "group-1"),
    _course("3201099", "English Language Skills", "general-mandatory", 3),
]

STT = "Sunday-Tuesday-Thursday"
MW = "Monday-Wednesday"

SECTIONS = {
    "0907101": [("1", STT, "12:00 - 13:00")],
    "0907102": [("1", "Monday", "14:00 - 17:00")],
    "0907211": [("1", STT, "09:00 - 10:00")],
    "0907231": [("1", MW, "08:00 - 09:30")],
    "0907221": [("1", STT, "08:00 - 09:00"), ("2", MW, "08:00 - 09:30")],
    "0907222": [("1", "Tuesday", "14:00 - 17:00")],
    "0907321": [("1", MW, "15:30 - 17:00")],
    "0907341": [("1", STT, "14:00 - 15:00")],
    "0907342": [("1", "Thursday", "14:00 - 17:00")],
    "0977598": [("1", "N/A", "00:00 - 00:00")],
    "0907451": [("1", STT, "15:00 - 16:00")],
    "0907461": [("1", MW, "17:00 - 18:30")],
    "0301101": [("1", MW, "12:30 - 14:00")],
    "0301102": [("1", STT, "10:00 - 11:00")],
    "0302101": [("1", MW, "09:30 - 11:00")],
    "0302111": [("1", "Wednesday", "14:00 - 17:00")],
    "0901131": [("1", MW, "11:00 - 12:30")],
    "2200101": [("1", "Sunday-Tuesday", "13:00 - 14:00")],
    "0400101": [("1", STT, "11:00 - 12:00")],
    "3201099": [("1", "Thursday", "13:00 - 14:00")],
}

OFFERING = {
    "semester": SEMESTER,
    "courses": [
        {
            "courseId": course_id,
            "sections": [{"section": s, "days": d, "time": t} for s, d, t in sections],
        }
        for course_id, sections in SECTIONS.items()
    ],
}

# Second-year student: failed Digital Logic, wants a better Physics grade.
STUDENT = {
    "studentId": "20210001",
    "creditHours": 16,
    "completedCourses": [
        {"courseId": "0907101", "grade": "A", "semester": "2024-1"},
        {"courseId": "0301101", "grade": "B+", "semester": "2024-1"},
        {"courseId": "0302101", "grade": "C", "semester": "2024-1"},
        {"courseId": "0302111", "grade": "B", "semester": "2024-1"},
        {"courseId": "2200101", "grade": "A-", "semester": "2024-2"},
        {"courseId": "3201099", "grade": "P", "semester": "2024-2"},
        {"courseId": "0907221", "grade": "F", "semester": "2024-2"},
    ],
}

PREFERENCES = {
    "targetCreditHours": 15,
    "preferredDays": "sun_tue_thu",
    "preferBreaks": "idc",
    "categoryPreferences": {"software": "prefer", "hardware": "dislike"},
    "coursesToImprove": ["0302101"],
    "specificCourses": [],
}


def demo_inputs():
    """Fresh copies of (catalog, offering, student, preferences)."""
    return (
        copy.deepcopy(CATALOG),
        copy.deepcopy(OFFERING),
        copy.deepcopy(STUDENT),
        copy.deepcopy(PREFERENCES),
    )

import json
from typing import Dict, List, Optional

from .errors import EmptyCatalogError, InvalidInputError, ScheduleInputError
from .models import Course, Section
from .run_log import RunLog

# -----------------------------------------------------------------------------
# Data loading
# -----------------------------------------------------------------------------

def load_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_course_catalog(json_path: str) -> List[dict]:
    """Load the course catalog document list from file."""
    data = load_json(json_path)
    if isinstance(data, dict):
        data = data.get("courses", [])
    return data

# -----------------------------------------------------------------------------
# Merging catalog metadata with the semester's sections
# -----------------------------------------------------------------------------

def _sections_by_course(offering: dict, log: RunLog) -> Dict[str, List[Section]]:
    sections: Dict[str, List[Section]] = {}
    for offered in offering.get("courses") or ():
        course_id = str(offered.get("courseId"))
        bucket = sections.setdefault(course_id, [])
        for raw in offered.get("sections") or ():
            try:
                bucket.append(Section.from_dict(raw))
            except InvalidInputError as e:
                log.warning(f"Skipping malformed section of {course_id}", {"section": raw, "reason": str(e)})
    return sections


def build_catalog_index(courses: List[dict], offering: Optional[dict], log: Optional[RunLog] = None) -> Dict[str, Course]:
    """
    Merge catalog courses with the offered sections into one lookup by course id.

    Every usable catalog course is kept, offered or not, because the chain
    scorer needs the whole prerequisite graph; courses that are not offered
    simply carry no sections. Courses without a numeric credit-hour value (or
    with any other malformed field) are excluded with a warning.

    Raises:
        ScheduleInputError: the offering document lists no courses
        EmptyCatalogError: nothing usable is left after merging
    """
    log = log or RunLog()
    if not offering or not offering.get("courses"):
        raise ScheduleInputError("No available sections found for current semester")

    offered = _sections_by_course(offering, log)
    index: Dict[str, Course] = {}

    for raw in courses or ():
        try:
            course = Course.from_dict(raw)
        except InvalidInputError as e:
            log.warning(f"Excluding course {raw.get('courseId')!r} from catalog", {"reason": str(e)})
            continue
        if course.course_id in index:
            log.warning(f"Duplicate catalog entry for {course.course_id}, keeping the first")
            continue
        index[course.course_id] = course.with_sections(offered.get(course.course_id, ()))

    unknown = sorted(set(offered) - set(index))
    if unknown:
        log.warning("Offered sections reference courses missing from the catalog", {"courseIds": unknown})

    log.info("Catalog index built", {
        "totalCourses": len(index),
        "offeredCourses": sum(1 for c in index.values() if c.sections),
    })

    if not index:
        raise EmptyCatalogError("No valid courses found with credit hours")
    return index

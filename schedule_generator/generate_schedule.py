"""
End-to-end schedule generation for one student and one semester.

    catalog index -> eligibility -> chain values -> priorities
        -> builder (credit targets, validator per attempt) -> final check -> metrics

A failed course that cannot be scheduled this term is reported as a failure
rather than left out of the schedule.

Input problems and unsatisfiable constraints come back as a failed
GenerationResult carrying the run's diagnostics. Anything else is logged and
re-raised, because continuing on corrupt state could produce a schedule that
breaks the rules.
"""

import os
import sys
import traceback
from typing import Dict, List, Optional, Union

from .catalog import build_catalog_index, load_course_catalog, load_json
from .chain_scorer import ChainScorer
from .constants import (
    LAB_CONSTRAINTS,
    PHASE_BUILD,
    PHASE_COMPLETE,
    PHASE_FILTER,
    PHASE_INIT,
    PHASE_PRIORITY,
    PHASE_VALIDATE,
    SPECIAL_COURSE_RULES,
)
from .errors import ScheduleInputError
from .metrics import compute_metrics
from .models import GenerationResult, Preferences, Student
from .plan_exporter import save_outputs
from .prereq_resolver import filter_eligible_courses, student_credit_hours
from .priority import prioritize_courses
from .run_log import RunLog
from .schedule_validator import validate_schedule
from .timeslots import current_semester_id, parse_semester, semester_type
from .unit_balancer import BuildContext, build_schedule


def _failure(message: str, log: RunLog, **details) -> GenerationResult:
    log.error(message, details or None)
    summary = log.summary()
    summary.update(details)
    return GenerationResult(success=False, error=message, details=summary, log=log)


def generate_schedule(courses: List[dict], offering: Optional[dict],
                      student: Union[Student, dict], preferences: Union[Preferences, dict, None], *,
                      semester: Optional[str] = None,
                      lab_limits: Optional[Dict[str, int]] = None,
                      special_rules: Optional[Dict[str, dict]] = None,
                      echo: bool = False) -> GenerationResult:
    """
    Build one validated schedule.

    Parameters:
        courses (list of dict): course catalog documents
        offering (dict): {"semester": "YYYY-N", "courses": [{"courseId", "sections": [...]}]}
        student (Student or dict): completed attempts and earned credit hours
        preferences (Preferences or dict): the student's preferences
        semester (str): semester id overriding the offering's own
        lab_limits (dict): {"min_labs", "max_labs"} overriding LAB_CONSTRAINTS
        special_rules (dict): course id -> rule, replacing SPECIAL_COURSE_RULES
        echo (bool): print log entries as they are written

    Returns:
        GenerationResult; .log holds the full trace of this run
    """
    log = RunLog(echo=echo)
    try:
        log.set_phase(PHASE_INIT)
        if preferences is None:
            raise ScheduleInputError("Preferences not found")
        if not isinstance(student, Student):
            student = Student.from_dict(student)
        if not isinstance(preferences, Preferences):
            preferences = Preferences.from_dict(preferences)

        semester_id = semester or (offering or {}).get("semester") or current_semester_id()
        parse_semester(semester_id)
        sem_type = semester_type(semester_id)
        log.info("Run started", {
            "studentId": student.student_id,
            "semester": semester_id,
            "semesterType": sem_type.value,
            "targetCreditHours": preferences.target_credit_hours,
        })

        index = build_catalog_index(courses, offering, log)
        earned = student_credit_hours(student, index)

        log.set_phase(PHASE_FILTER)
        scorer = ChainScorer(index)
        eligible = filter_eligible_courses(index, student, preferences, sem_type, scorer.chain_value,
                                           log, special_rules)
        if eligible.unavailable_failed:
            ids = ", ".join(eligible.unavailable_failed)
            noun = "course" if len(eligible.unavailable_failed) == 1 else "courses"
            verb = "is" if len(eligible.unavailable_failed) == 1 else "are"
            return _failure(f"Failed {noun} {ids} {verb} not offered this semester", log,
                            unavailableFailedCourses=list(eligible.unavailable_failed))
        if not eligible.courses:
            return _failure("No eligible courses found", log)

        log.set_phase(PHASE_PRIORITY)
        improving = {cid for cid, reason in eligible.reasons.items() if reason == "improvement"}
        ranked = prioritize_courses(eligible.courses, scorer.chain_value, preferences, eligible.failed, log,
                                    improving=improving)

        log.set_phase(PHASE_BUILD)
        ctx = BuildContext(
            preferences=preferences,
            sem_type=sem_type,
            earned_hours=earned,
            failed=set(eligible.failed),
            lab_limits=dict(lab_limits or LAB_CONSTRAINTS),
            special_rules=dict(SPECIAL_COURSE_RULES if special_rules is None else special_rules),
        )
        schedule, _ = build_schedule([course for course, _ in ranked], ctx, log,
                                     student_id=student.student_id, semester=semester_id)
        if schedule is None:
            return _failure("Could not generate valid schedule", log)

        log.set_phase(PHASE_VALIDATE)
        report = validate_schedule(schedule, sem_type, earned, ctx.failed,
                                   lab_limits=ctx.lab_limits, special_rules=ctx.special_rules)
        if not report["valid"]:
            return _failure("Final validation rejected the schedule", log, validation=report)

        log.set_phase(PHASE_COMPLETE)
        metrics = compute_metrics(schedule, student, preferences, index)
        log.info("Schedule complete", {"courses": schedule.course_ids, "metrics": metrics.as_dict()})
        return GenerationResult(success=True, schedule=schedule, metrics=metrics,
                                details={"validation": report}, log=log)

    except ScheduleInputError as e:
        return _failure(str(e), log)
    except Exception as e:
        log.error("Schedule generation failed", {
            "error_message": str(e),
            "error_type": type(e).__name__,
            "traceback": traceback.format_exc(),
        })
        raise

# ─── Command line ─────────────────────────────────────────────────────────────

USAGE = (
    "usage: schedule-generator CATALOG SECTIONS STUDENT PREFERENCES [OUTPUT_DIR] [-v]\n"
    "       schedule-generator --demo [OUTPUT_DIR] [-v]"
)


def _print_summary(result: GenerationResult) -> None:
    if not result.success:
        print(f"No schedule: {result.error}")
        for attempt in result.details.get("attempts", []):
            print(f"  target {attempt['targetCredits']}: {attempt['outcome']} - {'; '.join(attempt['reasons'])}")
        return
    print(f"Schedule for {result.schedule.student_id} ({result.schedule.semester}), "
          f"{result.total_credit_hours} credit hours")
    for sc in result.schedule:
        print(f"  {sc.course_id}  {sc.course.course_name:<40} {sc.days:<28} {sc.time}")
    m = result.metrics
    print(f"Difficulty: {m.difficulty_score} ({m.difficulty_level})  Balance: {m.balance_score}")


def main(argv: Optional[List[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    echo = False
    for flag in ("-v", "--verbose"):
        if flag in args:
            args.remove(flag)
            echo = True

    if args and args[0] == "--demo":
        from .sample_data import demo_inputs
        courses, offering, student, preferences = demo_inputs()
        output_dir = args[1] if len(args) > 1 else "schedule_output"
    elif len(args) in (4, 5):
        courses = load_course_catalog(args[0])
        offering = load_json(args[1])
        student = load_json(args[2])
        preferences = load_json(args[3])
        output_dir = args[4] if len(args) == 5 else "schedule_output"
    else:
        print(USAGE)
        return 2

    result = generate_schedule(courses, offering, student, preferences, echo=echo)
    _print_summary(result)

    os.makedirs(output_dir, exist_ok=True)
    save_outputs(result, output_dir)
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())

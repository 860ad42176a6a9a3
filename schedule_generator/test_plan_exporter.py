"""
test_plan_exporter.py - output documents, table export and the distribution chart.
"""

import json

from schedule_generator.generate_schedule import generate_schedule
from schedule_generator.plan_exporter import (
    SCHEDULE_TABLE_COLUMNS,
    export_generation_result,
    plot_category_distribution,
    save_outputs,
    save_schedule_to_json,
    schedule_to_frame,
)
from schedule_generator.sample_data import demo_inputs


def create_test_data(target=16):
    courses, offering, student, preferences = demo_inputs()
    preferences["targetCreditHours"] = target
    return generate_schedule(courses, offering, student, preferences)


def test_export_success_documents():
    result = create_test_data()
    docs = export_generation_result(result)

    assert docs["success"] and docs["error"] is None
    assert docs["schedule"]["totalCreditHours"] == 16
    assert docs["schedule"]["status"] == "generated"
    assert [c["courseId"] for c in docs["schedule"]["courses"]] == result.schedule.course_ids
    assert docs["metrics"]["totalCreditHours"] == 16
    assert docs["log"]["currentPhase"] == "COMPLETION"
    assert docs["log"]["attempts"][-1]["outcome"] == "accepted"


def test_export_failure_documents():
    courses, offering, student, preferences = demo_inputs()
    result = generate_schedule(courses, {"courses": []}, student, preferences)
    docs = export_generation_result(result)

    assert not docs["success"]
    assert docs["schedule"] is None and docs["metrics"] is None
    assert docs["error"] == "No available sections found for current semester"
    assert docs["log"]["errors"]


def test_schedule_table():
    result = create_test_data()
    df = schedule_to_frame(result.schedule)

    assert list(df.columns) == SCHEDULE_TABLE_COLUMNS
    assert len(df) == len(result.schedule)
    assert df["creditHours"].sum() == 16
    assert df["isLab"].sum() >= 1


def test_save_schedule_to_json(tmp_path):
    path = tmp_path / "doc.json"
    save_schedule_to_json({"name": "Programación", "n": 1}, str(path))
    assert json.loads(path.read_text(encoding="utf-8")) == {"name": "Programación", "n": 1}


def test_plot_category_distribution(tmp_path):
    path = tmp_path / "chart.png"
    plot_category_distribution({"networking": 0.0, "hardware": 20.0, "software": 60.0, "electrical": 0.0},
                               str(path), title="test")
    assert path.stat().st_size > 0


def test_save_outputs(tmp_path):
    paths = save_outputs(create_test_data(), str(tmp_path))
    assert set(paths) == {"log", "trace", "schedule", "metrics", "table", "chart"}

    schedule = json.loads((tmp_path / "schedule.json").read_text(encoding="utf-8"))
    assert schedule["totalCreditHours"] == 16
    assert "difficultyScore" in json.loads((tmp_path / "metrics.json").read_text(encoding="utf-8"))


def test_save_outputs_on_failure(tmp_path):
    courses, offering, student, _ = demo_inputs()
    failed = generate_schedule(courses, offering, student, None)

    paths = save_outputs(failed, str(tmp_path))
    assert set(paths) == {"log", "trace"}
    assert not (tmp_path / "schedule.json").exists()
    log = json.loads((tmp_path / "schedule_log.json").read_text(encoding="utf-8"))
    assert log["errors"][0]["message"] == "Preferences not found"

import os
import tempfile

from schedule_generator.constants import PHASE_BUILD, PHASE_INIT
from schedule_generator.run_log import RunLog


def test_entries_carry_phase_and_data():
    log = RunLog()
    assert log.phase == PHASE_INIT

    log.info("starting", {"target": 15})
    log.set_phase(PHASE_BUILD)
    log.warning("careful")
    log.error("broken", {"why": "test"})

    assert [e["phase"] for e in log.entries] == [PHASE_INIT, PHASE_BUILD, PHASE_BUILD, PHASE_BUILD]
    assert log.entries[0]["data"] == {"target": 15}
    assert "data" not in log.entries[2]
    assert [w["message"] for w in log.warnings] == ["careful"]
    assert [e["message"] for e in log.errors] == ["broken"]


def test_runs_do_not_share_state():
    first, second = RunLog(), RunLog()
    first.warning("only in first")
    first.count("time_conflicts")
    assert second.warnings == []
    assert second.stats["time_conflicts"] == 0


def test_attempts_and_summary():
    log = RunLog()
    log.record_attempt(15, "rejected", ["0 labs"], totalCredits=15)
    log.record_attempt(16, "accepted", [])

    summary = log.summary()
    assert summary["stats"]["attempt_count"] == 2
    assert summary["attempts"][0] == {"targetCredits": 15, "outcome": "rejected",
                                      "reasons": ["0 labs"], "totalCredits": 15}
    assert summary["currentPhase"] == PHASE_INIT


def test_echo_prints(capsys):
    log = RunLog(echo=True)
    log.info("hello", {"a": 1})
    out = capsys.readouterr().out
    assert "INFO" in out and "hello" in out and '"a": 1' in out


def test_save():
    log = RunLog()
    log.info("saved entry")
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "trace.txt")
        log.save(path)
        with open(path, encoding="utf-8") as f:
            assert "saved entry" in f.read()

import pytest

from schedule_generator.chain_scorer import ChainScorer, build_dependents
from schedule_generator.constants import Category
from schedule_generator.models import Course


def make_course(course_id, category=Category.MAJOR_MANDATORY, prereqs=()):
    return Course(course_id=course_id, course_name=course_id, category=category,
                  credit_hours=3, prerequisites=tuple(prereqs))


def create_test_data():
    """A unlocks B and D; B unlocks C."""
    courses = [
        make_course("A"),
        make_course("B", prereqs=["A"]),
        make_course("C", Category.COLLEGE_MANDATORY, prereqs=["B"]),
        make_course("D", Category.MAJOR_ELECTIVE, prereqs=["A"]),
    ]
    return {c.course_id: c for c in courses}


def test_build_dependents():
    deps = build_dependents(create_test_data())
    assert deps == {"A": ["B", "D"], "B": ["C"]}


def test_forward_value():
    scorer = ChainScorer(create_test_data())
    # B -> C: (1 + 0) * 0.9^0 * 1.5 (college) * 1.0 (C unlocks nothing)
    assert scorer.forward_value("B") == pytest.approx(1.5)
    # A -> B: (1 + 0.9 * 1.5) * 2.0 * 1.2,  A -> D: 1.0
    assert scorer.forward_value("A") == pytest.approx(2.35 * 2.0 * 1.2 + 1.0)
    assert scorer.forward_value("C") == 0


def test_backward_value():
    scorer = ChainScorer(create_test_data())
    assert scorer.backward_value("A") == 0
    assert scorer.backward_value("B") == pytest.approx(1.0)
    # C <- B <- A: (1 + 0.7) * 0.7^0
    assert scorer.backward_value("C") == pytest.approx(1.7)


def test_chain_value_blend():
    scorer = ChainScorer(create_test_data())
    assert scorer.chain_value("A") == pytest.approx(0.7 * 6.64)
    assert scorer.chain_value("C") == pytest.approx(0.3 * 1.7)
    assert scorer.chain_value("UNKNOWN") == 0


def test_determinism_across_runs():
    index = create_test_data()
    first, second = ChainScorer(index), ChainScorer(index)

    # Different scoring order, same answers
    a1, c1 = first.chain_value("A"), first.chain_value("C")
    c2, a2 = second.chain_value("C"), second.chain_value("A")
    assert (a1, c1) == (a2, c2)
    assert first.chain_value("A") == a1, "Repeated calls return the same value"


def test_cycle_is_safe():
    index = {
        "X": make_course("X", prereqs=["Y"]),
        "Y": make_course("Y", prereqs=["X"]),
        "Z": make_course("Z", prereqs=["Z"]),
    }
    scorer = ChainScorer(index)
    assert scorer.forward_value("X") == pytest.approx(2.4)
    assert scorer.backward_value("X") == pytest.approx(1.0)
    assert scorer.chain_value("Z") == 0, "Self-loops contribute nothing"


def test_depth_caps():
    ids = [f"C{i}" for i in range(10)]
    index = {cid: make_course(cid, prereqs=[ids[i - 1]] if i else []) for i, cid in enumerate(ids)}
    scorer = ChainScorer(index)

    # Backward stops after three levels, so long chains score like a 3-deep one
    assert scorer.backward_value("C9") == pytest.approx(scorer.backward_value("C3"))
    assert scorer.backward_value("C9") == pytest.approx(1 + (1 + 0.49) * 0.7)
    # Forward stops past depth 5: C0 and C1 see the same number of levels
    assert scorer.forward_value("C0") == pytest.approx(scorer.forward_value("C1"))

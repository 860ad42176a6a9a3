# chain_scorer.py
#
# How structurally important a course is in the prerequisite graph.
#   forward  = what it unlocks (dependents, their dependents, ...)
#   backward = how deep its own prerequisite chain runs
# The graph comes from user data and may contain cycles, so every traversal
# carries its own visited set and a depth cap.

from typing import Dict, FrozenSet, List, Mapping

from .constants import (
    BACKWARD_DECAY,
    BACKWARD_MAX_DEPTH,
    BACKWARD_SHARE,
    BRANCHING_STEP,
    CHAIN_CATEGORY_WEIGHTS,
    FORWARD_DECAY,
    FORWARD_MAX_DEPTH,
    FORWARD_SHARE,
)
from .models import Course


def build_dependents(index: Mapping[str, Course]) -> Dict[str, List[str]]:
    """Reverse the prerequisite edges: prereq id -> ids of courses that list it."""
    dependents: Dict[str, List[str]] = {}
    for course in index.values():
        for prereq in course.prerequisites:
            if course.course_id not in dependents.setdefault(prereq, []):
                dependents[prereq].append(course.course_id)
    return dependents


class ChainScorer:
    """
    Chain values over one catalog.

    Create one scorer per generation run; its memo tables live and die with
    the instance. Only top-level results are memoized, so a course's value
    never depends on which course was scored first.
    """

    def __init__(self, index: Mapping[str, Course]):
        self.index = index
        self.dependents = build_dependents(index)
        self._forward_memo: Dict[str, float] = {}
        self._backward_memo: Dict[str, float] = {}

    def _category_weight(self, course_id: str) -> float:
        course = self.index.get(course_id)
        if course is None:
            return 1.0
        return CHAIN_CATEGORY_WEIGHTS.get(course.category, 1.0)

    def _forward(self, course_id: str, depth: int, visited: FrozenSet[str]) -> float:
        if depth > FORWARD_MAX_DEPTH:
            return 0.0
        total = 0.0
        for dep in self.dependents.get(course_id, ()):
            if dep in visited:
                continue
            branching = 1 + BRANCHING_STEP * len(self.dependents.get(dep, ()))
            inner = self._forward(dep, depth + 1, visited | {dep})
            total += (1 + inner) * FORWARD_DECAY ** depth * self._category_weight(dep) * branching
        return total

    def _backward(self, course_id: str, depth: int, visited: FrozenSet[str]) -> float:
        if depth >= BACKWARD_MAX_DEPTH:
            return 0.0
        course = self.index.get(course_id)
        if course is None:
            return 0.0
        total = 0.0
        for prereq in course.prerequisites:
            if prereq in visited:
                continue
            inner = self._backward(prereq, depth + 1, visited | {prereq})
            total += (1 + inner) * BACKWARD_DECAY ** depth
        return total

    def forward_value(self, course_id: str) -> float:
        if course_id not in self._forward_memo:
            self._forward_memo[course_id] = self._forward(course_id, 0, frozenset({course_id}))
        return self._forward_memo[course_id]

    def backward_value(self, course_id: str) -> float:
        if course_id not in self._backward_memo:
            self._backward_memo[course_id] = self._backward(course_id, 0, frozenset({course_id}))
        return self._backward_memo[course_id]

    def chain_value(self, course_id: str) -> float:
        return FORWARD_SHARE * self.forward_value(course_id) + BACKWARD_SHARE * self.backward_value(course_id)

"""
In-memory prerequisite graph built from a snapshot of relationship records.

Built fresh for every analysis call and discarded afterwards; nothing is cached.
"""

import logging
from typing import Iterable, List, Optional

from .models import Course, Graph, NamedEdge, PrerequisiteEdge

logger = logging.getLogger(__name__)


def named_edges(edges: Iterable[PrerequisiteEdge]) -> List[NamedEdge]:
    """Resolve edges to (course name, prerequisite name) pairs, keeping order"""
    return [(edge.course_name, edge.prerequisite_name) for edge in edges]


class PrerequisiteGraph:
    """
    Adjacency mapping from course name to the ordered names of its direct prerequisites.

    Courses without edges are still representable: pass them as `courses` to get
    a key with an empty list, otherwise a missing key means "no known edges".
    Cycles are not rejected here; detecting them is a separate analysis.
    """

    def __init__(self, adjacency: Optional[Graph] = None):
        self._adjacency: Graph = {course: list(prereqs) for course, prereqs in (adjacency or {}).items()}

    @classmethod
    def from_named_edges(
        cls,
        edges: Iterable[NamedEdge],
        courses: Optional[Iterable[str]] = None
    ) -> "PrerequisiteGraph":
        adjacency: Graph = {}
        edge_count = 0
        for course_name, prerequisite_name in edges:
            adjacency.setdefault(course_name, []).append(prerequisite_name)
            edge_count += 1

        if courses is not None:
            for course_name in courses:
                adjacency.setdefault(course_name, [])

        logger.debug(f"Built prerequisite graph: {len(adjacency)} courses, {edge_count} edges")
        return cls(adjacency)

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[PrerequisiteEdge],
        courses: Optional[Iterable[Course]] = None
    ) -> "PrerequisiteGraph":
        course_names = [c.name for c in courses] if courses is not None else None
        return cls.from_named_edges(named_edges(edges), course_names)

    def prerequisites_of(self, course_name: str) -> List[str]:
        return list(self._adjacency.get(course_name, []))

    def has_prerequisites(self, course_name: str) -> bool:
        return bool(self._adjacency.get(course_name))

    def courses(self) -> List[str]:
        """Course names in insertion order"""
        return list(self._adjacency.keys())

    def edge_count(self) -> int:
        return sum(len(prereqs) for prereqs in self._adjacency.values())

    def as_dict(self) -> Graph:
        return {course: list(prereqs) for course, prereqs in self._adjacency.items()}

    def __contains__(self, course_name: str) -> bool:
        return course_name in self._adjacency

    def __len__(self) -> int:
        return len(self._adjacency)

"""
Record store interface for courses and prerequisite relationships,
plus an in-memory implementation used by tests and the demo runner.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Protocol

from .exceptions import DuplicateCourseError
from .models import Course, PrerequisiteEdge

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Operations the analysis service and CSV importer need from storage"""

    def insert_course(self, course: Course) -> int: ...

    def find_course_by_id(self, course_id: int) -> Optional[Course]: ...

    def find_course_by_name(self, name: str) -> Optional[Course]: ...

    def list_all_courses(self) -> List[Course]: ...

    def update_course(self, course: Course) -> bool: ...

    def delete_course(self, course_id: int) -> bool: ...

    def search_courses(self, term: str) -> List[Course]: ...

    def insert_prerequisite(self, edge: PrerequisiteEdge) -> int: ...

    def list_prerequisite_edges(self) -> List[PrerequisiteEdge]: ...

    def list_prerequisite_edges_for_course(self, course_id: int) -> List[PrerequisiteEdge]: ...

    def list_courses_requiring_prerequisite(self, prerequisite_course_id: int) -> List[PrerequisiteEdge]: ...

    def prerequisite_exists(self, course_id: int, prerequisite_course_id: int) -> bool: ...

    def delete_prerequisite(self, prerequisite_id: int) -> bool: ...

    def delete_prerequisites_for_course(self, course_id: int) -> bool: ...

    def close(self) -> None: ...


def check_not_self_referential(edge: PrerequisiteEdge) -> None:
    if edge.course_id == edge.prerequisite_course_id:
        raise ValueError(f"Course {edge.course_id} cannot be its own prerequisite")


class InMemoryRecordStore:
    """
    Dictionary-backed record store with sequential integer ids.

    Returns copies of stored records so callers cannot mutate store state.
    """

    def __init__(self) -> None:
        self._courses: Dict[int, Course] = {}
        self._edges: Dict[int, PrerequisiteEdge] = {}
        self._next_course_id = 1
        self._next_edge_id = 1

    def close(self) -> None:
        pass

    # ---- courses ----

    def insert_course(self, course: Course) -> int:
        if self.find_course_by_name(course.name) is not None:
            raise DuplicateCourseError(course.name)

        now = datetime.now()
        course_id = self._next_course_id
        self._next_course_id += 1

        stored = course.model_copy(update={"id": course_id, "created_at": now, "updated_at": now})
        self._courses[course_id] = stored
        course.id = course_id
        logger.debug(f"Course inserted with ID: {course_id}")
        return course_id

    def find_course_by_id(self, course_id: int) -> Optional[Course]:
        course = self._courses.get(course_id)
        return course.model_copy() if course else None

    def find_course_by_name(self, name: str) -> Optional[Course]:
        for course in self._courses.values():
            if course.name == name:
                return course.model_copy()
        return None

    def list_all_courses(self) -> List[Course]:
        return [c.model_copy() for c in sorted(self._courses.values(), key=lambda c: c.name)]

    def update_course(self, course: Course) -> bool:
        if course.id not in self._courses:
            return False
        existing = self.find_course_by_name(course.name)
        if existing is not None and existing.id != course.id:
            raise DuplicateCourseError(course.name)

        created_at = self._courses[course.id].created_at
        self._courses[course.id] = course.model_copy(
            update={"created_at": created_at, "updated_at": datetime.now()}
        )
        logger.debug(f"Course updated: {course.id}")
        return True

    def delete_course(self, course_id: int) -> bool:
        if self._courses.pop(course_id, None) is None:
            return False
        touching = [
            edge_id for edge_id, edge in self._edges.items()
            if course_id in (edge.course_id, edge.prerequisite_course_id)
        ]
        for edge_id in touching:
            del self._edges[edge_id]
        logger.debug(f"Course deleted: {course_id} ({len(touching)} relationships removed)")
        return True

    def search_courses(self, term: str) -> List[Course]:
        needle = term.lower()
        return [
            c for c in self.list_all_courses()
            if needle in c.name.lower() or needle in (c.description or "").lower()
        ]

    # ---- prerequisite relationships ----

    def insert_prerequisite(self, edge: PrerequisiteEdge) -> int:
        check_not_self_referential(edge)
        for course_id in (edge.course_id, edge.prerequisite_course_id):
            if course_id not in self._courses:
                raise ValueError(f"Unknown course id: {course_id}")

        edge_id = self._next_edge_id
        self._next_edge_id += 1
        self._edges[edge_id] = edge.model_copy(
            update={"id": edge_id, "created_at": datetime.now(), "course": None, "prerequisite_course": None}
        )
        edge.id = edge_id
        logger.debug(f"Prerequisite inserted with ID: {edge_id}")
        return edge_id

    def _resolved(self, edge: PrerequisiteEdge, course: bool, prerequisite: bool) -> PrerequisiteEdge:
        update = {}
        if course:
            update["course"] = self._courses[edge.course_id].model_copy()
        if prerequisite:
            update["prerequisite_course"] = self._courses[edge.prerequisite_course_id].model_copy()
        return edge.model_copy(update=update)

    def list_prerequisite_edges(self) -> List[PrerequisiteEdge]:
        edges = [self._resolved(e, course=True, prerequisite=True) for e in self._edges.values()]
        return sorted(edges, key=lambda e: (e.course_name, e.prerequisite_name))

    def list_prerequisite_edges_for_course(self, course_id: int) -> List[PrerequisiteEdge]:
        return [
            self._resolved(e, course=False, prerequisite=True)
            for e in self._edges.values() if e.course_id == course_id
        ]

    def list_courses_requiring_prerequisite(self, prerequisite_course_id: int) -> List[PrerequisiteEdge]:
        return [
            self._resolved(e, course=True, prerequisite=False)
            for e in self._edges.values() if e.prerequisite_course_id == prerequisite_course_id
        ]

    def prerequisite_exists(self, course_id: int, prerequisite_course_id: int) -> bool:
        return any(
            e.course_id == course_id and e.prerequisite_course_id == prerequisite_course_id
            for e in self._edges.values()
        )

    def delete_prerequisite(self, prerequisite_id: int) -> bool:
        return self._edges.pop(prerequisite_id, None) is not None

    def delete_prerequisites_for_course(self, course_id: int) -> bool:
        doomed = [edge_id for edge_id, e in self._edges.items() if e.course_id == course_id]
        for edge_id in doomed:
            del self._edges[edge_id]
        return len(doomed) > 0

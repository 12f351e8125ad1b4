"""
Prerequisite analysis service.

Fetches a fresh snapshot from the record store on every call and hands it to
the graph engine. The store is passed in at construction; nothing is cached
between calls, so concurrent callers each work on their own graph.
Store failures propagate unchanged.
"""

import logging
import time
from typing import List, Tuple

from .chains import find_prerequisite_chains
from .cycles import find_circular_dependencies
from .exceptions import CourseNotFoundError
from .models import (
    AnalysisSummary, ChainSet, CircularDependencyReport, Course, PopularityList, PrerequisiteEdge
)
from .popularity import DEFAULT_MIN_COUNT, find_popular_prerequisites
from .prerequisite_graph import PrerequisiteGraph
from .record_store import RecordStore
from .report import REPORT_POPULARITY_THRESHOLD, generate_report

logger = logging.getLogger(__name__)


class PrerequisiteAnalysisService:
    """Answers structural questions about the prerequisite graph held in a record store"""

    def __init__(self, store: RecordStore):
        self.store = store

    def _require_course(self, course_name: str) -> Course:
        course = self.store.find_course_by_name(course_name)
        if course is None:
            logger.warning(f"Course not found: {course_name}")
            raise CourseNotFoundError(course_name)
        return course

    def _snapshot(self) -> Tuple[List[Course], List[PrerequisiteEdge], PrerequisiteGraph]:
        """Courses, edges and the graph built from them, each fetched once"""
        courses = self.store.list_all_courses()
        edges = self.store.list_prerequisite_edges()
        return courses, edges, PrerequisiteGraph.from_edges(edges, courses)

    def _snapshot_graph(self) -> PrerequisiteGraph:
        edges = self.store.list_prerequisite_edges()
        return PrerequisiteGraph.from_edges(edges)

    def get_all_prerequisite_relationships(self) -> List[PrerequisiteEdge]:
        return self.store.list_prerequisite_edges()

    def get_prerequisites_for_course(self, course_name: str) -> List[PrerequisiteEdge]:
        """Direct prerequisites of a course; empty when it exists but has none"""
        course = self._require_course(course_name)
        return self.store.list_prerequisite_edges_for_course(course.id)

    def get_courses_requiring_prerequisite(self, prerequisite_name: str) -> List[PrerequisiteEdge]:
        prerequisite = self._require_course(prerequisite_name)
        return self.store.list_courses_requiring_prerequisite(prerequisite.id)

    def find_prerequisite_chains(self, course_name: str) -> ChainSet:
        start_time = time.time()
        _, _, graph = self._snapshot()
        if course_name not in graph:
            logger.warning(f"Course not found: {course_name}")
            raise CourseNotFoundError(course_name)

        chain_set = find_prerequisite_chains(course_name, graph)
        logger.debug(f"Chain enumeration for {course_name} took {time.time() - start_time:.3f}s")
        return chain_set

    def find_courses_with_no_prerequisites(self) -> List[Course]:
        courses, _, graph = self._snapshot()
        return [course for course in courses if not graph.has_prerequisites(course.name)]

    def find_popular_prerequisites(self, min_count: int = DEFAULT_MIN_COUNT) -> PopularityList:
        return find_popular_prerequisites(self.store.list_prerequisite_edges(), min_count)

    def find_circular_dependencies(self) -> CircularDependencyReport:
        return find_circular_dependencies(self._snapshot_graph())

    def generate_prerequisite_report(self) -> str:
        return generate_report(self.store.list_prerequisite_edges())

    def run_full_analysis(self) -> AnalysisSummary:
        """
        Relationship count, report, cycles, popular prerequisites and courses
        without prerequisites, all computed from a single snapshot.
        """
        start_time = time.time()
        courses, edges, graph = self._snapshot()

        summary = AnalysisSummary(
            relationship_count=len(edges),
            report=generate_report(edges),
            circular_dependencies=find_circular_dependencies(graph),
            popular_prerequisites=find_popular_prerequisites(edges, REPORT_POPULARITY_THRESHOLD),
            courses_without_prerequisites=[c for c in courses if not graph.has_prerequisites(c.name)],
        )
        logger.info(
            f"Full analysis of {len(courses)} courses and {len(edges)} relationships "
            f"completed in {time.time() - start_time:.2f}s"
        )
        return summary

"""
Tests for PrerequisiteAnalysisService against an in-memory record store
"""

import pytest
from unittest.mock import Mock

from graph_analysis.analysis_service import PrerequisiteAnalysisService
from graph_analysis.exceptions import CourseNotFoundError
from graph_analysis.models import Course, PrerequisiteEdge
from graph_analysis.record_store import InMemoryRecordStore


class TestAnalysisService:

    def test_all_relationships(self, analysis_service):
        edges = analysis_service.get_all_prerequisite_relationships()
        assert [(e.course_name, e.prerequisite_name) for e in edges] == [
            ("Calculus2", "Calculus1"),
            ("Physics1", "Calculus1"),
        ]

    def test_prerequisites_for_course(self, analysis_service):
        edges = analysis_service.get_prerequisites_for_course("Calculus2")
        assert [e.prerequisite_name for e in edges] == ["Calculus1"]
        assert analysis_service.get_prerequisites_for_course("Calculus1") == []

    def test_courses_requiring_prerequisite(self, analysis_service):
        edges = analysis_service.get_courses_requiring_prerequisite("Calculus1")
        assert [e.course_name for e in edges] == ["Calculus2", "Physics1"]

    @pytest.mark.parametrize("method", [
        "get_prerequisites_for_course",
        "get_courses_requiring_prerequisite",
        "find_prerequisite_chains",
    ])
    def test_unknown_course_raises(self, analysis_service, method):
        with pytest.raises(CourseNotFoundError) as exc_info:
            getattr(analysis_service, method)("Calculus9")
        assert exc_info.value.course_name == "Calculus9"

    def test_chains(self, linear_chain_store):
        service = PrerequisiteAnalysisService(linear_chain_store)
        assert service.find_prerequisite_chains("A").chains == [["A", "B", "C"]]
        assert service.find_prerequisite_chains("C").chains == [["C"]]

    def test_chains_through_cycle(self, cyclic_store):
        service = PrerequisiteAnalysisService(cyclic_store)
        assert service.find_prerequisite_chains("X").chains == [["X", "Y"]]

    def test_courses_with_no_prerequisites(self, analysis_service):
        assert [c.name for c in analysis_service.find_courses_with_no_prerequisites()] == ["Calculus1"]

    def test_isolated_course_has_no_prerequisites(self, calculus_store):
        calculus_store.insert_course(Course(name="Writing1"))
        service = PrerequisiteAnalysisService(calculus_store)
        assert [c.name for c in service.find_courses_with_no_prerequisites()] == ["Calculus1", "Writing1"]

    def test_popular_prerequisites(self, analysis_service):
        assert analysis_service.find_popular_prerequisites().names() == ["Calculus1"]
        assert analysis_service.find_popular_prerequisites(3).names() == []

    def test_circular_dependencies(self, analysis_service, cyclic_store):
        assert not analysis_service.find_circular_dependencies().has_cycles

        report = PrerequisiteAnalysisService(cyclic_store).find_circular_dependencies()
        assert len(report.cycles) == 1
        assert report.cycles[0].startswith("Circular dependency detected: ")

    def test_report(self, analysis_service):
        report = analysis_service.generate_prerequisite_report()
        assert "Total prerequisite relationships: 2" in report
        assert "Courses with prerequisites: 2" in report
        assert "Courses that are prerequisites: 1" in report

    def test_empty_store(self):
        service = PrerequisiteAnalysisService(InMemoryRecordStore())
        assert service.get_all_prerequisite_relationships() == []
        assert service.find_courses_with_no_prerequisites() == []
        assert not service.find_circular_dependencies().has_cycles
        assert service.generate_prerequisite_report().endswith("No prerequisite relationships found.\n")

    def test_repeated_calls_give_same_results(self, analysis_service):
        assert analysis_service.generate_prerequisite_report() == analysis_service.generate_prerequisite_report()
        assert analysis_service.find_circular_dependencies() == analysis_service.find_circular_dependencies()
        assert analysis_service.find_popular_prerequisites() == analysis_service.find_popular_prerequisites()

    def test_every_call_reads_a_fresh_snapshot(self, analysis_service, calculus_store):
        assert not analysis_service.find_circular_dependencies().has_cycles

        calculus1 = calculus_store.find_course_by_name("Calculus1")
        calculus2 = calculus_store.find_course_by_name("Calculus2")
        calculus_store.insert_prerequisite(PrerequisiteEdge(course_id=calculus1.id, prerequisite_course_id=calculus2.id))

        assert analysis_service.find_circular_dependencies().has_cycles

    def test_full_analysis(self, analysis_service):
        summary = analysis_service.run_full_analysis()
        assert summary.relationship_count == 2
        assert summary.report == analysis_service.generate_prerequisite_report()
        assert not summary.circular_dependencies.has_cycles
        assert summary.popular_prerequisites.names() == ["Calculus1"]
        assert [c.name for c in summary.courses_without_prerequisites] == ["Calculus1"]

    def test_store_errors_propagate(self):
        store = Mock()
        store.list_prerequisite_edges.side_effect = ConnectionError("store unreachable")
        service = PrerequisiteAnalysisService(store)
        with pytest.raises(ConnectionError):
            service.find_circular_dependencies()

    def test_chains_and_no_prerequisites_read_one_snapshot(self, calculus_store):
        store = Mock(wraps=calculus_store)
        service = PrerequisiteAnalysisService(store)

        assert service.find_prerequisite_chains("Physics1").chains == [["Physics1", "Calculus1"]]
        assert store.list_all_courses.call_count == 1
        assert store.list_prerequisite_edges.call_count == 1
        store.find_course_by_name.assert_not_called()

        store.reset_mock()
        assert [c.name for c in service.find_courses_with_no_prerequisites()] == ["Calculus1"]
        assert store.list_all_courses.call_count == 1
        assert store.list_prerequisite_edges.call_count == 1

    def test_chains_for_course_without_relationships(self, calculus_store):
        calculus_store.insert_course(Course(name="Writing1"))
        service = PrerequisiteAnalysisService(calculus_store)
        assert service.find_prerequisite_chains("Writing1").chains == [["Writing1"]]

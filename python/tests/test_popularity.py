"""
Tests for popular prerequisite ranking
"""

import pytest

from graph_analysis.popularity import count_dependents, find_popular_prerequisites

from conftest import make_edge


@pytest.fixture
def edges():
    return [
        make_edge("Calculus2", "Calculus1"),
        make_edge("Chemistry2", "Chemistry1"),
        make_edge("Physics1", "Calculus1"),
        make_edge("Physics2", "Chemistry1"),
        make_edge("Statistics", "Calculus1"),
        make_edge("Writing2", "Writing1"),
    ]


class TestPopularity:

    def test_count_dependents_in_first_seen_order(self, edges):
        assert count_dependents(edges) == {"Calculus1": 3, "Chemistry1": 2, "Writing1": 1}
        assert list(count_dependents(edges)) == ["Calculus1", "Chemistry1", "Writing1"]

    def test_default_threshold_is_two(self, edges):
        popular = find_popular_prerequisites(edges)
        assert popular.min_count == 2
        assert popular.names() == ["Calculus1", "Chemistry1"]
        assert [p.dependent_count for p in popular.prerequisites] == [3, 2]

    def test_threshold_three(self, edges):
        assert find_popular_prerequisites(edges, 3).names() == ["Calculus1"]

    def test_threshold_one_lists_every_prerequisite(self, edges):
        assert find_popular_prerequisites(edges, 1).names() == ["Calculus1", "Chemistry1", "Writing1"]

    def test_raising_threshold_never_adds_courses(self, edges):
        previous = None
        for min_count in range(1, 6):
            names = set(find_popular_prerequisites(edges, min_count).names())
            if previous is not None:
                assert names <= previous
            previous = names

    def test_first_edge_record_is_reported(self):
        first = make_edge("B", "A", credit_hours=4)
        second = make_edge("C", "A", credit_hours=1)
        popular = find_popular_prerequisites([first, second])
        assert popular.prerequisites[0].course.credit_hours == 4

    def test_no_edges(self):
        popular = find_popular_prerequisites([])
        assert popular.prerequisites == []
        assert popular.names() == []

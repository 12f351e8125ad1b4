"""
Pytest configuration and fixtures for prerequisite graph analyzer tests
"""

import pytest
from unittest.mock import MagicMock
from typing import List, Tuple

from graph_analysis.analysis_service import PrerequisiteAnalysisService
from graph_analysis.models import Course, MajorType, PrerequisiteEdge
from graph_analysis.record_store import InMemoryRecordStore


def build_store(courses: List[Course], relationships: List[Tuple[str, str]]) -> InMemoryRecordStore:
    """Seed an in-memory store; relationships are (course name, prerequisite name)"""
    store = InMemoryRecordStore()
    ids = {}
    for course in courses:
        ids[course.name] = store.insert_course(course)
    for course_name, prerequisite_name in relationships:
        store.insert_prerequisite(PrerequisiteEdge(
            course_id=ids[course_name],
            prerequisite_course_id=ids[prerequisite_name],
        ))
    return store


def make_edge(course: str, prerequisite: str, credit_hours: int = 3,
              major_type: MajorType = MajorType.MAJOR1) -> PrerequisiteEdge:
    """Fully resolved edge without a store, for pure engine tests"""
    return PrerequisiteEdge(
        course_id=hash(course) & 0xFFFF,
        prerequisite_course_id=hash(prerequisite) & 0xFFFF,
        course=Course(name=course, credit_hours=credit_hours, major_type=major_type),
        prerequisite_course=Course(name=prerequisite, credit_hours=credit_hours, major_type=major_type),
    )


@pytest.fixture
def calculus_courses():
    return [
        Course(name="Calculus1", credit_hours=4, major_type=MajorType.MAJOR1, description="Limits and derivatives"),
        Course(name="Calculus2", credit_hours=4, major_type=MajorType.MAJOR1, description="Integration"),
        Course(name="Physics1", credit_hours=3, major_type=MajorType.GENERAL_EDUCATION, description="Mechanics"),
    ]


@pytest.fixture
def calculus_store(calculus_courses):
    """Calculus2 and Physics1 both require Calculus1"""
    return build_store(calculus_courses, [("Calculus2", "Calculus1"), ("Physics1", "Calculus1")])


@pytest.fixture
def cyclic_store():
    """X requires Y and Y requires X"""
    return build_store(
        [Course(name="X", credit_hours=3), Course(name="Y", credit_hours=3)],
        [("X", "Y"), ("Y", "X")],
    )


@pytest.fixture
def linear_chain_store():
    """A requires B, B requires C"""
    return build_store(
        [Course(name="A", credit_hours=3), Course(name="B", credit_hours=3), Course(name="C", credit_hours=3)],
        [("A", "B"), ("B", "C")],
    )


@pytest.fixture
def analysis_service(calculus_store):
    return PrerequisiteAnalysisService(calculus_store)


@pytest.fixture
def mock_neo4j_driver():
    """Mock sync neo4j driver; tests set run.return_value.data on the session"""
    driver = MagicMock()
    return driver


@pytest.fixture
def sample_csv(tmp_path):
    path = tmp_path / "courses.csv"
    path.write_text(
        "Calculus2,Calculus1,4,M1,Integration\n"
        "Physics1,Calculus1,3,GE,Mechanics\n"
        "Calculus1,,4,M1,Limits and derivatives\n",
        encoding="utf-8",
    )
    return path

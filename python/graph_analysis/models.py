"""
Pydantic models for course records, prerequisite edges and analysis results.
Records are snapshots handed out by a record store; the engine never mutates them.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


class MajorType(str, Enum):
    """Classification of a course within a program of study"""
    MAJOR1 = "Major1"
    MAJOR2 = "Major2"
    GENERAL_EDUCATION = "GeneralEducation"
    MINOR = "Minor"

    @classmethod
    def from_string(cls, value: str) -> "MajorType":
        for major_type in cls:
            if major_type.value == value:
                return major_type
        raise ValueError(f"Invalid major type: {value}")


class Course(BaseModel):
    """Course record as stored in the record store"""
    id: Optional[int] = None
    name: str = Field(..., min_length=1)
    credit_hours: int = Field(default=0, ge=0)
    major_type: MajorType = MajorType.MAJOR1
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __eq__(self, other):
        if not isinstance(other, Course):
            return NotImplemented
        return self.id == other.id and self.name == other.name

    def __hash__(self):
        return hash((self.id, self.name))


class PrerequisiteEdge(BaseModel):
    """
    Directed relationship: prerequisite_course_id must be completed before course_id.

    `course` and `prerequisite_course` are filled in by the record store when
    edges are listed with details. `required` is advisory only.
    """
    id: Optional[int] = None
    course_id: int
    prerequisite_course_id: int
    required: bool = True
    created_at: Optional[datetime] = None
    course: Optional[Course] = None
    prerequisite_course: Optional[Course] = None

    def __eq__(self, other):
        if not isinstance(other, PrerequisiteEdge):
            return NotImplemented
        return (self.course_id, self.prerequisite_course_id) == (
            other.course_id, other.prerequisite_course_id
        )

    def __hash__(self):
        return hash((self.course_id, self.prerequisite_course_id))

    @property
    def course_name(self) -> str:
        if self.course is None:
            raise ValueError(f"Edge {self.id} has no resolved course")
        return self.course.name

    @property
    def prerequisite_name(self) -> str:
        if self.prerequisite_course is None:
            raise ValueError(f"Edge {self.id} has no resolved prerequisite course")
        return self.prerequisite_course.name


class CircularDependencyReport(BaseModel):
    """Back-edges found by cycle detection, one description per finding"""
    cycles: List[str] = Field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        return len(self.cycles) > 0


class ChainSet(BaseModel):
    """Prerequisite chains from a start course down to courses with no further prerequisites"""
    start_course: str
    chains: List[List[str]] = Field(default_factory=list)


class PopularPrerequisite(BaseModel):
    course: Course
    dependent_count: int = Field(..., ge=0)


class PopularityList(BaseModel):
    """Prerequisites named by at least `min_count` relationships, in first-seen order"""
    min_count: int
    prerequisites: List[PopularPrerequisite] = Field(default_factory=list)

    def names(self) -> List[str]:
        return [p.course.name for p in self.prerequisites]


class AnalysisSummary(BaseModel):
    """Everything a full analysis run produces from one snapshot"""
    relationship_count: int
    report: str
    circular_dependencies: CircularDependencyReport
    popular_prerequisites: PopularityList
    courses_without_prerequisites: List[Course]


# Adjacency mapping: course name -> ordered names of its direct prerequisites
Graph = Dict[str, List[str]]
# Name-resolved edge: (course name, prerequisite name)
NamedEdge = Tuple[str, str]

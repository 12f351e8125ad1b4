"""
Neo4j record store for courses and prerequisite relationships.
Uses the synchronous neo4j driver; one session per query.
Driver errors are logged and re-raised unchanged.
"""

import logging
from typing import Any, Dict, List, Optional

from neo4j import GraphDatabase

from .exceptions import DuplicateCourseError
from .models import Course, MajorType, PrerequisiteEdge
from .neo4j_schema import get_schema_queries
from .record_store import check_not_self_referential
from .settings import Settings

logger = logging.getLogger(__name__)

# ---- course queries ----

INSERT_COURSE = """
MERGE (s:Sequence {name: 'course'})
ON CREATE SET s.value = 0
SET s.value = s.value + 1
WITH s.value AS id
CREATE (c:Course {
    course_id: id,
    name: $name,
    credit_hours: $credit_hours,
    major_type: $major_type,
    description: $description,
    created_at: datetime(),
    updated_at: datetime()
})
RETURN c.course_id AS id
"""

SELECT_BY_ID = """
MATCH (c:Course {course_id: $course_id})
RETURN c {.*} AS course
"""

SELECT_BY_NAME = """
MATCH (c:Course {name: $name})
RETURN c {.*} AS course
"""

SELECT_ALL = """
MATCH (c:Course)
RETURN c {.*} AS course
ORDER BY c.name
"""

UPDATE_COURSE = """
MATCH (c:Course {course_id: $course_id})
SET c.name = $name,
    c.credit_hours = $credit_hours,
    c.major_type = $major_type,
    c.description = $description,
    c.updated_at = datetime()
RETURN count(c) AS updated
"""

DELETE_COURSE = """
MATCH (c:Course {course_id: $course_id})
WITH c, c.course_id AS id
DETACH DELETE c
RETURN count(id) AS deleted
"""

SEARCH_COURSES = """
MATCH (c:Course)
WHERE toLower(c.name) CONTAINS toLower($term)
   OR toLower(coalesce(c.description, '')) CONTAINS toLower($term)
RETURN c {.*} AS course
ORDER BY c.name
"""

# ---- prerequisite queries ----

INSERT_PREREQUISITE = """
MATCH (c:Course {course_id: $course_id}), (p:Course {course_id: $prerequisite_course_id})
MERGE (s:Sequence {name: 'prerequisite'})
ON CREATE SET s.value = 0
SET s.value = s.value + 1
CREATE (c)-[r:REQUIRES {prerequisite_id: s.value, required: $required, created_at: datetime()}]->(p)
RETURN r.prerequisite_id AS id
"""

SELECT_ALL_PREREQUISITES = """
MATCH (c:Course)-[r:REQUIRES]->(p:Course)
RETURN r {.*} AS rel, c.course_id AS course_id, p.course_id AS prerequisite_course_id,
       c {.*} AS course, p {.*} AS prerequisite
ORDER BY c.name, p.name
"""

SELECT_PREREQUISITES_FOR_COURSE = """
MATCH (c:Course {course_id: $course_id})-[r:REQUIRES]->(p:Course)
RETURN r {.*} AS rel, c.course_id AS course_id, p.course_id AS prerequisite_course_id,
       p {.*} AS prerequisite
ORDER BY r.prerequisite_id
"""

SELECT_COURSES_REQUIRING_PREREQUISITE = """
MATCH (c:Course)-[r:REQUIRES]->(p:Course {course_id: $prerequisite_course_id})
RETURN r {.*} AS rel, c.course_id AS course_id, p.course_id AS prerequisite_course_id,
       c {.*} AS course
ORDER BY r.prerequisite_id
"""

CHECK_PREREQUISITE_EXISTS = """
MATCH (:Course {course_id: $course_id})-[r:REQUIRES]->(:Course {course_id: $prerequisite_course_id})
RETURN count(r) AS matches
"""

DELETE_PREREQUISITE = """
MATCH ()-[r:REQUIRES {prerequisite_id: $prerequisite_id}]->()
WITH r, r.prerequisite_id AS id
DELETE r
RETURN count(id) AS deleted
"""

DELETE_PREREQUISITES_FOR_COURSE = """
MATCH (:Course {course_id: $course_id})-[r:REQUIRES]->()
WITH r, r.prerequisite_id AS id
DELETE r
RETURN count(id) AS deleted
"""


def _native(value: Any) -> Any:
    """Convert neo4j temporal values to Python datetimes"""
    return value.to_native() if hasattr(value, "to_native") else value


def _row_to_course(node: Dict[str, Any]) -> Course:
    return Course(
        id=node["course_id"],
        name=node["name"],
        credit_hours=node.get("credit_hours") or 0,
        major_type=MajorType.from_string(node.get("major_type") or MajorType.MAJOR1.value),
        description=node.get("description"),
        created_at=_native(node.get("created_at")),
        updated_at=_native(node.get("updated_at")),
    )


def _row_to_edge(row: Dict[str, Any]) -> PrerequisiteEdge:
    rel = row["rel"]
    course = row.get("course")
    prerequisite = row.get("prerequisite")
    return PrerequisiteEdge(
        id=rel.get("prerequisite_id"),
        course_id=row["course_id"],
        prerequisite_course_id=row["prerequisite_course_id"],
        required=rel.get("required", True),
        created_at=_native(rel.get("created_at")),
        course=_row_to_course(course) if course else None,
        prerequisite_course=_row_to_course(prerequisite) if prerequisite else None,
    )


class Neo4jRecordStore:
    """Record store backed by a Neo4j database"""

    def __init__(
        self,
        uri: str,
        username: str,
        password: str,
        database: Optional[str] = None,
        max_pool_size: int = 10,
        connection_timeout: float = 30.0,
        max_connection_lifetime: int = 1800,
        driver=None
    ):
        self.uri = uri
        self.database = database
        self.driver = driver or GraphDatabase.driver(
            uri,
            auth=(username, password),
            max_connection_pool_size=max_pool_size,
            connection_acquisition_timeout=connection_timeout,
            max_connection_lifetime=max_connection_lifetime,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Neo4jRecordStore":
        return cls(
            uri=settings.neo4j_uri,
            username=settings.neo4j_username,
            password=settings.neo4j_password,
            database=settings.neo4j_database,
            max_pool_size=settings.neo4j_max_pool_size,
            connection_timeout=settings.neo4j_connection_timeout,
            max_connection_lifetime=settings.neo4j_max_connection_lifetime,
        )

    def close(self) -> None:
        """Close the driver connection"""
        if self.driver:
            self.driver.close()
            self.driver = None
            logger.info("Neo4j driver closed")

    def execute_query(self, query: str, **parameters) -> List[Dict[str, Any]]:
        """Execute a Cypher query and return its records as dicts"""
        try:
            with self.driver.session(database=self.database) as session:
                result = session.run(query, parameters)
                return result.data()
        except Exception as e:
            logger.error(f"Query execution failed: {e}")
            raise

    def health_check(self) -> bool:
        """Check if Neo4j is reachable"""
        records = self.execute_query("RETURN 1 AS test")
        if records and records[0]["test"] == 1:
            logger.info("Neo4j health check passed")
            return True
        raise RuntimeError("Neo4j health check failed")

    def ensure_schema(self) -> None:
        for query in get_schema_queries():
            self.execute_query(query)
        logger.info(f"Applied {len(get_schema_queries())} schema statements")

    def _scalar(self, query: str, key: str, **parameters) -> Any:
        records = self.execute_query(query, **parameters)
        return records[0][key] if records else None

    # ---- courses ----

    def insert_course(self, course: Course) -> int:
        if self.find_course_by_name(course.name) is not None:
            raise DuplicateCourseError(course.name)

        course_id = self._scalar(
            INSERT_COURSE, "id",
            name=course.name,
            credit_hours=course.credit_hours,
            major_type=course.major_type.value,
            description=course.description,
        )
        if course_id is None:
            raise RuntimeError(f"Failed to insert course {course.name}")

        course.id = course_id
        logger.info(f"Course inserted with ID: {course_id}")
        return course_id

    def find_course_by_id(self, course_id: int) -> Optional[Course]:
        records = self.execute_query(SELECT_BY_ID, course_id=course_id)
        return _row_to_course(records[0]["course"]) if records else None

    def find_course_by_name(self, name: str) -> Optional[Course]:
        records = self.execute_query(SELECT_BY_NAME, name=name)
        return _row_to_course(records[0]["course"]) if records else None

    def list_all_courses(self) -> List[Course]:
        return [_row_to_course(r["course"]) for r in self.execute_query(SELECT_ALL)]

    def update_course(self, course: Course) -> bool:
        existing = self.find_course_by_name(course.name)
        if existing is not None and existing.id != course.id:
            raise DuplicateCourseError(course.name)

        updated = self._scalar(
            UPDATE_COURSE, "updated",
            course_id=course.id,
            name=course.name,
            credit_hours=course.credit_hours,
            major_type=course.major_type.value,
            description=course.description,
        )
        logger.info(f"Course updated: {updated} rows affected")
        return bool(updated)

    def delete_course(self, course_id: int) -> bool:
        deleted = self._scalar(DELETE_COURSE, "deleted", course_id=course_id)
        logger.info(f"Course deleted: {deleted} rows affected")
        return bool(deleted)

    def search_courses(self, term: str) -> List[Course]:
        return [_row_to_course(r["course"]) for r in self.execute_query(SEARCH_COURSES, term=term)]

    # ---- prerequisite relationships ----

    def insert_prerequisite(self, edge: PrerequisiteEdge) -> int:
        check_not_self_referential(edge)
        prerequisite_id = self._scalar(
            INSERT_PREREQUISITE, "id",
            course_id=edge.course_id,
            prerequisite_course_id=edge.prerequisite_course_id,
            required=edge.required,
        )
        if prerequisite_id is None:
            raise ValueError(
                f"Unknown course id in relationship {edge.course_id} -> {edge.prerequisite_course_id}"
            )

        edge.id = prerequisite_id
        logger.info(f"Prerequisite inserted with ID: {prerequisite_id}")
        return prerequisite_id

    def list_prerequisite_edges(self) -> List[PrerequisiteEdge]:
        return [_row_to_edge(r) for r in self.execute_query(SELECT_ALL_PREREQUISITES)]

    def list_prerequisite_edges_for_course(self, course_id: int) -> List[PrerequisiteEdge]:
        records = self.execute_query(SELECT_PREREQUISITES_FOR_COURSE, course_id=course_id)
        return [_row_to_edge(r) for r in records]

    def list_courses_requiring_prerequisite(self, prerequisite_course_id: int) -> List[PrerequisiteEdge]:
        records = self.execute_query(
            SELECT_COURSES_REQUIRING_PREREQUISITE,
            prerequisite_course_id=prerequisite_course_id
        )
        return [_row_to_edge(r) for r in records]

    def prerequisite_exists(self, course_id: int, prerequisite_course_id: int) -> bool:
        matches = self._scalar(
            CHECK_PREREQUISITE_EXISTS, "matches",
            course_id=course_id,
            prerequisite_course_id=prerequisite_course_id,
        )
        return bool(matches)

    def delete_prerequisite(self, prerequisite_id: int) -> bool:
        deleted = self._scalar(DELETE_PREREQUISITE, "deleted", prerequisite_id=prerequisite_id)
        logger.info(f"Prerequisite deleted: {deleted} rows affected")
        return bool(deleted)

    def delete_prerequisites_for_course(self, course_id: int) -> bool:
        deleted = self._scalar(DELETE_PREREQUISITES_FOR_COURSE, "deleted", course_id=course_id)
        logger.info(f"Prerequisites deleted for course {course_id}: {deleted} rows affected")
        return bool(deleted)

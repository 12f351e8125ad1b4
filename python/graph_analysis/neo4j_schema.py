"""
Neo4j schema for the course prerequisite record store.

(:Course {course_id, name, credit_hours, major_type, description, created_at, updated_at})
(:Course)-[:REQUIRES {prerequisite_id, required, created_at}]->(:Course)
(:Sequence {name, value}) allocates integer ids.

All statements use IF NOT EXISTS so they are safe to re-run.
"""

NEO4J_SCHEMA_QUERIES = [
    # Node constraints (must be unique)
    """
    CREATE CONSTRAINT course_id IF NOT EXISTS
    FOR (c:Course) REQUIRE c.course_id IS UNIQUE
    """,

    """
    CREATE CONSTRAINT course_name IF NOT EXISTS
    FOR (c:Course) REQUIRE c.name IS UNIQUE
    """,

    """
    CREATE CONSTRAINT sequence_name IF NOT EXISTS
    FOR (s:Sequence) REQUIRE s.name IS UNIQUE
    """,

    # Lookups by relationship id for deletes
    """
    CREATE INDEX requires_prerequisite_id IF NOT EXISTS
    FOR ()-[r:REQUIRES]-() ON (r.prerequisite_id)
    """,
]


def get_schema_queries():
    """Return list of schema setup queries"""
    return NEO4J_SCHEMA_QUERIES

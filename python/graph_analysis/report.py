"""
Plain-text prerequisite relationship report.

Sections, in order: prerequisites by course, courses by prerequisite,
statistics, popular prerequisites (threshold fixed at 2). Grouping follows the
order of the relationship listing handed in, which the record store sorts by
course name.
"""

import logging
from typing import Dict, List

from .models import Course, PrerequisiteEdge
from .popularity import find_popular_prerequisites

logger = logging.getLogger(__name__)

REPORT_TITLE = "=== PREREQUISITE RELATIONSHIP REPORT ==="
NO_RELATIONSHIPS = "No prerequisite relationships found."
REPORT_POPULARITY_THRESHOLD = 2


def _group_by(edges: List[PrerequisiteEdge], by_prerequisite: bool) -> Dict[str, List[PrerequisiteEdge]]:
    groups: Dict[str, List[PrerequisiteEdge]] = {}
    for edge in edges:
        key = edge.prerequisite_name if by_prerequisite else edge.course_name
        groups.setdefault(key, []).append(edge)
    return groups


def _course_line(course: Course) -> str:
    return f"  - {course.name} ({course.credit_hours} credits, {course.major_type.value})"


def generate_report(edges: List[PrerequisiteEdge]) -> str:
    """Build the report from a full relationship listing with resolved courses"""
    lines: List[str] = [REPORT_TITLE, ""]

    if not edges:
        lines.append(NO_RELATIONSHIPS)
        return "\n".join(lines) + "\n"

    by_course = _group_by(edges, by_prerequisite=False)
    by_prerequisite = _group_by(edges, by_prerequisite=True)

    lines.extend(["PREREQUISITES BY COURSE:", "======================="])
    for course_name, course_edges in by_course.items():
        lines.append("")
        lines.append(f"{course_name}:")
        lines.extend(_course_line(edge.prerequisite_course) for edge in course_edges)

    lines.extend(["", ""])
    lines.extend(["COURSES BY PREREQUISITE:", "======================="])
    for prerequisite_name, prerequisite_edges in by_prerequisite.items():
        lines.append("")
        lines.append(f"{prerequisite_name} is a prerequisite for:")
        lines.extend(_course_line(edge.course) for edge in prerequisite_edges)

    lines.extend(["", ""])
    lines.extend(["STATISTICS:", "==========="])
    lines.append(f"Total prerequisite relationships: {len(edges)}")
    lines.append(f"Courses with prerequisites: {len(by_course)}")
    lines.append(f"Courses that are prerequisites: {len(by_prerequisite)}")

    popular = find_popular_prerequisites(edges, REPORT_POPULARITY_THRESHOLD)
    if popular.prerequisites:
        lines.append("")
        lines.append(f"POPULAR PREREQUISITES (required by {REPORT_POPULARITY_THRESHOLD}+ courses):")
        for entry in popular.prerequisites:
            lines.append(f"  - {entry.course.name} (required by {entry.dependent_count} courses)")

    logger.info(f"Generated prerequisite report for {len(edges)} relationships")
    return "\n".join(lines) + "\n"

"""
Popularity ranking of prerequisite courses by in-degree.

Output order is first-seen order over the relationship listing, not count
order, so results are stable for a given snapshot.
"""

import logging
from typing import Dict, Iterable, List

from .models import Course, PopularityList, PopularPrerequisite, PrerequisiteEdge

logger = logging.getLogger(__name__)

DEFAULT_MIN_COUNT = 2


def count_dependents(edges: Iterable[PrerequisiteEdge]) -> Dict[str, int]:
    """Number of relationships naming each prerequisite, keyed by name in first-seen order"""
    counts: Dict[str, int] = {}
    for edge in edges:
        name = edge.prerequisite_name
        counts[name] = counts.get(name, 0) + 1
    return counts


def find_popular_prerequisites(
    edges: List[PrerequisiteEdge],
    min_count: int = DEFAULT_MIN_COUNT
) -> PopularityList:
    """
    Prerequisites whose dependent count is at least `min_count`.

    The course record attached to the first edge naming a prerequisite is the
    one reported for it.
    """
    counts = count_dependents(edges)

    first_seen: Dict[str, Course] = {}
    for edge in edges:
        first_seen.setdefault(edge.prerequisite_name, edge.prerequisite_course)

    popular = [
        PopularPrerequisite(course=first_seen[name], dependent_count=count)
        for name, count in counts.items()
        if count >= min_count
    ]

    logger.info(
        f"{len(popular)} of {len(counts)} prerequisites are required by {min_count}+ courses"
    )
    return PopularityList(min_count=min_count, prerequisites=popular)

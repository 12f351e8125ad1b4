"""
Prerequisite chain enumeration.

Every chain starts at the requested course and follows direct prerequisites
down to a course with no further prerequisites. Each branch carries its own
immutable path, so sibling branches never see each other's courses and the
same course may appear in several chains reached through different parents.

A prerequisite already on the current path is not followed: the path is
truncated there instead of looping. A course whose only prerequisites are
already on the path therefore ends its chain. Cycles are reported by
`graph_analysis.cycles`, not here.

Worst case is exponential in graph depth (shared prerequisites are revisited
once per distinct path); curricula are shallow enough for this to be fine.
"""

import logging
from typing import Callable, List, Tuple

from .models import ChainSet
from .prerequisite_graph import PrerequisiteGraph

logger = logging.getLogger(__name__)

PrerequisiteLookup = Callable[[str], List[str]]


def enumerate_chains(start_course: str, lookup: PrerequisiteLookup) -> List[List[str]]:
    """
    Depth-first enumeration of prerequisite chains from `start_course`.

    Args:
        start_course: Course name the chains start from
        lookup: Returns the ordered direct prerequisite names of a course

    Returns:
        Chains in DFS order, each a list of course names from start to terminal course
    """
    chains: List[List[str]] = []
    stack: List[Tuple[str, ...]] = [(start_course,)]

    while stack:
        path = stack.pop()
        course = path[-1]
        prerequisites = lookup(course)
        extendable = [p for p in prerequisites if p not in path]

        if not extendable:
            if prerequisites:
                logger.debug(f"Chain truncated at {course}: prerequisites already on path")
            chains.append(list(path))
            continue

        # reversed so the first prerequisite is explored first
        for prerequisite in reversed(extendable):
            stack.append(path + (prerequisite,))

    return chains


def find_prerequisite_chains(start_course: str, graph: PrerequisiteGraph) -> ChainSet:
    chains = enumerate_chains(start_course, graph.prerequisites_of)
    logger.info(f"Found {len(chains)} prerequisite chains from {start_course}")
    return ChainSet(start_course=start_course, chains=chains)

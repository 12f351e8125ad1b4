"""
Circular dependency detection over a prerequisite graph.

Three-color depth-first search driven by an explicit work stack. `visited`
persists across start courses so every course is explored once per run.
Reporting policy: the first back-edge found in a DFS tree is recorded and the
rest of that tree is abandoned, so each tree contributes at most one finding.
Which back-edge is reported depends on insertion order of courses and of each
course's prerequisite list; whether any is reported does not.
"""

import logging
from typing import Iterator, List, Optional, Set, Tuple

from .models import CircularDependencyReport, NamedEdge
from .prerequisite_graph import PrerequisiteGraph

logger = logging.getLogger(__name__)

CYCLE_MESSAGE = "Circular dependency detected: {course} -> {prerequisite}"


def _first_back_edge(
    graph: PrerequisiteGraph,
    start: str,
    visited: Set[str]
) -> Optional[NamedEdge]:
    """Walk the DFS tree rooted at `start` until a back-edge is found"""
    on_path: Set[str] = {start}
    visited.add(start)
    stack: List[Tuple[str, Iterator[str]]] = [(start, iter(graph.prerequisites_of(start)))]

    while stack:
        course, prerequisites = stack[-1]
        for prerequisite in prerequisites:
            if prerequisite in on_path:
                return course, prerequisite
            if prerequisite not in visited:
                visited.add(prerequisite)
                on_path.add(prerequisite)
                stack.append((prerequisite, iter(graph.prerequisites_of(prerequisite))))
                break
        else:
            # post-order: course fully explored
            stack.pop()
            on_path.discard(course)

    return None


def find_back_edges(graph: PrerequisiteGraph) -> List[NamedEdge]:
    visited: Set[str] = set()
    back_edges: List[NamedEdge] = []

    for course in graph.courses():
        if course in visited:
            continue
        back_edge = _first_back_edge(graph, course, visited)
        if back_edge is not None:
            back_edges.append(back_edge)

    return back_edges


def find_circular_dependencies(graph: PrerequisiteGraph) -> CircularDependencyReport:
    cycles = [
        CYCLE_MESSAGE.format(course=course, prerequisite=prerequisite)
        for course, prerequisite in find_back_edges(graph)
    ]
    if cycles:
        logger.warning(f"Found {len(cycles)} circular dependencies across {len(graph)} courses")
    else:
        logger.info(f"No circular dependencies across {len(graph)} courses")
    return CircularDependencyReport(cycles=cycles)


def has_cycle(graph: PrerequisiteGraph) -> bool:
    return bool(find_back_edges(graph))

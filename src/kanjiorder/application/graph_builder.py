"""
Graph builder for turning a validated corpus into a dependency graph.

Emits one edge per (component, character) pair, collapses duplicates,
rejects self references, and provides health-check traversals.
"""

import logging

from kanjiorder.application.corpus import Corpus
from kanjiorder.domain.errors import SelfDependencyError
from kanjiorder.domain.graph import DependencyGraph

logger = logging.getLogger(__name__)


def build_graph(corpus: Corpus) -> DependencyGraph:
    """
    Build the prerequisite graph for every character in the corpus.

    Runs in O(V + E). Handles are assigned in code-point order, so the
    result does not depend on how the corpus was supplied.

    Raises:
        SelfDependencyError: A character lists itself as a component.
    """
    nodes = tuple(corpus)
    handles = {c.id: h for h, c in enumerate(nodes)}

    dependents: list[set[int]] = [set() for _ in nodes]
    prerequisites: list[set[int]] = [set() for _ in nodes]
    duplicates = 0

    for h, character in enumerate(nodes):
        for component_id in character.components:
            if component_id == character.id:
                raise SelfDependencyError(character.id)

            p = handles[component_id]
            if p in prerequisites[h]:
                duplicates += 1
                logger.warning(
                    f"Duplicate component '{component_id}' in '{character.id}', collapsed"
                )
                continue

            prerequisites[h].add(p)
            dependents[p].add(h)

    graph = DependencyGraph(
        nodes=nodes,
        dependents=tuple(tuple(sorted(d)) for d in dependents),
        prerequisites=tuple(tuple(sorted(p)) for p in prerequisites),
    )
    logger.debug(
        f"Built graph: {len(graph)} nodes, {graph.edge_count} edges, "
        f"{duplicates} duplicate edges collapsed"
    )
    return graph


def find_isolated_nodes(graph: DependencyGraph) -> list[str]:
    """Characters with neither components nor dependents."""
    return [
        c.id
        for h, c in enumerate(graph.nodes)
        if not graph.prerequisites[h] and not graph.dependents[h]
    ]


def find_connected_components(graph: DependencyGraph) -> list[list[str]]:
    """
    Weakly connected components, ignoring edge direction.

    Each component is sorted by code point; components are ordered by their
    first id.
    """
    seen: set[int] = set()
    components: list[list[str]] = []

    for start in range(len(graph.nodes)):
        if start in seen:
            continue
        seen.add(start)
        stack = [start]
        members: list[int] = []
        while stack:
            h = stack.pop()
            members.append(h)
            for nxt in graph.dependents[h] + graph.prerequisites[h]:
                if nxt not in seen:
                    seen.add(nxt)
                    stack.append(nxt)
        components.append([graph.nodes[h].id for h in sorted(members)])

    return components

"""
Ordering engine: deterministic topological sort of the dependency graph.

Kahn's algorithm over a binary heap. Among the characters whose
prerequisites are all learned, the one with the smallest composite key
is emitted next. The key is built from the configured secondary fields
(frequency, grade level, stroke count by default), with the id's code
point as the final tie-break, so the order never depends on hashing or
insertion order.
"""

import heapq
import logging
from collections.abc import Sequence

from kanjiorder.domain.constants import DEFAULT_PRIORITY, SORT_KEYS
from kanjiorder.domain.errors import CyclicDependencyError
from kanjiorder.domain.graph import DependencyGraph
from kanjiorder.domain.models import Character, LearningOrder

logger = logging.getLogger(__name__)

# (is_undefined, value): defined values sort before undefined ones
FieldKey = tuple[int, int]
SortKey = tuple[tuple[FieldKey, ...], str]


def validate_priority(priority: Sequence[str]) -> tuple[str, ...]:
    """
    Check a priority list against the known sort fields.

    Raises:
        ValueError: Unknown or repeated field names.
    """
    fields = tuple(priority)
    unknown = [f for f in fields if f not in SORT_KEYS]
    if unknown:
        raise ValueError(f"Unknown sort field(s) {unknown}; expected any of {list(SORT_KEYS)}")
    if len(set(fields)) != len(fields):
        raise ValueError(f"Sort fields repeated in priority {list(fields)}")
    return fields


def sort_key(character: Character, priority: Sequence[str] = DEFAULT_PRIORITY) -> SortKey:
    """Composite key for ready-set selection; lower sorts first."""
    fields: list[FieldKey] = []
    for name in priority:
        value = getattr(character, name)
        fields.append((1, 0) if value is None else (0, value))
    return tuple(fields), character.id


def compute_learning_order(
    graph: DependencyGraph,
    priority: Sequence[str] = DEFAULT_PRIORITY,
) -> LearningOrder:
    """
    Produce the learning order for every node in the graph.

    Args:
        graph: The prerequisite graph.
        priority: Secondary fields compared in this order before the id.

    Returns:
        LearningOrder with every id exactly once, prerequisites first.

    Raises:
        CyclicDependencyError: Some characters can never become ready. The
            error carries all of them; no partial order is returned.
        ValueError: Invalid priority.
    """
    priority = validate_priority(priority)
    nodes = graph.nodes
    keys = [sort_key(c, priority) for c in nodes]
    in_degree = [len(p) for p in graph.prerequisites]

    ready: list[tuple[SortKey, int]] = [(keys[h], h) for h, d in enumerate(in_degree) if d == 0]
    heapq.heapify(ready)

    order: list[str] = []
    while ready:
        _, h = heapq.heappop(ready)
        order.append(nodes[h].id)
        for dep in graph.dependents[h]:
            in_degree[dep] -= 1
            if in_degree[dep] == 0:
                heapq.heappush(ready, (keys[dep], dep))

    if len(order) < len(nodes):
        unresolved = frozenset(nodes[h].id for h, d in enumerate(in_degree) if d > 0)
        logger.error(f"Cycle detected: {len(unresolved)} characters cannot be ordered")
        raise CyclicDependencyError(unresolved)

    logger.debug(f"Ordered {len(order)} characters by priority {list(priority)}")
    return LearningOrder(ids=tuple(order))

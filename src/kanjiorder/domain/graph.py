"""
Immutable prerequisite graph over characters.

Nodes live in an arena (a tuple) and are addressed by integer handles.
Handles follow the code-point order of the ids, so two graphs built from the
same corpus are identical no matter how the corpus was iterated.
"""

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field

from kanjiorder.domain.errors import NotFoundError
from kanjiorder.domain.models import Character


@dataclass(frozen=True)
class DependencyGraph:
    """
    Forward and reverse adjacency over a node arena.

    An edge R -> C means "R must be learned before C".

    Attributes:
        nodes: Characters indexed by handle.
        dependents: dependents[h] are the handles that list h as a component.
        prerequisites: prerequisites[h] are the handles h lists as components.
    """

    nodes: tuple[Character, ...]
    dependents: tuple[tuple[int, ...], ...]
    prerequisites: tuple[tuple[int, ...], ...]
    handles: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "handles", {c.id: h for h, c in enumerate(self.nodes)})

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, char_id: object) -> bool:
        return char_id in self.handles

    @property
    def ids(self) -> list[str]:
        return [c.id for c in self.nodes]

    @property
    def edge_count(self) -> int:
        return sum(len(d) for d in self.dependents)

    def handle(self, char_id: str) -> int:
        try:
            return self.handles[char_id]
        except KeyError:
            raise NotFoundError(char_id) from None

    def node(self, char_id: str) -> Character:
        return self.nodes[self.handle(char_id)]

    def get_prerequisites(self, char_id: str) -> list[str]:
        """Direct components of a character, in code-point order."""
        return [self.nodes[h].id for h in self.prerequisites[self.handle(char_id)]]

    def get_dependents(self, char_id: str) -> list[str]:
        """Characters that list this one as a direct component."""
        return [self.nodes[h].id for h in self.dependents[self.handle(char_id)]]

    def ancestors(self, char_id: str) -> set[str]:
        """Everything that must be learned before `char_id`, transitively."""
        return {self.nodes[h].id for h in self._walk(self.handle(char_id), self.prerequisites)}

    def descendants(self, char_id: str) -> set[str]:
        """Everything that builds on `char_id`, transitively."""
        return {self.nodes[h].id for h in self._walk(self.handle(char_id), self.dependents)}

    def roots(self) -> list[str]:
        """Characters with no prerequisites that something depends on."""
        return [
            c.id
            for h, c in enumerate(self.nodes)
            if not self.prerequisites[h] and self.dependents[h]
        ]

    def _walk(self, start: int, adjacency: tuple[tuple[int, ...], ...]) -> Iterator[int]:
        seen = {start}
        queue = deque(adjacency[start])
        while queue:
            h = queue.popleft()
            if h in seen:
                continue
            seen.add(h)
            yield h
            queue.extend(adjacency[h])


"""
Read-side queries over a computed learning order.

This is the contract consumed by the CLI, the HTTP API and any
presentation layer.
"""

from collections.abc import Callable, Iterator

from kanjiorder.application.corpus import Corpus
from kanjiorder.domain.errors import NotFoundError
from kanjiorder.domain.models import Character, LearningOrder

Predicate = Callable[[Character], bool]


class FilteredOrder:
    """
    Lazy, restartable view of (position, Character) pairs.

    Each iteration walks the cached order again and re-applies the predicate.
    The order itself is never recomputed.
    """

    def __init__(self, query: "OrderQuery", predicate: Predicate):
        self._query = query
        self._predicate = predicate

    def __iter__(self) -> Iterator[tuple[int, Character]]:
        for position, char_id in enumerate(self._query.order.ids):
            character = self._query.character(char_id)
            if self._predicate(character):
                yield position, character


class OrderQuery:
    """Position and prefix lookups over an immutable LearningOrder."""

    def __init__(self, order: LearningOrder, corpus: Corpus):
        self.order = order
        self.corpus = corpus

    def __len__(self) -> int:
        return len(self.order)

    def __iter__(self) -> Iterator[str]:
        return iter(self.order)

    def __getitem__(self, position: int) -> str:
        return self.order.ids[position]

    def index_of(self, char_id: str) -> int:
        try:
            return self.order.positions[char_id]
        except KeyError:
            raise NotFoundError(char_id) from None

    def range_up_to(self, char_id: str) -> list[str]:
        """Everything that must be learned to reach `char_id`, inclusive, in order."""
        return list(self.order.ids[: self.index_of(char_id) + 1])

    def filter(self, predicate: Predicate) -> FilteredOrder:
        return FilteredOrder(self, predicate)

    def character(self, char_id: str) -> Character:
        return self.corpus.get(char_id)

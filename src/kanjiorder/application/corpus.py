"""Validated, read-only collection of characters."""

import logging
from collections.abc import Iterable, Iterator

from kanjiorder.domain.errors import DanglingReferenceError, DuplicateIdError, NotFoundError
from kanjiorder.domain.models import Character

logger = logging.getLogger(__name__)


class Corpus:
    """
    Characters keyed by id.

    Use `Corpus.load` to build one; it rejects duplicate ids and components
    that point outside the corpus. Self references are left for the graph
    builder to report.
    """

    def __init__(self, characters: dict[str, Character]):
        self._characters = characters

    @classmethod
    def load(cls, entries: Iterable[Character]) -> "Corpus":
        characters: dict[str, Character] = {}
        for entry in entries:
            if entry.id in characters:
                raise DuplicateIdError(entry.id)
            characters[entry.id] = entry

        for char_id in sorted(characters):
            for component_id in characters[char_id].components:
                if component_id not in characters:
                    raise DanglingReferenceError(char_id, component_id)

        logger.debug(f"Loaded corpus with {len(characters)} characters")
        return cls(characters)

    def get(self, char_id: str) -> Character:
        try:
            return self._characters[char_id]
        except KeyError:
            raise NotFoundError(char_id) from None

    def __contains__(self, char_id: object) -> bool:
        return char_id in self._characters

    def __len__(self) -> int:
        return len(self._characters)

    def __iter__(self) -> Iterator[Character]:
        """Characters in code-point order of their ids."""
        for char_id in sorted(self._characters):
            yield self._characters[char_id]

    @property
    def radicals(self) -> list[Character]:
        return [c for c in self if c.is_radical]

"""
Error taxonomy for corpus and ordering failures.

Every error here is a data-integrity failure: the corpus is malformed and
must be fixed upstream. Nothing is retried and no partial result is returned.
"""


class KanjiOrderError(Exception):
    """Base class for all kanjiorder errors."""


class CorpusFormatError(KanjiOrderError):
    """A corpus or term file could not be parsed."""


class DuplicateIdError(KanjiOrderError):
    """The same character id appears twice in the corpus."""

    def __init__(self, char_id: str):
        self.char_id = char_id
        super().__init__(f"duplicate character id '{char_id}'")


class DanglingReferenceError(KanjiOrderError):
    """A component references an id that is not in the corpus."""

    def __init__(self, char_id: str, component_id: str):
        self.char_id = char_id
        self.component_id = component_id
        super().__init__(f"'{char_id}' lists unknown component '{component_id}'")


class SelfDependencyError(KanjiOrderError):
    """A character lists itself as one of its own components."""

    def __init__(self, char_id: str):
        self.char_id = char_id
        super().__init__(f"'{char_id}' lists itself as a component")


class CyclicDependencyError(KanjiOrderError):
    """
    The component relation contains a cycle.

    Attributes:
        unresolved: Every id the ordering could not place. This includes the
            cycle members and anything that depends on them.
    """

    def __init__(self, unresolved: frozenset[str]):
        self.unresolved = frozenset(unresolved)
        members = " ".join(sorted(self.unresolved))
        super().__init__(f"circular prerequisites among: {members}")


class NotFoundError(KanjiOrderError, KeyError):
    """Lookup of an id absent from the corpus or the order."""

    def __init__(self, char_id: str):
        self.char_id = char_id
        super().__init__(f"character '{char_id}' not found")

    def __str__(self) -> str:
        return self.args[0]

"""
Domain models for characters and learning orders.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Character:
    """
    A single learnable glyph.

    A glyph that is a radical in one place and a kanji in another is still one
    Character; `is_radical` records the role.

    Attributes:
        id: The literal glyph.
        is_radical: True when the glyph is taught as a radical.
        components: Direct prerequisites, as authored (duplicates allowed here,
            they are collapsed when the graph is built).
        frequency: Ordinal rank, lower is more common.
        grade_level: School grade where taught.
        stroke_count: Number of strokes.
    """

    id: str
    is_radical: bool = False
    components: tuple[str, ...] = ()
    frequency: int | None = None
    grade_level: int | None = None
    stroke_count: int | None = None

    # Descriptive only, never used for ordering
    meaning: str = field(default="", compare=False)
    readings: tuple[str, ...] = field(default=(), compare=False)
    note: str | None = field(default=None, compare=False)

    @property
    def kind(self) -> str:
        return "radical" if self.is_radical else "kanji"


@dataclass(frozen=True)
class LearningOrder:
    """
    Immutable learning order: every id exactly once, prerequisites first.

    Safe to share between any number of readers.
    """

    ids: tuple[str, ...]
    positions: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "positions", {cid: i for i, cid in enumerate(self.ids)})

    def __len__(self) -> int:
        return len(self.ids)

    def __iter__(self):
        return iter(self.ids)

    def __contains__(self, char_id: object) -> bool:
        return char_id in self.positions

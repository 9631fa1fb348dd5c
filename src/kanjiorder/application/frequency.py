"""
Frequency ranks derived from dictionary usage.

A character is as common as the number of terms written with it. Only
popular terms count by default.

This is a pure computation module with no I/O.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import replace

from kanjiorder.domain.models import Character
from kanjiorder.infrastructure.terms import Term


def group_terms_by_character(terms: Iterable[Term]) -> dict[str, list[Term]]:
    """Map each glyph to the terms whose writings contain it, once per term."""
    grouped: dict[str, list[Term]] = defaultdict(list)
    for term in terms:
        chars = {ch for writing in term.writings for ch in writing}
        for ch in chars:
            grouped[ch].append(term)
    return dict(grouped)


def term_scores(
    terms: Iterable[Term],
    char_ids: Iterable[str],
    popular_only: bool = True,
) -> dict[str, int]:
    grouped = group_terms_by_character(terms)
    scores: dict[str, int] = {}
    for char_id in char_ids:
        matches = grouped.get(char_id, [])
        scores[char_id] = sum(1 for t in matches if t.popular or not popular_only)
    return scores


def frequency_ranks(
    terms: Iterable[Term],
    char_ids: Iterable[str],
    popular_only: bool = True,
) -> dict[str, int]:
    """
    Rank characters by term count.

    Rank 1 is the most used character; equal counts fall back to code point.
    Characters used by no term are left out, so they stay unranked.
    """
    scores = term_scores(terms, char_ids, popular_only=popular_only)
    used = sorted((cid for cid, s in scores.items() if s > 0), key=lambda c: (-scores[c], c))
    return {cid: rank for rank, cid in enumerate(used, start=1)}


def apply_frequency_ranks(
    characters: Iterable[Character],
    ranks: dict[str, int],
) -> list[Character]:
    """Fill in `frequency` where the corpus left it undefined."""
    result: list[Character] = []
    for character in characters:
        if character.frequency is None and character.id in ranks:
            character = replace(character, frequency=ranks[character.id])
        result.append(character)
    return result

"""
Reader for EDICT2-style dictionary term files.

Each line looks like::

    漢字;漢じ [かんじ] /(n) kanji/Chinese characters/(P)/EntL1234567X/

The first line of the file is a header and is skipped.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from kanjiorder.domain.constants import POPULAR_MARKER
from kanjiorder.domain.errors import CorpusFormatError

logger = logging.getLogger(__name__)

WRITING_READING_RE = re.compile(r"^([^ ]+) \[([^\[\]]+)\].*$")
WRITING_RE = re.compile(r"^([^ ]+).*$")
TAG_RE = re.compile(r"\([^)]*\)")


@dataclass(frozen=True)
class Term:
    id: str
    writings: tuple[str, ...]
    readings: tuple[str, ...] | None
    meanings: tuple[str, ...]
    popular: bool


def _split_variants(raw: str) -> tuple[str, ...]:
    return tuple(TAG_RE.sub("", s).strip() for s in raw.split(";") if s.strip())


def parse_term(line: str) -> Term:
    fields = [f for f in line.split("/") if f]
    if len(fields) < 2:
        raise CorpusFormatError(f"unknown term entry: {line!r}")

    popular = False
    meanings: list[str] = []
    for f in fields[1:-1]:
        if f.strip().lower() == POPULAR_MARKER.lower():
            popular = True
        else:
            meanings.append(f)

    head = fields[0]
    readings: tuple[str, ...] | None = None
    match = WRITING_READING_RE.match(head)
    if match:
        writings = _split_variants(match.group(1))
        readings = _split_variants(match.group(2))
    else:
        match = WRITING_RE.match(head)
        if not match:
            raise CorpusFormatError(f"unknown term entry: {line!r}")
        writings = _split_variants(match.group(1))

    return Term(
        id=fields[-1].strip(),
        writings=writings,
        readings=readings,
        meanings=tuple(meanings),
        popular=popular,
    )


def parse_terms(lines: Iterable[str]) -> list[Term]:
    """Parse term lines, skipping the header line and blank lines."""
    terms: list[Term] = []
    for i, raw in enumerate(lines):
        line = raw.strip()
        if i == 0 or not line:
            continue
        try:
            terms.append(parse_term(line))
        except CorpusFormatError as e:
            raise CorpusFormatError(f"line {i + 1}: {e}") from e
    return terms


def load_terms(path: Path) -> list[Term]:
    """Read and parse a term file."""
    text = path.read_text(encoding="utf-8").lstrip("\ufeff")
    terms = parse_terms(text.split("\n"))
    logger.info(f"Loaded {len(terms)} terms from {path}")
    return terms
